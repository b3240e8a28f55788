"""Collection change events and the bus that delivers them."""

from instance_catalog.events.bus import EventBus
from instance_catalog.events.schemas import CollectionEvent
from instance_catalog.events.schemas import CollectionReset
from instance_catalog.events.schemas import InstanceAdded
from instance_catalog.events.schemas import InstanceChanged

__all__ = [
    "EventBus",
    "CollectionEvent",
    "CollectionReset",
    "InstanceAdded",
    "InstanceChanged",
]
