"""Change event schemas emitted by the instance collection."""

from typing import Literal

from pydantic import BaseModel
from pydantic import Field


class CollectionReset(BaseModel):
    """The whole collection was replaced or cleared."""

    type: Literal["collection_reset"] = "collection_reset"


class InstanceAdded(BaseModel):
    """An instance was appended to the collection."""

    type: Literal["instance_added"] = "instance_added"
    index: int = Field(..., ge=0, description="Index of the new instance")


class InstanceChanged(BaseModel):
    """Properties of an instance in the collection changed."""

    type: Literal["instance_changed"] = "instance_changed"
    index: int = Field(..., ge=0, description="Current index of the changed instance")


CollectionEvent = CollectionReset | InstanceAdded | InstanceChanged
