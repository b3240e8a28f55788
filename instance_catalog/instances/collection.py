"""Observable, ordered collection of loaded instances."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from instance_catalog.events.bus import EventBus
from instance_catalog.events.bus import EventHandler
from instance_catalog.events.schemas import CollectionReset
from instance_catalog.events.schemas import InstanceAdded
from instance_catalog.events.schemas import InstanceChanged

from .groups import GROUP_FILE_NAME
from .groups import load_group_map
from .scanner import DirectoryScanner
from .scanner import ScanStatus
from .schema import Instance

logger = logging.getLogger(__name__)


@dataclass
class LoadReport:
    """Summary of one ``InstanceList.load_list`` pass."""

    loaded: int = 0
    skipped: int = 0
    failed: list[str] = field(default_factory=list)


class InstanceList:
    """Owns the loaded instances and notifies subscribers of changes.

    Contract:
    - Order is scan order for loaded instances, then ``add`` order.
    - Ids are not required to be unique; ``get_by_id`` returns the first match.
    - Events: ``CollectionReset`` after ``load_list``/``clear``,
      ``InstanceAdded(index)`` after ``add``, ``InstanceChanged(index)`` when
      an owned instance reports a property change.
    - References handed out are only meaningful until the next
      ``load_list``/``clear``; after that the list no longer tracks them.
    """

    def __init__(
        self,
        instances_dir: Path,
        scanner: DirectoryScanner,
        group_file_name: str = GROUP_FILE_NAME,
        event_bus: EventBus | None = None,
    ):
        """Initialize an empty list.

        Args:
            instances_dir: Root directory whose children are instances.
            scanner: Scanner used by ``load_list``.
            group_file_name: Group file name, relative to instances_dir.
            event_bus: Bus for change events (a private one if not provided).
        """
        self.instances_dir = instances_dir
        self.scanner = scanner
        self.group_file_name = group_file_name
        self.events = event_bus or EventBus()
        self._instances: list[Instance] = []

    @property
    def group_file(self) -> Path:
        return self.instances_dir / self.group_file_name

    def subscribe(self, handler: EventHandler) -> None:
        self.events.subscribe(handler)

    def unsubscribe(self, handler: EventHandler) -> bool:
        return self.events.unsubscribe(handler)

    def load_list(self) -> LoadReport:
        """Replace the contents with the instances found under instances_dir.

        Group assignments from the group file are applied to loaded
        instances whose id they mention. Emits one ``CollectionReset`` no
        matter how many instances were loaded.

        Returns:
            Counts of loaded, skipped and failed candidate directories.
        """
        # Readers keep seeing the previous generation until the swap below.
        self._detach_all()

        group_map = load_group_map(self.group_file)

        report = LoadReport()
        loaded: list[Instance] = []
        for entry in self.scanner.scan(self.instances_dir):
            if entry.status == ScanStatus.SKIPPED:
                report.skipped += 1
                continue
            if entry.status == ScanStatus.FAILED or entry.instance is None:
                report.failed.append(entry.directory.name)
                continue

            instance = entry.instance
            group = group_map.get(instance.id)
            if group is not None:
                instance.group = group
            instance.add_listener(self._on_instance_properties_changed)
            loaded.append(instance)
            report.loaded += 1

        self._instances = loaded
        logger.info(
            f"Loaded {report.loaded} instances from {self.instances_dir} "
            f"({report.skipped} skipped, {len(report.failed)} failed)"
        )
        self.events.publish(CollectionReset())
        return report

    def clear(self) -> None:
        """Remove all instances. Emits ``CollectionReset``."""
        self._detach_all()
        self._instances = []
        self.events.publish(CollectionReset())

    def add(self, instance: Instance) -> int:
        """Append an instance. Emits ``InstanceAdded`` and returns the new index."""
        if self.index_of(instance) is None:
            instance.add_listener(self._on_instance_properties_changed)
        self._instances.append(instance)
        index = len(self._instances) - 1
        self.events.publish(InstanceAdded(index=index))
        return index

    def get_by_id(self, instance_id: str) -> Instance | None:
        """Return the first instance with the given id, or None."""
        for instance in self._instances:
            if instance.id == instance_id:
                return instance
        return None

    def index_of(self, instance: Instance) -> int | None:
        """Return the index of this exact instance object, or None."""
        for i, candidate in enumerate(self._instances):
            if candidate is instance:
                return i
        return None

    @property
    def instances(self) -> tuple[Instance, ...]:
        return tuple(self._instances)

    def count(self) -> int:
        return len(self._instances)

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[Instance]:
        return iter(tuple(self._instances))

    def __getitem__(self, index: int) -> Instance:
        return self._instances[index]

    def _on_instance_properties_changed(self, instance: Instance) -> None:
        index = self.index_of(instance)
        if index is None:
            return
        self.events.publish(InstanceChanged(index=index))

    def _detach_all(self) -> None:
        for instance in self._instances:
            instance.remove_listener(self._on_instance_properties_changed)
