"""Instance data model.

An Instance is a loaded profile backed by a directory. The catalog only reads
and writes a handful of fields (id, name, group, directory); everything else
the loader found is kept in ``settings`` as opaque key/value pairs.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

logger = logging.getLogger(__name__)

PropertiesChangedHandler = Callable[["Instance"], None]


@dataclass(eq=False)
class Instance:
    """A single application instance.

    Equality is identity: two instances loaded from the same directory are
    still different objects, and the collection tracks them by identity.

    Attributes:
        id: Stable key, unique within a collection (the directory name).
        name: Display name.
        directory: Directory the instance was loaded from.
        group: Group label, empty string when ungrouped.
        settings: Raw key/value pairs read from the instance marker file.
    """

    id: str
    name: str
    directory: Path
    group: str = ""
    settings: dict[str, str] = field(default_factory=dict, repr=False)
    _listeners: list[PropertiesChangedHandler] = field(default_factory=list, init=False, repr=False)

    def set_name(self, name: str) -> None:
        """Rename the instance and notify listeners if the name changed."""
        if name == self.name:
            return
        self.name = name
        self._notify()

    def set_group(self, group: str) -> None:
        """Move the instance to another group and notify listeners if it changed."""
        if group == self.group:
            return
        self.group = group
        self._notify()

    def add_listener(self, handler: PropertiesChangedHandler) -> None:
        """Register a callback invoked with this instance when its properties change."""
        self._listeners.append(handler)

    def remove_listener(self, handler: PropertiesChangedHandler) -> None:
        """Unregister a callback. Unknown handlers are ignored."""
        with contextlib.suppress(ValueError):
            self._listeners.remove(handler)

    def _notify(self) -> None:
        for handler in list(self._listeners):
            try:
                handler(self)
            except Exception:
                logger.exception(f"Error in properties handler for instance {self.id}")
