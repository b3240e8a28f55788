"""Directory scanning and per-entry classification."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .loader import INSTANCE_MARKER
from .loader import InstanceLoader
from .loader import LoadOutcome
from .schema import Instance

logger = logging.getLogger(__name__)


class ScanStatus(str, Enum):
    LOADED = "loaded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanEntry:
    """Result for one candidate directory (one that carries the marker file)."""

    directory: Path
    status: ScanStatus
    instance: Instance | None = None
    reason: str = ""


class DirectoryScanner:
    """Finds instance directories under a root and loads them.

    Only immediate children of the root are considered. Children without the
    marker file are ignored outright. No single failing directory aborts the
    scan.
    """

    def __init__(self, loader: InstanceLoader, marker: str = INSTANCE_MARKER, sort_entries: bool = True):
        """
        Initialize scanner.

        Args:
            loader: Loader invoked for every candidate directory.
            marker: File name that identifies an instance directory.
            sort_entries: Visit children in name order. When False, children
                are visited in raw filesystem order, which varies by platform.
        """
        self.loader = loader
        self.marker = marker
        self.sort_entries = sort_entries

    def candidates(self, root: Path) -> list[Path]:
        """List the children of root that contain the marker file."""
        try:
            if not root.is_dir():
                logger.warning(f"Instances directory {root} does not exist or is not a directory")
                return []
            with os.scandir(root) as it:
                children = [Path(entry.path) for entry in it if entry.is_dir()]
        except OSError as e:
            logger.warning(f"Cannot list instances directory {root}: {e}")
            return []

        if self.sort_entries:
            children.sort(key=lambda p: p.name)

        return [child for child in children if self._has_marker(child)]

    def _has_marker(self, directory: Path) -> bool:
        try:
            return (directory / self.marker).is_file()
        except OSError as e:
            logger.warning(f"Skipping {directory.name}: cannot check for {self.marker}: {e}")
            return False

    def scan(self, root: Path) -> list[ScanEntry]:
        """Load every candidate directory under root.

        Args:
            root: Directory whose children are candidate instances.

        Returns:
            One entry per candidate directory, in visiting order.
        """
        return [self._load_one(directory) for directory in self.candidates(root)]

    def _load_one(self, directory: Path) -> ScanEntry:
        try:
            result = self.loader.load(directory)
        except Exception as e:
            logger.exception(f"Failed to load instance {directory.name}: loader raised {type(e).__name__}")
            return ScanEntry(directory, ScanStatus.FAILED, reason=str(e))

        if result.outcome == LoadOutcome.OK:
            if result.instance is None:
                logger.error(f"Error loading instance {directory.name}. Instance loader returned no instance.")
                return ScanEntry(directory, ScanStatus.FAILED, reason="loader returned no instance")
            logger.debug(f"Loaded instance {result.instance.name}")
            return ScanEntry(directory, ScanStatus.LOADED, instance=result.instance)

        if result.outcome == LoadOutcome.NOT_AN_INSTANCE:
            logger.debug(f"Skipping {directory.name}: not an instance ({result.reason or 'no reason given'})")
            return ScanEntry(directory, ScanStatus.SKIPPED, reason=result.reason)

        reason = result.reason or f"Unknown instance loader error {result.outcome.value}"
        logger.error(f"Failed to load instance {directory.name}: {reason}")
        return ScanEntry(directory, ScanStatus.FAILED, reason=reason)
