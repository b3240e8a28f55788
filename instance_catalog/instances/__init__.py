"""Instance discovery, grouping and the observable instance list."""

from .collection import InstanceList
from .collection import LoadReport
from .groups import GROUP_FILE_NAME
from .groups import load_group_map
from .loader import INSTANCE_MARKER
from .loader import ConfigInstanceLoader
from .loader import InstanceLoader
from .loader import LoadOutcome
from .loader import LoadResult
from .scanner import DirectoryScanner
from .scanner import ScanEntry
from .scanner import ScanStatus
from .schema import Instance

__all__ = [
    "GROUP_FILE_NAME",
    "INSTANCE_MARKER",
    "ConfigInstanceLoader",
    "DirectoryScanner",
    "Instance",
    "InstanceList",
    "InstanceLoader",
    "LoadOutcome",
    "LoadReport",
    "LoadResult",
    "ScanEntry",
    "ScanStatus",
    "load_group_map",
]
