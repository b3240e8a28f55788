"""Instance loader contract and the default config-file loader.

A loader turns a candidate directory into an Instance or a classified
failure. The scanner only depends on the ``InstanceLoader`` protocol, so tests
and other front-ends can inject their own.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from .schema import Instance

logger = logging.getLogger(__name__)

INSTANCE_MARKER = "instance.cfg"


class LoadOutcome(str, Enum):
    """Classification of a single load attempt."""

    OK = "ok"
    NOT_AN_INSTANCE = "not_an_instance"
    UNKNOWN_ERROR = "unknown_error"


@dataclass(frozen=True)
class LoadResult:
    """Outcome of ``InstanceLoader.load``.

    Build results through the ``ok``/``not_an_instance``/``error``
    constructors; they never produce an OK result without an instance.
    """

    outcome: LoadOutcome
    instance: Instance | None = None
    reason: str = ""

    @classmethod
    def ok(cls, instance: Instance) -> "LoadResult":
        return cls(LoadOutcome.OK, instance)

    @classmethod
    def not_an_instance(cls, reason: str = "") -> "LoadResult":
        return cls(LoadOutcome.NOT_AN_INSTANCE, reason=reason)

    @classmethod
    def error(cls, reason: str = "") -> "LoadResult":
        return cls(LoadOutcome.UNKNOWN_ERROR, reason=reason)


class InstanceLoader(Protocol):
    """Capability that loads an instance from a directory."""

    def load(self, directory: Path) -> LoadResult: ...


def parse_instance_config(text: str) -> dict[str, str]:
    """Parse ``key=value`` lines of an instance marker file.

    Blank lines and lines starting with ``#`` or ``;`` are ignored, as are
    lines without ``=``. Keys and values are stripped; later keys override
    earlier ones.
    """
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(("#", ";")):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key:
            values[key] = value.strip()
    return values


class ConfigInstanceLoader:
    """Loads instances described by an ``instance.cfg`` file.

    The instance id is the directory name. The display name comes from the
    ``name`` key and falls back to the id.
    """

    def __init__(self, accepted_types: list[str] | None = None, marker: str = INSTANCE_MARKER):
        """
        Initialize the loader.

        Args:
            accepted_types: ``InstanceType`` values this loader understands.
                None or empty accepts any type, including a missing one.
            marker: Name of the config file inside an instance directory.
        """
        self.accepted_types = list(accepted_types or [])
        self.marker = marker

    def load(self, directory: Path) -> LoadResult:
        config_file = directory / self.marker
        try:
            settings = parse_instance_config(config_file.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return LoadResult.not_an_instance(f"no {self.marker}")
        except (OSError, UnicodeDecodeError) as e:
            return LoadResult.error(f"cannot read {config_file}: {e}")

        instance_type = settings.get("InstanceType", "")
        if self.accepted_types and instance_type not in self.accepted_types:
            return LoadResult.not_an_instance(f"unsupported instance type '{instance_type}'")

        instance_id = directory.name
        instance = Instance(
            id=instance_id,
            name=settings.get("name") or instance_id,
            directory=directory,
            settings=settings,
        )
        return LoadResult.ok(instance)
