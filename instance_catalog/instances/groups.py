"""Group file parsing.

Group assignments live outside the instances themselves, in a JSON side-file
at the root of the instances directory::

    {
        "formatVersion": 1,
        "groups": {
            "Modded": {"instances": ["inst-a", "inst-b"]},
            "Vanilla": {"instances": ["inst-c"]}
        }
    }

Parsing never fails the caller. A broken file yields an empty mapping, and a
single broken group is skipped while the rest still load.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import Field
from pydantic import StrictInt
from pydantic import ValidationError

logger = logging.getLogger(__name__)

GROUP_FILE_NAME = "instgroups.json"
GROUP_FILE_FORMAT_VERSION = 1


class GroupFile(BaseModel):
    """Top-level shape of the group file."""

    format_version: StrictInt = Field(..., alias="formatVersion", description="Group file format version")
    groups: dict[str, Any] = Field(..., description="Group name to group entry")


class GroupEntry(BaseModel):
    """A single group in the group file."""

    instances: list[Any] = Field(..., description="Instance ids belonging to the group")


def _describe(error: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(p) for p in e['loc']) or 'root'}: {e['msg']}" for e in error.errors())


def load_group_map(path: Path) -> dict[str, str]:
    """Read the group file and return an ``instance_id -> group_name`` mapping.

    Args:
        path: Path to the group file.

    Returns:
        Mapping of instance ids to group names. Empty when the file is absent
        or invalid. When an id appears in several groups the last one wins.
    """
    try:
        if not path.exists():
            return {}
    except OSError as e:
        logger.warning(f"Failed to read instance group file {path}: {e}")
        return {}

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read instance group file {path}: {e}")
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(
            f"Failed to parse instance group file {path}: {e.msg} "
            f"at line {e.lineno} column {e.colno} (offset {e.pos})"
        )
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Invalid group file {path}: root entry should be an object")
        return {}

    try:
        group_file = GroupFile.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Invalid group file {path}: {_describe(e)}")
        return {}

    if group_file.format_version != GROUP_FILE_FORMAT_VERSION:
        logger.warning(
            f"Unsupported group file format version {group_file.format_version} in {path} "
            f"(expected {GROUP_FILE_FORMAT_VERSION})"
        )
        return {}

    group_map: dict[str, str] = {}
    for group_name, value in group_file.groups.items():
        if not isinstance(value, dict):
            logger.warning(f"Group '{group_name}' in the group list should be an object")
            continue

        try:
            entry = GroupEntry.model_validate(value)
        except ValidationError:
            logger.warning(
                f"Group '{group_name}' in the group list is invalid. It should contain an array called 'instances'"
            )
            continue

        for instance_id in entry.instances:
            if not isinstance(instance_id, str):
                logger.debug(f"Ignoring non-string instance id {instance_id!r} in group '{group_name}'")
                continue
            group_map[instance_id] = group_name

    logger.debug(f"Loaded {len(group_map)} group assignments from {path}")
    return group_map


def group_names(group_map: dict[str, str]) -> list[str]:
    """Return the distinct group names of a mapping, sorted."""
    return sorted(set(group_map.values()))
