"""Settings manager for settings.yaml files.

Manages three-scope settings system:
- User global (~/.instance-catalog/settings.yaml)
- Project (.instance-catalog/settings.yaml)
- Local (.instance-catalog/settings.local.yaml)

Recognised keys::

    instances:
      dir: instances
      group_file: instgroups.json
      sort: true
      types: []
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from .instances.groups import GROUP_FILE_NAME

logger = logging.getLogger(__name__)

DEFAULT_INSTANCES_DIR = "instances"

SETTINGS_DIR_NAME = ".instance-catalog"


class SettingsManager:
    """Manages settings across user/project/local scopes."""

    def __init__(self, catalog_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            catalog_dir: Base directory for project/local settings (for testing).
                         If None, uses .instance-catalog in current directory.
            user_dir: Base directory for user settings (for testing).
                      If None, uses ~/.instance-catalog.
        """
        if catalog_dir is None:
            catalog_dir = Path(SETTINGS_DIR_NAME)
        if user_dir is None:
            user_dir = Path.home() / SETTINGS_DIR_NAME

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = catalog_dir / "settings.yaml"
        self.local_settings_file = catalog_dir / "settings.local.yaml"

    def _instances_section(self) -> dict[str, Any]:
        section = self.get_merged_settings().get("instances")
        return section if isinstance(section, dict) else {}

    def get_instances_dir(self) -> Path:
        """Get the directory scanned for instances.

        Returns:
            Configured instances directory, or ./instances
        """
        value = self._instances_section().get("dir")
        return Path(str(value)).expanduser() if value else Path(DEFAULT_INSTANCES_DIR)

    def get_group_file_name(self) -> str:
        """Get the group file name, relative to the instances directory."""
        value = self._instances_section().get("group_file")
        return str(value) if value else GROUP_FILE_NAME

    def get_sort_entries(self) -> bool:
        """Whether instance directories are visited in name order."""
        value = self._instances_section().get("sort", True)
        return bool(value)

    def get_accepted_types(self) -> list[str]:
        """Get accepted InstanceType values. Empty list accepts any type."""
        value = self._instances_section().get("types") or []
        if not isinstance(value, list):
            logger.warning(f"Ignoring instances.types setting, expected a list but got {type(value).__name__}")
            return []
        return [str(v) for v in value]

    def set_instances_dir(self, path: Path, scope: str = "local") -> None:
        """Set the instances directory in the given scope.

        Args:
            path: Directory to scan for instances
            scope: "user", "project", or "local"
        """
        file_map = {
            "user": self.user_settings_file,
            "project": self.project_settings_file,
            "local": self.local_settings_file,
        }

        target_file = file_map.get(scope, self.local_settings_file)
        self._update_settings(target_file, {"instances": {"dir": str(path)}})
        logger.info(f"Set {scope} instances directory to: {path}")

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Merge order (later overrides earlier):
        1. User settings
        2. Project settings
        3. Local settings

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}

        for path in (self.user_settings_file, self.project_settings_file, self.local_settings_file):
            settings = self._read_settings(path)
            if settings:
                merged = self._deep_merge(merged, settings)

        return merged

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if file doesn't exist or is unreadable
        """
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings in {path}: top level should be a mapping")
            return None
        return data

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        """Write settings to YAML file.

        Args:
            path: Path to settings file
            settings: Settings dictionary
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, "w", encoding="utf-8") as f:
                yaml.dump(settings, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to write settings to {path}: {e}")
            raise

    def _update_settings(self, path: Path, updates: dict[str, Any]) -> None:
        """Update settings file with new values (deep merge).

        Args:
            path: Path to settings file
            updates: Updates to merge
        """
        existing = self._read_settings(path) or {}
        merged = self._deep_merge(existing, updates)
        self._write_settings(path, merged)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries.

        Args:
            base: Base dictionary
            overlay: Overlay dictionary (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
