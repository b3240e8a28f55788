"""CLI-specific path policy and dependency injection helpers.

Library classes receive their paths and collaborators via injection; this
module provides the CLI's choices.
"""

from pathlib import Path

from .events.bus import EventBus
from .instances.collection import InstanceList
from .instances.loader import ConfigInstanceLoader
from .instances.loader import InstanceLoader
from .instances.scanner import DirectoryScanner
from .settings import SettingsManager


def create_settings_manager() -> SettingsManager:
    """Create settings manager with CLI paths (user scope under home, project/local under cwd)."""
    return SettingsManager()


def get_instances_dir(override: Path | None = None, settings: SettingsManager | None = None) -> Path:
    """Resolve the instances directory.

    Args:
        override: Explicit directory (e.g. from --root); wins over settings.
        settings: Settings manager (creates one if not provided)

    Returns:
        Directory to scan for instances
    """
    if override is not None:
        return override
    if settings is None:
        settings = create_settings_manager()
    return settings.get_instances_dir()


def create_instance_loader(settings: SettingsManager | None = None) -> ConfigInstanceLoader:
    """Create the default instance.cfg loader configured from settings."""
    if settings is None:
        settings = create_settings_manager()
    return ConfigInstanceLoader(accepted_types=settings.get_accepted_types())


def create_instance_list(
    instances_dir: Path | None = None,
    loader: InstanceLoader | None = None,
    event_bus: EventBus | None = None,
    settings: SettingsManager | None = None,
) -> InstanceList:
    """Create CLI-configured instance list with dependencies.

    Args:
        instances_dir: Root directory override (settings value if None)
        loader: Instance loader (default config-file loader if None)
        event_bus: Event bus shared with other components (private one if None)
        settings: Settings manager (creates one if not provided)

    Returns:
        Empty InstanceList; call ``load_list()`` to populate it
    """
    if settings is None:
        settings = create_settings_manager()
    if loader is None:
        loader = create_instance_loader(settings)

    scanner = DirectoryScanner(loader, sort_entries=settings.get_sort_entries())
    return InstanceList(
        instances_dir=get_instances_dir(instances_dir, settings),
        scanner=scanner,
        group_file_name=settings.get_group_file_name(),
        event_bus=event_bus,
    )
