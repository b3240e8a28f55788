"""Shared fixtures for instance-catalog tests."""

import errno
import json
from pathlib import Path

import pytest
from instance_catalog.instances.loader import INSTANCE_MARKER
from instance_catalog.instances.loader import LoadResult
from instance_catalog.instances.schema import Instance


class StubLoader:
    """Loader that replays canned results keyed by directory name.

    Directories without a canned result load as an instance whose id and
    name are the directory name.
    """

    def __init__(self, results: dict[str, LoadResult] | None = None):
        self.results = results or {}
        self.calls: list[Path] = []

    def load(self, directory: Path) -> LoadResult:
        self.calls.append(directory)
        if directory.name in self.results:
            return self.results[directory.name]
        return LoadResult.ok(Instance(id=directory.name, name=directory.name, directory=directory))


@pytest.fixture
def instances_dir(tmp_path):
    """Empty instances root directory."""
    root = tmp_path / "instances"
    root.mkdir()
    return root


@pytest.fixture
def make_instance_dir(instances_dir):
    """Factory creating a child directory, with the marker file unless marker=False."""

    def _make(name: str, config: str = "", marker: bool = True) -> Path:
        directory = instances_dir / name
        directory.mkdir()
        if marker:
            (directory / INSTANCE_MARKER).write_text(config, encoding="utf-8")
        return directory

    return _make


@pytest.fixture
def write_group_file(instances_dir):
    """Factory writing instgroups.json into the instances root."""

    def _write(data, name: str = "instgroups.json") -> Path:
        path = instances_dir / name
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def stub_loader():
    return StubLoader()


@pytest.fixture
def deny_marker(monkeypatch):
    """Make the marker check inside a given directory fail with EACCES."""

    def _deny(directory: Path) -> None:
        original_is_file = Path.is_file

        def is_file(self, *args, **kwargs):
            if self.parent == directory:
                raise PermissionError(errno.EACCES, "Permission denied", str(self))
            return original_is_file(self, *args, **kwargs)

        monkeypatch.setattr(Path, "is_file", is_file)

    return _deny
