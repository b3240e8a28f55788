"""Tests for the instance CLI commands."""

import json
import logging

import pytest
import yaml
from click.testing import CliRunner

from instance_catalog.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Isolated cwd and home so no real settings are read."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def populated(workspace):
    root = workspace / "instances"
    root.mkdir()
    for name, config in {
        "alpha": "InstanceType=OneSix\nname=Alpha Pack\n",
        "beta": "InstanceType=Legacy\nname=Beta Pack\n",
        "gamma": "name=Gamma Pack\n",
    }.items():
        (root / name).mkdir()
        (root / name / "instance.cfg").write_text(config)
    (root / "not-an-instance").mkdir()
    (root / "instgroups.json").write_text(
        json.dumps({"formatVersion": 1, "groups": {"Modded": {"instances": ["alpha", "beta"]}, "Empty": {"instances": []}}})
    )
    return root


class TestList:
    def test_lists_instances_from_default_dir(self, runner, populated):
        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0
        assert "alpha" in result.output
        assert "gamma" in result.output
        assert "not-an-instance" not in result.output

    def test_filter_by_group(self, runner, populated):
        result = runner.invoke(cli, ["list", "--group", "Modded"])

        assert result.exit_code == 0
        assert "alpha" in result.output
        assert "beta" in result.output
        assert "gamma" not in result.output

    def test_explicit_root(self, runner, populated, workspace):
        other = workspace / "elsewhere"
        (other / "delta").mkdir(parents=True)
        (other / "delta" / "instance.cfg").write_text("name=Delta\n")

        result = runner.invoke(cli, ["list", "--root", str(other)])

        assert result.exit_code == 0
        assert "delta" in result.output
        assert "alpha" not in result.output

    def test_missing_dir(self, runner, workspace):
        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0
        assert "Instances directory not found" in result.output
        assert "No instances found" in result.output

    def test_dir_from_settings(self, runner, populated, workspace):
        moved = workspace / "moved"
        populated.rename(moved)
        settings_dir = workspace / ".instance-catalog"
        settings_dir.mkdir()
        (settings_dir / "settings.yaml").write_text(yaml.safe_dump({"instances": {"dir": str(moved)}}))

        result = runner.invoke(cli, ["list"])

        assert result.exit_code == 0
        assert "alpha" in result.output


class TestShow:
    def test_show_instance(self, runner, populated):
        result = runner.invoke(cli, ["show", "alpha"])

        assert result.exit_code == 0
        assert "Alpha Pack" in result.output
        assert "Modded" in result.output
        assert "InstanceType" in result.output

    def test_show_ungrouped(self, runner, populated):
        result = runner.invoke(cli, ["show", "gamma"])

        assert result.exit_code == 0
        assert "(ungrouped)" in result.output

    def test_unknown_instance(self, runner, populated):
        result = runner.invoke(cli, ["show", "nope"])

        assert result.exit_code == 1
        assert "Instance 'nope' not found" in result.output


class TestGroups:
    def test_counts(self, runner, populated):
        result = runner.invoke(cli, ["groups"])

        assert result.exit_code == 0
        assert "Modded" in result.output
        assert "Empty" in result.output
        assert "(ungrouped)" in result.output

    def test_no_groups(self, runner, workspace):
        (workspace / "instances").mkdir()

        result = runner.invoke(cli, ["groups"])

        assert result.exit_code == 0
        assert "No groups defined" in result.output


class TestScan:
    def test_reports_classification(self, runner, populated, workspace):
        settings_dir = workspace / ".instance-catalog"
        settings_dir.mkdir()
        (settings_dir / "settings.yaml").write_text(yaml.safe_dump({"instances": {"types": ["OneSix"]}}))

        result = runner.invoke(cli, ["scan"])

        assert result.exit_code == 0
        assert "loaded" in result.output
        assert "skipped" in result.output
        assert "not-an-instance" not in result.output

    def test_empty(self, runner, workspace):
        result = runner.invoke(cli, ["scan"])

        assert result.exit_code == 0
        assert "No instance directories" in result.output


class TestDir:
    def test_show_default(self, runner, workspace):
        result = runner.invoke(cli, ["dir"])

        assert result.exit_code == 0
        assert result.output.strip() == "instances"

    def test_set_local(self, runner, workspace):
        result = runner.invoke(cli, ["dir", "/srv/instances"])

        assert result.exit_code == 0
        data = yaml.safe_load((workspace / ".instance-catalog" / "settings.local.yaml").read_text())
        assert data == {"instances": {"dir": "/srv/instances"}}

        result = runner.invoke(cli, ["dir"])
        assert result.output.strip() == "/srv/instances"


def test_help_without_subcommand(runner, workspace):
    result = runner.invoke(cli, [])

    assert result.exit_code == 0
    assert "list" in result.output
    assert "groups" in result.output


@pytest.fixture
def restore_root_handlers():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestLogOptions:
    def test_log_level_requires_log_file(self, runner, workspace, restore_root_handlers):
        result = runner.invoke(cli, ["--log-level", "debug", "list"])

        assert result.exit_code == 2
        assert "--log-level requires --log-file" in result.output
        assert not (workspace / "instance-catalog.log.jsonl").exists()

    def test_log_file_receives_records(self, runner, populated, workspace, restore_root_handlers):
        log_file = workspace / "catalog.jsonl"

        result = runner.invoke(cli, ["--log-file", str(log_file), "list"])

        assert result.exit_code == 0
        records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert any(r["message"].startswith("Loaded ") for r in records)
        assert all(r["level"] != "DEBUG" for r in records)
