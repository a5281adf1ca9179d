"""Tests for CLI module."""

import json

import pytest
from click.testing import CliRunner

from structure_organizer.cli import cli
from structure_organizer.models.config import create_default_config


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def structure_file(tmp_path):
    path = tmp_path / "structure.json"
    create_default_config(path)
    return path


class TestInit:

    def test_writes_example(self, runner, tmp_path):
        output = tmp_path / "out.json"
        result = runner.invoke(cli, ["init", str(output)])
        assert result.exit_code == 0
        assert "Wrote example structure" in result.output
        assert json.loads(output.read_text())["containers"]

    def test_refuses_to_overwrite(self, runner, structure_file):
        result = runner.invoke(cli, ["init", str(structure_file)])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_force_overwrites(self, runner, structure_file):
        structure_file.write_text("{}")
        result = runner.invoke(cli, ["init", "--force", str(structure_file)])
        assert result.exit_code == 0
        assert json.loads(structure_file.read_text())["containers"]


class TestTree:

    def test_shows_containers(self, runner, structure_file):
        result = runner.invoke(cli, ["tree", str(structure_file)])
        assert result.exit_code == 0
        assert "News" in result.output
        assert "by date" in result.output
        assert "by attribute" in result.output
        assert "redirect" in result.output

    @pytest.mark.parametrize("data", [
        {"containers": [{"path": "relative"}]},
        {"containers": [{"organizer": {"type": "date"}}]},
        {"containers": [{"path": 1}]},
        {"containers": [], "settings": {"log_level": "LOUD"}},
    ])
    def test_invalid_structure(self, runner, tmp_path, data):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(data))
        result = runner.invoke(cli, ["tree", str(path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error" in result.output


class TestResolve:

    def test_resolves_by_date(self, runner, structure_file):
        result = runner.invoke(
            cli, ["resolve", str(structure_file), "/Site/News", "--published", "2024-05-02"]
        )
        assert result.exit_code == 0
        assert "/Site/News/2024/05" in result.output

    def test_resolves_by_attribute(self, runner, structure_file):
        result = runner.invoke(
            cli, ["resolve", str(structure_file), "/Site/Articles", "--attr", "category=Sports"]
        )
        assert result.exit_code == 0
        assert "/Site/Articles/Sports" in result.output

    def test_plain_container_unchanged(self, runner, structure_file):
        result = runner.invoke(cli, ["resolve", str(structure_file), "/Site"])
        assert result.exit_code == 0
        assert "Placement unchanged" in result.output

    def test_trace(self, runner, structure_file):
        result = runner.invoke(
            cli,
            ["resolve", str(structure_file), "/Site/Press", "--published", "2024-05-02", "--trace"]
        )
        assert result.exit_code == 0
        assert "/Site/Press" in result.output
        assert "not organizing" in result.output
        assert "/Site/News/2024/05" in result.output

    def test_reference_argument(self, runner, structure_file):
        result = runner.invoke(cli, ["resolve", str(structure_file), "1"])
        assert result.exit_code == 0
        assert "/Site" in result.output

    def test_unknown_reference(self, runner, structure_file):
        result = runner.invoke(cli, ["resolve", str(structure_file), "404"])
        assert result.exit_code == 1
        assert "Container not found" in result.output

    def test_unknown_path(self, runner, structure_file):
        result = runner.invoke(cli, ["resolve", str(structure_file), "/Site/Missing"])
        assert result.exit_code == 2
        assert "No container" in result.output

    def test_bad_attribute(self, runner, structure_file):
        result = runner.invoke(
            cli, ["resolve", str(structure_file), "/Site/Articles", "--attr", "category"]
        )
        assert result.exit_code == 2

    def test_verbose_flag(self, runner, structure_file):
        result = runner.invoke(
            cli, ["--verbose", "resolve", str(structure_file), "/Site/News", "--published", "2024-05-02"]
        )
        assert result.exit_code == 0
