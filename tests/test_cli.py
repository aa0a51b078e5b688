"""
Tests for CLI commands — global options, pkg commands, apply, config check.

All package commands run with ``--mock`` so nothing touches the system.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from pacstate.main import cli


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch) -> Path:
    """Run from an empty directory so no pacstate.yml is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write_manifest(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "pacstate.yml"
    path.write_text(textwrap.dedent(body))
    return path


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "pacstate" in result.output
        assert "pkg" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestPkgCommands:
    def test_query(self, isolated):
        result = CliRunner().invoke(cli, ["--mock", "pkg", "query", "vim"])
        assert result.exit_code == 0
        assert "0.0.0-mock" in result.output

    def test_query_json(self, isolated):
        result = CliRunner().invoke(cli, ["--mock", "pkg", "query", "vim", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"ensure": "0.0.0-mock"}

    def test_list_json(self, isolated):
        result = CliRunner().invoke(cli, ["--mock", "pkg", "list", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_install(self, isolated):
        result = CliRunner().invoke(cli, ["--mock", "pkg", "install", "vim"])
        assert result.exit_code == 0
        assert "Installed vim" in result.output

    def test_install_from_file_url(self, isolated):
        result = CliRunner().invoke(
            cli, ["--mock", "pkg", "install", "vim", "--source", "file:///tmp/vim.pkg.tar.zst"]
        )
        assert result.exit_code == 0

    def test_install_bad_source(self, isolated):
        result = CliRunner().invoke(cli, ["--mock", "pkg", "install", "vim", "--source", "blah://"])
        assert result.exit_code == 1
        assert "Invalid source" in result.output

    def test_remove(self, isolated):
        result = CliRunner().invoke(cli, ["--mock", "pkg", "remove", "vim"])
        assert result.exit_code == 0
        assert "Removed vim" in result.output

    def test_update(self, isolated):
        result = CliRunner().invoke(cli, ["--mock", "pkg", "update", "vim"])
        assert result.exit_code == 0

    def test_latest(self, isolated):
        result = CliRunner().invoke(cli, ["--mock", "pkg", "latest", "vim"])
        assert result.exit_code == 0
        assert result.output.strip() == "0.0.0-mock"

    def test_tool_not_found(self, isolated, monkeypatch):
        monkeypatch.setenv("PACSTATE_TOOL", "/nonexistent/pacman")
        result = CliRunner().invoke(cli, ["pkg", "query", "vim"])
        assert result.exit_code == 1
        assert "not an executable" in result.output


class TestApplyCommand:
    def test_apply(self, tmp_path: Path):
        config = _write_manifest(tmp_path, """\
            packages:
              - name: vim
              - name: nano
                ensure: absent
        """)
        result = CliRunner().invoke(cli, ["--config", str(config), "--mock", "apply"])
        assert result.exit_code == 0
        assert "vim unchanged" in result.output
        assert "nano" in result.output
        assert "1 changed, 0 failed" in result.output

    def test_apply_json(self, tmp_path: Path):
        config = _write_manifest(tmp_path, """\
            packages:
              - name: nano
                ensure: absent
        """)
        result = CliRunner().invoke(cli, ["--config", str(config), "--mock", "apply", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["results"][0]["action"] == "removed"

    def test_apply_tool_not_found(self, tmp_path: Path):
        config = _write_manifest(tmp_path, """\
            settings:
              tool: /nonexistent/pacman
            packages:
              - name: vim
        """)
        result = CliRunner().invoke(cli, ["--config", str(config), "apply"])
        assert result.exit_code == 1
        assert "not an executable" in result.output

    def test_apply_missing_config(self, isolated):
        result = CliRunner().invoke(cli, ["--config", str(isolated / "nope.yml"), "--mock", "apply"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestConfigCheck:
    def test_valid(self, tmp_path: Path):
        config = _write_manifest(tmp_path, """\
            settings:
              tool: pacman
            packages:
              - name: vim
        """)
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_bad_source(self, tmp_path: Path):
        config = _write_manifest(tmp_path, """\
            packages:
              - name: vim
                source: puppet://server/vim
        """)
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 1
        assert "puppet:// URLs are not supported" in result.output

    def test_duplicates_and_warnings_json(self, tmp_path: Path):
        config = _write_manifest(tmp_path, """\
            packages:
              - name: vim
              - name: vim
                ensure: absent
                source: /tmp/vim.pkg.tar.zst
        """)
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["valid"] is False
        assert any("Duplicate" in e for e in data["errors"])
        assert any("source is ignored" in w for w in data["warnings"])

    def test_empty_manifest_warns(self, tmp_path: Path):
        config = _write_manifest(tmp_path, "packages: []\n")
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 0
        assert "No packages declared" in result.output
