"""Unit tests for the config command group."""

import os
import time

import pytest
from click.testing import CliRunner

from termtitle.cli import main
from termtitle.config_manager import ConfigManager


@pytest.fixture
def runner():
    return CliRunner()


class TestConfigCommands:
    """Tests for `termtitle config`."""

    def test_show_defaults(self, runner, temp_home_dir):
        result = runner.invoke(main, ["config", "show"])

        assert result.exit_code == 0
        assert "freshness_window" in result.output
        assert "300" in result.output
        assert "WarpTerminal" in result.output

    def test_set_integer(self, runner, temp_home_dir):
        result = runner.invoke(main, ["config", "set", "freshness_window", "600"])

        assert result.exit_code == 0
        assert ConfigManager.load_config().freshness_window == 600

    def test_set_list(self, runner, temp_home_dir):
        runner.invoke(main, ["config", "set", "reset_programs", "WarpTerminal,vscode"])
        assert ConfigManager.load_config().reset_programs == ["WarpTerminal", "vscode"]

    def test_set_unknown_key(self, runner, temp_home_dir):
        result = runner.invoke(main, ["config", "set", "colour", "blue"])
        assert result.exit_code == 1
        assert "Unknown config key" in result.output

    def test_set_invalid_value(self, runner, temp_home_dir):
        result = runner.invoke(main, ["config", "set", "max_title_length", "0"])
        assert result.exit_code == 1
        assert ConfigManager.load_config().max_title_length == 80

    def test_path(self, runner, temp_home_dir):
        result = runner.invoke(main, ["config", "path"])
        assert result.output.strip() == str(temp_home_dir / ".claude" / "terminal_title.toml")

    def test_set_freshness_used_by_hook(self, runner, project_dir, title_file):
        """Test that a shorter freshness window makes the hook ignore a 2 minute old title."""
        runner.invoke(main, ["config", "set", "freshness_window", "60"])
        runner.invoke(main, ["set", "Build"])
        old = time.time() - 120
        os.utime(title_file, (old, old))

        result = runner.invoke(main, ["hook"])

        assert "~/projects/myrepo" in result.output
