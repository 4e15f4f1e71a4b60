"""
Shared test fixtures and configuration for termtitle tests.

This module provides common fixtures used across all test types:
- Temporary home directory (nothing touches the real ~/.claude)
- Clean environment (no claim flag, prefix or terminal variables leak in)
- Title store and session context builders
"""

import pytest

from termtitle.session import SessionContext
from termtitle.title_store import TitleStore

ENV_VARS = (
    "CLAUDE_TITLE_CLAIMED",
    "CLAUDE_TITLE_PREFIX",
    "TERM_PROGRAM",
    "TERMINAL_PROFILE",
    "TERMTITLE_CONFIG",
)


# ============================================================================
# ENVIRONMENT FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove termtitle-related variables from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")


@pytest.fixture
def temp_home_dir(tmp_path, monkeypatch):
    """Temporary home directory for testing.

    Sets HOME environment variable to temporary directory
    for testing home directory operations without affecting
    real user home directory.
    """
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture
def project_dir(temp_home_dir, monkeypatch):
    """Working directory ~/projects/myrepo, entered and exported as $PWD."""
    repo = temp_home_dir / "projects" / "myrepo"
    repo.mkdir(parents=True)
    monkeypatch.chdir(repo)
    monkeypatch.setenv("PWD", str(repo))
    return repo


# ============================================================================
# STORE AND CONTEXT FIXTURES
# ============================================================================


@pytest.fixture
def title_file(temp_home_dir):
    """Default title record location inside the temporary home."""
    return temp_home_dir / ".claude" / "terminal_title"


@pytest.fixture
def title_store(title_file):
    return TitleStore(title_file)


@pytest.fixture
def make_context(temp_home_dir, project_dir):
    """Factory for SessionContext objects rooted in the temporary home."""

    def _make(**overrides):
        values = {
            "cwd": project_dir,
            "home": temp_home_dir,
            "claimed": False,
            "term": "xterm-256color",
            "term_program": "",
            "prefix": None,
        }
        values.update(overrides)
        return SessionContext(**values)

    return _make
