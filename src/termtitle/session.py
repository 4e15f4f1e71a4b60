"""Per-shell session context.

A session context captures everything the publisher and the prompt hook need
to know about the calling shell: working directory, home directory, terminal
identification and whether this session has claimed the published title.

The claim is held in the context object. Environment variables are only the
way the context crosses process boundaries: the hook reads
CLAUDE_TITLE_CLAIMED on the way in and asks the shell to export it on the way
out (see ``to_environ``).
"""

import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path

CLAIM_ENV_VAR = "CLAUDE_TITLE_CLAIMED"
PREFIX_ENV_VAR = "CLAUDE_TITLE_PREFIX"
TERM_ENV_VAR = "TERM"
TERM_PROGRAM_ENV_VAR = "TERM_PROGRAM"

# Terminals that clear the title between prompts on their own
DEFAULT_RESET_PROGRAMS = ("WarpTerminal",)

logger = logging.getLogger(__name__)


def working_directory(pwd: str | None = None) -> str:
    """Resolve the process working directory.

    $PWD keeps the logical path the shell shows (symlinks unresolved), but it
    is inherited by child processes started elsewhere. It is used only when it
    names the same directory as os.getcwd().

    If the working directory has been deleted, $PWD is the only name left for
    it; without one the root directory is used.
    """
    try:
        actual = os.getcwd()
    except OSError as e:
        logger.debug(f"Working directory unavailable: {e}")
        return pwd or os.sep

    if pwd and os.path.isabs(pwd):
        try:
            if os.path.samefile(pwd, actual):
                return pwd
        except OSError:
            pass
        logger.debug(f"Ignoring stale PWD {pwd!r}, using {actual!r}")

    return actual


@dataclass(frozen=True)
class SessionContext:
    """Snapshot of the calling shell session."""

    cwd: Path
    home: Path | None = None
    claimed: bool = False
    term: str = ""
    term_program: str = ""
    prefix: str | None = None

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        cwd: str | Path | None = None,
    ) -> "SessionContext":
        """Build a context from environment variables.

        Args:
            environ: Environment mapping (defaults to os.environ)
            cwd: Working directory (defaults to ``working_directory($PWD)``)

        Returns:
            SessionContext for the current process
        """
        if environ is None:
            environ = os.environ

        if cwd is None:
            cwd = working_directory(environ.get("PWD"))

        home = environ.get("HOME")

        return cls(
            cwd=Path(cwd),
            home=Path(home) if home else None,
            claimed=bool(environ.get(CLAIM_ENV_VAR)),
            term=environ.get(TERM_ENV_VAR, ""),
            term_program=environ.get(TERM_PROGRAM_ENV_VAR, ""),
            prefix=environ.get(PREFIX_ENV_VAR),
        )

    def claim(self) -> "SessionContext":
        """Return a copy of this context that has claimed the title."""
        return replace(self, claimed=True)

    def to_environ(self) -> dict[str, str]:
        """Serialize session state to environment variables the shell must export."""
        if self.claimed:
            return {CLAIM_ENV_VAR: "1"}
        return {}

    def resets_title_each_prompt(self, programs: Iterable[str] = DEFAULT_RESET_PROGRAMS) -> bool:
        """Check whether the host terminal clears the title on every prompt."""
        return bool(self.term_program) and self.term_program in set(programs)

    @property
    def dir_name(self) -> str:
        """Base name of the working directory ("/" for the root)."""
        return self.cwd.name or str(self.cwd)

    def display_cwd(self) -> str:
        """Working directory with the home prefix abbreviated to ``~``."""
        cwd = str(self.cwd)
        if not self.home:
            return cwd

        home = str(self.home).rstrip("/")
        if not home:
            return cwd
        if cwd == home:
            return "~"
        if cwd.startswith(home + "/"):
            return "~" + cwd[len(home) :]
        return cwd


__all__ = [
    "CLAIM_ENV_VAR",
    "DEFAULT_RESET_PROGRAMS",
    "PREFIX_ENV_VAR",
    "TERM_ENV_VAR",
    "TERM_PROGRAM_ENV_VAR",
    "SessionContext",
    "working_directory",
]
