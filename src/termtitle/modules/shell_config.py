"""Shell prompt hook configuration module.

This module installs the termtitle prompt hook into the user's shell startup
file so the published title survives prompts and /clear.

Configuration includes:
- Picking the rc file (~/.bashrc, ~/.bash_profile or ~/.zshrc)
- Backing it up with a timestamped copy
- Appending a marked hook block that eval's ``termtitle hook`` before each prompt

Idempotency:
- The block carries a unique marker; a second run detects it and does nothing
- bash only prepends the hook to PROMPT_COMMAND when it is not there yet
"""

import logging
import os
import shlex
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

SETUP_MARKER = "CLAUDE_TERMINAL_TITLE_SETUP"
SUPPORTED_SHELLS = ("bash", "zsh")
_RULE = "# " + "=" * 76

_BASH_HOOK = """__termtitle_precmd() {{
    eval "$({command} hook 2>/dev/null)"
}}

# Add to PROMPT_COMMAND if not already present
if [[ "$PROMPT_COMMAND" != *"__termtitle_precmd"* ]]; then
    PROMPT_COMMAND="__termtitle_precmd${{PROMPT_COMMAND:+;$PROMPT_COMMAND}}"
fi"""

_ZSH_HOOK = """__termtitle_precmd() {{
    eval "$({command} hook 2>/dev/null)"
}}

autoload -Uz add-zsh-hook
add-zsh-hook precmd __termtitle_precmd"""


class ShellConfigError(Exception):
    """Raised when shell configuration fails."""

    pass


@dataclass
class ShellConfigResult:
    """Result from shell configuration operation."""

    success: bool
    message: str
    rc_file: Path
    already_configured: bool = False
    backup_path: Path | None = None


def detect_shell(shell_path: str | None = None) -> str:
    """Detect the user's shell from $SHELL.

    Returns:
        "bash" or "zsh" ("bash" when unknown)
    """
    if shell_path is None:
        shell_path = os.environ.get("SHELL", "")
    name = Path(shell_path).name if shell_path else ""
    return name if name in SUPPORTED_SHELLS else "bash"


def default_rc_file(shell: str, home: Path | None = None) -> Path:
    """Startup file the hook is installed into for a shell."""
    if home is None:
        home = Path.home()

    if shell == "zsh":
        return home / ".zshrc"

    bashrc = home / ".bashrc"
    bash_profile = home / ".bash_profile"
    if not bashrc.exists() and bash_profile.exists():
        return bash_profile
    return bashrc


def resolve_command(name: str = "termtitle") -> str:
    """Shell-quoted command used inside the hook (absolute when on PATH)."""
    return shlex.quote(shutil.which(name) or name)


class ShellConfigurator:
    """Install the termtitle prompt hook into a shell rc file.

    Example:
        >>> configurator = ShellConfigurator("zsh")
        >>> result = configurator.configure()
        >>> if result.success:
        ...     print(f"Reload with: source {result.rc_file}")
    """

    def __init__(
        self,
        shell: str | None = None,
        rc_file: str | Path | None = None,
        command: str | None = None,
    ):
        """Initialize shell configurator.

        Args:
            shell: "bash" or "zsh" (detected from $SHELL when omitted)
            rc_file: Startup file to modify (default depends on the shell)
            command: Command the hook runs (defaults to termtitle on PATH)

        Raises:
            ShellConfigError: If the shell is not supported
        """
        self.shell = shell or detect_shell()
        if self.shell not in SUPPORTED_SHELLS:
            raise ShellConfigError(
                f"Unsupported shell: {self.shell}. Supported: {', '.join(SUPPORTED_SHELLS)}"
            )
        self.rc_file = Path(rc_file).expanduser() if rc_file else default_rc_file(self.shell)
        self.command = command or resolve_command()

    def _read_rc(self) -> str:
        try:
            return self.rc_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except OSError as e:
            raise ShellConfigError(f"Failed to read {self.rc_file}: {e}") from e

    def is_configured(self) -> bool:
        """Check whether the hook block is already installed."""
        return SETUP_MARKER in self._read_rc()

    def hook_snippet(self) -> str:
        """Generate the marked hook block for the configured shell."""
        template = _ZSH_HOOK if self.shell == "zsh" else _BASH_HOOK
        body = template.format(command=self.command)
        return (
            f"\n{_RULE}\n"
            f"# {SETUP_MARKER} - Terminal Title Configuration\n"
            f"# Added by termtitle setup\n"
            f"{_RULE}\n\n"
            f"{body}\n\n"
            f"{_RULE}\n"
        )

    def backup(self) -> Path | None:
        """Copy the rc file to a timestamped backup.

        Returns:
            Backup path, or None when there was nothing to back up

        Raises:
            ShellConfigError: If the copy fails
        """
        if not self.rc_file.exists():
            return None

        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = self.rc_file.with_name(f"{self.rc_file.name}.backup.{stamp}")
        try:
            shutil.copy2(self.rc_file, backup_path)
        except OSError as e:
            raise ShellConfigError(f"Failed to back up {self.rc_file}: {e}") from e

        logger.info(f"Backup created: {backup_path}")
        return backup_path

    def configure(self) -> ShellConfigResult:
        """Install the hook block (main entry point).

        Returns:
            ShellConfigResult with detailed status

        Raises:
            ShellConfigError: If the rc file cannot be read or written
        """
        if self.is_configured():
            logger.info(f"{self.rc_file} already configured")
            return ShellConfigResult(
                success=True,
                message=f"{self.rc_file} is already configured for terminal titles",
                rc_file=self.rc_file,
                already_configured=True,
            )

        backup_path = self.backup()

        try:
            self.rc_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.rc_file, "a", encoding="utf-8") as f:
                f.write(self.hook_snippet())
        except OSError as e:
            raise ShellConfigError(f"Failed to update {self.rc_file}: {e}") from e

        logger.info(f"Configured {self.shell} prompt hook in {self.rc_file}")
        return ShellConfigResult(
            success=True,
            message=f"Configuration added to {self.rc_file}",
            rc_file=self.rc_file,
            backup_path=backup_path,
        )

    def remove(self) -> bool:
        """Remove the hook block from the rc file.

        Returns:
            True if a block was removed, False if none was installed

        Raises:
            ShellConfigError: If the rc file cannot be rewritten
        """
        content = self._read_rc()
        if SETUP_MARKER not in content:
            return False

        lines = content.splitlines(keepends=True)
        marker_idx = next(i for i, line in enumerate(lines) if SETUP_MARKER in line)

        # Block starts at the rule line just above the marker
        start = marker_idx
        if start > 0 and lines[start - 1].startswith(_RULE):
            start -= 1
        if start > 0 and not lines[start - 1].strip():
            start -= 1

        # Block ends at the closing rule (third rule line from the start)
        end = len(lines)
        rules_seen = 0
        for i in range(start, len(lines)):
            if lines[i].startswith(_RULE):
                rules_seen += 1
                if rules_seen == 3:
                    end = i + 1
                    break

        new_content = "".join(lines[:start] + lines[end:])
        temp_path = self.rc_file.with_name(f"{self.rc_file.name}.tmp.{os.getpid()}")
        try:
            temp_path.write_text(new_content, encoding="utf-8")
            shutil.copymode(self.rc_file, temp_path)
            os.replace(temp_path, self.rc_file)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise ShellConfigError(f"Failed to update {self.rc_file}: {e}") from e

        logger.info(f"Removed prompt hook from {self.rc_file}")
        return True


__all__ = [
    "SETUP_MARKER",
    "SUPPORTED_SHELLS",
    "ShellConfigError",
    "ShellConfigResult",
    "ShellConfigurator",
    "default_rc_file",
    "detect_shell",
]
