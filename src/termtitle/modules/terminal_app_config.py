"""macOS Terminal.app title configuration module.

Terminal.app decorates window titles with the active process, window
dimensions and the represented URL. This module switches those decorations
off for one profile so the published title is shown as-is.

Profile selection:
1. TERMINAL_PROFILE environment variable
2. "Default Window Settings" from the Terminal preferences
3. "Basic"
"""

import logging
import os
import plistlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

APPLE_TERMINAL = "Apple_Terminal"
PROFILE_ENV_VAR = "TERMINAL_PROFILE"
DEFAULT_PROFILE = "Basic"
TITLE_FLAGS = (
    "ShowActiveProcessInTitle",
    "ShowDimensionsInTitle",
    "ShowRepresentedURLInTitle",
)


class TerminalAppConfigError(Exception):
    """Raised when Terminal.app preferences cannot be updated."""

    pass


@dataclass
class TerminalAppConfigResult:
    """Result from Terminal.app configuration."""

    success: bool
    message: str
    profile: str
    changed_flags: list[str] = field(default_factory=list)


def default_plist_path() -> Path:
    return Path.home() / "Library" / "Preferences" / "com.apple.Terminal.plist"


def is_apple_terminal(environ: dict[str, str] | None = None) -> bool:
    """Check whether we are running inside Terminal.app."""
    if environ is None:
        environ = dict(os.environ)
    return environ.get("TERM_PROGRAM") == APPLE_TERMINAL


class TerminalAppConfigurator:
    """Disable Terminal.app title decorations for a profile."""

    def __init__(self, plist_path: str | Path | None = None, profile: str | None = None):
        self.plist_path = Path(plist_path).expanduser() if plist_path else default_plist_path()
        self.profile = profile

    def _load(self) -> dict[str, Any]:
        try:
            with open(self.plist_path, "rb") as f:
                data = plistlib.load(f)
        except FileNotFoundError as e:
            raise TerminalAppConfigError(
                f"Terminal preferences not found: {self.plist_path}"
            ) from e
        except (OSError, plistlib.InvalidFileException) as e:
            raise TerminalAppConfigError(f"Failed to read {self.plist_path}: {e}") from e

        if not isinstance(data, dict):
            raise TerminalAppConfigError(f"Unexpected plist structure in {self.plist_path}")
        return data

    def resolve_profile(self, data: dict[str, Any]) -> str:
        """Pick the profile to modify."""
        if self.profile:
            return self.profile
        env_profile = os.environ.get(PROFILE_ENV_VAR)
        if env_profile:
            return env_profile
        default = data.get("Default Window Settings")
        if isinstance(default, str) and default:
            return default
        return DEFAULT_PROFILE

    def configure(self) -> TerminalAppConfigResult:
        """Turn off title decorations (main entry point).

        Returns:
            TerminalAppConfigResult listing the flags that changed

        Raises:
            TerminalAppConfigError: If the plist or profile is missing or unwritable
        """
        data = self._load()
        profile = self.resolve_profile(data)

        window_settings = data.get("Window Settings")
        if not isinstance(window_settings, dict) or not isinstance(
            window_settings.get(profile), dict
        ):
            raise TerminalAppConfigError(f"Terminal profile not found: {profile}")

        profile_settings = window_settings[profile]
        changed = [flag for flag in TITLE_FLAGS if profile_settings.get(flag) is not False]

        if not changed:
            return TerminalAppConfigResult(
                success=True,
                message=f"Terminal.app profile '{profile}' already configured",
                profile=profile,
            )

        for flag in changed:
            profile_settings[flag] = False

        temp_path = self.plist_path.with_name(f"{self.plist_path.name}.tmp")
        try:
            with open(temp_path, "wb") as f:
                plistlib.dump(data, f, fmt=plistlib.FMT_BINARY)
            os.replace(temp_path, self.plist_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise TerminalAppConfigError(f"Failed to write {self.plist_path}: {e}") from e

        logger.info(f"Disabled {', '.join(changed)} for Terminal.app profile '{profile}'")
        return TerminalAppConfigResult(
            success=True,
            message="Terminal.app title settings configured",
            profile=profile,
            changed_flags=changed,
        )


__all__ = [
    "TITLE_FLAGS",
    "TerminalAppConfigError",
    "TerminalAppConfigResult",
    "TerminalAppConfigurator",
    "is_apple_terminal",
]
