"""Agent permission configuration module.

Adds an auto-approval rule for ``termtitle set`` to the agent's local
settings file so titles can be set without a confirmation prompt.

Settings file layout:
    {
      "permissions": {
        "allow": ["Bash(termtitle set*)"],
        "deny": []
      }
    }

Idempotent: an existing rule (including the legacy set_title.sh rule) is left
alone. Writes go through a temp file and an atomic rename.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

PERMISSION_RULE = "Bash(termtitle set*)"
LEGACY_RULE_MARKER = "set_title.sh"


class PermissionConfigError(Exception):
    """Raised when the settings file cannot be updated."""

    pass


@dataclass
class PermissionConfigResult:
    """Result from permission configuration."""

    success: bool
    message: str
    settings_file: Path
    created: bool = False
    already_configured: bool = False


def default_settings_file() -> Path:
    return Path.home() / ".claude" / "settings.local.json"


class PermissionConfigurator:
    """Add the auto-approval rule to the agent settings file."""

    def __init__(self, settings_file: str | Path | None = None, rule: str = PERMISSION_RULE):
        self.settings_file = (
            Path(settings_file).expanduser() if settings_file else default_settings_file()
        )
        self.rule = rule

    def _load(self) -> dict[str, Any]:
        try:
            data = json.loads(self.settings_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise PermissionConfigError(f"{self.settings_file} is not valid JSON: {e}") from e
        except OSError as e:
            raise PermissionConfigError(f"Failed to read {self.settings_file}: {e}") from e

        if not isinstance(data, dict):
            raise PermissionConfigError(f"{self.settings_file} does not contain a JSON object")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        temp_path = self.settings_file.with_name(f"{self.settings_file.name}.tmp")
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
            os.replace(temp_path, self.settings_file)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise PermissionConfigError(f"Failed to write {self.settings_file}: {e}") from e

    def has_rule(self, data: dict[str, Any]) -> bool:
        """Check whether the allow list already grants the title command."""
        permissions = data.get("permissions")
        if not isinstance(permissions, dict):
            return False
        allow = permissions.get("allow", [])
        if not isinstance(allow, list):
            return False
        return any(
            isinstance(entry, str) and (entry == self.rule or LEGACY_RULE_MARKER in entry)
            for entry in allow
        )

    def configure(self) -> PermissionConfigResult:
        """Add the rule (main entry point).

        Returns:
            PermissionConfigResult with detailed status

        Raises:
            PermissionConfigError: If the file is malformed or cannot be written
        """
        if not self.settings_file.exists():
            self._save({"permissions": {"allow": [self.rule], "deny": []}})
            logger.info(f"Created {self.settings_file}")
            return PermissionConfigResult(
                success=True,
                message="Created settings file with auto-approval permission",
                settings_file=self.settings_file,
                created=True,
            )

        data = self._load()
        if self.has_rule(data):
            return PermissionConfigResult(
                success=True,
                message="Permission already configured",
                settings_file=self.settings_file,
                already_configured=True,
            )

        permissions = data.setdefault("permissions", {})
        if not isinstance(permissions, dict):
            raise PermissionConfigError("'permissions' must be a JSON object")
        allow = permissions.setdefault("allow", [])
        if not isinstance(allow, list):
            raise PermissionConfigError("'permissions.allow' must be a JSON array")

        allow.append(self.rule)
        self._save(data)

        logger.info(f"Added {self.rule} to {self.settings_file}")
        return PermissionConfigResult(
            success=True,
            message="Added auto-approval permission",
            settings_file=self.settings_file,
        )


__all__ = [
    "PERMISSION_RULE",
    "PermissionConfigError",
    "PermissionConfigResult",
    "PermissionConfigurator",
]
