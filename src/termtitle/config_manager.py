"""Configuration management module.

This module handles optional persistent configuration stored in TOML format.
Nothing needs configuring for normal use; the file only overrides paths and
limits.

Example ~/.claude/terminal_title.toml:
    title_file = "~/.claude/terminal_title"
    freshness_window = 300
    max_title_length = 80
    max_prefix_length = 20
    reset_programs = ["WarpTerminal"]

Security:
- Config file permissions: 0600 (owner read/write only)
- Atomic writes (temp file + rename)
- Values validated before use
"""

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

try:
    import tomli  # type: ignore[import]
except ImportError:
    # Fallback for older Python versions
    try:
        import tomllib as tomli  # type: ignore[import]
    except ImportError as e:
        raise ImportError("toml library not available. Install with: pip install tomli") from e

try:
    import tomlkit
except ImportError as e:
    raise ImportError("tomlkit library not available. Install with: pip install tomlkit") from e

from termtitle.claimer import DEFAULT_FRESHNESS_WINDOW
from termtitle.sanitizer import DEFAULT_MAX_PREFIX_LENGTH, DEFAULT_MAX_TITLE_LENGTH
from termtitle.session import DEFAULT_RESET_PROGRAMS
from termtitle.title_store import DEFAULT_TITLE_FILE, TitleStore

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TERMTITLE_CONFIG"
CONFIG_FILE_NAME = "terminal_title.toml"


class ConfigError(Exception):
    """Raised when configuration operations fail."""

    pass


@dataclass
class TermTitleConfig:
    """termtitle configuration data."""

    title_file: str = DEFAULT_TITLE_FILE
    freshness_window: int = DEFAULT_FRESHNESS_WINDOW
    max_title_length: int = DEFAULT_MAX_TITLE_LENGTH
    max_prefix_length: int = DEFAULT_MAX_PREFIX_LENGTH
    reset_programs: list[str] = field(default_factory=lambda: list(DEFAULT_RESET_PROGRAMS))

    @property
    def title_path(self) -> Path:
        """Title record path with ~ expanded."""
        return Path(self.title_file).expanduser()

    def title_store(self) -> TitleStore:
        return TitleStore(self.title_path)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TermTitleConfig":
        """Create from dictionary."""
        reset_programs = data.get("reset_programs", DEFAULT_RESET_PROGRAMS)
        # A bare string is left as-is for validate() to reject
        if isinstance(reset_programs, list | tuple):
            reset_programs = list(reset_programs)

        return cls(
            title_file=data.get("title_file", DEFAULT_TITLE_FILE),
            freshness_window=data.get("freshness_window", DEFAULT_FRESHNESS_WINDOW),
            max_title_length=data.get("max_title_length", DEFAULT_MAX_TITLE_LENGTH),
            max_prefix_length=data.get("max_prefix_length", DEFAULT_MAX_PREFIX_LENGTH),
            reset_programs=reset_programs,
        )

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigError: If any value is out of range
        """
        if not isinstance(self.title_file, str) or not self.title_file.strip():
            raise ConfigError("title_file must be a non-empty path")

        for name in ("freshness_window", "max_title_length", "max_prefix_length"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

        if not isinstance(self.reset_programs, list) or not all(
            isinstance(p, str) for p in self.reset_programs
        ):
            raise ConfigError("reset_programs must be a list of strings")


class ConfigManager:
    """Manage the termtitle configuration file.

    Configuration is stored at ~/.claude/terminal_title.toml with secure
    permissions. TERMTITLE_CONFIG overrides the location.
    """

    @classmethod
    def default_config_dir(cls) -> Path:
        return Path.home() / ".claude"

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            Path to config file (may not exist yet)
        """
        if custom_path:
            return Path(custom_path).expanduser()

        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()

        return cls.default_config_dir() / CONFIG_FILE_NAME

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> TermTitleConfig:
        """Load configuration from file.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            TermTitleConfig object (defaults when the file does not exist)

        Raises:
            ConfigError: If the file exists but cannot be parsed or is invalid
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return TermTitleConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)  # type: ignore[attr-defined]
        except Exception as e:
            raise ConfigError(f"Failed to load config: {e}") from e

        config = TermTitleConfig.from_dict(data)
        config.validate()

        logger.debug(f"Loaded config from: {config_path}")
        return config

    @classmethod
    def load_or_default(cls, custom_path: str | None = None) -> TermTitleConfig:
        """Load configuration, falling back to defaults on any error.

        Used by the publisher and prompt hook, which must never fail because
        of a broken config file.
        """
        try:
            return cls.load_config(custom_path)
        except ConfigError as e:
            logger.debug(f"Ignoring config: {e}")
            return TermTitleConfig()

    @classmethod
    def save_config(cls, config: TermTitleConfig, custom_path: str | None = None) -> Path:
        """Save configuration to file.

        Args:
            config: Configuration to save
            custom_path: Custom config file path (optional)

        Returns:
            Path the configuration was written to

        Raises:
            ConfigError: If validation or saving fails
        """
        config.validate()
        config_path = cls.get_config_path(custom_path)
        temp_path = config_path.with_suffix(".tmp")

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)

            # Load existing file if it exists (preserves comments/formatting)
            if config_path.exists():
                with open(config_path) as f:
                    doc = tomlkit.load(f)
            else:
                doc = tomlkit.document()

            for key, value in config.to_dict().items():
                doc[key] = value

            with open(temp_path, "w") as f:
                tomlkit.dump(doc, f)

            # Set secure permissions before moving
            os.chmod(temp_path, 0o600)

            # Atomic rename
            temp_path.replace(config_path)

            logger.debug(f"Saved config to: {config_path}")
            return config_path

        except Exception as e:
            # Cleanup temp file on error
            if temp_path.exists():
                temp_path.unlink()
            raise ConfigError(f"Failed to save config: {e}") from e

    @classmethod
    def update_config(cls, custom_path: str | None = None, **updates: Any) -> TermTitleConfig:
        """Update specific configuration values.

        Args:
            custom_path: Custom config file path (optional)
            **updates: Key-value pairs to update

        Returns:
            Updated TermTitleConfig object

        Raises:
            ConfigError: If a key is unknown or a value is invalid
        """
        config = cls.load_config(custom_path)
        known = {f.name for f in fields(TermTitleConfig)}

        for key, value in updates.items():
            if key not in known:
                raise ConfigError(f"Unknown config key: {key}")
            setattr(config, key, value)

        cls.save_config(config, custom_path)
        return config

    @classmethod
    def parse_value(cls, key: str, raw: str) -> Any:
        """Convert a command-line string to the type of a config field.

        Raises:
            ConfigError: If the key is unknown or the value cannot be converted
        """
        defaults = TermTitleConfig()
        if not hasattr(defaults, key):
            raise ConfigError(f"Unknown config key: {key}")

        current = getattr(defaults, key)
        if isinstance(current, int):
            try:
                return int(raw)
            except ValueError as e:
                raise ConfigError(f"{key} must be an integer, got {raw!r}") from e
        if isinstance(current, list):
            return [item.strip() for item in raw.split(",") if item.strip()]
        return raw


__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigError",
    "ConfigManager",
    "TermTitleConfig",
]
