"""Title record storage.

The title record is a single plain-text file holding the most recently
published window title. It is the only state shared between the publisher
(``termtitle set``) and the prompt hook (``termtitle hook``).

Concurrency:
- Writers replace the whole file: write a sibling temp file unique to the
  process, then os.replace() it over the target
- Readers therefore see either the old or the new title, never a mix
- Concurrent writers race and the last rename wins; no locking is used

Reads are best-effort: a missing or unreadable file reads as an empty title.
"""

import logging
import os
import time
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TITLE_FILE = "~/.claude/terminal_title"


class TitleStoreError(Exception):
    """Raised when the title record cannot be written."""

    pass


class RecordDirectoryError(TitleStoreError):
    """Raised when the directory holding the title record cannot be created."""

    pass


class TitleStore:
    """File-backed title record.

    Example:
        >>> store = TitleStore(Path("~/.claude/terminal_title").expanduser())
        >>> store.write("myrepo | Build")
        >>> store.read()
        'myrepo | Build'
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    @classmethod
    def default(cls) -> "TitleStore":
        """Store at the default location under the user's home directory."""
        return cls(DEFAULT_TITLE_FILE)

    def __repr__(self) -> str:
        return f"TitleStore({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str:
        """Read the current title.

        Returns:
            Title without its trailing newline, or "" when the file is
            missing or unreadable
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read title record {self.path}: {e}")
            return ""
        return content.rstrip("\r\n")

    def modified_time(self) -> float | None:
        """Last modification time of the record, None if it cannot be determined."""
        try:
            return self.path.stat().st_mtime
        except OSError as e:
            logger.debug(f"Could not stat title record {self.path}: {e}")
            return None

    def age(self, now: float | None = None) -> float | None:
        """Seconds since the record was last written, None if unknown."""
        mtime = self.modified_time()
        if mtime is None:
            return None
        if now is None:
            now = time.time()
        return now - mtime

    def ensure_directory(self) -> Path:
        """Create the directory holding the record.

        Raises:
            RecordDirectoryError: If the directory cannot be created
        """
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RecordDirectoryError(f"Failed to create directory {directory}: {e}") from e
        return directory

    def _temp_path(self) -> Path:
        return self.path.with_name(f"{self.path.name}.tmp.{os.getpid()}")

    def write(self, title: str) -> None:
        """Atomically replace the record with a new title.

        Args:
            title: Composed title (already sanitized)

        Raises:
            RecordDirectoryError: If the parent directory cannot be created
            TitleStoreError: If writing or renaming fails (target untouched)
        """
        self.ensure_directory()
        temp_path = self._temp_path()

        try:
            temp_path.write_text(f"{title}\n", encoding="utf-8")
            os.replace(temp_path, self.path)
        except (OSError, ValueError) as e:
            # Never leave the temp file behind
            try:
                temp_path.unlink()
            except FileNotFoundError:
                pass
            except OSError as cleanup_error:
                logger.debug(f"Could not remove temp file {temp_path}: {cleanup_error}")
            raise TitleStoreError(f"Failed to write title record {self.path}: {e}") from e

        logger.debug(f"Saved title record to: {self.path}")


__all__ = [
    "DEFAULT_TITLE_FILE",
    "RecordDirectoryError",
    "TitleStore",
    "TitleStoreError",
]
