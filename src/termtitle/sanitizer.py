"""Title text sanitization.

Titles and prefixes end up inside an OSC escape sequence, so any control
character in them could terminate the sequence early or inject another one.
This module strips the C0 control range (0x00-0x1F) and enforces length caps.

Truncation counts characters, never bytes, so multi-byte characters such as
emoji are never split in half.
"""

import re
from re import Pattern

DEFAULT_MAX_TITLE_LENGTH = 80
DEFAULT_MAX_PREFIX_LENGTH = 20


class TitleSanitizer:
    """Sanitize user-provided title text.

    All methods are static and can be called without instantiation.
    """

    CONTROL_CHARS: Pattern = re.compile(r"[\x00-\x1f]")

    @staticmethod
    def replace_undecodable(value: str) -> str:
        """Replace lone surrogates with U+FFFD.

        Arguments and environment variables holding invalid UTF-8 arrive as
        surrogate escapes, which cannot be encoded to write the record.
        """
        return value.encode("utf-8", "surrogatepass").decode("utf-8", "replace")

    @staticmethod
    def strip_control_chars(value: str | None) -> str:
        """Remove all C0 control characters (0x00-0x1F) and undecodable bytes."""
        if not value:
            return ""
        return TitleSanitizer.CONTROL_CHARS.sub("", TitleSanitizer.replace_undecodable(value))

    @staticmethod
    def sanitize_text(value: str | None, max_length: int) -> str:
        """Strip control characters, then truncate to max_length characters.

        Args:
            value: Raw text (None is treated as empty)
            max_length: Maximum number of characters to keep

        Returns:
            Sanitized text, possibly empty
        """
        if max_length <= 0:
            return ""
        return TitleSanitizer.strip_control_chars(value)[:max_length]

    @staticmethod
    def sanitize_title(value: str | None, max_length: int = DEFAULT_MAX_TITLE_LENGTH) -> str:
        """Sanitize a candidate window title."""
        return TitleSanitizer.sanitize_text(value, max_length)

    @staticmethod
    def sanitize_prefix(value: str | None, max_length: int = DEFAULT_MAX_PREFIX_LENGTH) -> str:
        """Sanitize the optional title prefix."""
        return TitleSanitizer.sanitize_text(value, max_length)


def sanitize_title(value: str | None, max_length: int = DEFAULT_MAX_TITLE_LENGTH) -> str:
    """Convenience wrapper for TitleSanitizer.sanitize_title."""
    return TitleSanitizer.sanitize_title(value, max_length)


def sanitize_prefix(value: str | None, max_length: int = DEFAULT_MAX_PREFIX_LENGTH) -> str:
    """Convenience wrapper for TitleSanitizer.sanitize_prefix."""
    return TitleSanitizer.sanitize_prefix(value, max_length)


__all__ = [
    "DEFAULT_MAX_PREFIX_LENGTH",
    "DEFAULT_MAX_TITLE_LENGTH",
    "TitleSanitizer",
    "sanitize_prefix",
    "sanitize_title",
]
