"""Terminal title escape sequences.

Titles are set with a single ANSI OSC 0 sequence (set icon name and window
title): ``ESC ] 0 ; <title> BEL``. Terminals that do not understand it ignore
it, so the sequence is always written.

The terminal kind only decides how write errors are treated:
- ANSI_COMPATIBLE (xterm, rxvt, screen, tmux): errors propagate
- BEST_EFFORT (anything else): errors are logged at debug level and dropped
"""

import logging
import shlex
import sys
from enum import Enum
from typing import TextIO

logger = logging.getLogger(__name__)

ANSI_TERM_PREFIXES = ("xterm", "rxvt", "screen", "tmux")


class TerminalKind(str, Enum):
    """Closed set of terminal kinds."""

    ANSI_COMPATIBLE = "ansi-compatible"
    BEST_EFFORT = "best-effort"


def detect_terminal_kind(term: str | None) -> TerminalKind:
    """Classify a $TERM value."""
    if term and term.startswith(ANSI_TERM_PREFIXES):
        return TerminalKind.ANSI_COMPATIBLE
    return TerminalKind.BEST_EFFORT


def title_sequence(title: str) -> str:
    """OSC 0 escape sequence that sets the window title."""
    return f"\033]0;{title}\007"


def write_title(
    title: str,
    stream: TextIO | None = None,
    kind: TerminalKind = TerminalKind.BEST_EFFORT,
) -> None:
    """Write the title escape sequence and flush.

    Args:
        title: Title text (must already be sanitized)
        stream: Output stream (defaults to sys.stdout)
        kind: Terminal kind from detect_terminal_kind()
    """
    if stream is None:
        stream = sys.stdout

    if kind is TerminalKind.ANSI_COMPATIBLE:
        stream.write(title_sequence(title))
        stream.flush()
        return

    try:
        stream.write(title_sequence(title))
        stream.flush()
    except (OSError, ValueError) as e:
        logger.debug(f"Terminal did not accept title sequence: {e}")


def shell_title_command(title: str) -> str:
    """Shell command that sets the title when eval'd by a prompt hook."""
    return f"printf '\\033]0;%s\\007' {shlex.quote(title)}"


__all__ = [
    "ANSI_TERM_PREFIXES",
    "TerminalKind",
    "detect_terminal_kind",
    "shell_title_command",
    "title_sequence",
    "write_title",
]
