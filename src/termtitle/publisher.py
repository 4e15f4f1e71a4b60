"""Title publisher.

Composes the display title, persists it to the title record and sets it on
the current terminal straight away. Invoked on demand by an external agent
through ``termtitle set TITLE``.

Composition:
    "<dir_name> | <title>"            no prefix
    "<prefix> <dir_name> | <title>"   CLAUDE_TITLE_PREFIX set

Publishing is best-effort. An empty title is a silent no-op, and a record
that cannot be persisted still leaves the title set for this terminal.
"""

import logging
from dataclasses import dataclass
from typing import TextIO

from termtitle.sanitizer import (
    DEFAULT_MAX_PREFIX_LENGTH,
    DEFAULT_MAX_TITLE_LENGTH,
    TitleSanitizer,
)
from termtitle.session import SessionContext
from termtitle.terminal import TerminalKind, detect_terminal_kind, write_title
from termtitle.title_store import RecordDirectoryError, TitleStore, TitleStoreError

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Result from a publish operation."""

    published: bool
    title: str | None = None
    persisted: bool = False
    terminal_kind: TerminalKind | None = None
    error: str | None = None
    directory_error: bool = False


def compose_title(title: str, dir_name: str, prefix: str | None = None) -> str:
    """Build the display title from its parts."""
    if prefix:
        return f"{prefix} {dir_name} | {title}"
    return f"{dir_name} | {title}"


class TitlePublisher:
    """Publish window titles to the title record and the terminal.

    Example:
        >>> publisher = TitlePublisher(TitleStore.default())
        >>> result = publisher.publish("Build", SessionContext.from_environ())
        >>> result.title
        'myrepo | Build'
    """

    def __init__(
        self,
        store: TitleStore,
        max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
        max_prefix_length: int = DEFAULT_MAX_PREFIX_LENGTH,
    ):
        self.store = store
        self.max_title_length = max_title_length
        self.max_prefix_length = max_prefix_length

    def build_title(self, raw_title: str | None, context: SessionContext) -> str | None:
        """Sanitize and compose the final title.

        Returns:
            Composed title, or None when there is nothing to publish
        """
        title = TitleSanitizer.sanitize_title(raw_title, self.max_title_length)
        if not title:
            return None

        prefix = TitleSanitizer.sanitize_prefix(context.prefix, self.max_prefix_length)
        return compose_title(title, context.dir_name, prefix or None)

    def publish(
        self,
        raw_title: str | None,
        context: SessionContext,
        stream: TextIO | None = None,
    ) -> PublishResult:
        """Publish a title.

        Args:
            raw_title: Candidate title as given by the caller
            context: Session context of the caller (cwd, prefix, terminal)
            stream: Output stream for the escape sequence (defaults to stdout)

        Returns:
            PublishResult describing what happened
        """
        final_title = self.build_title(raw_title, context)
        if final_title is None:
            logger.debug("Empty title, nothing to publish")
            return PublishResult(published=False)

        result = PublishResult(published=True, title=final_title)

        try:
            self.store.write(final_title)
            result.persisted = True
        except RecordDirectoryError as e:
            logger.debug(f"Title not persisted: {e}")
            result.error = str(e)
            result.directory_error = True
        except TitleStoreError as e:
            logger.debug(f"Title not persisted: {e}")
            result.error = str(e)

        result.terminal_kind = detect_terminal_kind(context.term)
        write_title(final_title, stream=stream, kind=result.terminal_kind)

        return result


__all__ = ["PublishResult", "TitlePublisher", "compose_title"]
