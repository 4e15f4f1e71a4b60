"""Title claimer (prompt hook).

Runs before every interactive prompt and decides which title to show:

1. The session already claimed the title and the record is non-empty:
   show the record, whatever its age. On terminals that reset titles on
   every prompt (Warp) this is a re-assertion; elsewhere it keeps the title.
2. The session has not claimed yet and the record was written less than
   ``freshness_window`` seconds ago: claim it for the rest of the session
   and show it.
3. Otherwise show the working directory, home-relative.

A fresh title is assumed to belong to the newest shell that sees it. Shells
started after the record went stale ignore it.

Every I/O problem degrades to the directory fallback; the decision never
raises for a missing, unreadable or un-stat-able record.
"""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from termtitle.session import DEFAULT_RESET_PROGRAMS, SessionContext
from termtitle.title_store import TitleStore

logger = logging.getLogger(__name__)

DEFAULT_FRESHNESS_WINDOW = 300


class ClaimSource(str, Enum):
    """Why a title was chosen."""

    REASSERTED = "reasserted"
    KEPT = "kept"
    CLAIMED = "claimed"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ClaimDecision:
    """Outcome of one prompt-hook evaluation."""

    title: str
    source: ClaimSource
    context: SessionContext

    @property
    def newly_claimed(self) -> bool:
        return self.source is ClaimSource.CLAIMED

    @property
    def shows_record(self) -> bool:
        return self.source is not ClaimSource.FALLBACK


class TitleClaimer:
    """Decide which title a shell session should display."""

    def __init__(
        self,
        store: TitleStore,
        freshness_window: float = DEFAULT_FRESHNESS_WINDOW,
        reset_programs: Iterable[str] = DEFAULT_RESET_PROGRAMS,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.freshness_window = freshness_window
        self.reset_programs = tuple(reset_programs)
        self.clock = clock

    def decide(self, context: SessionContext) -> ClaimDecision:
        """Evaluate the claiming protocol for one prompt render.

        Args:
            context: Session context for the shell rendering the prompt

        Returns:
            ClaimDecision with the title to show and the updated context
        """
        record = self.store.read()

        if record and context.claimed:
            if context.resets_title_each_prompt(self.reset_programs):
                source = ClaimSource.REASSERTED
            else:
                source = ClaimSource.KEPT
            return ClaimDecision(title=record, source=source, context=context)

        if record:
            mtime = self.store.modified_time()
            if mtime is None:
                logger.debug("Title record has no usable mtime, using directory")
                return self._fallback(context)

            age = self.clock() - mtime
            if age < self.freshness_window:
                logger.debug(f"Claiming title record ({age:.0f}s old)")
                return ClaimDecision(
                    title=record, source=ClaimSource.CLAIMED, context=context.claim()
                )

            logger.debug(f"Title record is stale ({age:.0f}s old)")

        return self._fallback(context)

    @staticmethod
    def _fallback(context: SessionContext) -> ClaimDecision:
        return ClaimDecision(
            title=context.display_cwd(), source=ClaimSource.FALLBACK, context=context
        )


__all__ = [
    "DEFAULT_FRESHNESS_WINDOW",
    "ClaimDecision",
    "ClaimSource",
    "TitleClaimer",
]
