"""Unit tests for claimer module.

Test Structure:
- Fresh record: first prompt claims, later prompts keep showing it
- Stale record: unclaimed sessions fall back to the directory
- Aggressive-reset terminals: claimed sessions re-assert every prompt
- Failure handling: every I/O problem degrades to the fallback
"""

import os
from unittest.mock import patch

import pytest

from termtitle.claimer import ClaimSource, TitleClaimer

NOW = 1_700_000_000.0


class FakeClock:
    """Controllable clock for freshness checks."""

    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def claimer(title_store, clock):
    return TitleClaimer(title_store, clock=clock)


def write_record(title_store, title: str, age: float) -> None:
    title_store.write(title)
    mtime = NOW - age
    os.utime(title_store.path, (mtime, mtime))


class TestFreshRecord:
    """Tests for claiming a freshly published title."""

    def test_first_prompt_claims(self, claimer, title_store, make_context):
        write_record(title_store, "myrepo | Build", age=10)

        decision = claimer.decide(make_context())

        assert decision.title == "myrepo | Build"
        assert decision.source is ClaimSource.CLAIMED
        assert decision.newly_claimed
        assert decision.context.claimed is True

    def test_claimed_session_keeps_title_after_it_goes_stale(
        self, claimer, title_store, make_context, clock
    ):
        """Test that a claimed session shows the title regardless of age."""
        write_record(title_store, "myrepo | Build", age=10)
        context = claimer.decide(make_context()).context

        for elapsed in (60, 299, 301, 3600, 86400):
            clock.now = NOW + elapsed
            decision = claimer.decide(context)
            assert decision.title == "myrepo | Build"
            assert decision.source is ClaimSource.KEPT
            assert not decision.newly_claimed
            context = decision.context

    def test_claimed_session_follows_new_titles(self, claimer, title_store, make_context):
        write_record(title_store, "myrepo | Build", age=10)
        context = claimer.decide(make_context()).context

        write_record(title_store, "myrepo | Deploy", age=7200)
        assert claimer.decide(context).title == "myrepo | Deploy"

    def test_claim_survives_directory_change(self, claimer, title_store, make_context, temp_home_dir):
        write_record(title_store, "myrepo | Build", age=10)
        context = claimer.decide(make_context()).context

        elsewhere = make_context(cwd=temp_home_dir, claimed=context.claimed)
        assert claimer.decide(elsewhere).title == "myrepo | Build"

    def test_boundary_is_exclusive(self, claimer, title_store, make_context):
        write_record(title_store, "myrepo | Build", age=300)
        decision = claimer.decide(make_context())
        assert decision.source is ClaimSource.FALLBACK

    def test_just_inside_window(self, claimer, title_store, make_context):
        write_record(title_store, "myrepo | Build", age=299)
        assert claimer.decide(make_context()).source is ClaimSource.CLAIMED

    def test_custom_freshness_window(self, title_store, make_context, clock):
        claimer = TitleClaimer(title_store, freshness_window=30, clock=clock)
        write_record(title_store, "myrepo | Build", age=45)
        assert claimer.decide(make_context()).source is ClaimSource.FALLBACK


class TestStaleRecord:
    """Tests for new sessions seeing an old record."""

    def test_stale_record_falls_back_to_directory(self, claimer, title_store, make_context):
        write_record(title_store, "myrepo | Build", age=301)

        decision = claimer.decide(make_context())

        assert decision.title == "~/projects/myrepo"
        assert decision.source is ClaimSource.FALLBACK
        assert decision.context.claimed is False

    def test_missing_record_falls_back(self, claimer, make_context):
        decision = claimer.decide(make_context())
        assert decision.title == "~/projects/myrepo"
        assert decision.source is ClaimSource.FALLBACK

    def test_empty_record_falls_back(self, claimer, title_store, make_context):
        title_store.path.parent.mkdir(parents=True)
        title_store.path.write_text("\n")
        decision = claimer.decide(make_context())
        assert decision.source is ClaimSource.FALLBACK

    def test_claimed_session_with_empty_record_falls_back(self, claimer, make_context):
        decision = claimer.decide(make_context(claimed=True))
        assert decision.source is ClaimSource.FALLBACK
        assert decision.context.claimed is True

    def test_fallback_outside_home(self, claimer, make_context, tmp_path):
        decision = claimer.decide(make_context(cwd=tmp_path / "outside"))
        assert decision.title == str(tmp_path / "outside")


class TestAggressiveResetTerminal:
    """Tests for terminals that clear titles on every prompt."""

    def test_claimed_warp_session_reasserts(self, claimer, title_store, make_context):
        write_record(title_store, "myrepo | Build", age=86400)

        decision = claimer.decide(make_context(claimed=True, term_program="WarpTerminal"))

        assert decision.title == "myrepo | Build"
        assert decision.source is ClaimSource.REASSERTED

    def test_unclaimed_warp_session_uses_freshness(self, claimer, title_store, make_context):
        write_record(title_store, "myrepo | Build", age=86400)
        decision = claimer.decide(make_context(term_program="WarpTerminal"))
        assert decision.source is ClaimSource.FALLBACK

    def test_custom_reset_programs(self, title_store, make_context, clock):
        claimer = TitleClaimer(title_store, reset_programs=["vscode"], clock=clock)
        write_record(title_store, "myrepo | Build", age=10)

        decision = claimer.decide(make_context(claimed=True, term_program="vscode"))
        assert decision.source is ClaimSource.REASSERTED


class TestFailureHandling:
    """Tests for best-effort I/O."""

    def test_unknown_mtime_falls_back(self, claimer, title_store, make_context):
        write_record(title_store, "myrepo | Build", age=10)

        with patch.object(title_store, "modified_time", return_value=None):
            decision = claimer.decide(make_context())

        assert decision.source is ClaimSource.FALLBACK
        assert decision.context.claimed is False

    def test_read_error_falls_back(self, claimer, title_store, make_context):
        write_record(title_store, "myrepo | Build", age=10)

        with patch("pathlib.Path.read_text", side_effect=PermissionError("denied")):
            decision = claimer.decide(make_context())

        assert decision.source is ClaimSource.FALLBACK
