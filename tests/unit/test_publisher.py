"""Unit tests for publisher module."""

import io
from unittest.mock import patch

import pytest

from termtitle.publisher import TitlePublisher, compose_title
from termtitle.terminal import TerminalKind
from termtitle.title_store import RecordDirectoryError, TitleStoreError


@pytest.fixture
def publisher(title_store):
    return TitlePublisher(title_store)


class TestComposeTitle:
    """Tests for title composition."""

    def test_without_prefix(self):
        assert compose_title("Build", "myrepo") == "myrepo | Build"

    def test_with_prefix(self):
        assert compose_title("Build", "myrepo", "🤖 Bot") == "🤖 Bot myrepo | Build"

    def test_empty_prefix_ignored(self):
        assert compose_title("Build", "myrepo", "") == "myrepo | Build"


class TestPublish:
    """Tests for publishing titles."""

    def test_publishes_and_persists(self, publisher, make_context, title_file):
        stream = io.StringIO()
        result = publisher.publish("Build", make_context(), stream=stream)

        assert result.published is True
        assert result.persisted is True
        assert result.title == "myrepo | Build"
        assert title_file.read_text() == "myrepo | Build\n"
        assert stream.getvalue() == "\x1b]0;myrepo | Build\x07"

    def test_prefix_from_context(self, publisher, make_context, title_file):
        stream = io.StringIO()
        result = publisher.publish("Build", make_context(prefix="🤖 Bot"), stream=stream)

        assert result.title == "🤖 Bot myrepo | Build"
        assert title_file.read_text() == "🤖 Bot myrepo | Build\n"

    def test_prefix_sanitized_and_truncated(self, publisher, make_context):
        prefix = "\x1b[31m" + "P" * 40
        result = publisher.publish("Build", make_context(prefix=prefix), stream=io.StringIO())
        assert result.title == "[31m" + "P" * 16 + " myrepo | Build"

    def test_prefix_of_only_control_chars_dropped(self, publisher, make_context):
        result = publisher.publish("Build", make_context(prefix="\t\n"), stream=io.StringIO())
        assert result.title == "myrepo | Build"

    def test_title_sanitized(self, publisher, make_context):
        result = publisher.publish("Line1\nLine2" + "z" * 100, make_context(), stream=io.StringIO())
        assert result.title == "myrepo | " + ("Line1Line2" + "z" * 100)[:80]

    @pytest.mark.parametrize("raw", [None, "", "\n\t\x1b"])
    def test_empty_title_is_noop(self, publisher, make_context, title_file, raw):
        """Test that empty titles leave the existing record untouched."""
        title_file.parent.mkdir(parents=True)
        title_file.write_text("previous | Title\n")
        stream = io.StringIO()

        result = publisher.publish(raw, make_context(), stream=stream)

        assert result.published is False
        assert stream.getvalue() == ""
        assert title_file.read_text() == "previous | Title\n"

    def test_terminal_kind_detected(self, publisher, make_context):
        result = publisher.publish("Build", make_context(term="dumb"), stream=io.StringIO())
        assert result.terminal_kind is TerminalKind.BEST_EFFORT

    def test_storage_failure_still_emits(self, publisher, make_context):
        """Test that a failed write still sets the title on this terminal."""
        stream = io.StringIO()
        with patch.object(publisher.store, "write", side_effect=TitleStoreError("disk full")):
            result = publisher.publish("Build", make_context(), stream=stream)

        assert result.published is True
        assert result.persisted is False
        assert result.directory_error is False
        assert "disk full" in result.error
        assert stream.getvalue() == "\x1b]0;myrepo | Build\x07"

    def test_directory_failure_flagged(self, publisher, make_context):
        stream = io.StringIO()
        with patch.object(publisher.store, "write", side_effect=RecordDirectoryError("nope")):
            result = publisher.publish("Build", make_context(), stream=stream)

        assert result.directory_error is True
        assert result.persisted is False
        assert stream.getvalue() == "\x1b]0;myrepo | Build\x07"

    def test_custom_limits(self, title_store, make_context):
        publisher = TitlePublisher(title_store, max_title_length=5, max_prefix_length=2)
        result = publisher.publish("abcdefgh", make_context(prefix="xyz"), stream=io.StringIO())
        assert result.title == "xy myrepo | abcde"

    def test_undecodable_title_published(self, publisher, make_context, title_file):
        """Test that invalid UTF-8 from argv is replaced, persisted and emitted."""
        stream = io.StringIO()
        result = publisher.publish("bad\udcff", make_context(), stream=stream)

        assert result.persisted is True
        assert title_file.read_text(encoding="utf-8").startswith("myrepo | bad\ufffd")
        assert stream.getvalue().startswith("\x1b]0;myrepo | bad\ufffd")
        assert [p.name for p in title_file.parent.iterdir()] == ["terminal_title"]
