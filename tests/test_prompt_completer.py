#!/usr/bin/env python3
"""
Tests for the Ghostline prompt-toolkit completer and auto-suggest.
"""

import pytest
from conftest import run
from prompt_toolkit.auto_suggest import Suggestion
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import to_plain_text
from prompt_toolkit.keys import Keys

from ghostline.cli.completion_ui import CompletionFormatter
from ghostline.cli.prompt_completer import ControllerKeyBindings, GhostlineAutoSuggest, GhostlineCompleter
from ghostline.completion.controller import AutoCompleteController
from ghostline.config import config
from ghostline.completion.models import CompletionItem, ItemKind


@pytest.fixture
def completer(orchestrator):
    """Fixture for GhostlineCompleter."""
    return GhostlineCompleter(orchestrator)


@pytest.fixture
def keys(orchestrator):
    return ControllerKeyBindings(AutoCompleteController(orchestrator, ghost_enabled=False))


@pytest.fixture
def auto_suggest(orchestrator):
    """Fixture for GhostlineAutoSuggest."""
    return GhostlineAutoSuggest(orchestrator)


def get_completions(completer, text, cursor_offset=None):
    """Helper function to get completions from the completer."""
    if cursor_offset is None:
        cursor_offset = len(text)
    doc = Document(text, cursor_position=cursor_offset)
    return list(completer.get_completions(doc, None))


async def collect_async(completer, text):
    doc = Document(text, cursor_position=len(text))
    return [c async for c in completer.get_completions_async(doc, None)]


def test_complete_commands(completer):
    """Test completion of top-level commands."""
    completions = get_completions(completer, "de")
    assert [c.text for c in completions] == ["deploy "]
    assert completions[0].start_position == -2


def test_complete_group_members(completer):
    """Test completion inside a command group."""
    texts = [c.text for c in get_completions(completer, "server ")]
    assert texts == ["profile ", "connect ", "disconnect ", "status "]


def test_complete_argument_values(completer):
    """Test completion of static argument values."""
    completions = get_completions(completer, "deploy --Environment st")
    assert [c.text for c in completions] == ["staging "]
    assert completions[0].start_position == -2


def test_display_meta_is_description(completer):
    """Test that descriptions are shown as meta text."""
    completions = get_completions(completer, "deploy --Env")
    assert to_plain_text(completions[0].display_meta) == "Target environment"


def test_accepted_completion_adds_separator(completer):
    """Test that accepting a complete token leaves the cursor past a space."""
    buffer = Buffer(document=Document("serv", 4))
    buffer.apply_completion(get_completions(completer, "serv")[0])
    assert (buffer.text, buffer.cursor_position) == ("server ", 7)


def test_directory_completion_has_no_separator(completer):
    """Test that directories stay open for the next path segment."""
    assert "docs/" in [c.text for c in get_completions(completer, "copy file1.txt d")]


def test_mid_line_completion(completer):
    """Test that the token under the cursor is replaced, not the line end."""
    completions = get_completions(completer, "deploy --Env --Force", 12)
    assert [c.text for c in completions] == ["--Environment"]
    assert completions[0].start_position == -5


def test_async_completions(completer):
    """Test the async completion path used by prompt_toolkit."""
    completions = run(collect_async(completer, "logs "))
    assert [c.text for c in completions] == ["api ", "worker ", "scheduler ", "web "]


def test_no_completions_for_unknown_command(completer):
    """Test that unknown commands produce nothing."""
    assert get_completions(completer, "bogus ") == []


def test_auto_suggest_remainder(auto_suggest):
    """Test that the suggestion is the text after the buffer."""
    doc = Document("se", cursor_position=2)
    suggestion = auto_suggest.get_suggestion(Buffer(), doc)
    assert suggestion.text == "rver"


def test_auto_suggest_only_at_line_end(auto_suggest):
    """Test that no suggestion is offered mid-line."""
    doc = Document("se", cursor_position=1)
    assert auto_suggest.get_suggestion(Buffer(), doc) is None


def test_auto_suggest_async_uses_history(auto_suggest, history):
    """Test that history drives the async suggestion."""
    history.record("copy file1.txt backup/")
    doc = Document("cop", cursor_position=3)
    suggestion = run(auto_suggest.get_suggestion_async(Buffer(), doc))
    assert suggestion.text == "y file1.txt backup/"


def test_auto_suggest_suppressed(orchestrator):
    """Test that no suggestion is offered while suppressed."""
    auto_suggest = GhostlineAutoSuggest(orchestrator, suppressed=lambda: True)
    assert auto_suggest.get_suggestion(Buffer(), Document("se", 2)) is None


async def press(keys, buffer, *pressed):
    for key in pressed:
        await keys.forward(buffer, key)


class TestControllerKeyBindings:
    """Test that Tab and the open menu go through the controller"""

    def test_single_match_gets_separator(self, keys):
        buffer = Buffer(document=Document("serv", 4))
        run(press(keys, buffer, Keys.Tab))
        assert (buffer.text, buffer.cursor_position) == ("server ", 7)
        assert not keys.menu_is_open()

    def test_menu_navigation_and_accept(self, keys):
        buffer = Buffer(document=Document("server ", 7))
        run(press(keys, buffer, Keys.Tab))
        assert keys.menu_is_open()
        assert "profile" in to_plain_text(keys.menu_toolbar())
        run(press(keys, buffer, Keys.Down, Keys.Enter))
        assert buffer.text == "server connect "
        assert not keys.menu_is_open()

    def test_single_filtered_survivor_is_accepted(self, keys):
        buffer = Buffer(document=Document("deploy -e ", 10))
        run(press(keys, buffer, Keys.Tab, "s"))
        assert (buffer.text, buffer.cursor_position) == ("deploy -e staging ", 18)
        assert not keys.menu_is_open()

    def test_escape_restores_line_and_suggestion(self, keys):
        buffer = Buffer(document=Document("deploy -e ", 10))
        buffer.suggestion = Suggestion("dev")
        run(press(keys, buffer, Keys.Tab))
        assert buffer.suggestion is None
        run(press(keys, buffer, Keys.Down, Keys.Escape))
        assert (buffer.text, buffer.cursor_position) == ("deploy -e ", 10)
        assert buffer.suggestion.text == "dev"

    def test_buffer_is_synced_before_each_key(self, keys):
        buffer = Buffer(document=Document("dep", 3))
        run(press(keys, buffer, Keys.Tab))
        assert buffer.text == "deploy "
        buffer.document = Document("cop", 3)
        run(press(keys, buffer, Keys.Tab))
        assert buffer.text == "copy "

    def test_toolbar_empty_when_closed(self, keys):
        assert to_plain_text(keys.menu_toolbar()) == ""


class TestCompletionFormatter:
    """Test menu entry styling"""

    def test_prefix_is_highlighted(self):
        formatter = CompletionFormatter()
        item = CompletionItem.of("deploy", ItemKind.COMMAND)
        fragments = list(formatter.format_display(item, "dep"))
        assert [text for _, text in fragments] == ["dep", "loy"]
        assert "bold" in fragments[0][0]

    def test_plain_display_without_prefix(self):
        formatter = CompletionFormatter(theme="minimal")
        item = CompletionItem.of("deploy", ItemKind.COMMAND)
        assert to_plain_text(formatter.format_display(item)) == "deploy"

    def test_long_meta_is_truncated(self):
        formatter = CompletionFormatter(meta_width=10)
        item = CompletionItem("x", "x", "a very long description")
        assert to_plain_text(formatter.format_meta(item)) == "a very ..."

    def test_theme_comes_from_config(self):
        config.set("menu.theme", "minimal")
        try:
            assert CompletionFormatter().theme_name == "minimal"
        finally:
            config.reset_to_defaults()

    def test_unknown_theme_falls_back(self):
        assert CompletionFormatter(theme="neon").theme == CompletionFormatter().theme
