#!/usr/bin/env python3
"""Tests for tokenizing and used-argument tracking"""

import pytest

from ghostline.completion.models import CompletionItem, ItemKind
from ghostline.completion.tokens import active_token, apply_item, is_option_text, tokenize
from ghostline.completion.used_args import UsedArgumentTracker, bind_positionals


@pytest.fixture
def tracker(registry):
    return UsedArgumentTracker(registry)


class TestTokenize:
    """Test the quote-aware tokenizer"""

    def test_spans(self):
        tokens = tokenize("copy  a.txt b")
        assert [(t.text, t.start, t.end) for t in tokens] == [("copy", 0, 4), ("a.txt", 6, 11), ("b", 12, 13)]

    def test_quotes_group_words(self):
        tokens = tokenize('copy "my file.txt" out')
        assert tokens[1].text == "my file.txt"
        assert tokens[1].quoted
        assert (tokens[1].start, tokens[1].end) == (5, 18)

    def test_unterminated_quote_runs_to_end(self):
        assert tokenize('copy "my fi')[1].text == "my fi"

    def test_option_detection(self):
        assert is_option_text("--Force")
        assert is_option_text("-F")
        assert not is_option_text("-")
        assert not is_option_text("-5")
        assert not is_option_text("value")

    def test_active_token_inside_word(self):
        span, token = active_token("server con", 10)
        assert (span.start, span.end, span.partial) == (7, 10, "con")
        assert token.text == "con"

    def test_active_token_after_space_is_empty(self):
        span, token = active_token("server ", 7)
        assert span.is_empty
        assert token is None

    def test_cursor_before_word_starts_new_token(self):
        span, _ = active_token("server  --ApiKey", 7)
        assert span.is_empty


class TestApplyItem:
    """Test insertion of accepted items"""

    def test_terminal_item_gets_trailing_space(self):
        item = CompletionItem.of("connect", ItemKind.COMMAND)
        assert apply_item("server con", 7, 10, item) == ("server connect ", 15)

    def test_existing_space_is_not_duplicated(self):
        item = CompletionItem.of("connect", ItemKind.COMMAND)
        assert apply_item("server con --ApiKey", 7, 10, item) == ("server connect --ApiKey", 15)

    def test_directory_item_gets_no_space(self):
        item = CompletionItem("backup/", "backup/", kind=ItemKind.PATH, terminal=False)
        assert apply_item("copy a b", 7, 8, item) == ("copy a backup/", 14)


class TestUsedArgumentTracker:
    """Test scanning of the whole line for bound arguments"""

    def test_named_argument(self, tracker):
        assert tracker.compute_used("deploy --Tag v1") == {"Tag"}

    def test_names_are_case_insensitive(self, tracker):
        assert tracker.compute_used("deploy --environment prod") == {"Environment"}

    def test_alias_resolves_to_canonical_name(self, tracker):
        assert tracker.compute_used("deploy -F") == {"Force"}

    def test_inline_value(self, tracker):
        assert tracker.compute_used("deploy --Tag=v1 -e dev") == {"Tag", "Environment"}

    def test_positional_fills_named_slot(self, tracker):
        assert tracker.compute_used("copy file1.txt") == {"Source"}
        assert tracker.compute_used("copy file1.txt backup/") == {"Source", "Destination"}

    def test_positional_skips_slot_set_by_name(self, tracker):
        assert tracker.compute_used("copy --Destination out a.txt") == {"Source", "Destination"}

    def test_flag_does_not_consume_next_token(self, tracker):
        assert tracker.compute_used("copy -f a.txt") == {"Force", "Source"}

    def test_variadic_slot(self, tracker):
        assert tracker.compute_used("logs api web") == {"Services"}

    def test_unknown_command_uses_nothing(self, tracker):
        assert tracker.compute_used("nope --Force") == frozenset()

    def test_whole_line_is_scanned(self, tracker):
        # The argument after the cursor position still counts
        assert "ApiKey" in tracker.compute_used("server connect  --ApiKey ")

    def test_excluded_span_is_ignored(self, tracker):
        assert tracker.compute_used("deploy --Force", exclude=(7, 14)) == frozenset()

    def test_bind_positionals_next_slot(self, registry):
        copy = registry.find_command("copy")
        filled, slot = bind_positionals(copy, frozenset(), 1)
        assert filled == {"Source"}
        assert slot.name == "Destination"

    def test_bind_positionals_variadic_stays_open(self, registry):
        logs = registry.find_command("logs")
        _, slot = bind_positionals(logs, frozenset(), 5)
        assert slot.name == "Services"
