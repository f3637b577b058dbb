#!/usr/bin/env python3
"""
Ghostline Line Tokenizer
Quote-aware splitting of the input line and the edits applied when a completion is accepted
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .models import CompletionItem


@dataclass(frozen=True)
class Token:
    """A whitespace-separated word; start/end are buffer offsets of the raw text"""
    text: str
    start: int
    end: int
    quoted: bool = False

    @property
    def is_option(self) -> bool:
        return is_option_text(self.text) and not self.quoted


def is_option_text(text: str) -> bool:
    """True for --name and -a style tokens; a lone dash or a negative number is a value"""
    if len(text) < 2 or not text.startswith("-"):
        return False
    return not text[1:].replace(".", "", 1).isdigit()


def tokenize(buffer: str) -> List[Token]:
    tokens = []
    start = None
    chars = []
    quoted = False
    in_quote = False

    for index, char in enumerate(buffer):
        if char == '"':
            if start is None:
                start = index
            in_quote = not in_quote
            quoted = True
            continue
        if char.isspace() and not in_quote:
            if start is not None:
                tokens.append(Token("".join(chars), start, index, quoted))
                start, chars, quoted = None, [], False
            continue
        if start is None:
            start = index
        chars.append(char)

    if start is not None:
        tokens.append(Token("".join(chars), start, len(buffer), quoted))
    return tokens


@dataclass(frozen=True)
class ActiveToken:
    """The token under the cursor, or an empty one at the cursor"""
    start: int
    end: int
    partial: str

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


def active_token(buffer: str, cursor: int, tokens: Optional[List[Token]] = None) -> Tuple[ActiveToken, Optional[Token]]:
    """
    Locate the token being completed.

    A token counts as active when the cursor sits inside it or right after
    it; a cursor right before a token starts a new, empty one.

    Returns:
        The active span and the matching Token (None for an empty span)
    """
    for token in tokens if tokens is not None else tokenize(buffer):
        if token.start < cursor <= token.end:
            partial = buffer[token.start:cursor].replace('"', "")
            return ActiveToken(token.start, token.end, partial), token
    return ActiveToken(cursor, cursor, ""), None


# ---------------------------------------------------------------------------
# Line edits
# ---------------------------------------------------------------------------


def insert_text(buffer: str, cursor: int, text: str) -> Tuple[str, int]:
    return buffer[:cursor] + text + buffer[cursor:], cursor + len(text)


def delete_before(buffer: str, cursor: int) -> Tuple[str, int]:
    if cursor <= 0:
        return buffer, cursor
    return buffer[:cursor - 1] + buffer[cursor:], cursor - 1


def delete_at(buffer: str, cursor: int) -> Tuple[str, int]:
    if cursor >= len(buffer):
        return buffer, cursor
    return buffer[:cursor] + buffer[cursor + 1:], cursor


def apply_item(buffer: str, start: int, end: int, item: CompletionItem) -> Tuple[str, int]:
    """
    Replace buffer[start:end] with the item's insertion text.

    Complete tokens get a separating space unless one already follows; the
    cursor lands after the separator either way.
    """
    rest = buffer[end:]
    text = item.insertion
    cursor = start + len(text)
    if item.terminal:
        if rest.startswith(" "):
            cursor += 1
        else:
            text += " "
            cursor += 1
    return buffer[:start] + text + rest, cursor
