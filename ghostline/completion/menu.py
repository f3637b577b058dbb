#!/usr/bin/env python3
"""
Ghostline Menu State Machine
Selection, wraparound navigation and live filtering of an open suggestion menu
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple

from prompt_toolkit.keys import Keys

from .models import CompletionItem
from .tokens import apply_item, delete_at, delete_before, insert_text

DEFAULT_VIEWPORT_SIZE = 10


@dataclass(frozen=True)
class MenuAnchor:
    """The line as it was when the menu opened"""
    buffer: str
    cursor: int
    token_start: int
    token_end: int
    partial: str
    command: str = ""
    argument: str = ""


@dataclass(frozen=True)
class MenuState:
    items: Tuple[CompletionItem, ...]
    all_items: Tuple[CompletionItem, ...]
    anchor: MenuAnchor
    selected_index: int = 0
    typed: str = ""
    viewport_start: int = 0
    viewport_size: int = DEFAULT_VIEWPORT_SIZE

    @classmethod
    def open(cls, items: Sequence[CompletionItem], anchor: MenuAnchor, viewport_size: int = DEFAULT_VIEWPORT_SIZE) -> "MenuState":
        items = tuple(items)
        return cls(items=items, all_items=items, anchor=anchor, viewport_size=max(1, viewport_size))

    @property
    def selected(self) -> CompletionItem:
        return self.items[self.selected_index]

    @property
    def filter_text(self) -> str:
        return self.anchor.partial + self.typed

    @property
    def token_end(self) -> int:
        """End of the token being completed in the current buffer"""
        return self.anchor.token_end + len(self.typed)

    def visible_items(self) -> Tuple[CompletionItem, ...]:
        return self.items[self.viewport_start:self.viewport_start + self.viewport_size]

    def select(self, index: int) -> "MenuState":
        index %= len(self.items)
        start = self.viewport_start
        if index < start:
            start = index
        elif index >= start + self.viewport_size:
            start = index - self.viewport_size + 1
        return replace(self, selected_index=index, viewport_start=start)

    def next(self) -> "MenuState":
        return self.select((self.selected_index + 1) % len(self.items))

    def previous(self) -> "MenuState":
        count = len(self.items)
        return self.select((self.selected_index - 1 + count) % count)

    def filtered(self, char: str) -> "MenuState":
        """Narrow the original items to those matching the typed text"""
        typed = self.typed + char
        text = (self.anchor.partial + typed).lower()
        items = tuple(
            item for item in self.all_items
            if item.display.lower().startswith(text) or item.insertion.lower().lstrip('"').startswith(text)
        )
        return replace(self, items=items, typed=typed, selected_index=0, viewport_start=0)


class MenuAction(Enum):
    NAVIGATED = "navigated"
    FILTERED = "filtered"
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"
    CLOSED = "closed"
    IGNORED = "ignored"


@dataclass(frozen=True)
class MenuTransition:
    """Outcome of one key while the menu is open; menu is None once closed"""
    action: MenuAction
    buffer: str
    cursor: int
    menu: Optional[MenuState] = None
    item: Optional[CompletionItem] = None

    @property
    def closed(self) -> bool:
        return self.menu is None


class MenuMachine:
    """
    Key handling for an open menu.

    Up/Down and Tab/Shift+Tab rotate the selection. Enter accepts, Escape
    restores the line as it was before the menu opened. Printable characters
    filter the list; an empty list closes the menu and a single survivor is
    accepted. Cursor movement, deletion and whitespace close the menu and
    apply the key to the line.
    """

    def handle(self, menu: MenuState, key: str, buffer: str, cursor: int) -> MenuTransition:
        if key in (Keys.Down, Keys.Tab):
            return MenuTransition(MenuAction.NAVIGATED, buffer, cursor, menu.next())
        if key in (Keys.Up, Keys.BackTab):
            return MenuTransition(MenuAction.NAVIGATED, buffer, cursor, menu.previous())
        if key == Keys.Enter:
            return self.accept(menu, buffer)
        if key == Keys.Escape:
            return self.cancel(menu)
        if key == Keys.Home:
            return MenuTransition(MenuAction.CLOSED, buffer, 0)
        if key == Keys.End:
            return MenuTransition(MenuAction.CLOSED, buffer, len(buffer))
        if key == Keys.Left:
            return MenuTransition(MenuAction.CLOSED, buffer, max(0, cursor - 1))
        if key == Keys.Right:
            return MenuTransition(MenuAction.CLOSED, buffer, min(len(buffer), cursor + 1))
        if key == Keys.Backspace:
            return MenuTransition(MenuAction.CLOSED, *delete_before(buffer, cursor))
        if key == Keys.Delete:
            return MenuTransition(MenuAction.CLOSED, *delete_at(buffer, cursor))
        if isinstance(key, str) and len(key) == 1:
            return self.type_char(menu, key, buffer, cursor)
        return MenuTransition(MenuAction.IGNORED, buffer, cursor, menu)

    def accept(self, menu: MenuState, buffer: str, item: Optional[CompletionItem] = None) -> MenuTransition:
        item = item or menu.selected
        new_buffer, new_cursor = apply_item(buffer, menu.anchor.token_start, menu.token_end, item)
        return MenuTransition(MenuAction.ACCEPTED, new_buffer, new_cursor, item=item)

    def cancel(self, menu: MenuState) -> MenuTransition:
        return MenuTransition(MenuAction.CANCELLED, menu.anchor.buffer, menu.anchor.cursor)

    def type_char(self, menu: MenuState, char: str, buffer: str, cursor: int) -> MenuTransition:
        buffer, cursor = insert_text(buffer, cursor, char)
        if char.isspace():
            return MenuTransition(MenuAction.CLOSED, buffer, cursor)

        narrowed = menu.filtered(char)
        if not narrowed.items:
            return MenuTransition(MenuAction.CLOSED, buffer, cursor)
        if len(narrowed.items) == 1:
            return self.accept(narrowed, buffer, narrowed.items[0])
        return MenuTransition(MenuAction.FILTERED, buffer, cursor, narrowed)
