#!/usr/bin/env python3
"""
Ghostline Ghost-Text State Machine
Keeps the inline suggestion in step with typing, cursor moves and the menu
"""

from typing import Optional, Tuple

from .models import GhostState


class GhostMachine:
    """
    Holds the current GhostState and whether it may be drawn.

    The state itself is only ever replaced. It is drawn when the cursor is
    at the end of the buffer and no menu is open.
    """

    def __init__(self, orchestrator, enabled: bool = True):
        self.orchestrator = orchestrator
        self.enabled = enabled
        self.state: Optional[GhostState] = None
        self.hidden = False
        self._before_menu: Optional[GhostState] = None

    @property
    def visible_text(self) -> str:
        if self.hidden or self.state is None:
            return ""
        return self.state.remainder

    async def recompute(self, buffer: str, cursor: int) -> Optional[GhostState]:
        self.hidden = cursor != len(buffer)
        if not self.enabled or self.hidden:
            self.state = None
        else:
            self.state = await self.orchestrator.suggest(buffer)
        return self.state

    async def on_char(self, char: str, buffer: str, cursor: int) -> Optional[GhostState]:
        """buffer and cursor are after the character was inserted"""
        if self.state is not None and cursor == len(buffer):
            advanced = self.state.advance(char)
            if advanced is not None and advanced.prefix == buffer:
                self.state = advanced
                self.hidden = False
                return self.state
        self.state = None
        return await self.recompute(buffer, cursor)

    async def on_delete(self, buffer: str, cursor: int) -> Optional[GhostState]:
        return await self.recompute(buffer, cursor)

    async def on_cursor_moved(self, buffer: str, cursor: int) -> Optional[GhostState]:
        """Hide away from the end; on return, recompute if the line was edited meanwhile"""
        returning = self.hidden and cursor == len(buffer)
        if returning and (self.state is None or self.state.prefix != buffer):
            return await self.recompute(buffer, cursor)
        self.hidden = cursor != len(buffer)
        return self.state

    def on_menu_opened(self) -> None:
        self._before_menu = self.state
        self.hidden = True

    async def on_menu_closed(self, buffer: str, cursor: int, accepted: bool = False) -> Optional[GhostState]:
        """
        Restore the pre-menu ghost when the line is back to what it was,
        otherwise compute one for the new line.
        """
        saved, self._before_menu = self._before_menu, None
        if not accepted and saved is not None and saved.prefix == buffer:
            self.state = saved
            self.hidden = cursor != len(buffer)
            return self.state
        return await self.recompute(buffer, cursor)

    def accept(self, buffer: str, cursor: int) -> Optional[Tuple[str, int]]:
        """Take the whole remainder; None when there is nothing to take"""
        if self.hidden or self.state is None or cursor != len(buffer) or not self.state.remainder:
            return None
        if self.state.prefix != buffer:
            return None
        suggestion = self.state.suggestion
        self.state = None
        return suggestion, len(suggestion)

    def clear(self) -> None:
        self.state = None
        self._before_menu = None
