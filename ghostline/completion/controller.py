#!/usr/bin/env python3
"""
Ghostline AutoComplete Controller
Turns key events into line edits, menu and ghost transitions, and render instructions
"""

import asyncio
from typing import Awaitable, List, Optional, Tuple

from prompt_toolkit.keys import Keys

from ..history import InputHistory
from ..logger import logger
from .ghost import GhostMachine
from .menu import MenuAction, MenuMachine, MenuState
from .orchestrator import CompletionOrchestrator, TabAction
from .render import ClearGhost, ClearMenu, RenderInstruction, Renderer, ShowGhost, ShowMenu, UpdateLine
from .tokens import delete_at, delete_before, insert_text

log = logger.get_logger("completion.controller")

_STALE = object()


class AutoCompleteController:
    """
    Owns the line, the menu and the ghost for one prompt.

    Keys are prompt_toolkit Keys values or single printable characters. Each
    call to handle_key finishes its state transition before returning. If a
    newer key arrives while a completion query is still running, the older
    query is cancelled and its result is dropped.
    """

    def __init__(self, orchestrator: CompletionOrchestrator, renderer: Optional[Renderer] = None,
                 history: Optional[InputHistory] = None, ghost_enabled: bool = True):
        self.orchestrator = orchestrator
        self.renderer = renderer
        self.history = history
        self.buffer = ""
        self.cursor = 0
        self.menu: Optional[MenuState] = None
        self.ghost = GhostMachine(orchestrator, ghost_enabled)
        self.menus = MenuMachine()

        self._generation = 0
        self._pending: Optional[asyncio.Task] = None
        self._history_index = -1
        self._draft = ""
        self._shown: Tuple[str, int, Optional[MenuState], str] = ("", 0, None, "")

    @property
    def ghost_text(self) -> str:
        return "" if self.menu is not None else self.ghost.visible_text

    async def _query(self, awaitable: Awaitable):
        """Run one completion query; _STALE when a newer key superseded it"""
        generation = self._generation
        task = asyncio.ensure_future(awaitable)
        self._pending = task
        await asyncio.wait({task})
        if task.cancelled() or generation != self._generation:
            return _STALE
        return task.result()

    async def type_text(self, text: str) -> None:
        for char in text:
            await self.handle_key(char)

    async def handle_key(self, key: str) -> Optional[str]:
        """
        Process a single key.

        Returns:
            The submitted line when Enter is pressed with no menu open
        """
        self._generation += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()

        submitted = None
        if self.menu is not None:
            await self._handle_menu_key(key)
        else:
            submitted = await self._handle_line_key(key)
        self._emit()
        return submitted

    async def _handle_menu_key(self, key: str) -> None:
        transition = self.menus.handle(self.menu, key, self.buffer, self.cursor)
        self.buffer, self.cursor, self.menu = transition.buffer, transition.cursor, transition.menu
        if transition.closed:
            accepted = transition.action is MenuAction.ACCEPTED
            await self._update_ghost(self.ghost.on_menu_closed(self.buffer, self.cursor, accepted))

    async def _handle_line_key(self, key: str) -> Optional[str]:
        if key == Keys.Tab:
            await self._tab()
        elif key == Keys.Enter:
            return self._submit()
        elif key in (Keys.End, Keys.Right) and self._accept_ghost():
            pass
        elif key == Keys.End:
            await self._move(len(self.buffer))
        elif key == Keys.Right:
            await self._move(self.cursor + 1)
        elif key == Keys.Left:
            await self._move(self.cursor - 1)
        elif key == Keys.Home:
            await self._move(0)
        elif key == Keys.Backspace:
            self._edit(*delete_before(self.buffer, self.cursor))
            await self._update_ghost(self.ghost.on_delete(self.buffer, self.cursor))
        elif key == Keys.Delete:
            self._edit(*delete_at(self.buffer, self.cursor))
            await self._update_ghost(self.ghost.on_delete(self.buffer, self.cursor))
        elif key == Keys.Up:
            await self._browse_history(1)
        elif key == Keys.Down:
            await self._browse_history(-1)
        elif key == Keys.Escape:
            self.ghost.clear()
        elif isinstance(key, str) and len(key) == 1 and key.isprintable():
            self._edit(*insert_text(self.buffer, self.cursor, key))
            await self._update_ghost(self.ghost.on_char(key, self.buffer, self.cursor))
        return None

    async def _tab(self) -> None:
        outcome = await self._query(self.orchestrator.handle_tab(self.buffer, self.cursor))
        if outcome is _STALE:
            return
        if outcome.action is TabAction.INSERT:
            self._edit(outcome.buffer, outcome.cursor)
            await self._update_ghost(self.ghost.recompute(self.buffer, self.cursor))
        elif outcome.action is TabAction.OPEN_MENU:
            self.menu = outcome.menu
            self.ghost.on_menu_opened()

    async def _update_ghost(self, awaitable: Awaitable) -> None:
        result = await self._query(awaitable)
        if result is _STALE:
            log.debug("Dropped a superseded ghost suggestion")

    def _accept_ghost(self) -> bool:
        accepted = self.ghost.accept(self.buffer, self.cursor)
        if accepted is None:
            return False
        self._edit(*accepted)
        return True

    async def _move(self, cursor: int) -> None:
        self.cursor = max(0, min(cursor, len(self.buffer)))
        await self._update_ghost(self.ghost.on_cursor_moved(self.buffer, self.cursor))

    def _edit(self, buffer: str, cursor: int) -> None:
        self.buffer, self.cursor = buffer, cursor
        self._history_index = -1

    def _submit(self) -> str:
        line = self.buffer
        if self.history is not None:
            self.history.record(line)
        self.buffer, self.cursor, self.menu = "", 0, None
        self.ghost.clear()
        self._history_index = -1
        self._draft = ""
        return line

    async def _browse_history(self, step: int) -> None:
        if self.history is None:
            return
        entries = self.history.entries()
        index = self._history_index + step
        if index >= len(entries) or index < -1:
            return
        if self._history_index == -1:
            self._draft = self.buffer
        line = self._draft if index == -1 else entries[index]
        self.buffer, self.cursor = line, len(line)
        self._history_index = index
        await self._update_ghost(self.ghost.recompute(self.buffer, self.cursor))

    def reset(self, buffer: str = "", cursor: Optional[int] = None) -> None:
        """Start over with the given line, menu closed and no ghost"""
        self.buffer = buffer
        self.cursor = len(buffer) if cursor is None else cursor
        self.menu = None
        self.ghost.clear()
        self._history_index = -1

    def _emit(self) -> None:
        if self.renderer is None:
            return
        instructions: List[RenderInstruction] = []
        buffer, cursor, menu, ghost = self._shown
        if (self.buffer, self.cursor) != (buffer, cursor):
            instructions.append(UpdateLine(self.buffer, self.cursor))
        if self.menu is not None and self.menu != menu:
            instructions.append(ShowMenu(
                self.menu.items, self.menu.selected_index, self.menu.viewport_start, self.menu.viewport_size,
            ))
        elif self.menu is None and menu is not None:
            instructions.append(ClearMenu())
        current_ghost = self.ghost_text
        if current_ghost and current_ghost != ghost:
            instructions.append(ShowGhost(current_ghost, self.cursor))
        elif not current_ghost and ghost:
            instructions.append(ClearGhost())
        self._shown = (self.buffer, self.cursor, self.menu, current_ghost)
        if instructions:
            self.renderer.render(instructions)
