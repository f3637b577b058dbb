#!/usr/bin/env python3
"""
Ghostline Prompt-Toolkit Bridge
Exposes the completion engine to a PromptSession: a Completer, an AutoSuggest,
and key bindings that hand Tab and the open menu to the AutoComplete controller
"""

import asyncio
from typing import AsyncGenerator, Callable, Iterable, List, Optional

from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys

from ..completion.controller import AutoCompleteController
from ..completion.models import CompletionContext, CompletionItem, CompletionResult
from ..completion.orchestrator import CompletionOrchestrator
from .completion_ui import CompletionFormatter


def completion_text(ctx: CompletionContext, item: CompletionItem) -> str:
    """Insertion text plus the separating space a complete token gets on accept"""
    if item.terminal and ctx.cursor == ctx.token_end and not ctx.buffer[ctx.cursor:].startswith(" "):
        return item.insertion + " "
    return item.insertion


class GhostlineCompleter(Completer):
    """
    A prompt_toolkit completer backed by the completion orchestrator.

    prompt_toolkit drives get_completions_async from its own event loop; the
    synchronous get_completions is for callers outside any running loop.
    """

    def __init__(self, orchestrator: CompletionOrchestrator, formatter: Optional[CompletionFormatter] = None):
        self.orchestrator = orchestrator
        self.formatter = formatter or CompletionFormatter()

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        ctx = self.orchestrator.build_context(document.text, document.cursor_position)
        result = asyncio.run(self.orchestrator.complete_context(ctx))
        return self._to_completions(ctx, result)

    async def get_completions_async(self, document: Document, complete_event) -> AsyncGenerator[Completion, None]:
        ctx = self.orchestrator.build_context(document.text, document.cursor_position)
        result = await self.orchestrator.complete_context(ctx)
        for completion in self._to_completions(ctx, result):
            yield completion

    def _to_completions(self, ctx: CompletionContext, result: CompletionResult) -> List[Completion]:
        # prompt_toolkit only replaces text left of the cursor
        start_position = ctx.token_start - ctx.cursor
        return [
            Completion(
                completion_text(ctx, item),
                start_position=start_position,
                display=self.formatter.format_display(item, ctx.partial),
                display_meta=self.formatter.format_meta(item),
            )
            for item in result.items
        ]


class GhostlineAutoSuggest(AutoSuggest):
    """Ghost text from the orchestrator: history first, then the best completion"""

    def __init__(self, orchestrator: CompletionOrchestrator, suppressed: Optional[Callable[[], bool]] = None):
        self.orchestrator = orchestrator
        self.suppressed = suppressed

    def get_suggestion(self, buffer, document: Document) -> Optional[Suggestion]:
        if self._is_suppressed():
            return None
        return self._to_suggestion(document, asyncio.run(self.orchestrator.suggest(document.text)))

    async def get_suggestion_async(self, buffer, document: Document) -> Optional[Suggestion]:
        if self._is_suppressed():
            return None
        return self._to_suggestion(document, await self.orchestrator.suggest(document.text))

    def _is_suppressed(self) -> bool:
        return self.suppressed is not None and self.suppressed()

    @staticmethod
    def _to_suggestion(document: Document, ghost) -> Optional[Suggestion]:
        if ghost is None or not ghost.remainder or not document.is_cursor_at_the_end:
            return None
        return Suggestion(ghost.remainder)


class ControllerKeyBindings:
    """
    Key bindings that give Tab, and every key while the menu is open, to an
    AutoCompleteController. The prompt buffer is synced into the controller
    before each key and the controller's line is written back after it.

    Ghost text stays with GhostlineAutoSuggest; the menu is drawn by
    menu_toolbar, meant for the PromptSession bottom toolbar.
    """

    MENU_KEYS = (
        Keys.Up, Keys.Down, Keys.BackTab, Keys.Enter, Keys.Home, Keys.End,
        Keys.Left, Keys.Right, Keys.Backspace, Keys.Delete,
    )

    def __init__(self, controller: AutoCompleteController, formatter: Optional[CompletionFormatter] = None):
        self.controller = controller
        self.formatter = formatter or CompletionFormatter()
        self.bindings = self._build()
        self._hidden_suggestion = None

    def menu_is_open(self) -> bool:
        return self.controller.menu is not None

    def _build(self) -> KeyBindings:
        bindings = KeyBindings()
        menu_open = Condition(self.menu_is_open)

        @bindings.add(Keys.Tab)
        async def _(event):
            await self.forward(event.current_buffer, Keys.Tab)

        @bindings.add(Keys.Escape, filter=menu_open, eager=True)
        async def _(event):
            await self.forward(event.current_buffer, Keys.Escape)

        for key in self.MENU_KEYS:
            bindings.add(key, filter=menu_open)(self._forward_pressed)

        @bindings.add(Keys.Any, filter=menu_open)
        async def _(event):
            if len(event.data) == 1 and event.data.isprintable():
                await self.forward(event.current_buffer, event.data)

        return bindings

    async def _forward_pressed(self, event) -> None:
        await self.forward(event.current_buffer, event.key_sequence[0].key)

    async def forward(self, buffer: Buffer, key) -> None:
        controller = self.controller
        if controller.menu is None and (controller.buffer, controller.cursor) != (buffer.text, buffer.cursor_position):
            controller.reset(buffer.text, buffer.cursor_position)

        before, was_open = buffer.document, controller.menu is not None
        await controller.handle_key(key)
        if buffer.document != before:
            # Edited while the query ran; the controller's answer is stale
            controller.reset(buffer.text, buffer.cursor_position)
            return
        if (buffer.text, buffer.cursor_position) != (controller.buffer, controller.cursor):
            buffer.document = Document(controller.buffer, controller.cursor)
        self._sync_suggestion(buffer, before.text, was_open)

    def _sync_suggestion(self, buffer: Buffer, text_before: str, was_open: bool) -> None:
        """Hide the ghost while the menu is open and bring it back on cancel"""
        if not was_open and self.menu_is_open():
            self._hidden_suggestion = (text_before, buffer.suggestion)
            buffer.suggestion = None
        elif was_open and not self.menu_is_open():
            saved, self._hidden_suggestion = self._hidden_suggestion, None
            if saved is not None and saved[0] == buffer.text:
                buffer.suggestion = saved[1]

    def menu_toolbar(self) -> FormattedText:
        """The open menu's visible rows on one line, selection reversed"""
        menu = self.controller.menu
        if menu is None:
            return FormattedText([])
        fragments = []
        for offset, item in enumerate(menu.visible_items()):
            selected = menu.viewport_start + offset == menu.selected_index
            for style, text in self.formatter.format_display(item, menu.filter_text):
                fragments.append((f"reverse {style}".strip() if selected else style, text))
            fragments.append(("", "  "))
        if len(menu.items) > menu.viewport_size:
            fragments.append(("italic", f"{menu.selected_index + 1}/{len(menu.items)}"))
        return FormattedText(fragments)

    def reset(self) -> None:
        self.controller.reset()
