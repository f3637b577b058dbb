#!/usr/bin/env python3
"""
Whole-line suggestions from previously submitted input
"""

from typing import List

from ...history import InputHistory
from ..models import CompletionContext, CompletionItem, ItemKind
from .base import CompletionProvider

DEFAULT_LIMIT = 10


class HistoryProvider(CompletionProvider):
    """
    Most recent matching lines first. Only consulted for ghost text, where
    a whole previous line can be offered as the continuation of the buffer.
    """

    priority = 100
    cacheable = False

    def __init__(self, history: InputHistory, limit: int = DEFAULT_LIMIT):
        self.history = history
        self.limit = limit

    def can_handle(self, ctx: CompletionContext) -> bool:
        return ctx.for_ghost and bool(ctx.buffer[:ctx.cursor].strip())

    async def get_completions(self, ctx: CompletionContext) -> List[CompletionItem]:
        typed = ctx.buffer[:ctx.cursor]
        lowered = typed.lower()
        seen = set()
        items = []
        for entry in self.history.entries():
            key = entry.lower()
            if key in seen or entry == typed or not key.startswith(lowered):
                continue
            seen.add(key)
            items.append(CompletionItem(entry, entry, "From history", ItemKind.HISTORY))
            if len(items) >= self.limit:
                break
        return items
