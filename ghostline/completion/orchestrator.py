#!/usr/bin/env python3
"""
Ghostline Completion Orchestrator
Intent detection, provider dispatch, caching and used-argument exclusion behind one call
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..config import config
from ..exceptions import ProviderError
from ..filesystem import FileSystem
from ..history import InputHistory
from ..logger import logger
from ..registry import CommandRegistry
from .cache import CacheKey, CompletionCache
from .intent import IntentDetector
from .menu import DEFAULT_VIEWPORT_SIZE, MenuAnchor, MenuState
from .models import (
    CompletionContext, CompletionItem, CompletionResult, GhostSource, GhostState, Intent, ItemKind,
)
from .providers import CompletionProvider, HistoryProvider, default_providers
from .tokens import apply_item
from .used_args import UsedArgumentTracker

log = logger.get_logger("completion.orchestrator")


class TabAction(Enum):
    NONE = "none"
    INSERT = "insert"
    OPEN_MENU = "open_menu"


@dataclass(frozen=True)
class TabOutcome:
    action: TabAction
    buffer: str
    cursor: int
    menu: Optional[MenuState] = None
    item: Optional[CompletionItem] = None


class CompletionOrchestrator:
    """
    Entry point of the completion engine.

    Providers that can handle a context run concurrently; their results are
    merged in descending priority order and de-duplicated by insertion text,
    so the higher priority provider wins a collision. A merged result is
    cached only when every provider succeeded.
    """

    def __init__(self, registry: CommandRegistry, history: Optional[InputHistory] = None,
                 filesystem: Optional[FileSystem] = None, providers: Optional[Sequence[CompletionProvider]] = None,
                 cache: Optional[CompletionCache] = None, cache_ttl: Optional[float] = None,
                 menu_size: Optional[int] = None):
        self.registry = registry
        self.tracker = UsedArgumentTracker(registry)
        self.detector = IntentDetector(registry, self.tracker)
        self.cache = cache or CompletionCache(max_entries=config.get("completion.cache_max_entries", 100))
        self.cache_ttl = config.get("completion.cache_ttl_seconds", 300) if cache_ttl is None else cache_ttl
        self.menu_size = menu_size or config.get("menu.max_visible_items", DEFAULT_VIEWPORT_SIZE)

        if providers is None:
            providers = default_providers(
                registry, history, filesystem, config.get("completion.history_limit", 10),
            )
        # sorted() is stable: equal priorities keep registration order
        self.providers: List[CompletionProvider] = sorted(providers, key=lambda p: -p.priority)

    def build_context(self, buffer: str, cursor: Optional[int] = None) -> CompletionContext:
        return self.detector.detect(buffer, cursor)

    async def complete(self, buffer: str, cursor: Optional[int] = None) -> CompletionResult:
        return await self.complete_context(self.build_context(buffer, cursor))

    async def complete_context(self, ctx: CompletionContext) -> CompletionResult:
        if ctx.intent is Intent.NONE:
            return CompletionResult.empty()

        key = CacheKey.for_context(ctx)
        result = self.cache.get(key)
        if result is None:
            applicable = [p for p in self.providers if not isinstance(p, HistoryProvider) and p.can_handle(ctx)]
            result, succeeded = await self._dispatch(applicable, ctx)
            if succeeded and all(p.is_cacheable(ctx) for p in applicable):
                self.cache.set(key, result, self.cache_ttl)
        else:
            log.debug(f"Cache hit for '{ctx.command_name}' {ctx.element_type.value} {ctx.partial!r}")
        return self._exclude_used(ctx, result)

    async def _dispatch(self, providers: Sequence[CompletionProvider], ctx: CompletionContext) -> Tuple[CompletionResult, bool]:
        outcomes = await asyncio.gather(*(self._invoke(p, ctx) for p in providers))
        seen = set()
        merged = []
        for items, _ in outcomes:
            for item in items:
                key = item.insertion.lower()
                if key not in seen:
                    seen.add(key)
                    merged.append(item)
        return CompletionResult(tuple(merged)), all(ok for _, ok in outcomes)

    async def _invoke(self, provider: CompletionProvider, ctx: CompletionContext) -> Tuple[List[CompletionItem], bool]:
        try:
            return list(await provider.get_completions(ctx)), True
        except Exception as e:
            error = ProviderError(f"Completion provider {provider.name} failed: {e}", provider=provider.name, cause=e)
            log.warning(error.message)
            log.debug("Provider failure details", exc_info=True)
            return [], False

    def _exclude_used(self, ctx: CompletionContext, result: CompletionResult) -> CompletionResult:
        if not ctx.used or ctx.command is None:
            return result
        names = {f"--{name.lower()}" for name in ctx.used}
        aliases = set(self.tracker.aliases_of(ctx.command, ctx.used))
        kept = tuple(
            item for item in result.items
            if item.insertion.lower() not in names and item.insertion not in aliases
        )
        return result if len(kept) == len(result.items) else CompletionResult(kept)

    async def handle_tab(self, buffer: str, cursor: Optional[int] = None) -> TabOutcome:
        """
        Complete at the cursor.

        Returns:
            NONE when nothing matches, INSERT with the edited line when exactly
            one item matches, otherwise OPEN_MENU with the first item selected
        """
        ctx = self.build_context(buffer, cursor)
        result = await self.complete_context(ctx)
        if not result:
            return TabOutcome(TabAction.NONE, buffer, ctx.cursor)

        if len(result) == 1:
            item = result.items[0]
            new_buffer, new_cursor = apply_item(buffer, ctx.token_start, ctx.token_end, item)
            return TabOutcome(TabAction.INSERT, new_buffer, new_cursor, item=item)

        anchor = MenuAnchor(
            buffer=buffer, cursor=ctx.cursor, token_start=ctx.token_start, token_end=ctx.token_end,
            partial=ctx.partial, command=ctx.command_name, argument=ctx.argument_name,
        )
        return TabOutcome(TabAction.OPEN_MENU, buffer, ctx.cursor, MenuState.open(result.items, anchor, self.menu_size))

    async def suggest(self, buffer: str) -> Optional[GhostState]:
        """The single inline suggestion for a cursor at the end of buffer, if any"""
        if not buffer.strip():
            return None
        ctx = self.build_context(buffer, len(buffer)).ghost_query()

        for provider in self.providers:
            if isinstance(provider, HistoryProvider) and provider.can_handle(ctx):
                items, _ = await self._invoke(provider, ctx)
                for item in items:
                    if item.insertion.lower().startswith(buffer.lower()) and len(item.insertion) > len(buffer):
                        return GhostState(buffer, buffer + item.insertion[len(buffer):], GhostSource.HISTORY)

        result = await self.complete_context(ctx)
        if not result:
            return None
        insertion = result.items[0].insertion
        if not insertion.lower().startswith(ctx.partial.lower()) or len(insertion) <= len(ctx.partial):
            return None
        kind = result.items[0].kind
        source = GhostSource.COMMAND if kind in (ItemKind.COMMAND, ItemKind.GROUP) else GhostSource.ARGUMENT
        return GhostState(buffer, buffer + insertion[len(ctx.partial):], source)

    def invalidate_command(self, name: str) -> int:
        removed = self.cache.invalidate_for_command(name)
        log.debug(f"Invalidated {removed} cached result(s) for '{name}'")
        return removed
