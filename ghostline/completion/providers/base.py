#!/usr/bin/env python3
"""
Completion provider contract
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Union

from ...registry import CompletionSource
from ..models import CompletionContext, CompletionItem, Intent, ItemKind


class CompletionProvider(ABC):
    """
    One source of completion candidates.

    Providers are consulted in descending priority order; when two providers
    offer the same insertion text the higher priority one wins.
    """

    priority: int = 0
    # Results that depend on outside state (the file system) are not cached
    cacheable: bool = True

    @property
    def name(self) -> str:
        return type(self).__name__

    def is_cacheable(self, ctx: CompletionContext) -> bool:
        return self.cacheable

    @abstractmethod
    def can_handle(self, ctx: CompletionContext) -> bool:
        ...

    @abstractmethod
    async def get_completions(self, ctx: CompletionContext) -> List[CompletionItem]:
        ...

    def __repr__(self):
        return f"<{self.name} priority={self.priority}>"


class ValueProvider(CompletionProvider):
    """Completes argument values for slots whose descriptor has a given source"""

    source: CompletionSource = CompletionSource.NONE

    def handles_descriptor(self, descriptor) -> bool:
        return descriptor.source is self.source and descriptor.resolved

    def can_handle(self, ctx: CompletionContext) -> bool:
        return ctx.intent is Intent.ARGUMENT_VALUE and self.handles_descriptor(ctx.completion)


def starts_with(value: str, partial: str) -> bool:
    return value.lower().startswith(partial.lower())


def to_items(values: Iterable[Union[str, CompletionItem]], partial: str, kind: ItemKind = ItemKind.ARGUMENT_VALUE) -> List[CompletionItem]:
    """Normalize strings and items, keeping those that extend the partial"""
    items = []
    for value in values:
        item = value if isinstance(value, CompletionItem) else CompletionItem.of(str(value), kind)
        if starts_with(item.insertion, partial) or starts_with(item.display, partial):
            items.append(item)
    return items
