#!/usr/bin/env python3
"""
Positional argument completion
"""

from typing import List, Sequence

from ..models import CompletionContext, CompletionItem, Intent
from .base import CompletionProvider, ValueProvider


class PositionalArgumentProvider(CompletionProvider):
    """Completes the next open positional slot through the value provider for its descriptor"""

    priority = 45

    def __init__(self, value_providers: Sequence[ValueProvider]):
        self.value_providers = sorted(value_providers, key=lambda p: -p.priority)

    def is_cacheable(self, ctx: CompletionContext) -> bool:
        delegate = self._delegate(ctx)
        return delegate is None or delegate.cacheable

    def _delegate(self, ctx: CompletionContext):
        for provider in self.value_providers:
            if provider.handles_descriptor(ctx.completion):
                return provider
        return None

    def can_handle(self, ctx: CompletionContext) -> bool:
        return ctx.intent is Intent.POSITIONAL_VALUE and self._delegate(ctx) is not None

    async def get_completions(self, ctx: CompletionContext) -> List[CompletionItem]:
        return await self._delegate(ctx).get_completions(ctx)
