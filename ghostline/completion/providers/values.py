#!/usr/bin/env python3
"""
Argument value completion: static lists, enums, named methods and provider types
"""

import asyncio
import inspect
from enum import Enum
from typing import List, Optional, get_args

from ...registry import CompletionSource
from ..models import CompletionContext, CompletionItem
from .base import ValueProvider, to_items


class StaticValuesProvider(ValueProvider):
    priority = 70
    source = CompletionSource.STATIC_VALUES

    async def get_completions(self, ctx: CompletionContext) -> List[CompletionItem]:
        return to_items(ctx.completion.values, ctx.partial)


class EnumProvider(ValueProvider):
    """Member names of the argument's Enum type, in declaration order"""

    priority = 65
    source = CompletionSource.ENUM

    async def get_completions(self, ctx: CompletionContext) -> List[CompletionItem]:
        enum_type = enum_class(ctx.completion.enum_type)
        if enum_type is None:
            return []
        return to_items((member.name for member in enum_type), ctx.partial)


def enum_class(annotation) -> Optional[type]:
    """The Enum class behind an annotation, unwrapping Optional[...] and Union[..., None]"""
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return annotation
    for arg in get_args(annotation):
        if arg is not type(None) and isinstance(arg, type) and issubclass(arg, Enum):
            return arg
    return None


class MethodProvider(ValueProvider):
    """
    Calls a completion method resolved from the command handler, or a
    provider object's get_completions. Either may be sync or async and may
    return strings or CompletionItems.
    """

    priority = 75

    def handles_descriptor(self, descriptor) -> bool:
        return descriptor.resolved and descriptor.source in (
            CompletionSource.NAMED_METHOD, CompletionSource.PROVIDER_TYPE,
        )

    async def get_completions(self, ctx: CompletionContext) -> List[CompletionItem]:
        target = ctx.completion.target
        if ctx.completion.source is CompletionSource.PROVIDER_TYPE:
            target = getattr(target, "get_completions", target)

        if inspect.iscoroutinefunction(target):
            values = await target(ctx)
        else:
            values = await asyncio.to_thread(target, ctx)
            if inspect.isawaitable(values):
                values = await values
        return to_items(values or (), ctx.partial)
