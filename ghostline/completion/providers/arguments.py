#!/usr/bin/env python3
"""
Named argument and alias completion
"""

from typing import List

from ..models import CompletionContext, CompletionItem, Intent, ItemKind
from .base import CompletionProvider, starts_with


class ArgumentNameProvider(CompletionProvider):
    """--Name candidates for arguments not yet used anywhere in the line"""

    priority = 50

    def can_handle(self, ctx: CompletionContext) -> bool:
        return ctx.command is not None and ctx.intent in (Intent.ARGUMENT_NAME, Intent.OPTION)

    async def get_completions(self, ctx: CompletionContext) -> List[CompletionItem]:
        items = []
        for argument in sorted(ctx.command.arguments, key=lambda a: a.name.lower()):
            if argument.name in ctx.used:
                continue
            text = f"--{argument.name}"
            if starts_with(text, ctx.partial):
                items.append(CompletionItem(text, text, argument.description, ItemKind.ARGUMENT_NAME))
        return items


class ArgumentAliasProvider(CompletionProvider):
    """-a candidates; aliases are case-sensitive"""

    priority = 51

    def can_handle(self, ctx: CompletionContext) -> bool:
        return ctx.command is not None and ctx.intent is Intent.ARGUMENT_ALIAS

    async def get_completions(self, ctx: CompletionContext) -> List[CompletionItem]:
        items = []
        for argument in ctx.command.arguments:
            if argument.name in ctx.used:
                continue
            for alias in argument.aliases:
                text = f"-{alias}"
                if text.startswith(ctx.partial):
                    description = f"{argument.name}: {argument.description}" if argument.description else argument.name
                    items.append(CompletionItem(text, text, description, ItemKind.ARGUMENT_ALIAS))
        return sorted(items, key=lambda i: (i.insertion.lower(), i.insertion))
