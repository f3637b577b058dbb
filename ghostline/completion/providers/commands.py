#!/usr/bin/env python3
"""
Command and group name completion
"""

from typing import List

from ...registry import CommandRegistry
from ..models import CompletionContext, CompletionItem, Intent, ItemKind
from .base import CompletionProvider, starts_with


class CommandProvider(CompletionProvider):
    """Groups first, then commands, each alphabetical"""

    priority = 0

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    def can_handle(self, ctx: CompletionContext) -> bool:
        return ctx.intent is Intent.COMMAND

    async def get_completions(self, ctx: CompletionContext) -> List[CompletionItem]:
        groups = sorted(
            (g for g in self.registry.groups_in(ctx.group) if starts_with(g.name, ctx.partial)),
            key=lambda g: g.name.lower(),
        )
        commands = sorted(
            (c for c in self.registry.commands_in(ctx.group) if starts_with(c.name, ctx.partial)),
            key=lambda c: c.name.lower(),
        )
        return [
            CompletionItem(g.name, g.name, g.description, ItemKind.GROUP) for g in groups
        ] + [
            CompletionItem(c.name, c.name, c.description, ItemKind.COMMAND) for c in commands
        ]
