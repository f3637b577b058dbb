#!/usr/bin/env python3
"""
Ghostline Used-Argument Tracker
Finds every argument already bound anywhere in the line
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence, Tuple

from ..registry import ArgumentDescriptor, CommandDescriptor, CommandRegistry
from .models import UsedArgumentSet
from .tokens import Token, tokenize

OPTIONS_END = "--"


@dataclass(frozen=True)
class ArgumentScan:
    """Named arguments and bare positional values found after a command"""
    named: FrozenSet[str]
    positional: Tuple[Token, ...]


def lookup_option(command: CommandDescriptor, text: str) -> Optional[ArgumentDescriptor]:
    """Resolve --Name or -a (with an optional =value) to its argument"""
    name = text.split("=", 1)[0]
    if name.startswith("--"):
        return command.find_argument(name[2:])
    if len(name) == 2:
        return command.find_alias(name[1])
    return None


def ends_options(token: Token) -> bool:
    """A bare `--` makes every later word a positional value"""
    return token.text == OPTIONS_END and not token.quoted


def scan_arguments(command: CommandDescriptor, tokens: Sequence[Token]) -> ArgumentScan:
    named = set()
    positional = []
    options_ended = False
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if not options_ended and ends_options(token):
            options_ended = True
        elif options_ended:
            positional.append(token)
        elif token.is_option:
            argument = lookup_option(command, token.text)
            if argument is not None:
                named.add(argument.name)
                has_inline_value = "=" in token.text
                if argument.takes_value and not has_inline_value and index + 1 < len(tokens) \
                        and not tokens[index + 1].is_option:
                    index += 1
        else:
            positional.append(token)
        index += 1
    return ArgumentScan(frozenset(named), tuple(positional))


def bind_positionals(command: CommandDescriptor, named: FrozenSet[str], count: int) -> Tuple[FrozenSet[str], Optional[ArgumentDescriptor]]:
    """
    Bind `count` bare values to positional slots, skipping slots already set by name.

    Returns:
        The argument names filled positionally, and the slot the next bare
        value would bind to (a variadic slot keeps accepting values)
    """
    filled = set()
    remaining = count
    for slot in command.positional_arguments():
        if slot.name in named:
            continue
        if slot.is_variadic:
            if remaining:
                filled.add(slot.name)
            return frozenset(filled), slot
        if remaining == 0:
            return frozenset(filled), slot
        filled.add(slot.name)
        remaining -= 1
    return frozenset(filled), None


class UsedArgumentTracker:
    """Computes the used-argument set from the whole buffer, never just the text left of the cursor"""

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    def compute_used(self, buffer: str, exclude: Optional[Tuple[int, int]] = None) -> UsedArgumentSet:
        """
        Args:
            buffer: The full input line
            exclude: (start, end) span of a token to ignore, normally the one being edited

        Returns:
            Canonical names of every argument bound by name, alias or position
        """
        tokens = [t for t in tokenize(buffer) if exclude is None or (t.start, t.end) != tuple(exclude)]
        resolved = self.registry.resolve([t.text for t in tokens])
        if resolved.command is None:
            return frozenset()
        return self.used_for(resolved.command, tokens[resolved.consumed:])

    def used_for(self, command: CommandDescriptor, tokens: Sequence[Token]) -> UsedArgumentSet:
        scan = scan_arguments(command, tokens)
        filled, _ = bind_positionals(command, scan.named, len(scan.positional))
        return scan.named | filled

    def aliases_of(self, command: CommandDescriptor, used: UsedArgumentSet) -> List[str]:
        return [f"-{alias}" for argument in command.arguments if argument.name in used for alias in argument.aliases]
