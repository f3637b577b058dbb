#!/usr/bin/env python3
"""
Ghostline Completion Data Model
Immutable values passed between the intent detector, providers, cache and state machines
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from ..registry import CommandDescriptor, CompletionDescriptor

UsedArgumentSet = FrozenSet[str]


class ElementType(Enum):
    """What kind of token the cursor is completing"""
    COMMAND = "command"
    ARGUMENT_NAME = "argument_name"
    ARGUMENT_ALIAS = "argument_alias"
    ARGUMENT_VALUE = "argument_value"
    POSITIONAL_VALUE = "positional_value"


class Intent(Enum):
    NONE = "none"
    COMMAND = "command"
    ARGUMENT_NAME = "argument_name"
    ARGUMENT_ALIAS = "argument_alias"
    ARGUMENT_VALUE = "argument_value"
    POSITIONAL_VALUE = "positional_value"
    OPTION = "option"


class ItemKind(Enum):
    COMMAND = "command"
    GROUP = "group"
    ARGUMENT_NAME = "argument_name"
    ARGUMENT_ALIAS = "argument_alias"
    ARGUMENT_VALUE = "argument_value"
    PATH = "path"
    HISTORY = "history"


class GhostSource(Enum):
    COMMAND = "command"
    HISTORY = "history"
    ARGUMENT = "argument"


@dataclass(frozen=True)
class CompletionContext:
    """Snapshot of everything a provider needs to answer one query"""
    buffer: str
    cursor: int
    partial: str = ""
    token_start: int = 0
    token_end: int = 0
    intent: Intent = Intent.NONE
    element_type: Optional[ElementType] = None
    group: Tuple[str, ...] = ()
    command: Optional[CommandDescriptor] = None
    argument_name: str = ""
    completion: CompletionDescriptor = field(default_factory=CompletionDescriptor.none)
    used: UsedArgumentSet = frozenset()
    for_ghost: bool = False

    @property
    def command_name(self) -> str:
        return self.command.path if self.command else " ".join(self.group)

    def ghost_query(self) -> "CompletionContext":
        return replace(self, for_ghost=True)


@dataclass(frozen=True)
class CompletionItem:
    display: str
    insertion: str
    description: str = ""
    kind: ItemKind = ItemKind.ARGUMENT_VALUE
    terminal: bool = True

    @classmethod
    def of(cls, value: str, kind: ItemKind = ItemKind.ARGUMENT_VALUE, description: str = "") -> "CompletionItem":
        return cls(display=value, insertion=value, description=description, kind=kind)


@dataclass(frozen=True)
class CompletionResult:
    items: Tuple[CompletionItem, ...] = ()
    total_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        if not self.total_count:
            object.__setattr__(self, "total_count", len(self.items))

    @classmethod
    def empty(cls) -> "CompletionResult":
        return cls()

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __bool__(self):
        return bool(self.items)


@dataclass(frozen=True)
class GhostState:
    """Inline suggestion for a prefix; remainder is what is drawn after the cursor"""
    prefix: str
    suggestion: str
    source: GhostSource = GhostSource.COMMAND

    @property
    def remainder(self) -> str:
        return self.suggestion[len(self.prefix):]

    @property
    def visible(self) -> bool:
        return bool(self.remainder)

    def advance(self, char: str) -> Optional["GhostState"]:
        """The state after typing char, or None when char breaks the match"""
        remainder = self.remainder
        if not remainder or remainder[0] != char:
            return None
        return GhostState(self.prefix + char, self.suggestion, self.source)
