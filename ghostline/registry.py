#!/usr/bin/env python3
"""
Command registry consumed by the Ghostline completion engine.

Commands and groups are described with small declarative specs. Each argument
carries a completion descriptor that is resolved once, when the command is
registered, so the completion engine never inspects handlers per keystroke.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .exceptions import MetadataError, RegistryError
from .logger import logger

log = logger.get_logger("registry")


# ---------------------------------------------------------------------------
# Completion descriptors
# ---------------------------------------------------------------------------


class CompletionSource(Enum):
    NONE = "none"
    STATIC_VALUES = "static_values"
    ENUM = "enum"
    FILE_PATH = "file_path"
    DIRECTORY_PATH = "directory_path"
    NAMED_METHOD = "named_method"
    PROVIDER_TYPE = "provider_type"


@dataclass(frozen=True)
class CompletionDescriptor:
    """How values for one argument slot are completed"""
    source: CompletionSource = CompletionSource.NONE
    values: Tuple[str, ...] = ()
    enum_type: Optional[type] = None
    reference: Any = None
    target: Any = None
    resolved: bool = True

    @classmethod
    def none(cls) -> "CompletionDescriptor":
        return cls()

    @classmethod
    def static(cls, *values: str) -> "CompletionDescriptor":
        if len(values) == 1 and not isinstance(values[0], str):
            values = tuple(values[0])
        return cls(CompletionSource.STATIC_VALUES, values=tuple(str(v) for v in values))

    @classmethod
    def enum(cls, enum_type: type) -> "CompletionDescriptor":
        return cls(CompletionSource.ENUM, enum_type=enum_type)

    @classmethod
    def file_path(cls) -> "CompletionDescriptor":
        return cls(CompletionSource.FILE_PATH)

    @classmethod
    def directory_path(cls) -> "CompletionDescriptor":
        return cls(CompletionSource.DIRECTORY_PATH)

    @classmethod
    def method(cls, name: str) -> "CompletionDescriptor":
        return cls(CompletionSource.NAMED_METHOD, reference=name, resolved=False)

    @classmethod
    def provider_type(cls, reference: Union[str, type]) -> "CompletionDescriptor":
        return cls(CompletionSource.PROVIDER_TYPE, reference=reference, resolved=False)

    @property
    def has_completion(self) -> bool:
        return self.source is not CompletionSource.NONE and self.resolved

    @property
    def identity(self) -> str:
        """Stable name of the custom provider behind this slot, empty for built-ins"""
        if self.source is CompletionSource.PROVIDER_TYPE and self.target is not None:
            cls = type(self.target)
            return f"{cls.__module__}.{cls.__qualname__}"
        if self.source is CompletionSource.NAMED_METHOD and self.reference:
            return f"method:{self.reference}"
        return ""


# ---------------------------------------------------------------------------
# Command, group and argument specs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArgumentDescriptor:
    name: str
    aliases: Tuple[str, ...] = ()
    position: Optional[int] = None
    is_variadic: bool = False
    is_flag: bool = False
    description: str = ""
    completion: CompletionDescriptor = field(default_factory=CompletionDescriptor.none)

    def __post_init__(self):
        # "vF" and ["v", "F"] both mean two single-character aliases
        object.__setattr__(self, "aliases", tuple(self.aliases))

    @property
    def is_positional(self) -> bool:
        return self.position is not None

    @property
    def takes_value(self) -> bool:
        return not self.is_flag


@dataclass
class CommandDescriptor:
    name: str
    group: Tuple[str, ...] = ()
    description: str = ""
    arguments: List[ArgumentDescriptor] = field(default_factory=list)
    handler: Any = None

    def __post_init__(self):
        if isinstance(self.group, str):
            self.group = tuple(self.group.split())
        else:
            self.group = tuple(self.group)

    @property
    def path(self) -> str:
        return " ".join(self.group + (self.name,))

    def find_argument(self, name: str) -> Optional[ArgumentDescriptor]:
        lowered = name.lower()
        for argument in self.arguments:
            if argument.name.lower() == lowered:
                return argument
        return None

    def find_alias(self, alias: str) -> Optional[ArgumentDescriptor]:
        for argument in self.arguments:
            if alias in argument.aliases:
                return argument
        return None

    def positional_arguments(self) -> List[ArgumentDescriptor]:
        return sorted((a for a in self.arguments if a.is_positional), key=lambda a: a.position)


@dataclass
class GroupDescriptor:
    name: str
    parent: Tuple[str, ...] = ()
    description: str = ""

    @property
    def path(self) -> Tuple[str, ...]:
        return self.parent + (self.name,)


@dataclass
class ResolvedPath:
    """Result of walking the leading words of a line through the registry"""
    group: Tuple[str, ...] = ()
    command: Optional[CommandDescriptor] = None
    consumed: int = 0
    unrecognized: bool = False


def _key(path: Sequence[str]) -> Tuple[str, ...]:
    return tuple(part.lower() for part in path)


class CommandRegistry:
    """Holds every registered command and group, looked up case-insensitively"""

    def __init__(self):
        self._groups: Dict[Tuple[str, ...], GroupDescriptor] = {}
        self._commands: Dict[Tuple[str, ...], CommandDescriptor] = {}

    def register_group(self, path: Union[str, Sequence[str]], description: str = "") -> GroupDescriptor:
        """Register a group, creating any missing parent groups"""
        parts = tuple(path.split()) if isinstance(path, str) else tuple(path)
        if not parts:
            raise RegistryError("Group path cannot be empty")

        group = None
        for depth in range(1, len(parts) + 1):
            key = _key(parts[:depth])
            if key in self._commands:
                raise RegistryError(
                    f"'{' '.join(parts[:depth])}' is already registered as a command",
                    group=" ".join(parts),
                )
            group = self._groups.get(key)
            if group is None:
                group = GroupDescriptor(parts[depth - 1], parts[:depth - 1])
                self._groups[key] = group
                log.debug(f"Registered group '{' '.join(parts[:depth])}'")
        if description:
            group.description = description
        return group

    def register(self, command: CommandDescriptor) -> CommandDescriptor:
        """
        Register a command and resolve its completion descriptors

        Raises:
            RegistryError: duplicate command, or a name clash with a group
        """
        key = _key(command.group + (command.name,))
        if key in self._commands:
            raise RegistryError(f"Command '{command.path}' is already registered", command=command.path)
        if key in self._groups:
            raise RegistryError(f"'{command.path}' is already registered as a group", command=command.path)
        self._check_arguments(command)

        if command.group:
            self.register_group(command.group)

        command.arguments = [
            replace(argument, completion=self._resolve_completion(command, argument))
            for argument in command.arguments
        ]
        self._commands[key] = command
        log.debug(f"Registered command '{command.path}' with {len(command.arguments)} argument(s)")
        return command

    def _check_arguments(self, command: CommandDescriptor) -> None:
        names = set()
        aliases = set()
        positions = set()
        for argument in command.arguments:
            if argument.name.lower() in names:
                raise RegistryError(f"Duplicate argument '{argument.name}'", command=command.path)
            names.add(argument.name.lower())
            for alias in argument.aliases:
                if alias in aliases:
                    raise RegistryError(f"Duplicate alias '-{alias}'", command=command.path)
                aliases.add(alias)
            if argument.position is not None:
                if argument.position in positions:
                    raise RegistryError(f"Duplicate position {argument.position}", command=command.path)
                positions.add(argument.position)

    def _resolve_completion(self, command: CommandDescriptor, argument: ArgumentDescriptor) -> CompletionDescriptor:
        descriptor = argument.completion
        try:
            if descriptor.source is CompletionSource.NAMED_METHOD:
                target = getattr(command.handler, descriptor.reference, None)
                if not callable(target):
                    raise MetadataError(
                        f"Completion method '{descriptor.reference}' not found",
                        command=command.path, argument=argument.name, reference=descriptor.reference,
                    )
                return replace(descriptor, target=target, resolved=True)

            if descriptor.source is CompletionSource.PROVIDER_TYPE:
                provider_cls = self._import_provider(descriptor.reference, command, argument)
                try:
                    target = provider_cls()
                except TypeError as e:
                    raise MetadataError(
                        f"Completion provider '{descriptor.reference}' could not be created: {e}",
                        command=command.path, argument=argument.name, reference=str(descriptor.reference),
                    )
                return replace(descriptor, target=target, resolved=True)
        except MetadataError as e:
            log.warning(f"{e.message}; '{argument.name}' of '{command.path}' will not complete")
            return replace(descriptor, resolved=False)
        return descriptor

    @staticmethod
    def _import_provider(reference: Union[str, type], command: CommandDescriptor, argument: ArgumentDescriptor) -> type:
        if isinstance(reference, type):
            return reference
        module_name, _, attr = str(reference).replace(":", ".").rpartition(".")
        try:
            return getattr(importlib.import_module(module_name), attr)
        except (ImportError, AttributeError, ValueError) as e:
            raise MetadataError(
                f"Completion provider '{reference}' could not be imported: {e}",
                command=command.path, argument=argument.name, reference=str(reference),
            )

    def find_command(self, name: str, group: Sequence[str] = ()) -> Optional[CommandDescriptor]:
        return self._commands.get(_key(tuple(group) + (name,)))

    def find_group(self, path: Union[str, Sequence[str]]) -> Optional[GroupDescriptor]:
        parts = tuple(path.split()) if isinstance(path, str) else tuple(path)
        return self._groups.get(_key(parts))

    def groups_in(self, group: Sequence[str] = ()) -> List[GroupDescriptor]:
        parent = _key(group)
        return [g for key, g in self._groups.items() if key[:-1] == parent]

    def commands_in(self, group: Sequence[str] = ()) -> List[CommandDescriptor]:
        parent = _key(group)
        return [c for key, c in self._commands.items() if key[:-1] == parent]

    def commands(self) -> List[CommandDescriptor]:
        return list(self._commands.values())

    def resolve(self, words: Sequence[str]) -> ResolvedPath:
        """Walk leading words through groups until a command is found"""
        group: Tuple[str, ...] = ()
        for index, word in enumerate(words):
            command = self.find_command(word, group)
            if command is not None:
                return ResolvedPath(group=group, command=command, consumed=index + 1)
            found = self.find_group(group + (word,))
            if found is None:
                return ResolvedPath(group=group, consumed=index, unrecognized=True)
            group = found.path
        return ResolvedPath(group=group, consumed=len(words))
