"""Built-in completion providers"""

from typing import List, Optional

from ...filesystem import FileSystem
from ...history import InputHistory
from ...registry import CommandRegistry
from .arguments import ArgumentAliasProvider, ArgumentNameProvider
from .base import CompletionProvider, ValueProvider
from .commands import CommandProvider
from .history import HistoryProvider
from .paths import DirectoryPathProvider, FilePathProvider
from .positional import PositionalArgumentProvider
from .values import EnumProvider, MethodProvider, StaticValuesProvider


def default_providers(registry: CommandRegistry, history: Optional[InputHistory] = None,
                      filesystem: Optional[FileSystem] = None, history_limit: int = 10) -> List[CompletionProvider]:
    """The built-in providers, highest priority first"""
    value_providers = [
        MethodProvider(),
        StaticValuesProvider(),
        EnumProvider(),
        DirectoryPathProvider(filesystem),
        FilePathProvider(filesystem),
    ]
    providers = [
        *value_providers,
        ArgumentAliasProvider(),
        ArgumentNameProvider(),
        PositionalArgumentProvider(value_providers),
        CommandProvider(registry),
    ]
    if history is not None:
        providers.insert(0, HistoryProvider(history, history_limit))
    return providers


__all__ = [
    'CompletionProvider', 'ValueProvider', 'CommandProvider', 'HistoryProvider',
    'ArgumentNameProvider', 'ArgumentAliasProvider', 'PositionalArgumentProvider',
    'StaticValuesProvider', 'EnumProvider', 'MethodProvider', 'FilePathProvider',
    'DirectoryPathProvider', 'default_providers',
]
