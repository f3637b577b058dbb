"""Completion engine: intent detection, providers, cache, ghost text and menu"""

from .cache import CacheKey, CompletionCache
from .controller import AutoCompleteController
from .ghost import GhostMachine
from .intent import IntentDetector
from .menu import MenuAnchor, MenuMachine, MenuState
from .models import (
    CompletionContext, CompletionItem, CompletionResult, ElementType, GhostSource, GhostState, Intent, ItemKind,
)
from .orchestrator import CompletionOrchestrator, TabAction, TabOutcome
from .used_args import UsedArgumentTracker

__all__ = [
    'AutoCompleteController', 'CacheKey', 'CompletionCache', 'CompletionContext', 'CompletionItem',
    'CompletionOrchestrator', 'CompletionResult', 'ElementType', 'GhostMachine', 'GhostSource',
    'GhostState', 'Intent', 'IntentDetector', 'ItemKind', 'MenuAnchor', 'MenuMachine', 'MenuState',
    'TabAction', 'TabOutcome', 'UsedArgumentTracker',
]
