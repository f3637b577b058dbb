"""CLI components"""

from .interactive_cli import GhostlineShell, run_interactive_cli

__all__ = ['GhostlineShell', 'run_interactive_cli']
