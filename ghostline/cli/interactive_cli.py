#!/usr/bin/env python3
"""
Ghostline Interactive Shell
A prompt_toolkit shell wired to the completion engine, running the demo command set
"""

import asyncio
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.shortcuts import print_formatted_text
from rich.console import Console
from rich.table import Table

from ..completion.controller import AutoCompleteController
from ..completion.orchestrator import CompletionOrchestrator
from ..completion.tokens import tokenize
from ..config import config
from ..filesystem import LocalFileSystem
from ..history import InputHistory
from ..logger import logger
from ..registry import CommandRegistry
from .prompt_completer import ControllerKeyBindings, GhostlineAutoSuggest, GhostlineCompleter
from .sample_commands import PROFILE_STORE, build_sample_registry

console = Console()
log = logger.get_logger("cli.shell")


class GhostlineShell:
    """Read-complete-echo loop; commands are resolved but not executed"""

    def __init__(self, registry: Optional[CommandRegistry] = None, history_file: Optional[str] = None):
        self.registry = registry or build_sample_registry()
        self.history = InputHistory(history_file if history_file is not None else config.get("history.file"))
        self.orchestrator = CompletionOrchestrator(self.registry, self.history, LocalFileSystem())
        self.should_exit = False

        # The controller owns Tab and the menu; ghost text comes from the AutoSuggest
        self.keys = ControllerKeyBindings(AutoCompleteController(self.orchestrator, ghost_enabled=False))
        auto_suggest = None
        if config.get("ghost.enabled", True):
            auto_suggest = GhostlineAutoSuggest(self.orchestrator, suppressed=self.keys.menu_is_open)
        self.session = PromptSession(
            history=self.history,
            completer=GhostlineCompleter(self.orchestrator),
            auto_suggest=auto_suggest,
            complete_while_typing=False,
            key_bindings=self.keys.bindings,
            bottom_toolbar=self.keys.menu_toolbar,
        )

    async def run(self):
        """Main loop for the interactive shell."""
        print_formatted_text(HTML("<dim>Tab completes, Right arrow takes the grey suggestion. Type 'help' or 'exit'.</dim>"))
        while not self.should_exit:
            self.keys.reset()
            try:
                line = await self.session.prompt_async("(ghostline) ")
                self.handle_line(line)
            except KeyboardInterrupt:
                continue
            except EOFError:
                self.should_exit = True
        print_formatted_text(HTML("<yellow>Goodbye!</yellow>"))

    def handle_line(self, line: str) -> None:
        words = [t.text for t in tokenize(line)]
        if not words:
            return

        resolved = self.registry.resolve(words)
        if resolved.command is None:
            if resolved.unrecognized:
                console.print(f"[red]Unknown command:[/red] {words[resolved.consumed]}")
            else:
                self.print_commands(resolved.group)
            return

        command = resolved.command
        arguments = words[resolved.consumed:]
        if command.path == "exit":
            self.should_exit = True
        elif command.path == "help":
            self.print_commands(())
        elif command.path == "server profile add" and arguments:
            self._save_profile(arguments[0])
        elif command.path == "server profile remove" and arguments:
            self._delete_profile(arguments[0])
        else:
            used = sorted(self.orchestrator.tracker.compute_used(line))
            console.print(f"[green]{command.path}[/green] [dim]arguments: {', '.join(used) or 'none'}[/dim]")

    def print_commands(self, group):
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Name")
        table.add_column("Description", style="dim")
        for sub in sorted(self.registry.groups_in(group), key=lambda g: g.name.lower()):
            table.add_row(f"[magenta]{sub.name}[/magenta] ...", sub.description)
        for command in sorted(self.registry.commands_in(group), key=lambda c: c.name.lower()):
            table.add_row(command.name, command.description)
        console.print(table)

    def _save_profile(self, name: str) -> None:
        if name not in PROFILE_STORE:
            PROFILE_STORE.append(name)
        self._profiles_changed()
        console.print(f"[green]Saved profile[/green] {name}")

    def _delete_profile(self, name: str) -> None:
        if name in PROFILE_STORE:
            PROFILE_STORE.remove(name)
            self._profiles_changed()
            console.print(f"[green]Removed profile[/green] {name}")
        else:
            console.print(f"[red]No such profile:[/red] {name}")

    def _profiles_changed(self) -> None:
        for path in ("server profile remove", "server connect"):
            self.orchestrator.invalidate_command(path)


def run_interactive_cli(history_file: Optional[str] = None):
    shell = GhostlineShell(history_file=history_file)
    try:
        asyncio.run(shell.run())
    except KeyboardInterrupt:
        print_formatted_text(HTML("\n<yellow>Interrupted.</yellow>"))
    log.debug("Shell exited")
