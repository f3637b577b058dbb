#!/usr/bin/env python3
"""
Ghostline Output Formatting
Rich rendering of completion results and controller render instructions
"""

import json
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..completion.models import CompletionItem, CompletionResult, GhostState, ItemKind
from ..completion.render import (
    ClearGhost, ClearMenu, RenderInstruction, Renderer, ShowGhost, ShowMenu, UpdateLine,
)

KIND_STYLES = {
    ItemKind.GROUP: "bold magenta",
    ItemKind.COMMAND: "bold cyan",
    ItemKind.ARGUMENT_NAME: "green",
    ItemKind.ARGUMENT_ALIAS: "green",
    ItemKind.ARGUMENT_VALUE: "yellow",
    ItemKind.PATH: "blue",
    ItemKind.HISTORY: "dim white",
}


class OutputFormatter:
    """Prints completion results for the command line tools"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def completion_table(self, items: Sequence[CompletionItem], selected: Optional[int] = None,
                         title: Optional[str] = None) -> Table:
        table = Table(title=title, show_header=True, header_style="bold", box=None, pad_edge=False)
        table.add_column("", width=1)
        table.add_column("Completion")
        table.add_column("Kind", style="dim")
        table.add_column("Description", style="dim italic")
        for index, item in enumerate(items):
            marker = ">" if index == selected else ""
            style = KIND_STYLES.get(item.kind, "white")
            if index == selected:
                style = f"reverse {style}"
            table.add_row(marker, Text(item.display, style=style), item.kind.value, item.description)
        return table

    def print_completions(self, result: CompletionResult, line: str = ""):
        if not result:
            self.console.print(f"[yellow]No completions for[/yellow] {line!r}")
            return
        self.console.print(self.completion_table(result.items, title=f"{len(result)} completion(s)"))

    def print_ghost(self, line: str, ghost: Optional[GhostState]):
        text = Text(line)
        if ghost is not None and ghost.remainder:
            text.append(ghost.remainder, style="dim")
            text.append(f"   ({ghost.source.value})", style="dim italic")
        else:
            text.append("   (no suggestion)", style="dim italic")
        self.console.print(text)

    def print_json(self, result: CompletionResult):
        data = [
            {"display": i.display, "insertion": i.insertion, "description": i.description, "kind": i.kind.value}
            for i in result.items
        ]
        self.console.print_json(json.dumps({"total": result.total_count, "items": data}))


class RichRenderer(Renderer):
    """Draws each batch of render instructions as a snapshot of line, ghost and menu"""

    def __init__(self, console: Optional[Console] = None):
        self.formatter = OutputFormatter(console)
        self.console = self.formatter.console
        self.buffer = ""
        self.cursor = 0
        self.ghost = ""
        self.menu: Optional[ShowMenu] = None

    def render(self, instructions: Sequence[RenderInstruction]) -> None:
        for instruction in instructions:
            if isinstance(instruction, UpdateLine):
                self.buffer, self.cursor = instruction.buffer, instruction.cursor
            elif isinstance(instruction, ShowGhost):
                self.ghost = instruction.text
            elif isinstance(instruction, ClearGhost):
                self.ghost = ""
            elif isinstance(instruction, ShowMenu):
                self.menu = instruction
            elif isinstance(instruction, ClearMenu):
                self.menu = None
        self.draw()

    def draw(self) -> None:
        line = Text("> ", style="bold green")
        line.append(self.buffer[:self.cursor])
        line.append("|", style="bold")
        line.append(self.buffer[self.cursor:])
        if self.ghost and self.menu is None:
            line.append(self.ghost, style="dim")
        self.console.print(line)
        if self.menu is not None:
            start = self.menu.viewport_start
            visible = self.menu.items[start:start + self.menu.viewport_size]
            self.console.print(self.formatter.completion_table(visible, self.menu.selected_index - start))
