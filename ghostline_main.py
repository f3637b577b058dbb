#!/usr/bin/env python3
"""
Ghostline - Autocomplete engine for interactive command shells
Typer entry point: demo shell plus one-shot completion tools
"""

import asyncio
from typing import List, Optional

import typer
from prompt_toolkit.keys import Keys
from rich.console import Console

from ghostline import __version__
from ghostline.cli.interactive_cli import run_interactive_cli
from ghostline.cli.sample_commands import build_sample_registry
from ghostline.completion.controller import AutoCompleteController
from ghostline.completion.orchestrator import CompletionOrchestrator
from ghostline.config import config
from ghostline.exceptions import GhostlineException
from ghostline.filesystem import LocalFileSystem
from ghostline.history import InputHistory
from ghostline.logger import logger
from ghostline.ui.output import OutputFormatter, RichRenderer

console = Console()
log = logger.get_logger("main")

app = typer.Typer(
    name="ghostline",
    help="Ghostline - autocomplete engine for interactive command shells",
    no_args_is_help=True,
    add_completion=False
)

KEY_NAMES = {
    "tab": Keys.Tab,
    "s-tab": Keys.BackTab,
    "enter": Keys.Enter,
    "escape": Keys.Escape,
    "up": Keys.Up,
    "down": Keys.Down,
    "left": Keys.Left,
    "right": Keys.Right,
    "home": Keys.Home,
    "end": Keys.End,
    "backspace": Keys.Backspace,
    "delete": Keys.Delete,
    "space": " ",
}


def _orchestrator(history: Optional[List[str]] = None) -> CompletionOrchestrator:
    return CompletionOrchestrator(
        build_sample_registry(), InputHistory(initial=history or ()), LocalFileSystem(),
    )


@app.command("version", help="Show version information")
def version():
    """Show version information"""
    console.print(f"[bold cyan]Ghostline[/bold cyan] v{__version__}")
    console.print("[dim]Autocomplete engine for interactive command shells[/dim]")


@app.command("shell", help="Start the interactive demo shell")
def shell(
    history_file: Optional[str] = typer.Option(None, "--history-file", help="History file (defaults to history.file)"),
):
    """Start the interactive demo shell"""
    run_interactive_cli(history_file)


@app.command("i", help="Start the interactive demo shell (shorthand)")
def shell_shortcut():
    """Start the interactive demo shell (shorthand)"""
    run_interactive_cli()


@app.command("complete", help="List completions for a line of the demo command set")
def complete(
    line: str = typer.Argument(..., help="Input line"),
    cursor: Optional[int] = typer.Option(None, "--cursor", "-c", help="Cursor position (defaults to end of line)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
):
    """List completions for a line of the demo command set"""
    if cursor is not None and not 0 <= cursor <= len(line):
        raise typer.BadParameter(f"cursor must be between 0 and {len(line)}", param_hint="--cursor")
    result = asyncio.run(_orchestrator().complete(line, cursor))
    formatter = OutputFormatter(console)
    if as_json:
        formatter.print_json(result)
    else:
        formatter.print_completions(result, line)


@app.command("suggest", help="Show the ghost text for a line of the demo command set")
def suggest(
    line: str = typer.Argument(..., help="Input line"),
    history: Optional[List[str]] = typer.Option(None, "--history", help="Previous input line, newest last (repeatable)"),
):
    """Show the ghost text for a line of the demo command set"""
    ghost = asyncio.run(_orchestrator(history).suggest(line))
    OutputFormatter(console).print_ghost(line, ghost)


@app.command("simulate", help="Type text into the controller, press keys, and draw every step")
def simulate(
    text: str = typer.Argument("", help="Text typed first"),
    keys: Optional[List[str]] = typer.Option(None, "--key", "-k", help=f"Key to press (repeatable): {', '.join(KEY_NAMES)}"),
):
    """Type text into the controller, press keys, and draw every step"""
    pressed = []
    for name in keys or []:
        if name.lower() not in KEY_NAMES and len(name) != 1:
            raise typer.BadParameter(f"unknown key '{name}'", param_hint="--key")
        pressed.append(KEY_NAMES.get(name.lower(), name))

    controller = AutoCompleteController(_orchestrator(), RichRenderer(console))

    async def drive():
        await controller.type_text(text)
        for key in pressed:
            submitted = await controller.handle_key(key)
            if submitted is not None:
                console.print(f"[green]Submitted:[/green] {submitted}")

    asyncio.run(drive())


@app.command("config", help="Show or reset the configuration")
def config_cmd(
    reset: bool = typer.Option(False, "--reset", help="Reset to defaults and save"),
):
    """Show or reset the configuration"""
    if reset:
        config.reset_to_defaults()
        path = config.save()
        console.print(f"[green]Configuration reset:[/green] {path}")
    config.print_config(console)


def main():
    """
    Main entry point for Ghostline.
    Validates configuration and routes to the Typer app.
    """
    try:
        config.validate()
        logger.configure(config.get("logging.level", "INFO"), config.get("logging.directory"))
        app()

    except GhostlineException as e:
        console.print(f"\n[bold red]Error: {e.message}[/bold red]")
        if e.details:
            console.print(f"[dim]Details: {e.details}[/dim]")
        log.error(f"{e.code}: {e.message}")
        raise typer.Exit(code=1)

    except KeyboardInterrupt:
        console.print("\n[bold yellow]Operation cancelled by user[/bold yellow]")
        raise typer.Exit(code=0)


if __name__ == "__main__":
    main()
