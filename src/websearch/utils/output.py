"""Output handling utilities for websearch"""

from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table
import pyperclip

console = Console()
err_console = Console(stderr=True)


def print_error(message: str):
    """Print an error message to stderr"""
    err_console.print(f"[red]{escape(message)}[/red]", highlight=False)


def display_engines(names: Iterable[str]):
    """Display the engine names, one per line when piped"""
    names = list(names)
    if not console.is_terminal:
        for name in names:
            print(name)
        return

    table = Table(title="Available engines")
    table.add_column("Engine", style="cyan")
    for name in names:
        table.add_row(name)
    console.print(table)


def copy_to_clipboard(content: str):
    """Copy content to clipboard"""
    try:
        pyperclip.copy(content)
        console.print("[green]✓ Copied to clipboard[/green]")
    except pyperclip.PyperclipException as e:
        print_error(f"Failed to copy to clipboard: {e}")
