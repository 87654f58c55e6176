"""Utility functions for terminal output and user input."""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console()

SUCCESS = "[bold green]✔[/bold green]"
INFO = "[bold blue]ℹ[/bold blue]"
ERROR = "[bold red]✖ error:[/bold red]"
WARN = "[bold yellow]! warning:[/bold yellow]"

_STATUS_STYLES = {
    "Accepted": "green",
    "Wrong Answer": "red",
    "Compile Error": "yellow",
    "Runtime Error": "red",
    "Time Limit Exceeded": "yellow",
    "Memory Limit Exceeded": "yellow",
    "Memory Leak": "magenta",
    "Disk Limit Exceeded": "magenta",
}


def setup_logging(debug: bool = False) -> None:
    """Send log records to the terminal through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def highlight(value) -> str:
    """Blue, markup-safe rendering of a value."""
    return f"[blue]{escape(str(value))}[/blue]"


def confirm(message: str, default: bool = True) -> bool:
    """Ask a yes/no question."""
    return click.confirm(message, default=default)


def format_status_color(status: str) -> str:
    """Format a judge status with appropriate color."""
    style = _STATUS_STYLES.get(status)
    if style is None:
        return f"[bold]{escape(status)}[/bold]"
    text = "Accepted!" if status == "Accepted" else status
    return f"[bold {style}]{escape(text)}[/bold {style}]"
