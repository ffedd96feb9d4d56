"""Centralized terminal output for ccportal.

Key principle: stderr for status, progress and diagnostics; stdout for data.
"""

from __future__ import annotations

from rich.console import Console

# stderr console for status messages and response body dumps
err_console = Console(stderr=True)

# stdout console for data output (JSON, tables)
out_console = Console()


def success(message: str, *, console: Console | None = None) -> None:
    """Print a success message (green checkmark) to stderr."""
    c = console or err_console
    c.print(f"[green]  ✓ {message}[/green]")


def error(message: str, *, console: Console | None = None) -> None:
    """Print an error message (red X) to stderr."""
    c = console or err_console
    c.print(f"[red]  ✗ {message}[/red]")


def warn(message: str, *, console: Console | None = None) -> None:
    """Print a warning message (yellow) to stderr."""
    c = console or err_console
    c.print(f"[yellow]  ⚠ {message}[/yellow]")


def info(message: str, *, console: Console | None = None) -> None:
    """Print an info message (dim) to stderr."""
    c = console or err_console
    c.print(f"[dim]  {message}[/dim]")


def dump_body(body: str, *, console: Console | None = None) -> None:
    """Write a raw response body to stderr verbatim (no markup, no wrapping)."""
    c = console or err_console
    c.print(body, markup=False, highlight=False, emoji=False, soft_wrap=True)
