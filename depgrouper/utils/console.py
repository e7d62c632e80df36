"""
Console output utilities for depgrouper using Rich.

This module provides user-facing output helpers for CLI commands.
For diagnostic or debug output, use :mod:`depgrouper.utils.logger`.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Optional, Sequence, Tuple

from rich.table import Table
from rich.markup import escape
from rich.theme import Theme
from rich.console import Console

DEPGROUPER_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "group": "bold magenta",
    }
)

UNGROUPED_LABEL = "(ungrouped)"

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return a singleton Rich Console instance."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=DEPGROUPER_THEME,
                    no_color=not use_color,
                    highlight=use_color,
                )
    return _console


def reconfigure_console() -> None:
    """Drop the cached console so the next call picks up a new environment."""
    global _console
    with _console_lock:
        _console = None


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()


def _print_status(message: str, prefix: str, style: str) -> None:
    # Messages carry package and group names, which may contain brackets
    _get_console().print(escape(f"{prefix} {message}"), style=style)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _print_status(message, prefix, "success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _print_status(message, prefix, "error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _print_status(message, prefix, "warning")


def _join_members(members: Sequence[str]) -> str:
    return ", ".join(escape(member) for member in members) or "-"


def print_group_table(
    groups: Sequence[Tuple[str, Sequence[str]]],
    *,
    ungrouped: Sequence[str] = (),
    title: Optional[str] = "Dependency Groups",
) -> None:
    """Render group membership as a Rich table.

    One row per group, in the order given, followed by a dimmed
    ``(ungrouped)`` row when some dependencies matched no group. Group
    and dependency names are printed literally, never as Rich markup.

    Args:
        groups: ``(group name, member display names)`` pairs.
        ungrouped: Display names of dependencies outside every group.
        title: Optional table title.
    """
    if not groups and not ungrouped:
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Group", style="group", no_wrap=True)
    table.add_column("Count", justify="right")
    table.add_column("Dependencies", overflow="fold")

    for name, members in groups:
        table.add_row(escape(name), str(len(members)), _join_members(members))
    if ungrouped:
        table.add_row(
            UNGROUPED_LABEL,
            str(len(ungrouped)),
            _join_members(ungrouped),
            style="dim",
        )

    _get_console().print(table)
