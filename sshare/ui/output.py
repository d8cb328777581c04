"""
Coloured status lines for the terminal.
"""

from __future__ import annotations

import click


def _line(heading: str, fg: str, bg: str, message: str, *, err: bool = False) -> None:
    click.echo(
        f"{click.style(f' {heading} ', fg=fg, bg=bg, bold=True)} {message}",
        err=err,
    )


def info(message: str) -> None:
    _line("INFO", "bright_white", "cyan", message)


def success(message: str) -> None:
    _line("SUCCESS", "bright_white", "green", message)


def warn(message: str) -> None:
    _line("WARN", "white", "yellow", message, err=True)
