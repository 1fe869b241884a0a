"""Operator-facing status output and prompts."""

from collections.abc import Callable, Iterable

import click

Confirm = Callable[[str], bool]


def info(message: str) -> None:
    click.echo(f"{click.style('[INFO]', fg='blue')} {message}")


def success(message: str) -> None:
    click.echo(f"{click.style('[SUCCESS]', fg='green')} {message}")


def warning(message: str) -> None:
    click.echo(f"{click.style('[WARNING]', fg='yellow', bold=True)} {message}")


def error(message: str) -> None:
    click.echo(f"{click.style('[ERROR]', fg='red')} {message}", err=True)


def hints(lines: Iterable[str]) -> None:
    """Print numbered remediation steps below an error."""
    lines = list(lines)
    if not lines:
        return
    error("You may need to:")
    for number, line in enumerate(lines, start=1):
        error(f"  {number}. {line}")


def ask(prompt: str) -> bool:
    """
    Ask a yes/no question on the terminal.

    Pressing Enter answers no.
    """
    return click.confirm(prompt, default=False)
