"""Color utilities for TTY output."""

import sys

import click


def echo_error(message: str) -> None:
    """Print error message (red)."""
    if should_color():
        click.secho(message, fg="red", err=True)
    else:
        click.echo(message, err=True)


def echo_warning(message: str) -> None:
    """Print warning message (yellow)."""
    if should_color():
        click.secho(message, fg="yellow", err=True)
    else:
        click.echo(message, err=True)


def should_color() -> bool:
    """Check if color output should be used."""
    return sys.stdout.isatty()
