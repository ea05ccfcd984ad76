"""Output utilities for CLI commands with clear intent.

user_output() is for human-facing messages (stderr); machine_output() is for
data meant to be piped (stdout).
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Write a human-facing message to stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", nl: bool = True) -> None:
    """Write data output to stdout."""
    click.echo(message, nl=nl)


def format_duration(seconds: int) -> str:
    """Format a duration compactly: 45s, 2m5s, 1h3m."""
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m{seconds % 60}s"
    return f"{seconds // 3600}h{(seconds % 3600) // 60}m"
