"""Subcommand modules for simpledoc.

Provides register_commands() which uses deferred imports to keep
``simpledoc --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from simpledoc.commands.check import check
    from simpledoc.commands.migrate import migrate

    cli.add_command(check)
    cli.add_command(migrate)
