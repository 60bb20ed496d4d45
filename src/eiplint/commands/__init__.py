"""Subcommand modules for eiplint.

Provides register_commands() which uses deferred imports to keep
``eiplint --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from eiplint.commands.check import check
    from eiplint.commands.lints import lints

    cli.add_command(check)
    cli.add_command(lints)
