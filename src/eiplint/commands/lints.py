"""Command: list active lints."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from eiplint.commands._base import LintCommand

if TYPE_CHECKING:
    from eiplint.commands._context import AppContext


@click.command(
    cls=LintCommand,
    examples="""\
  eiplint lints
  eiplint -v lints
  eiplint --json lints""",
)
@click.pass_obj
def lints(app: AppContext) -> None:
    """List the lints that ``check`` would run."""
    from eiplint.services.lint import LintService

    app.emit(LintService(app.settings, plugins=app.plugins).list_lints())
