"""Command: lint proposal files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from eiplint.commands._base import LintCommand

if TYPE_CHECKING:
    from eiplint.commands._context import AppContext


@click.command(
    cls=LintCommand,
    examples="""\
  eiplint check EIPS/eip-1234.md
  eiplint check EIPS/
  eiplint --json check EIPS/
  eiplint -q check EIPS/ | sort""",
)
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.pass_obj
def check(app: AppContext, paths: tuple[Path, ...]) -> None:
    """Lint proposal files or directories of proposals."""
    from eiplint.services.lint import LintService

    svc = LintService(app.settings, plugins=app.plugins)
    app.emit(svc.check(list(paths)))
