"""Pluggy hook specifications for eiplint.

One setup-time hook lets plugins contribute lints; one event hook is
called after every ``check`` run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from eiplint.lints.base import Lint

PROJECT_NAME = "eiplint"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class EiplintHookSpec:
    """Hook specifications for the eiplint plugin system."""

    @hookspec
    def register_lints(self) -> dict[str, Lint] | None:
        """Return slug -> Lint mappings to run alongside configured lints."""

    @hookspec
    def post_check(
        self,
        files_checked: int,
        diagnostics_found: int,
        error_count: int,
    ) -> None:
        """Called after a check run completes."""
