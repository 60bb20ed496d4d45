"""Lint — the two-phase rule protocol.

The host calls :meth:`Lint.find_resources` once per document so that
every referenced document can be fetched up front, then
:meth:`Lint.lint` with the resolved documents available through the
context. The two calls share no state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from eiplint.lints.context import Context, FetchContext


class Lint(ABC):
    """Base for all lint kinds."""

    kind: str = ""

    def find_resources(self, ctx: FetchContext) -> None:  # noqa: B027
        """Declare documents needed by :meth:`lint`. Default: none."""

    @abstractmethod
    def lint(self, slug: str, ctx: Context) -> None:
        """Check the current document, reporting through ``ctx.report``."""
