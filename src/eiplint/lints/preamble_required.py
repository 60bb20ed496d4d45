"""preamble-required — listed headers must be present."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from eiplint.domain.diagnostics import Annotation, Snippet
from eiplint.lints.base import Lint

if TYPE_CHECKING:
    from eiplint.lints.context import Context


@dataclass(frozen=True)
class PreambleRequired(Lint):
    """Report every required header missing from the preamble."""

    kind: ClassVar[str] = "preamble-required"

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(self.names))

    def lint(self, slug: str, ctx: Context) -> None:
        missing = [name for name in self.names if ctx.preamble.by_name(name) is None]
        if not missing:
            return

        label = "preamble is missing header(s): `{}`".format("`, `".join(missing))
        ctx.report(
            Snippet(
                title=Annotation(annotation_type=ctx.annotation_type, id=slug, label=label),
            )
        )
