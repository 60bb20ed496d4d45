"""preamble-requires-status — dependencies must be at least as mature.

Every proposal listed in the ``requires`` header must have a status in
the same tier as, or a later tier than, the status of the proposal
that requires it. Tiers come from the configured ``flow``: an ordered
list of label groups, least mature first. Tier 0 means "status absent
or not in the flow" and sorts below every configured tier.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from eiplint.domain.diagnostics import (
    Annotation,
    AnnotationType,
    Slice,
    Snippet,
    SourceAnnotation,
)
from eiplint.lints.base import Lint
from eiplint.lints.context import DocumentError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from eiplint.domain.preamble import Field, Preamble
    from eiplint.lints.context import Context, FetchContext

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"\+?[0-9]+")
_U64_MAX = 2**64 - 1

# Unicode White_Space. Unlike str.isspace() this excludes U+001C..U+001F.
WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


def trim(text: str) -> str:
    """Strip leading and trailing Unicode whitespace."""
    return text.strip(WHITESPACE)


def parse_number(item: str) -> int | None:
    """Parse a trimmed ``requires`` item as a non-negative identifier."""
    text = trim(item)
    if not _NUMBER.fullmatch(text):
        return None
    value = int(text)
    if value > _U64_MAX:
        return None
    return value


def proposal_path(number: int) -> Path:
    """Canonical locator of proposal *number*."""
    return Path(f"eip-{number}.md")


def split_items(field: Field) -> Iterator[tuple[str, tuple[int, int]]]:
    """Yield each comma-separated item of *field* with its range in ``field.source``.

    Offsets count characters and account for the ``name:`` prefix of
    the source line.
    """
    name_count = len(field.name)
    offset = 0
    for item in field.value.split(","):
        start = name_count + offset + 1
        offset += len(item) + 1
        yield item, (start, start + len(item))


@dataclass(frozen=True)
class RequiresStatus(Lint):
    """Lint requiring referenced proposals to be at least as advanced."""

    kind: ClassVar[str] = "preamble-requires-status"

    requires: str
    status: str
    flow: tuple[tuple[str, ...], ...]

    def __post_init__(self) -> None:
        # Accept any nested sequence; store it immutably.
        frozen = tuple(tuple(tier) for tier in self.flow)
        object.__setattr__(self, "flow", frozen)

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    def tier_map(self) -> dict[str, int]:
        """Map every label in ``flow`` to its 1-based tier."""
        tiers: dict[str, int] = {}
        for index, labels in enumerate(self.flow):
            for label in labels:
                tiers[trim(label)] = index + 1
        return tiers

    def tier(self, tiers: dict[str, int], preamble: Preamble) -> int:
        """Tier of the document owning *preamble*; 0 if absent or unknown."""
        field = preamble.by_name(self.status)
        if field is None:
            return 0
        return tiers.get(trim(field.value), 0)

    # ------------------------------------------------------------------
    # Lint protocol
    # ------------------------------------------------------------------

    def find_resources(self, ctx: FetchContext) -> None:
        field = ctx.preamble.by_name(self.requires)
        if field is None:
            return

        for item in field.value.split(","):
            number = parse_number(item)
            if number is not None:
                ctx.fetch(proposal_path(number))

    def lint(self, slug: str, ctx: Context) -> None:
        field = ctx.preamble.by_name(self.requires)
        if field is None:
            return

        tiers = self.tier_map()
        my_tier = self.tier(tiers, ctx.preamble)
        too_unstable: list[SourceAnnotation] = []
        min_tier: float = math.inf

        for item, span in split_items(field):
            number = parse_number(item)
            if number is None:
                continue
            key = proposal_path(number)

            try:
                eip = ctx.eip(key)
            except DocumentError as exc:
                logger.debug("Unable to resolve %s for %s: %s", key, slug, exc)
                ctx.report(_unreadable(slug, ctx, field, key, exc, span))
                continue

            their_tier = self.tier(tiers, eip.preamble)
            min_tier = min(min_tier, their_tier)

            if their_tier >= my_tier:
                continue

            too_unstable.append(
                SourceAnnotation(
                    annotation_type=ctx.annotation_type,
                    label="has a less advanced status",
                    range=span,
                )
            )

        if not too_unstable:
            return

        status_field = ctx.preamble.by_name(self.status)
        current = status_field.value if status_field is not None else "<missing>"
        label = (
            f"preamble header `{self.requires}` contains items not stable enough "
            f"for a `{self.status}` of `{trim(current)}`"
        )

        choices = sorted({v for v, t in tiers.items() if t <= min_tier})
        footer: list[Annotation] = []
        if choices:
            footer.append(
                Annotation(
                    annotation_type=AnnotationType.HELP,
                    label=(
                        f"valid `{self.status}` values for this proposal are: "
                        f"`{'`, `'.join(choices)}`"
                    ),
                )
            )

        ctx.report(
            Snippet(
                title=Annotation(annotation_type=ctx.annotation_type, id=slug, label=label),
                slices=[
                    Slice(
                        source=field.source,
                        line_start=field.line_start,
                        origin=ctx.origin,
                        annotations=too_unstable,
                    )
                ],
                footer=footer,
            )
        )


def _unreadable(
    slug: str,
    ctx: Context,
    field: Field,
    key: Path,
    exc: DocumentError,
    span: tuple[int, int],
) -> Snippet:
    """Diagnostic for a ``requires`` item whose document can't be read."""
    return Snippet(
        title=Annotation(
            annotation_type=ctx.annotation_type,
            id=slug,
            label=f"unable to read file `{key}`: {exc}",
        ),
        slices=[
            Slice(
                source=field.source,
                line_start=field.line_start,
                origin=ctx.origin,
                annotations=[
                    SourceAnnotation(
                        annotation_type=ctx.annotation_type,
                        label="required from here",
                        range=span,
                    )
                ],
            )
        ],
    )
