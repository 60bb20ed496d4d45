"""Preamble parsing — named fields with source positions.

A proposal document opens with a preamble block::

    ---
    eip: 1234
    title: Example
    status: Draft
    requires: 20, 721
    ---

Every field keeps its raw value (everything after the first colon,
including leading whitespace) together with the full source line and
its 1-based line number, so lints can anchor diagnostics at exact
character offsets inside the line.

Pure functions and frozen dataclasses, no I/O.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

_PREAMBLE_DELIMITER = "---"


class PreambleError(ValueError):
    """Raised when a document's preamble is structurally invalid."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line

    def __str__(self) -> str:
        msg = super().__str__()
        if self.line is None:
            return msg
        return f"{msg} (line {self.line})"


@dataclass(frozen=True)
class Field:
    """A single ``name: value`` line from a preamble."""

    name: str
    value: str  # raw text after the colon, whitespace preserved
    line_start: int
    source: str  # the full line, ``name:value``


@dataclass(frozen=True)
class Preamble:
    """Ordered collection of preamble fields."""

    fields: tuple[Field, ...] = ()

    def by_name(self, name: str) -> Field | None:
        """Return the first field named exactly *name*, or None."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class Document:
    """A parsed proposal: preamble plus markdown body."""

    preamble: Preamble = field(default_factory=Preamble)
    body: str = ""

    @classmethod
    def parse(cls, text: str) -> Document:
        preamble, body = parse_preamble(text)
        return cls(preamble=preamble, body=body)


def parse_preamble(text: str) -> tuple[Preamble, str]:
    """Split *text* into a :class:`Preamble` and the remaining body.

    Handles both ``\\n`` and ``\\r\\n`` line endings.

    Raises:
        PreambleError: if the delimiters are missing, or a line inside
            the block is not a ``name: value`` pair.
    """
    normalized = text.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].rstrip() != _PREAMBLE_DELIMITER:
        raise PreambleError("missing initial delimiter `---`", line=1)

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.rstrip() == _PREAMBLE_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        raise PreambleError("missing closing delimiter `---`")

    fields: list[Field] = []
    for i, line in enumerate(lines[1:end_idx], start=2):
        name, sep, value = line.partition(":")
        if not sep:
            raise PreambleError("line must be a `name: value` pair", line=i)
        if not name or name != name.strip():
            raise PreambleError("field name must be non-empty and unpadded", line=i)
        fields.append(Field(name=name, value=value, line_start=i, source=line))

    body = "\n".join(lines[end_idx + 1 :])
    return Preamble(fields=tuple(fields)), body
