"""Diagnostic records produced by lints.

The shape mirrors a rendered compiler snippet: a title annotation, one
or more source slices carrying ranged annotations, and footer notes.
All models are frozen; lints build them and hand them to a reporter.

Ranges are ``(start, end)`` character offsets (not bytes) into the
slice's ``source``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class AnnotationType(StrEnum):
    """Severity or role of an annotation."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    NOTE = "note"
    HELP = "help"


class Annotation(BaseModel):
    """A title or footer line."""

    model_config = {"frozen": True}

    annotation_type: AnnotationType
    id: str | None = None
    label: str | None = None


class SourceAnnotation(BaseModel):
    """A labelled character range inside a :class:`Slice`."""

    model_config = {"frozen": True}

    annotation_type: AnnotationType
    label: str
    range: tuple[int, int]


class Slice(BaseModel):
    """A span of source text with its annotations."""

    model_config = {"frozen": True}

    source: str
    line_start: int
    origin: str | None = None
    annotations: list[SourceAnnotation] = Field(default_factory=list)
    fold: bool = False


class Snippet(BaseModel):
    """A complete diagnostic."""

    model_config = {"frozen": True}

    title: Annotation | None = None
    slices: list[Slice] = Field(default_factory=list)
    footer: list[Annotation] = Field(default_factory=list)

    @property
    def annotation_type(self) -> AnnotationType | None:
        return self.title.annotation_type if self.title else None

    @property
    def slug(self) -> str | None:
        return self.title.id if self.title else None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready payload (enums as strings, ranges as lists)."""
        return self.model_dump(mode="json")
