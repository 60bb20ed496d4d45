"""Host context objects handed to lints.

Lints never touch the filesystem or the output stream directly. The
host passes a :class:`FetchContext` during resource discovery and a
:class:`Context` during linting; both wrap the current document and
the collaborators (resolver, reporter) for that single call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from eiplint.domain.diagnostics import AnnotationType, Snippet
from eiplint.domain.preamble import Document, Preamble


class DocumentError(Exception):
    """A referenced document could not be read or parsed."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path
        self.message = message

    def __str__(self) -> str:
        return self.message


class ReporterError(Exception):
    """The reporting sink failed to accept a diagnostic."""


class Reporter(ABC):
    """Sink for diagnostics."""

    @abstractmethod
    def report(self, snippet: Snippet) -> None:
        """Accept *snippet*. Raise :class:`ReporterError` on failure."""


class CollectingReporter(Reporter):
    """Keeps every reported snippet in memory, in order."""

    def __init__(self) -> None:
        self.snippets: list[Snippet] = []

    def report(self, snippet: Snippet) -> None:
        self.snippets.append(snippet)

    def clear(self) -> None:
        self.snippets.clear()


Resolver = Callable[[Path], Document]


class FetchContext:
    """Context for the resource-discovery phase."""

    def __init__(self, document: Document) -> None:
        self._document = document
        self._resources: set[Path] = set()

    @property
    def preamble(self) -> Preamble:
        return self._document.preamble

    @property
    def body(self) -> str:
        return self._document.body

    def fetch(self, path: Path) -> None:
        """Declare that *path* must be resolvable before linting."""
        self._resources.add(path)

    @property
    def resources(self) -> frozenset[Path]:
        return frozenset(self._resources)


class Context:
    """Context for the lint phase of a single document."""

    def __init__(
        self,
        document: Document,
        *,
        resolver: Resolver,
        reporter: Reporter,
        origin: str | None = None,
        annotation_type: AnnotationType = AnnotationType.ERROR,
    ) -> None:
        self._document = document
        self._resolver = resolver
        self._reporter = reporter
        self._origin = origin
        self._annotation_type = annotation_type

    @property
    def preamble(self) -> Preamble:
        return self._document.preamble

    @property
    def body(self) -> str:
        return self._document.body

    @property
    def origin(self) -> str | None:
        return self._origin

    @property
    def annotation_type(self) -> AnnotationType:
        return self._annotation_type

    def eip(self, path: Path) -> Document:
        """Resolve a referenced document.

        Raises:
            DocumentError: if the document is missing or unreadable.
        """
        return self._resolver(path)

    def report(self, snippet: Snippet) -> None:
        """Hand *snippet* to the reporter. ``ReporterError`` propagates."""
        self._reporter.report(snippet)
