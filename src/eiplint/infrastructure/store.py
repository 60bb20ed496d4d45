"""Document store — fetch, parse, and cache proposal files.

INVARIANT: each path is read at most once per store. Failures are
cached as well, so a missing dependency referenced by many proposals
costs one filesystem hit and always yields the same error text.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from eiplint.domain.preamble import Document, PreambleError
from eiplint.lints.context import DocumentError

logger = logging.getLogger(__name__)

# Directories to skip when discovering proposal files.
_SKIP_DIRS = frozenset({".git", "node_modules"})


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_documents(paths: Iterable[Path]) -> list[Path]:
    """Expand *paths* into markdown files.

    Files are kept as given. Directories are searched recursively for
    ``*.md``, sorted, skipping hidden and vendored directories.
    """
    found: list[Path] = []
    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob("*.md")):
                rel_parts = candidate.relative_to(path).parts[:-1]
                if any(p in _SKIP_DIRS or p.startswith(".") for p in rel_parts):
                    continue
                found.append(candidate)
        else:
            found.append(path)
    return found


def read_document(path: Path) -> Document:
    """Read and parse a proposal file.

    Raises:
        DocumentError: wrapping the OS or preamble error.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentError(path, str(exc)) from exc
    try:
        return Document.parse(text)
    except PreambleError as exc:
        raise DocumentError(path, str(exc)) from exc


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class DocumentStore:
    """Resolves proposal locators relative to a base directory."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._cache: dict[Path, Document | DocumentError] = {}

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: Path, *, relative_to: Path | None = None) -> Path:
        """Absolute filesystem path for locator *path*."""
        base = relative_to if relative_to is not None else self._root
        return path if path.is_absolute() else base / path

    def prefetch(self, paths: Iterable[Path], *, relative_to: Path | None = None) -> None:
        """Load every path into the cache, recording failures."""
        for path in paths:
            self._load(self.resolve(path, relative_to=relative_to))

    def get(self, path: Path, *, relative_to: Path | None = None) -> Document:
        """Return the parsed document at *path*.

        Raises:
            DocumentError: if the file is missing, unreadable, or has an
                invalid preamble. The error's ``path`` is the locator as
                given, not the resolved filesystem path.
        """
        outcome = self._load(self.resolve(path, relative_to=relative_to))
        if isinstance(outcome, DocumentError):
            raise DocumentError(path, outcome.message)
        return outcome

    def _load(self, full: Path) -> Document | DocumentError:
        cached = self._cache.get(full)
        if cached is not None:
            return cached
        try:
            outcome: Document | DocumentError = read_document(full)
        except DocumentError as exc:
            logger.debug("Failed to load %s: %s", full, exc)
            outcome = exc
        self._cache[full] = outcome
        return outcome

    def __len__(self) -> int:
        return len(self._cache)
