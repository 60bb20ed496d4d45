"""LintService — runs every active lint over a set of proposal files.

Each document goes through two phases:

1. *find resources*: every lint declares the documents it will need;
   the store loads them all up front.
2. *lint*: every lint runs against a :class:`Context` whose resolver
   reads from the warmed store and whose reporter records diagnostics.

Per-item problems become diagnostics. A failing plugin lint becomes a
warning. A failing reporter aborts the run with ``REPORT_FAILED``.
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from eiplint.config.logging import document_scope
from eiplint.domain.diagnostics import Annotation, AnnotationType, Snippet
from eiplint.infrastructure.store import DocumentStore, find_documents, read_document
from eiplint.lints import build_lints
from eiplint.lints.context import (
    CollectingReporter,
    Context,
    DocumentError,
    FetchContext,
    Reporter,
    ReporterError,
)
from eiplint.services.base import BaseService
from eiplint.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from eiplint.config.settings import LintSettings
    from eiplint.domain.preamble import Document
    from eiplint.lints.base import Lint
    from eiplint.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

PARSE_SLUG = "markdown-preamble"

_ERROR_TYPES = frozenset({AnnotationType.ERROR, None})


@dataclass(frozen=True)
class ActiveLint:
    """A lint instance with the host-side settings it runs under."""

    slug: str
    lint: Lint
    level: AnnotationType
    source: str  # "config" or "plugin"


class _RecordingReporter(CollectingReporter):
    """Records snippets, forwarding each to an optional downstream sink first."""

    def __init__(self, sink: Reporter | None) -> None:
        super().__init__()
        self._sink = sink

    def report(self, snippet: Snippet) -> None:
        if self._sink is not None:
            self._sink.report(snippet)
        super().report(snippet)


class LintService(BaseService):
    """Lints proposal documents."""

    def __init__(
        self,
        settings: LintSettings,
        *,
        store: DocumentStore | None = None,
        plugins: PluginManager | None = None,
        sink: Reporter | None = None,
    ) -> None:
        super().__init__(settings, plugins=plugins)
        self._store = store if store is not None else DocumentStore(settings.project_root)
        self._sink = sink

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check(self, paths: Sequence[Path]) -> ServiceResult:
        """Lint every markdown file under *paths*."""
        warnings: list[str] = []
        active = self._active_lints(warnings)
        files = find_documents(paths)
        if not files:
            return ServiceResult(
                ok=False,
                op="check",
                error=ServiceError(
                    code="NO_FILES",
                    message="No markdown files found",
                    detail={"paths": [str(p) for p in paths]},
                ),
            )

        diagnostics: list[dict[str, Any]] = []
        error_count = 0
        for path in files:
            origin = str(path)
            with document_scope(origin):
                try:
                    snippets = self._check_document(path, active, warnings)
                except ReporterError as exc:
                    logger.warning("Reporter failed on %s: %s", origin, exc)
                    return ServiceResult(
                        ok=False,
                        op="check",
                        warnings=warnings,
                        error=ServiceError(
                            code="REPORT_FAILED",
                            message=f"Unable to report diagnostic for {origin}: {exc}",
                            detail={"origin": origin},
                        ),
                    )
            # Untitled snippets carry no severity; count them as errors.
            error_count += sum(1 for s in snippets if s.annotation_type in _ERROR_TYPES)
            diagnostics.extend({"origin": origin, **s.to_dict()} for s in snippets)

        warning_count = len(diagnostics) - error_count

        self._dispatch_event(
            "post_check",
            {
                "files_checked": len(files),
                "diagnostics_found": len(diagnostics),
                "error_count": error_count,
            },
            warnings,
        )

        data = {
            "files": len(files),
            "diagnostics": diagnostics,
            "count": len(diagnostics),
            "error_count": error_count,
            "warning_count": warning_count,
        }
        if error_count:
            return ServiceResult(
                ok=False,
                op="check",
                data=data,
                warnings=warnings,
                error=ServiceError(
                    code="LINT_FAILED",
                    message=f"{error_count} error(s) in {len(files)} file(s)",
                ),
            )
        return ServiceResult(ok=True, op="check", data=data, warnings=warnings)

    def list_lints(self) -> ServiceResult:
        """Describe every active lint."""
        warnings: list[str] = []
        items = [
            {"slug": a.slug, "kind": a.lint.kind, "level": str(a.level), "source": a.source}
            for a in self._active_lints(warnings)
        ]
        return ServiceResult(
            ok=True,
            op="list_lints",
            data={"items": items, "count": len(items)},
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _active_lints(self, warnings: list[str]) -> list[ActiveLint]:
        configs = self._settings.active_lints()
        built = build_lints(configs)
        active = [
            ActiveLint(slug, lint, AnnotationType(configs[slug].level), "config")
            for slug, lint in built.items()
        ]

        if self._plugins is not None:
            for slug, lint in self._plugins.collect_lints().items():
                if slug in built:
                    warnings.append(f"Plugin lint {slug!r} conflicts with a configured lint")
                    continue
                active.append(ActiveLint(slug, lint, AnnotationType.ERROR, "plugin"))
        return active

    def _check_document(
        self,
        path: Path,
        active: list[ActiveLint],
        warnings: list[str],
    ) -> list[Snippet]:
        reporter = _RecordingReporter(self._sink)

        try:
            document = read_document(path)
        except DocumentError as exc:
            reporter.report(
                Snippet(
                    title=Annotation(
                        annotation_type=AnnotationType.ERROR,
                        id=PARSE_SLUG,
                        label=f"unable to parse preamble: {exc}",
                    )
                )
            )
            return reporter.snippets

        self._prefetch(path, document, active, warnings)

        resolver = functools.partial(self._store.get, relative_to=path.parent)
        for entry in active:
            ctx = Context(
                document,
                resolver=resolver,
                reporter=reporter,
                origin=str(path),
                annotation_type=entry.level,
            )
            with _plugin_guard(entry, path, warnings):
                entry.lint.lint(entry.slug, ctx)

        logger.debug("Linted %s: %d diagnostic(s)", path, len(reporter.snippets))
        return reporter.snippets

    def _prefetch(
        self,
        path: Path,
        document: Document,
        active: list[ActiveLint],
        warnings: list[str],
    ) -> None:
        resources: set[Path] = set()
        for entry in active:
            fetch_ctx = FetchContext(document)
            with _plugin_guard(entry, path, warnings):
                entry.lint.find_resources(fetch_ctx)
            resources |= fetch_ctx.resources
        self._store.prefetch(sorted(resources), relative_to=path.parent)


@contextmanager
def _plugin_guard(entry: ActiveLint, path: Path, warnings: list[str]) -> Iterator[None]:
    """Turn a plugin lint's failure into a warning.

    INVARIANT: Plugin failures are warnings, never errors. Reporter
    failures and configured lints propagate unchanged.
    """
    try:
        yield
    except ReporterError:
        raise
    except Exception as exc:
        if entry.source != "plugin":
            raise
        logger.warning("Plugin lint %r failed on %s", entry.slug, path, exc_info=True)
        warnings.append(f"Plugin lint {entry.slug!r} failed on {path}: {exc}")
