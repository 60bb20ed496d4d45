"""Tests for LintService — two-phase linting over proposal files."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pluggy

from eiplint.config.models import RequiresStatusConfig
from eiplint.config.settings import LintSettings
from eiplint.domain.diagnostics import Annotation, Snippet
from eiplint.infrastructure.store import DocumentStore
from eiplint.lints.base import Lint
from eiplint.lints.context import (
    CollectingReporter,
    Context,
    FetchContext,
    Reporter,
    ReporterError,
)
from eiplint.plugins.manager import PluginManager
from eiplint.services.lint import LintService
from tests.conftest import FLOW

hookimpl = pluggy.HookimplMarker("eiplint")


def _settings(tmp_path: Path, **kwargs: Any) -> LintSettings:
    return LintSettings.from_cli(project_root=tmp_path, **kwargs)


def _requires_only(tmp_path: Path, level: str = "error") -> LintSettings:
    return _settings(
        tmp_path,
        default_lints=False,
        lints={"preamble-requires-status": RequiresStatusConfig(flow=FLOW, level=level)},
    )


class TestCheckClean:
    def test_no_diagnostics(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        write_proposal(1, status="Final")
        write_proposal(2, status="Final", requires="1")

        result = LintService(_settings(tmp_path)).check([eips_dir])
        assert result.ok
        assert result.op == "check"
        assert result.data["files"] == 2
        assert result.data["count"] == 0
        assert result.data["diagnostics"] == []

    def test_no_files(self, tmp_path: Path, eips_dir: Path) -> None:
        result = LintService(_settings(tmp_path)).check([eips_dir])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NO_FILES"


class TestCheckViolations:
    def test_less_mature_dependency(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        write_proposal(1, status="Final")
        write_proposal(2, status="Draft")
        target = write_proposal(5, status="Final", requires="1, 2")

        result = LintService(_settings(tmp_path)).check([target])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "LINT_FAILED"
        assert result.data["error_count"] == 1

        (diag,) = result.data["diagnostics"]
        assert diag["origin"] == str(target)
        assert diag["title"]["id"] == "preamble-requires-status"
        slice_ = diag["slices"][0]
        assert slice_["source"] == "requires: 1, 2"
        assert slice_["line_start"] == 7
        assert slice_["annotations"][0]["range"] == [12, 14]
        assert diag["footer"][0]["label"] == (
            "valid `status` values for this proposal are: `Draft`, `Stagnant`"
        )

    def test_missing_dependency(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        target = write_proposal(5, status="Final", requires="abc, 7")

        result = LintService(_settings(tmp_path)).check([target])
        (diag,) = result.data["diagnostics"]
        assert diag["title"]["label"].startswith("unable to read file `eip-7.md`: ")
        assert diag["slices"][0]["annotations"][0]["label"] == "required from here"

    def test_unparsable_document(self, tmp_path: Path, eips_dir: Path) -> None:
        bad = eips_dir / "eip-9.md"
        bad.write_text("status: Final\n", encoding="utf-8")

        result = LintService(_settings(tmp_path)).check([bad])
        (diag,) = result.data["diagnostics"]
        assert diag["title"]["id"] == "markdown-preamble"
        assert diag["title"]["label"].startswith("unable to parse preamble: ")
        assert diag["origin"] == str(bad)

    def test_unparsable_dependency(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        (eips_dir / "eip-1.md").write_text("---\nbroken\n---\n", encoding="utf-8")
        target = write_proposal(5, status="Final", requires="1")

        result = LintService(_requires_only(tmp_path)).check([target])
        labels = [d["title"]["label"] for d in result.data["diagnostics"]]
        assert labels == [
            "unable to read file `eip-1.md`: line must be a `name: value` pair (line 2)"
        ]

    def test_warning_level_keeps_ok(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        write_proposal(1, status="Draft")
        target = write_proposal(5, status="Final", requires="1")

        result = LintService(_requires_only(tmp_path, level="warning")).check([target])
        assert result.ok
        assert result.data["warning_count"] == 1
        assert result.data["error_count"] == 0
        assert result.data["diagnostics"][0]["title"]["annotation_type"] == "warning"

    def test_missing_required_headers(self, tmp_path: Path, eips_dir: Path) -> None:
        target = eips_dir / "eip-3.md"
        target.write_text("---\ntitle: Only a title\n---\n", encoding="utf-8")

        result = LintService(_settings(tmp_path)).check([target])
        (diag,) = result.data["diagnostics"]
        assert diag["title"]["id"] == "preamble-required"
        assert diag["title"]["label"] == (
            "preamble is missing header(s): `eip`, `author`, `status`, `created`"
        )


class _CountingStore(DocumentStore):
    def __init__(self, root: Path) -> None:
        super().__init__(root)
        self.prefetched: list[Path] = []

    def prefetch(self, paths: Any, *, relative_to: Path | None = None) -> None:
        paths = list(paths)
        self.prefetched.extend(paths)
        super().prefetch(paths, relative_to=relative_to)


class TestResources:
    def test_dependencies_prefetched_and_cached(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        write_proposal(3, status="Final")
        a = write_proposal(1, status="Review", requires="3")
        b = write_proposal(2, status="Review", requires="3, x")

        store = _CountingStore(tmp_path)
        result = LintService(_requires_only(tmp_path), store=store).check([a, b])
        assert result.ok
        assert store.prefetched == [Path("eip-3.md"), Path("eip-3.md")]
        assert len(store) == 1


class _FailingReporter(Reporter):
    def report(self, snippet: Snippet) -> None:
        raise ReporterError("broken pipe")


class TestSink:
    def test_sink_receives_every_snippet(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        write_proposal(1, status="Draft")
        target = write_proposal(5, status="Final", requires="1, 2")
        sink = CollectingReporter()

        result = LintService(_requires_only(tmp_path), sink=sink).check([target])
        assert len(sink.snippets) == result.data["count"] == 2

    def test_sink_failure_aborts(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        write_proposal(1, status="Draft")
        target = write_proposal(5, status="Final", requires="1")

        result = LintService(_requires_only(tmp_path), sink=_FailingReporter()).check([target])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "REPORT_FAILED"
        assert "broken pipe" in result.error.message
        assert result.error.detail == {"origin": str(target)}


class _TitleLint(Lint):
    kind = "title-shout"

    def lint(self, slug: str, ctx: Context) -> None:
        title = ctx.preamble.by_name("title")
        if title is not None and title.value.strip().isupper():
            ctx.report(
                Snippet(
                    title=Annotation(
                        annotation_type=ctx.annotation_type, id=slug, label="title is shouting"
                    )
                )
            )


class _LintPlugin:
    def __init__(self) -> None:
        self.events: list[dict[str, int]] = []

    @hookimpl
    def register_lints(self) -> dict[str, Lint]:
        return {"title-shout": _TitleLint(), "preamble-required": _TitleLint()}

    @hookimpl
    def post_check(self, files_checked: int, diagnostics_found: int, error_count: int) -> None:
        self.events.append(
            {
                "files_checked": files_checked,
                "diagnostics_found": diagnostics_found,
                "error_count": error_count,
            }
        )


class _BrokenLint(Lint):
    kind = "broken"

    def __init__(self, *, in_find: bool = False) -> None:
        self.in_find = in_find

    def find_resources(self, ctx: FetchContext) -> None:
        if self.in_find:
            raise RuntimeError("find bug")

    def lint(self, slug: str, ctx: Context) -> None:
        raise RuntimeError("lint bug")


class _UntitledLint(Lint):
    kind = "untitled"

    def lint(self, slug: str, ctx: Context) -> None:
        ctx.report(Snippet())


class _StaticPlugin:
    def __init__(self, lints: dict[str, Lint]) -> None:
        self.lints = lints

    @hookimpl
    def register_lints(self) -> dict[str, Lint]:
        return self.lints


class TestPlugins:
    def _plugins(self) -> tuple[PluginManager, _LintPlugin]:
        pm = PluginManager()
        plugin = _LintPlugin()
        pm.register_plugin(plugin, name="shout")
        return pm, plugin

    def test_plugin_lints_run(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        pm, plugin = self._plugins()
        target = write_proposal(1, status="Draft", title="LOUD")

        result = LintService(_settings(tmp_path), plugins=pm).check([target])
        (diag,) = result.data["diagnostics"]
        assert diag["title"]["id"] == "title-shout"
        assert plugin.events == [{"files_checked": 1, "diagnostics_found": 1, "error_count": 1}]

    def test_failing_plugin_lint_becomes_warning(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(
            _StaticPlugin({"broken": _BrokenLint(), "shaky": _BrokenLint(in_find=True)}),
            name="broken",
        )
        write_proposal(1, status="Draft")
        target = write_proposal(5, status="Final", requires="1")

        result = LintService(_requires_only(tmp_path), plugins=pm).check([target])
        assert result.data["files"] == 1
        (diag,) = result.data["diagnostics"]
        assert diag["title"]["id"] == "preamble-requires-status"
        assert result.warnings == [
            f"Plugin lint 'shaky' failed on {target}: find bug",
            f"Plugin lint 'broken' failed on {target}: lint bug",
            f"Plugin lint 'shaky' failed on {target}: lint bug",
        ]

    def test_untitled_snippet_counts_as_error(
        self, tmp_path: Path, eips_dir: Path, write_proposal: Callable[..., Path]
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(_StaticPlugin({"untitled": _UntitledLint()}), name="untitled")
        target = write_proposal(1, status="Final")

        result = LintService(_requires_only(tmp_path), plugins=pm).check([target])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "LINT_FAILED"
        assert result.data["error_count"] == 1
        assert result.data["warning_count"] == 0
        assert result.data["diagnostics"][0]["title"] is None

    def test_conflicting_plugin_slug_skipped(self, tmp_path: Path) -> None:
        pm, _plugin = self._plugins()
        result = LintService(_settings(tmp_path), plugins=pm).list_lints()
        slugs = [(i["slug"], i["source"]) for i in result.data["items"]]
        assert slugs == [
            ("preamble-requires-status", "config"),
            ("preamble-required", "config"),
            ("title-shout", "plugin"),
        ]
        assert result.warnings == [
            "Plugin lint 'preamble-required' conflicts with a configured lint"
        ]


class TestListLints:
    def test_defaults(self, tmp_path: Path) -> None:
        result = LintService(_settings(tmp_path)).list_lints()
        assert result.ok
        assert result.op == "list_lints"
        assert result.data["count"] == 2
        assert result.data["items"][0] == {
            "slug": "preamble-requires-status",
            "kind": "preamble-requires-status",
            "level": "error",
            "source": "config",
        }
