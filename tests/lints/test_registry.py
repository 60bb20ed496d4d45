"""Tests for building lints from configuration."""

from __future__ import annotations

import pytest

from eiplint.config.models import (
    PreambleRequiredConfig,
    RequiresStatusConfig,
    default_lint_configs,
)
from eiplint.lints import PreambleRequired, RequiresStatus, build_lint, build_lints


class TestBuildLint:
    def test_requires_status(self) -> None:
        config = RequiresStatusConfig(requires="deps", status="state", flow=[["a"], ["b"]])
        lint = build_lint(config)
        assert isinstance(lint, RequiresStatus)
        assert lint.requires == "deps"
        assert lint.status == "state"
        assert lint.flow == (("a",), ("b",))
        assert lint.kind == "preamble-requires-status"

    def test_preamble_required(self) -> None:
        lint = build_lint(PreambleRequiredConfig(names=["title"]))
        assert isinstance(lint, PreambleRequired)
        assert lint.names == ("title",)

    def test_unknown_config_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown lint kind"):
            build_lint(object())  # type: ignore[arg-type]


class TestBuildLints:
    def test_defaults(self) -> None:
        lints = build_lints(default_lint_configs())
        assert set(lints) == {"preamble-requires-status", "preamble-required"}
        requires_status = lints["preamble-requires-status"]
        assert isinstance(requires_status, RequiresStatus)
        assert requires_status.tier_map()["Final"] == 4
        assert requires_status.tier_map()["Stagnant"] == 1

    def test_slug_is_independent_of_kind(self) -> None:
        lints = build_lints({"strict-deps": RequiresStatusConfig()})
        assert isinstance(lints["strict-deps"], RequiresStatus)
