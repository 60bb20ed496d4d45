"""Lint layer — rule kinds and the registry that builds them from config.

Each configured lint is a tagged-union entry (``kind``) that maps to one
:class:`~eiplint.lints.base.Lint` subclass. The host enumerates the
resulting instances and drives both phases through the base interface.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from eiplint.config.models import PreambleRequiredConfig, RequiresStatusConfig
from eiplint.lints.base import Lint
from eiplint.lints.preamble_required import PreambleRequired
from eiplint.lints.requires_status import RequiresStatus

if TYPE_CHECKING:
    from collections.abc import Mapping

    from eiplint.config.models import LintConfig


def build_lint(config: LintConfig) -> Lint:
    """Instantiate the lint described by *config*."""
    if isinstance(config, RequiresStatusConfig):
        return RequiresStatus(requires=config.requires, status=config.status, flow=config.flow)
    if isinstance(config, PreambleRequiredConfig):
        return PreambleRequired(names=config.names)
    msg = f"Unknown lint kind: {getattr(config, 'kind', type(config).__name__)!r}"
    raise ValueError(msg)


def build_lints(configs: Mapping[str, LintConfig]) -> dict[str, Lint]:
    """Instantiate every configured lint, keyed by slug."""
    return {slug: build_lint(cfg) for slug, cfg in configs.items()}


__all__ = ["Lint", "PreambleRequired", "RequiresStatus", "build_lint", "build_lints"]
