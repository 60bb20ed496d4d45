"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, eiplint.toml only contains
overrides. Each ``[lints.<slug>]`` table is one entry of a tagged
union discriminated by ``kind``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

DEFAULT_FLOW: list[list[str]] = [
    ["Draft", "Stagnant"],
    ["Review"],
    ["Last Call"],
    ["Final"],
]

DEFAULT_REQUIRED_HEADERS: list[str] = ["eip", "title", "author", "status", "created"]


class BaseLintConfig(BaseModel):
    """Settings shared by every lint kind."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["error", "warning"] = "error"


class RequiresStatusConfig(BaseLintConfig):
    """``kind = "preamble-requires-status"``."""

    kind: Literal["preamble-requires-status"] = "preamble-requires-status"
    requires: str = "requires"
    status: str = "status"
    flow: list[list[str]] = Field(default_factory=lambda: [list(t) for t in DEFAULT_FLOW])


class PreambleRequiredConfig(BaseLintConfig):
    """``kind = "preamble-required"``."""

    kind: Literal["preamble-required"] = "preamble-required"
    names: list[str] = Field(default_factory=lambda: list(DEFAULT_REQUIRED_HEADERS))


LintConfig = Annotated[
    RequiresStatusConfig | PreambleRequiredConfig,
    Field(discriminator="kind"),
]


def default_lint_configs() -> dict[str, LintConfig]:
    """The lints enabled when no configuration says otherwise."""
    return {
        "preamble-requires-status": RequiresStatusConfig(),
        "preamble-required": PreambleRequiredConfig(),
    }
