"""Shared pytest fixtures and test helpers for eiplint tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from eiplint.domain.preamble import Document

FLOW: list[list[str]] = [["Draft"], ["Review"], ["Last Call"], ["Final"]]


def proposal_text(fields: dict[str, str], body: str = "Body.\n") -> str:
    """Render a proposal with a ``name: value`` preamble."""
    lines = ["---", *(f"{name}: {value}" for name, value in fields.items()), "---", body]
    return "\n".join(lines)


def make_document(**fields: str) -> Document:
    """Parse a proposal built from keyword fields."""
    return Document.parse(proposal_text(fields))


def full_fields(number: int, status: str, **extra: str) -> dict[str, str]:
    """Fields satisfying the default ``preamble-required`` lint."""
    return {
        "eip": str(number),
        "title": f"Proposal {number}",
        "author": "Jane Doe (@jane)",
        "status": status,
        "created": "2024-01-01",
        **extra,
    }


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's EIPLINT_* environment out of the tests."""
    monkeypatch.delenv("EIPLINT_CONFIG", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def eips_dir(tmp_path: Path) -> Path:
    """Empty ``EIPS/`` directory inside a temp project root."""
    path = tmp_path / "EIPS"
    path.mkdir()
    return path


@pytest.fixture
def write_proposal(eips_dir: Path) -> Callable[..., Path]:
    """Factory writing ``eip-<number>.md`` into ``eips_dir``.

    Usage::

        write_proposal(1, status="Final", requires="2")
        write_proposal(2, fields={...})  # exact preamble
    """

    def _write(number: int, *, fields: dict[str, str] | None = None, **kwargs: str) -> Path:
        if fields is None:
            status = kwargs.pop("status", "Draft")
            fields = full_fields(number, status, **kwargs)
        path = eips_dir / f"eip-{number}.md"
        path.write_text(proposal_text(fields), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp project root so the CLI discovers no outside config."""
    monkeypatch.chdir(tmp_path)
