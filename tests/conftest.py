"""Pytest configuration and fixtures for tagtint tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tagtint import context
from tagtint.contrast import ContrastResolver
from tagtint.logger import reset_logger
from tagtint.models import ColorOptions
from tagtint.resolver import TagColorResolver


@pytest.fixture(autouse=True)
def clean_session() -> None:
    """Reset global state between tests for isolation."""
    context.reset()
    reset_logger()


@pytest.fixture
def resolver() -> TagColorResolver:
    """A resolver with its own, empty contrast memo."""
    return TagColorResolver(ContrastResolver())


@pytest.fixture
def plain_options() -> ColorOptions:
    """Mixing on, hard gradient edges, tinted text."""
    return ColorOptions(is_mixing=True, is_transition=False, high_text_contrast=False)


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """A small vault of Markdown notes."""
    notes = tmp_path / "notes"
    (notes / "daily").mkdir(parents=True)
    (notes / "project.md").write_text(
        "---\ntags:\n  - project/alpha\n  - Work\n---\n# Project\n\nSee #idea and #project/beta.\n",
        encoding="utf-8",
    )
    (notes / "daily" / "2024-05-01.md").write_text(
        "Worked on #project/alpha today, fixed #42.\n", encoding="utf-8"
    )
    (notes / "readme.txt").write_text("#ignored", encoding="utf-8")
    return notes


def stop_spans(gradient: tuple[str, ...]) -> list[tuple[float, float]]:
    """Extract (start, end) percentages from gradient stops."""
    spans: list[tuple[float, float]] = []
    for stop in gradient:
        _, start, _, end = stop.rsplit(" ", 3)
        spans.append((float(start.rstrip("%")), float(end.rstrip("%)"))))
    return spans


def stop_color(stop: str) -> str:
    """Color part of a gradient stop."""
    return stop.rsplit(" ", 3)[0]
