"""Tests for the verbosity-level logger."""

from __future__ import annotations

import io

from tagtint.logger import checks_enabled, get_logger, reset_logger, setup_logger


def _emit_all() -> None:
    logger = get_logger()
    logger.changes("a change")
    logger.checks("a check")
    logger.debug("a detail")


def test_silent_by_default() -> None:
    stream = io.StringIO()
    setup_logger(0, stream)
    _emit_all()
    assert stream.getvalue() == ""
    assert not checks_enabled()


def test_changes_level() -> None:
    stream = io.StringIO()
    setup_logger(1, stream)
    _emit_all()
    assert stream.getvalue() == "a change\n"


def test_checks_level() -> None:
    stream = io.StringIO()
    setup_logger(2, stream)
    _emit_all()
    assert stream.getvalue() == "a change\na check\n"
    assert checks_enabled()


def test_debug_level() -> None:
    stream = io.StringIO()
    setup_logger(3, stream)
    _emit_all()
    assert stream.getvalue() == "a change\na check\na detail\n"


def test_errors_always_show() -> None:
    stream = io.StringIO()
    setup_logger(0, stream)
    get_logger().error("broken")
    assert stream.getvalue() == "broken\n"


def test_setup_replaces_handlers() -> None:
    first = io.StringIO()
    second = io.StringIO()
    setup_logger(1, first)
    setup_logger(1, second)
    get_logger().changes("once")
    assert first.getvalue() == ""
    assert second.getvalue() == "once\n"


def test_reset() -> None:
    setup_logger(3, io.StringIO())
    reset_logger()
    assert get_logger().handlers == []
    assert not checks_enabled()
