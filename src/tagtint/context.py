"""Process-wide state: the settings path chosen on the command line and the
session's contrast memo."""

from __future__ import annotations

from pathlib import Path

from .contrast import ContrastResolver


class _Session:
    def __init__(self) -> None:
        self.config_path: Path | None = None
        self.contrast = ContrastResolver()


_session = _Session()


def get_config_path() -> Path | None:
    """Settings path given via --config, if any."""
    return _session.config_path


def set_config_path(path: Path | None) -> None:
    _session.config_path = path


def get_contrast_resolver() -> ContrastResolver:
    """The contrast resolver shared by everything in this process."""
    return _session.contrast


def reset() -> None:
    """Forget the settings path and every memoized text color."""
    _session.config_path = None
    _session.contrast.clear()
