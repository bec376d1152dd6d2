"""Data models shared by the color engine and its callers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PaletteType(str, Enum):
    """Which palette recipe a configuration selects."""

    ADAPTIVE_SOFT = "adaptive-soft"
    ADAPTIVE_BRIGHT = "adaptive-bright"
    CUSTOM = "custom"


class Theme(str, Enum):
    """Theme variants a palette is generated for."""

    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class Palettes:
    """Light and dark palettes generated from one configuration.

    Both are tuples of LCH color strings of equal length.
    """

    light: tuple[str, ...]
    dark: tuple[str, ...]

    def for_theme(self, theme: Theme) -> tuple[str, ...]:
        return self.dark if theme is Theme.DARK else self.light

    def __len__(self) -> int:
        return len(self.light)


@dataclass(frozen=True)
class ColorOptions:
    """Rendering switches that change how a tag path is colored."""

    is_mixing: bool = True
    is_transition: bool = True
    high_text_contrast: bool = False


@dataclass(frozen=True)
class ColorResult:
    """Colors for one tag under one palette.

    Attributes:
        background: Anchor color of the first path segment (LCH string)
        color: Text color readable on the background
        linear_gradient: One CSS gradient stop per path segment
    """

    background: str
    color: str
    linear_gradient: tuple[str, ...]
