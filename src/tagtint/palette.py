"""Palette generation: adaptive LCH palettes and user-supplied hex lists."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

from coloraide import Color

from .exceptions import PaletteError
from .logger import get_logger
from .models import Palettes, PaletteType

if TYPE_CHECKING:
    from .settings import PaletteConfig

logger = get_logger()

CUSTOM_PALETTE_PATTERN = re.compile(r"^[A-Fa-f0-9]{6}(-[A-Fa-f0-9]{6})*$")

# Built-in presets
PALETTE_SIZE = 8
HUE_OFFSET = 35
SOFT_CHROMA = 16
SOFT_LIGHTNESS = 87
BRIGHT_CHROMA = 85
BRIGHT_LIGHTNESS = 75

# Dark backgrounds need more chroma and much less lightness to read as saturated
DARK_CHROMA_FACTOR = 1.8
DARK_LIGHTNESS_DIVISOR = 2.5
MAX_LCH_CHANNEL = 100


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def to_lch_string(color: Color | str) -> str:
    """Serialize any parseable color as a CSS lch() string."""
    return Color(color).convert("lch").to_string()


def rotate_palette(colors: Sequence[str], seed: int) -> list[str]:
    """Move the last `seed` colors to the front, keeping their order.

    The seed is taken modulo the palette length, so seed 0 and any multiple
    of the length leave the palette unchanged.
    """
    result = list(colors)
    if not result:
        return result
    cut = seed % len(result)
    if cut == 0:
        return result
    return result[-cut:] + result[:-cut]


def shuffle_palette(colors: Sequence[str]) -> list[str]:
    """Reorder colors so neighbours in the result are far apart in hue.

    Walks the pool from index 0, removing each visited color and jumping a
    third of the remaining pool ahead. Fully deterministic.
    """
    available = list(colors)
    result: list[str] = []
    next_index = 0

    while available:
        result.append(available.pop(next_index))
        if available:
            next_index = _round_half_up(next_index + len(available) / 3) % len(available)

    return result


def generate_adaptive_palette(  # noqa: PLR0913
    *,
    is_dark_theme: bool,
    palette_size: int,
    base_chroma: float,
    base_lightness: float,
    hue_offset: float,
    seed: int = 0,
    shuffle: bool = True,
) -> list[str]:
    """Spread `palette_size` hues evenly around the LCH wheel.

    Args:
        is_dark_theme: Generate the dark-theme variant
        palette_size: Number of colors (and hue steps)
        base_chroma: Chroma used for the light theme
        base_lightness: Lightness used for the light theme
        hue_offset: Degrees added to every hue
        seed: Rotation applied after shuffling
        shuffle: Space out adjacent hues

    Returns:
        LCH color strings
    """
    hue_increment = 360 / palette_size
    if is_dark_theme:
        chroma = min(_round_half_up(base_chroma * DARK_CHROMA_FACTOR), MAX_LCH_CHANNEL)
        lightness = min(_round_half_up(base_lightness / DARK_LIGHTNESS_DIVISOR), MAX_LCH_CHANNEL)
    else:
        chroma, lightness = base_chroma, base_lightness

    colors = [
        Color("lch", [lightness, chroma, (i * hue_increment + hue_offset) % 360]).to_string()
        for i in range(palette_size)
    ]

    if shuffle:
        colors = shuffle_palette(colors)

    return rotate_palette(colors, seed)


def split_custom_palette(custom: str) -> list[str]:
    """Split a 'rrggbb-rrggbb' string into '#rrggbb' entries.

    Raises:
        PaletteError: If the string is not empty and does not match the pattern
    """
    custom = custom.strip()
    if not custom:
        return []
    if not CUSTOM_PALETTE_PATTERN.match(custom):
        raise PaletteError(
            f"Invalid custom palette '{custom}': expected hex colors like 'e12729-f37324'"
        )
    return [f"#{item}" for item in custom.split("-") if item]


def parse_custom_palette(hex_list: Sequence[str], seed: int = 0) -> list[str]:
    """Convert user-picked hex colors to LCH strings and rotate by seed.

    Custom palettes are never shuffled; the user controls the order.
    """
    return rotate_palette([to_lch_string(item) for item in hex_list], seed)


def generate_palettes(config: PaletteConfig) -> Palettes:
    """Build light and dark palettes for a palette configuration.

    A custom selection with at least one color reuses the same hex values for
    both themes. Anything else falls back to the adaptive presets.
    """
    if config.selected is PaletteType.CUSTOM:
        try:
            hex_list = split_custom_palette(config.custom)
        except PaletteError as e:
            logger.warning(f"{e}; using the adaptive palette instead")
            hex_list = []

        if hex_list:
            colors = tuple(parse_custom_palette(hex_list, config.seed))
            logger.checks(f"Custom palette with {len(colors)} colors, seed {config.seed}")
            return Palettes(light=colors, dark=colors)

    is_bright = config.selected is PaletteType.ADAPTIVE_BRIGHT
    base_chroma = BRIGHT_CHROMA if is_bright else SOFT_CHROMA
    base_lightness = BRIGHT_LIGHTNESS if is_bright else SOFT_LIGHTNESS
    logger.checks(
        f"Adaptive {'bright' if is_bright else 'soft'} palette, "
        f"chroma {base_chroma}, lightness {base_lightness}, seed {config.seed}"
    )

    def build(is_dark_theme: bool) -> tuple[str, ...]:
        return tuple(
            generate_adaptive_palette(
                is_dark_theme=is_dark_theme,
                palette_size=PALETTE_SIZE,
                base_chroma=base_chroma,
                base_lightness=base_lightness,
                hue_offset=HUE_OFFSET,
                seed=config.seed,
                shuffle=True,
            )
        )

    return Palettes(light=build(False), dark=build(True))
