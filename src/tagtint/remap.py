"""Keep pinned tag colors stable when the palette changes."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from coloraide import Color

from .logger import get_logger
from .models import Palettes
from .tags import normalize_palette_index, tag_key

logger = get_logger()


def find_closest_color_index(color: Color | str, palette: Sequence[str]) -> int:
    """Index of the palette color nearest to `color` by CIEDE2000.

    The first of several equally close colors wins. An empty palette yields 0.
    """
    if not palette:
        return 0

    source = Color(color)
    best_index = 0
    best_distance = math.inf
    for index, candidate in enumerate(palette):
        distance = source.delta_e(Color(candidate), method="2000")
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def palettes_changed(previous: Palettes, next_palettes: Palettes) -> bool:
    return previous.light != next_palettes.light or previous.dark != next_palettes.dark


def remap_overrides(
    previous_palette: Sequence[str],
    next_palette: Sequence[str],
    overrides: Mapping[str, int],
) -> dict[str, int]:
    """Move every pinned index to the closest color of the next palette.

    Args:
        previous_palette: Palette the indices currently point into
        next_palette: Palette that replaces it
        overrides: Tag name -> palette index

    Returns:
        New override mapping keyed by normalized tag name. The input is
        returned as a copy when either palette is empty.
    """
    if not previous_palette or not next_palette:
        return dict(overrides)

    remapped: dict[str, int] = {}
    for tag_name, palette_index in overrides.items():
        key = tag_key(tag_name)
        if not key:
            logger.checks(f"Dropping color override for unnamed tag '{tag_name}'")
            continue
        source = previous_palette[normalize_palette_index(palette_index, len(previous_palette))]
        remapped[key] = find_closest_color_index(source, next_palette)
        if remapped[key] != palette_index:
            logger.changes(f"Tag '{key}' color moved from index {palette_index} to {remapped[key]}")
    return remapped
