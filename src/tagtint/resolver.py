"""Per-tag color resolution: palette pick, nested blending, gradient stops."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from coloraide import Color

from .contrast import ContrastResolver
from .logger import get_logger
from .models import ColorOptions, ColorResult
from .tags import TAG_SEPARATOR, compose_tag_path, normalize_palette_index, tag_key

logger = get_logger()

MIX_RATIO = 0.4
TRANSITION_MIX_RATIO = 0.5
MIX_RATIO_BUMP = 0.1
MIN_VISIBLE_DELTA_E = 10
TRANSITION_GAP = 50
MIN_STOP_WIDTH = "2em"


def css_number(value: float) -> str:
    """Format a number the way a browser script would print it.

    Integral values lose the fractional part, everything else keeps its
    shortest round-tripping form: 50.0 -> '50', 100/3 -> '33.333333333333336'.
    """
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def build_linear_gradient(stops: Sequence[str], is_transition: bool) -> list[str]:
    """Lay out one gradient stop per color across 0-100%.

    Without transition the stops butt against each other. With transition
    they are separated by gaps that the browser fills with a blend.
    """
    count = len(stops)
    default_gap = TRANSITION_GAP if is_transition else 0
    gap = (default_gap / count) * 2
    element_size = (100 - gap * (count - 1)) / count

    gradient: list[str] = []
    for index, color in enumerate(stops):
        start = index * (element_size + gap)
        end = start + element_size
        gradient.append(f"{color} {css_number(start)}% max({MIN_STOP_WIDTH}, {css_number(end)}%)")
    return gradient


class TagColorResolver:
    """Maps a tag path to its background, text color and gradient.

    The resolver never writes to the sibling-order or override mappings it
    is given.
    """

    def __init__(self, contrast: ContrastResolver | None = None) -> None:
        self.contrast = contrast if contrast is not None else ContrastResolver()

    def get_colors(
        self,
        tag_path: str,
        palette: Sequence[str],
        sibling_orders: Mapping[str, int],
        options: ColorOptions,
        overrides: Mapping[str, int] | None = None,
    ) -> ColorResult:
        """Resolve the colors of one tag under one palette.

        Args:
            tag_path: Normalized tag path such as 'project/alpha'
            palette: Color strings to pick from
            sibling_orders: Tag path -> 1-based order among siblings
            options: Mixing, transition and text contrast switches
            overrides: Tag path -> pinned palette index

        Returns:
            ColorResult whose background is the first segment's color

        Raises:
            ValueError: If the tag path is empty or the palette has no colors
        """
        key = tag_key(tag_path)
        if not key:
            raise ValueError("Cannot resolve colors for an empty tag path")
        if not palette:
            raise ValueError("Cannot resolve colors from an empty palette")

        stops = self.gradient_stops(
            key.split(TAG_SEPARATOR), palette, sibling_orders, options, overrides
        )

        # The background is the root segment's identity color, never an average
        background = Color(stops[0])
        color = self.contrast.resolve_text_color(background, options.high_text_contrast)
        logger.checks(f"Tag '{key}': background {stops[0]}, text {color}")

        return ColorResult(
            background=background.to_string(),
            color=color,
            linear_gradient=tuple(build_linear_gradient(stops, options.is_transition)),
        )

    def gradient_stops(
        self,
        segments: Sequence[str],
        palette: Sequence[str],
        sibling_orders: Mapping[str, int],
        options: ColorOptions,
        overrides: Mapping[str, int] | None = None,
    ) -> list[str]:
        """One LCH color string per path segment, left to right."""
        stops: list[str] = []
        anchor: Color | None = None
        last_color = ""
        current_path = ""

        for segment in segments:
            key = compose_tag_path(current_path, segment)
            order = sibling_orders.get(key) or 1
            override = overrides.get(key) if overrides is not None else None

            candidates = self._palette_for_segment(palette, last_color, override)
            source = override if override is not None else order - 1
            picked = candidates[normalize_palette_index(source, len(candidates))]
            last_color = picked

            if anchor is not None and options.is_mixing:
                new_color = self._mix(anchor, picked, options.is_transition)
            else:
                new_color = Color(picked).convert("lch")

            if anchor is None:
                anchor = new_color

            stops.append(new_color.to_string())
            current_path = key

        return stops

    @staticmethod
    def _palette_for_segment(
        palette: Sequence[str], last_color: str, override: int | None
    ) -> Sequence[str]:
        # Skip the previous segment's color so parent and child differ
        if override is not None or len(palette) <= 1:
            return palette
        filtered = [color for color in palette if color != last_color]
        return filtered or palette

    @staticmethod
    def _mix(anchor: Color, color: str, is_transition: bool) -> Color:
        ratio = TRANSITION_MIX_RATIO if is_transition else MIX_RATIO
        mixed = anchor.mix(color, ratio, space="lch", out_space="lch")
        if mixed.delta_e(anchor, method="2000") < MIN_VISIBLE_DELTA_E:
            mixed = anchor.mix(color, ratio + MIX_RATIO_BUMP, space="lch", out_space="lch")
        return mixed
