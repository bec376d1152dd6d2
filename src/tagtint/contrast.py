"""Text colors that stay readable on arbitrary tag backgrounds.

Two metrics gate every candidate: the APCA lightness contrast (perceptual,
signed by polarity) and the WCAG 2.1 contrast ratio. Passing both avoids text
that is legible by the numbers but muddy to the eye.
"""

from __future__ import annotations

import math

from coloraide import Color

WHITE = "white"
BLACK = "black"

# APCA-W3 0.0.98G constants
_APCA_NORM_BG = 0.56
_APCA_NORM_TXT = 0.57
_APCA_REV_TXT = 0.62
_APCA_REV_BG = 0.65
_APCA_BLACK_THRESHOLD = 0.022
_APCA_BLACK_CLAMP = 1.414
_APCA_SCALE = 1.14
_APCA_LOW_CLIP = 0.1
_APCA_OFFSET = 0.027
_APCA_DELTA_Y_MIN = 0.0005
_APCA_COEFFICIENTS = (0.2126729, 0.7151522, 0.0721750)

# Soft text color search
MIN_APCA_CONTRAST = 60
MIN_WCAG_CONTRAST = 4.5
LIGHT_TEXT_CHROMA_BOOST = 3
DARK_TEXT_CHROMA_BOOST = 20
MAX_CHROMA = 100
MAX_STEPS = 100
FALLBACK_TEXT_COLOR = WHITE


def _apca_luminance(color: Color) -> float:
    srgb = color.convert("srgb")
    luminance = 0.0
    for channel, coefficient in zip(("red", "green", "blue"), _APCA_COEFFICIENTS):
        value = srgb.get(channel)
        if math.isnan(value):
            value = 0.0
        luminance += math.copysign(abs(value) ** 2.4, value) * coefficient
    return luminance


def _soft_clamp_black(y: float) -> float:
    if y >= _APCA_BLACK_THRESHOLD:
        return y
    return y + (_APCA_BLACK_THRESHOLD - y) ** _APCA_BLACK_CLAMP


def apca_contrast(background: Color | str, foreground: Color | str) -> float:
    """APCA lightness contrast of text on a background.

    Positive for dark text on a light background, negative for light text on
    a dark background, roughly within [-108, 106].
    """
    y_bg = _soft_clamp_black(_apca_luminance(Color(background)))
    y_txt = _soft_clamp_black(_apca_luminance(Color(foreground)))

    # Far out-of-gamut candidates can have negative luminance; no contrast is defined
    if y_bg < 0 or y_txt < 0:
        return math.nan
    if abs(y_bg - y_txt) < _APCA_DELTA_Y_MIN:
        return 0.0

    if y_bg > y_txt:
        c = (y_bg**_APCA_NORM_BG - y_txt**_APCA_NORM_TXT) * _APCA_SCALE
    else:
        c = (y_bg**_APCA_REV_BG - y_txt**_APCA_REV_TXT) * _APCA_SCALE

    if abs(c) < _APCA_LOW_CLIP:
        return 0.0
    return (c - _APCA_OFFSET if c > 0 else c + _APCA_OFFSET) * 100


def wcag_contrast(first: Color | str, second: Color | str) -> float:
    """WCAG 2.1 contrast ratio, symmetric, in [1, 21]."""
    return Color(first).contrast(Color(second), method="wcag21")


class ContrastResolver:
    """Derives text colors for backgrounds and remembers them.

    The memo is keyed by the background's serialized form and lives as long
    as the resolver. Create one per session and call clear() on reset.
    """

    def __init__(self) -> None:
        self._memo: dict[str, str] = {}

    @property
    def cache_size(self) -> int:
        return len(self._memo)

    def clear(self) -> None:
        self._memo.clear()

    def resolve_text_color(self, background: Color | str, high_contrast: bool = False) -> str:
        """Return a readable text color for `background`.

        Args:
            background: Background color, a Color or any CSS color string
            high_contrast: Pick plain white or black instead of a tinted color

        Returns:
            A CSS color string
        """
        background = Color(background)
        if high_contrast:
            return self.high_contrast_color(background)
        return self.darkened_color(background)

    @staticmethod
    def high_contrast_color(background: Color) -> str:
        """White or black, whichever has the larger APCA magnitude. Ties go to white."""
        on_white = abs(apca_contrast(background, WHITE))
        on_black = abs(apca_contrast(background, BLACK))
        return WHITE if on_white >= on_black else BLACK

    def darkened_color(self, background: Color) -> str:
        """Tinted text color meeting both contrast thresholds.

        A lighter and a darker candidate start from the background hue and
        walk away from it one lightness unit per step; the first to pass
        both gates wins, the lighter one checked first.
        """
        memo_key = background.to_string()
        cached = self._memo.get(memo_key)
        if cached is not None:
            return cached

        light = background.convert("lch")
        dark = background.convert("lch")
        light.set("chroma", min(light.get("chroma") + LIGHT_TEXT_CHROMA_BOOST, MAX_CHROMA))
        dark.set("chroma", min(dark.get("chroma") + DARK_TEXT_CHROMA_BOOST, MAX_CHROMA))

        result = FALLBACK_TEXT_COLOR
        for _ in range(MAX_STEPS):
            if (
                apca_contrast(background, light) <= -MIN_APCA_CONTRAST
                and wcag_contrast(light, background) >= MIN_WCAG_CONTRAST
            ):
                result = light.to_string()
                break
            if (
                apca_contrast(background, dark) >= MIN_APCA_CONTRAST
                and wcag_contrast(dark, background) >= MIN_WCAG_CONTRAST
            ):
                result = dark.to_string()
                break

            light.set("lightness", light.get("lightness") + 1)
            dark.set("lightness", dark.get("lightness") - 1)

        self._memo[memo_key] = result
        return result
