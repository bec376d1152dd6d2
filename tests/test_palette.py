"""Tests for palette generation."""

import pytest
from coloraide import Color

from tagtint.exceptions import PaletteError
from tagtint.models import PaletteType
from tagtint.palette import (
    HUE_OFFSET,
    PALETTE_SIZE,
    generate_adaptive_palette,
    generate_palettes,
    parse_custom_palette,
    rotate_palette,
    shuffle_palette,
    split_custom_palette,
    to_lch_string,
)
from tagtint.settings import PaletteConfig


def _channels(color: str) -> tuple[float, float, float]:
    lch = Color(color)
    return lch.get("lightness"), lch.get("chroma"), lch.get("hue")


class TestRotateAndShuffle:
    """Test the ordering helpers."""

    def test_rotate_moves_tail_to_front(self) -> None:
        assert rotate_palette(["a", "b", "c"], 1) == ["c", "a", "b"]
        assert rotate_palette(["a", "b", "c"], 2) == ["b", "c", "a"]

    def test_rotate_zero_and_full_length_are_identity(self) -> None:
        assert rotate_palette(["a", "b", "c"], 0) == ["a", "b", "c"]
        assert rotate_palette(["a", "b", "c"], 3) == ["a", "b", "c"]

    def test_rotate_wraps_large_seed(self) -> None:
        assert rotate_palette(["a", "b", "c"], 4) == rotate_palette(["a", "b", "c"], 1)

    def test_rotate_empty(self) -> None:
        assert rotate_palette([], 3) == []

    def test_rotate_returns_new_list(self) -> None:
        colors = ["a", "b"]
        rotate_palette(colors, 1)
        assert colors == ["a", "b"]

    def test_shuffle_eight(self) -> None:
        """Test the exact traversal for the default palette size."""
        assert shuffle_palette(list("abcdefgh")) == list("adgcfbhe")

    def test_shuffle_small(self) -> None:
        assert shuffle_palette(list("abc")) == list("acb")
        assert shuffle_palette(list("abcde")) == list("acedb")
        assert shuffle_palette(["only"]) == ["only"]
        assert shuffle_palette([]) == []


class TestAdaptivePalette:
    """Test adaptive palette generation."""

    def test_hues_are_evenly_spaced(self) -> None:
        palette = generate_adaptive_palette(
            is_dark_theme=False,
            palette_size=8,
            base_chroma=16,
            base_lightness=87,
            hue_offset=35,
            shuffle=False,
        )
        assert len(palette) == 8
        for index, color in enumerate(palette):
            lightness, chroma, hue = _channels(color)
            assert color.startswith("lch(")
            assert lightness == pytest.approx(87)
            assert chroma == pytest.approx(16)
            assert hue == pytest.approx((index * 45 + 35) % 360)

    def test_hue_wraps_past_360(self) -> None:
        palette = generate_adaptive_palette(
            is_dark_theme=False,
            palette_size=4,
            base_chroma=30,
            base_lightness=70,
            hue_offset=300,
            shuffle=False,
        )
        hues = [_channels(color)[2] for color in palette]
        assert hues == pytest.approx([300, 30, 120, 210])

    def test_dark_variant_adjusts_chroma_and_lightness(self) -> None:
        palette = generate_adaptive_palette(
            is_dark_theme=True,
            palette_size=3,
            base_chroma=16,
            base_lightness=87,
            hue_offset=0,
            shuffle=False,
        )
        lightness, chroma, _ = _channels(palette[0])
        assert chroma == pytest.approx(29)  # round(28.8)
        assert lightness == pytest.approx(35)  # round(34.8)

    def test_dark_variant_clamps_chroma(self) -> None:
        palette = generate_adaptive_palette(
            is_dark_theme=True,
            palette_size=2,
            base_chroma=85,
            base_lightness=75,
            hue_offset=0,
            shuffle=False,
        )
        lightness, chroma, _ = _channels(palette[0])
        assert chroma == pytest.approx(100)
        assert lightness == pytest.approx(30)

    def test_dark_lightness_rounds_half_up(self) -> None:
        palette = generate_adaptive_palette(
            is_dark_theme=True,
            palette_size=1,
            base_chroma=10,
            base_lightness=11.25,
            hue_offset=0,
            shuffle=False,
        )
        assert _channels(palette[0])[0] == pytest.approx(5)  # 4.5 rounds up

    def test_shuffle_reorders_unshuffled_palette(self) -> None:
        kwargs = {
            "is_dark_theme": False,
            "palette_size": 8,
            "base_chroma": 16,
            "base_lightness": 87,
            "hue_offset": 35,
        }
        plain = generate_adaptive_palette(**kwargs, shuffle=False)
        shuffled = generate_adaptive_palette(**kwargs, shuffle=True)
        assert shuffled == [plain[i] for i in (0, 3, 6, 2, 5, 1, 7, 4)]

    def test_seed_rotates_result(self) -> None:
        kwargs = {
            "is_dark_theme": False,
            "palette_size": 8,
            "base_chroma": 16,
            "base_lightness": 87,
            "hue_offset": 35,
            "shuffle": True,
        }
        base = generate_adaptive_palette(**kwargs, seed=0)
        assert generate_adaptive_palette(**kwargs, seed=3) == rotate_palette(base, 3)


class TestCustomPalette:
    """Test user supplied palettes."""

    def test_split_custom_palette(self) -> None:
        assert split_custom_palette("ff0000-00FF00") == ["#ff0000", "#00FF00"]
        assert split_custom_palette("") == []

    def test_split_rejects_malformed(self) -> None:
        with pytest.raises(PaletteError):
            split_custom_palette("ff0000-zzz")

    def test_parse_converts_to_lch_and_rotates(self) -> None:
        palette = parse_custom_palette(["#ff0000", "#00ff00", "#0000ff"], seed=1)
        assert palette == [
            to_lch_string("#0000ff"),
            to_lch_string("#ff0000"),
            to_lch_string("#00ff00"),
        ]

    def test_lch_strings_round_trip(self) -> None:
        value = to_lch_string("#abcdef")
        assert value.startswith("lch(")
        assert to_lch_string(value) == value


class TestGeneratePalettes:
    """Test palette orchestration."""

    def test_custom_palette_and_seed_rotation(self) -> None:
        config = PaletteConfig(selected=PaletteType.CUSTOM, custom="ff0000-00ff00-0000ff", seed=0)
        base = generate_palettes(config)
        rotated = generate_palettes(config.model_copy(update={"seed": 1}))

        assert len(base.light) == 3
        assert all(color.startswith("lch(") for color in base.light)
        assert rotated.light[0] == base.light[2]

    def test_custom_palette_reused_for_dark(self) -> None:
        config = PaletteConfig(selected=PaletteType.CUSTOM, custom="123456-abcdef")
        palettes = generate_palettes(config)
        assert palettes.dark == palettes.light

    def test_empty_custom_falls_back_to_adaptive(self) -> None:
        palettes = generate_palettes(PaletteConfig(selected=PaletteType.CUSTOM, custom=""))
        assert len(palettes.light) == PALETTE_SIZE
        assert len(palettes.dark) == PALETTE_SIZE
        assert palettes == generate_palettes(PaletteConfig(selected=PaletteType.ADAPTIVE_SOFT))

    def test_bright_differs_from_soft(self) -> None:
        bright = generate_palettes(PaletteConfig(selected=PaletteType.ADAPTIVE_BRIGHT))
        soft = generate_palettes(PaletteConfig(selected=PaletteType.ADAPTIVE_SOFT))
        assert bright.light[0] != soft.light[0]
        assert _channels(bright.light[0])[1] == pytest.approx(85)
        assert _channels(soft.light[0])[1] == pytest.approx(16)

    def test_first_color_uses_hue_offset(self) -> None:
        palettes = generate_palettes(PaletteConfig())
        assert _channels(palettes.light[0])[2] == pytest.approx(HUE_OFFSET)

    def test_light_and_dark_differ(self) -> None:
        palettes = generate_palettes(PaletteConfig())
        assert palettes.light != palettes.dark

    @pytest.mark.parametrize("seed", range(PALETTE_SIZE))
    def test_seed_is_pure_rotation(self, seed: int) -> None:
        base = generate_palettes(PaletteConfig(seed=0))
        shifted = generate_palettes(PaletteConfig(seed=seed))
        assert list(shifted.light) == rotate_palette(base.light, seed)
        assert list(shifted.dark) == rotate_palette(base.dark, seed)

    def test_palettes_are_immutable_tuples(self) -> None:
        palettes = generate_palettes(PaletteConfig())
        assert isinstance(palettes.light, tuple)
        assert isinstance(palettes.dark, tuple)
