"""Tests for moving pinned colors between palettes."""

from __future__ import annotations

from tagtint.models import Palettes
from tagtint.remap import find_closest_color_index, palettes_changed, remap_overrides


class TestFindClosestColorIndex:
    def test_exact_match(self) -> None:
        assert find_closest_color_index("#00ff00", ["#ff0000", "#00ff00", "#0000ff"]) == 1

    def test_nearest_gray(self) -> None:
        assert find_closest_color_index("#111111", ["#ffffff", "#888888"]) == 1
        assert find_closest_color_index("#eeeeee", ["#000000", "#888888", "#ffffff"]) == 2

    def test_first_of_equal_distances_wins(self) -> None:
        assert find_closest_color_index("#123456", ["#abcdef", "#abcdef"]) == 0

    def test_empty_palette(self) -> None:
        assert find_closest_color_index("#123456", []) == 0

    def test_accepts_lch_strings(self) -> None:
        palette = ["lch(50% 40 30)", "lch(80% 40 200)"]
        assert find_closest_color_index("lch(78% 38 205)", palette) == 1


class TestRemapOverrides:
    def test_dark_pin_moves_to_nearest_gray(self) -> None:
        remapped = remap_overrides(["#000000", "#111111"], ["#999999", "#888888"], {"tag": 1})
        assert remapped == {"tag": 1}

    def test_pinned_index_follows_its_color(self) -> None:
        previous = ["#ff0000", "#00ff00", "#0000ff"]
        next_palette = ["#0000ff", "#ff0000", "#00ff00"]

        remapped = remap_overrides(previous, next_palette, {"work": 0, "home": 1, "misc": 2})

        assert remapped == {"work": 1, "home": 2, "misc": 0}

    def test_keys_are_normalized(self) -> None:
        remapped = remap_overrides(["#ff0000"], ["#ff0000"], {"#Work/": 0, " ": 0, "#": 0})
        assert remapped == {"work": 0}

    def test_out_of_range_index_wraps(self) -> None:
        previous = ["#ff0000", "#00ff00"]
        next_palette = ["#00ff00", "#ff0000"]
        assert remap_overrides(previous, next_palette, {"a": 3, "b": -2}) == {"a": 0, "b": 1}

    def test_empty_palette_is_a_no_op(self) -> None:
        overrides = {"Work": 4}
        assert remap_overrides([], ["#ff0000"], overrides) == {"Work": 4}
        assert remap_overrides(["#ff0000"], [], overrides) == {"Work": 4}

    def test_input_is_not_modified(self) -> None:
        overrides = {"#work": 1}
        result = remap_overrides(["#ff0000", "#00ff00"], ["#00ff00", "#ff0000"], overrides)
        assert overrides == {"#work": 1}
        assert result is not overrides

    def test_shrinking_palette(self) -> None:
        previous = ["#ff0000", "#00ff00", "#0000ff", "#ffff00"]
        next_palette = ["#ee1111", "#1111ee"]
        assert remap_overrides(previous, next_palette, {"a": 0, "b": 2}) == {"a": 0, "b": 1}


class TestPalettesChanged:
    def test_identical(self) -> None:
        palettes = Palettes(light=("a", "b"), dark=("c", "d"))
        assert not palettes_changed(palettes, Palettes(light=("a", "b"), dark=("c", "d")))

    def test_reordered_light(self) -> None:
        previous = Palettes(light=("a", "b"), dark=("c", "d"))
        assert palettes_changed(previous, Palettes(light=("b", "a"), dark=("c", "d")))

    def test_dark_only(self) -> None:
        previous = Palettes(light=("a", "b"), dark=("c", "d"))
        assert palettes_changed(previous, Palettes(light=("a", "b"), dark=("c", "e")))
