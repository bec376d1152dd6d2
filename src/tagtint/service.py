"""Orchestration: settings, palettes, tag orders, color resolution and CSS."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from . import context
from .logger import get_logger
from .models import ColorResult, Palettes, Theme
from .palette import generate_palettes
from .remap import palettes_changed, remap_overrides
from .resolver import TagColorResolver
from .settings import PaletteConfig, Settings
from .stylesheet import StyleBuffer, render_tag_css
from .tags import TagManager, tag_key

logger = get_logger()


class TagTintService:
    """Keeps the stylesheet in line with the settings and the known tags.

    The service mutates its Settings in place (known tags, overrides,
    palette); persisting them is the caller's job.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        resolver: TagColorResolver | None = None,
        sink: Callable[[str], None] | None = None,
    ) -> None:
        self.settings = settings
        self.resolver = resolver or TagColorResolver(context.get_contrast_resolver())
        self.tag_manager = TagManager(settings.known_tags)
        self.buffer = StyleBuffer(sink)
        self.palettes = Palettes(light=(), dark=())
        self._overrides: dict[str, int] = {}

    @property
    def overrides(self) -> dict[str, int]:
        """Override map keyed by normalized tag path."""
        return dict(self._overrides)

    def reload(self, palettes: Palettes | None = None) -> None:
        """Throw away rendered CSS and render every known tag again."""
        self.tag_manager.clear_rendered_tags()
        self.buffer.clear()
        self.palettes = palettes or generate_palettes(self.settings.palette)
        self._refresh_overrides()
        self.update()

    def update(self) -> None:
        """Render known tags that have no CSS yet."""
        for tag_name in list(self.tag_manager.tags_map):
            if not self.tag_manager.is_rendered(tag_name):
                self.tag_manager.mark_as_rendered(tag_name)
                self.colorize_tag(tag_name)

    def observe_tags(self, tags: Iterable[str]) -> bool:
        """Register tags seen in notes; returns True if known tags changed."""
        changed = self.tag_manager.update_known_tags(tags)
        if changed:
            self.settings.known_tags = self.tag_manager.export_known_tags()
        return changed

    def colors_for(self, tag_name: str, theme: Theme = Theme.LIGHT) -> ColorResult:
        if not self.palettes.light:
            self.palettes = generate_palettes(self.settings.palette)
            self._refresh_overrides()
        return self.resolver.get_colors(
            tag_key(tag_name),
            self.palettes.for_theme(theme),
            self.tag_manager.tags_map,
            self.settings.color_options(),
            self._overrides,
        )

    def colorize_tag(self, tag_name: str) -> None:
        key = tag_key(tag_name)
        if not key:
            return
        light = self.colors_for(key, Theme.LIGHT)
        dark = self.colors_for(key, Theme.DARK)
        self.buffer.append(f"\n{render_tag_css(key, light, dark)}\n")

    def stylesheet(self) -> str:
        """All CSS rendered since the last reload."""
        self.buffer.flush()
        return self.buffer.text()

    def apply_palette_config(self, config: PaletteConfig) -> bool:
        """Switch palettes, moving pinned tag colors to their closest match.

        Returns:
            True if the generated palettes differ from the previous ones
        """
        previous = self.palettes
        if not previous.light:
            previous = generate_palettes(self.settings.palette)
        next_palettes = generate_palettes(config)
        changed = palettes_changed(previous, next_palettes)
        if changed:
            # The light palette is the reference for both themes
            self.settings.tag_colors = remap_overrides(
                previous.light, next_palettes.light, self.settings.tag_colors
            )
            logger.changes(f"Palette switched to {config.selected.value} (seed {config.seed})")
        self.settings.palette = config
        self.reload(next_palettes)
        return changed

    def set_tag_color(self, tag_name: str, palette_index: int) -> None:
        key = tag_key(tag_name)
        if not key:
            raise ValueError(f"Not a tag name: '{tag_name}'")
        self.settings.tag_colors[key] = palette_index
        logger.changes(f"Pinned '{key}' to palette index {palette_index}")
        self.reload(self.palettes if self.palettes.light else None)

    def clear_tag_color(self, tag_name: str) -> bool:
        key = tag_key(tag_name)
        removed = [name for name in self.settings.tag_colors if tag_key(name) == key]
        for name in removed:
            del self.settings.tag_colors[name]
        if removed:
            logger.changes(f"Unpinned '{key}'")
            self.reload(self.palettes if self.palettes.light else None)
        return bool(removed)

    def _refresh_overrides(self) -> None:
        self._overrides = {}
        for name, index in self.settings.tag_colors.items():
            key = tag_key(name)
            if key:
                self._overrides[key] = index
