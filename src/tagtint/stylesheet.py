"""CSS rules for colored tags and a buffer that writes them in batches."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Callable

from .models import ColorResult

LIGHT_SCOPE = "body"
DARK_SCOPE = "body.theme-dark"
GRADIENT_ANGLE = "108deg"

_NON_CLASS_CHARS_RE = re.compile(r"[^0-9a-z-]", re.IGNORECASE)


def _escape_slashes(tag_name: str) -> str:
    return tag_name.replace("/", "\\/")


def build_tag_selectors(tag_name: str) -> list[str]:
    """Selectors matching every place a tag is rendered.

    Covers tag links, editor hashtags and tag pills in note properties.
    Single-segment tags also match the editor's flat per-tag classes.
    """
    tag_href = f"#{_escape_slashes(tag_name)}"
    tag_lower = _escape_slashes(tag_name.lower())
    selectors = [
        f'a.tag[href="{tag_href}" i]',
        f"a.tag.colored-tag-{tag_lower}",
        f".cm-s-obsidian .cm-line span.cm-hashtag.colored-tag-{tag_lower}",
        '.metadata-property[data-property-key="tags" i] '
        f".multi-select-pill.colored-tag-{tag_lower}",
    ]

    tag_flat = _NON_CLASS_CHARS_RE.sub("", tag_name)
    if tag_flat and "/" not in tag_name:
        selectors.append(f".cm-s-obsidian .cm-line span.cm-tag-{tag_flat.lower()}.cm-hashtag")
    return selectors


def build_remove_button_selectors(tag_name: str) -> list[str]:
    if not tag_name:
        return []
    tag_lower = _escape_slashes(tag_name.lower())
    return [
        '.metadata-property[data-property-key="tags" i] '
        f".multi-select-pill-remove-button.colored-tag-{tag_lower}"
    ]


def _scoped(scope: str, selectors: list[str]) -> str:
    return ", ".join(f"{scope} {selector}" for selector in selectors)


def render_tag_css(tag_name: str, light: ColorResult, dark: ColorResult) -> str:
    """CSS for one tag: a rule set for the light scope and one for the dark scope."""
    tag_selectors = build_tag_selectors(tag_name)
    button_selectors = build_remove_button_selectors(tag_name)

    rules: list[str] = []
    for scope, colors in ((LIGHT_SCOPE, light), (DARK_SCOPE, dark)):
        gradient = ", ".join(colors.linear_gradient)
        rules.append(
            f"{_scoped(scope, tag_selectors)} {{\n"
            f"\tbackground-color: {colors.background};\n"
            f"\tcolor: {colors.color};\n"
            f"\tbackground-image: linear-gradient({GRADIENT_ANGLE}, {gradient});\n"
            "\t}"
        )
        if button_selectors:
            rules.append(
                f"{_scoped(scope, button_selectors)} {{\n"
                f"\tcolor: {colors.color};\n"
                f"\tstroke: {colors.color};\n"
                "\t}"
            )
    return "\n".join(rules)


class StyleBuffer:
    """Collects CSS fragments and hands them to a sink in one write.

    Inside a running asyncio loop, the first append() of a burst schedules
    a flush for the next loop iteration, so many tags resolved in one pass
    cost a single write. Without a loop, call flush() yourself.
    """

    def __init__(self, sink: Callable[[str], None] | None = None) -> None:
        self._pending: list[str] = []
        self._written: list[str] = []
        self._sink = sink
        self._flush_scheduled = False

    @property
    def pending(self) -> bool:
        return bool(self._pending)

    def append(self, css: str) -> None:
        self._pending.append(css)
        if self._flush_scheduled:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._flush_scheduled = True
        loop.call_soon(self.flush)

    def flush(self) -> None:
        self._flush_scheduled = False
        if not self.pending:
            return
        chunk = "\n".join(self._pending)
        self._pending = []
        self._written.append(chunk)
        if self._sink is not None:
            self._sink(chunk)

    def clear(self) -> None:
        """Forget pending and written CSS."""
        self._pending = []
        self._written = []

    def text(self) -> str:
        """All CSS flushed so far."""
        return "\n".join(self._written)
