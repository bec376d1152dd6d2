"""Tag name helpers and the sibling-order registry."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .logger import get_logger

logger = get_logger()

TAG_SEPARATOR = "/"

_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_SLASHES_RE = re.compile(r"/+$")


def normalize_tag_name(tag_name: str) -> str:
    """Strip '#', surrounding and inner whitespace, and trailing slashes.

    Case is preserved. An empty result means the input named no tag.
    """
    name = tag_name.replace("#", "").strip()
    name = _WHITESPACE_RE.sub("", name)
    return _TRAILING_SLASHES_RE.sub("", name)


def tag_key(tag_name: str) -> str:
    """Lookup key for a tag: normalized and lowercased."""
    return normalize_tag_name(tag_name).lower()


def compose_tag_path(parent_path: str, segment: str) -> str:
    return f"{parent_path}{TAG_SEPARATOR}{segment}" if parent_path else segment


def tag_prefixes(tag_path: str) -> list[str]:
    """Cumulative prefixes of a path: 'a/b/c' -> ['a', 'a/b', 'a/b/c']."""
    prefixes: list[str] = []
    current = ""
    for segment in tag_path.split(TAG_SEPARATOR):
        current = compose_tag_path(current, segment)
        prefixes.append(current)
    return prefixes


def normalize_palette_index(index: int, length: int) -> int:
    """Wrap an index into [0, length). Returns 0 for an empty palette."""
    if length <= 0:
        return 0
    return index % length


class TagManager:
    """Owns the sibling-order map and the set of already rendered tags.

    Every tag path gets a 1-based order among siblings with the same parent
    the first time it is seen. Orders are never reassigned afterwards, so a
    tag keeps its color while new tags keep arriving.
    """

    def __init__(self, known_tags: Mapping[str, int] | None = None) -> None:
        self._tags_map: dict[str, int] = {}
        for name, order in (known_tags or {}).items():
            key = tag_key(name)
            if key:
                self._tags_map.setdefault(key, order)
        self._rendered: set[str] = set()

    @property
    def tags_map(self) -> Mapping[str, int]:
        """Read-only view of tag path -> sibling order."""
        return MappingProxyType(self._tags_map)

    def export_known_tags(self) -> dict[str, int]:
        return dict(self._tags_map)

    def clear_rendered_tags(self) -> None:
        self._rendered.clear()

    def mark_as_rendered(self, tag_name: str) -> None:
        self._rendered.add(tag_name)

    def is_rendered(self, tag_name: str) -> bool:
        return tag_name in self._rendered

    def update_known_tags(self, observed_tags: Iterable[str]) -> bool:
        """Register observed tags and any missing ancestor prefixes.

        Args:
            observed_tags: Tag names as found in notes, with or without '#'

        Returns:
            True if at least one new order was assigned
        """
        incoming = [tag_key(tag) for tag in observed_tags if not tag.rstrip().endswith("/")]
        incoming = [tag for tag in incoming if tag]
        all_tags = list(dict.fromkeys([*self._tags_map, *incoming]))

        has_changes = False
        for tag in all_tags:
            if self._assign_order_to_tag_path(tag, all_tags):
                has_changes = True
        return has_changes

    def _assign_order_to_tag_path(self, tag: str, all_tags: list[str]) -> bool:
        parent_path = ""
        has_changes = False

        for depth, key in enumerate(tag_prefixes(tag)):
            if key not in self._tags_map:
                order = self._order_for_new_tag(all_tags, depth, parent_path)
                self._tags_map[key] = order
                logger.changes(f"New tag '{key}' gets order {order}")
                has_changes = True
            parent_path = key

        return has_changes

    def _order_for_new_tag(self, all_tags: list[str], depth: int, parent_path: str) -> int:
        siblings = [
            tag
            for tag in all_tags
            if len(tag.split(TAG_SEPARATOR)) == depth + 1
            and (not parent_path or tag.startswith(parent_path))
        ]
        max_order = max((self._tags_map.get(sibling, 0) for sibling in siblings), default=0)
        return max_order + 1
