"""Collect tags from a directory of Markdown notes."""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from .logger import get_logger
from .tags import normalize_tag_name

logger = get_logger()

_FRONT_MATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---\s*(?:\r?\n|\Z)", re.DOTALL)
_FENCED_CODE_RE = re.compile(r"^(```|~~~).*?^\1", re.DOTALL | re.MULTILINE)
_INLINE_CODE_RE = re.compile(r"`[^`\n]*`")
# '#' must not follow a word character, '#', '/' or '&' (URL fragments, entities)
_INLINE_TAG_RE = re.compile(r"(?<![\w#/&])#([\w\-/]+)")
_NUMERIC_RE = re.compile(r"^[\d/]+$")


def _front_matter_tags(front_matter: str) -> list[str]:
    try:
        data: Any = yaml.safe_load(front_matter)
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring unparsable front matter: {e}")
        return []
    if not isinstance(data, dict):
        return []

    value = data.get("tags", data.get("tag"))
    if value is None:
        return []
    if isinstance(value, str):
        items = re.split(r"[,\s]+", value)
    elif isinstance(value, list):
        items = [str(item) for item in value if item is not None]
    else:
        items = [str(value)]
    return [name for name in (normalize_tag_name(item) for item in items) if name]


def _inline_tags(body: str) -> Iterator[str]:
    body = _FENCED_CODE_RE.sub("", body)
    body = _INLINE_CODE_RE.sub("", body)
    for match in _INLINE_TAG_RE.finditer(body):
        name = normalize_tag_name(match.group(1))
        # '#123' is an issue number, not a tag
        if name and not _NUMERIC_RE.match(name):
            yield name


def extract_tags(text: str) -> list[str]:
    """Tags of one note: front-matter tags first, then inline #tags.

    Duplicates are kept so callers can count occurrences.
    """
    tags: list[str] = []
    body = text
    match = _FRONT_MATTER_RE.match(text)
    if match:
        tags.extend(_front_matter_tags(match.group(1)))
        body = text[match.end() :]
    tags.extend(_inline_tags(body))
    return tags


def scan_notes(directory: Path | str) -> dict[str, int]:
    """Count tag occurrences across every *.md file below `directory`.

    Returns:
        Tag name -> number of occurrences, in first-seen order

    Raises:
        FileNotFoundError: If the directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Notes directory not found: {directory}")

    counts: dict[str, int] = {}
    for note in sorted(directory.rglob("*.md")):
        note_tags = extract_tags(note.read_text(encoding="utf-8"))
        if note_tags:
            logger.debug(f"{note}: {', '.join(note_tags)}")
        for tag in note_tags:
            counts[tag] = counts.get(tag, 0) + 1
    return counts
