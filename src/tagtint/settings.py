"""Settings file loading, migration and saving.

Settings live in a YAML file (tagtint.yaml by default):

    palette:
      selected: adaptive-soft
      custom: e12729-f37324-f8cc1b-72b043-007f4e
      seed: 0
    mix_colors: true
    transition: true
    accessibility:
      high_text_contrast: false
    known_tags: {}
    tag_colors: {}
    version: 4
"""

from __future__ import annotations

from collections.abc import MutableMapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from ruamel.yaml import YAML

from . import context
from .exceptions import ConfigError
from .logger import get_logger
from .models import ColorOptions, PaletteType
from .palette import CUSTOM_PALETTE_PATTERN, SOFT_CHROMA, SOFT_LIGHTNESS

logger = get_logger()

SETTINGS_FILENAME = "tagtint.yaml"
CURRENT_VERSION = 4
DEFAULT_CUSTOM_PALETTE = "e12729-f37324-f8cc1b-72b043-007f4e"
LEGACY_PALETTE_SIZE = 16

# Keys written by the browser plugin this settings format descends from
_LEGACY_KEYS = {
    "mixColors": "mix_colors",
    "knownTags": "known_tags",
    "tagColors": "tag_colors",
    "_version": "version",
}


class PaletteConfig(BaseModel):
    """Which palette to generate and how to shift it."""

    selected: PaletteType = PaletteType.ADAPTIVE_SOFT
    custom: str = DEFAULT_CUSTOM_PALETTE  # "rrggbb-rrggbb-..."
    seed: int = Field(default=0, ge=0)

    @field_validator("custom")
    @classmethod
    def _check_custom(cls, value: str) -> str:
        value = value.strip()
        if value and not CUSTOM_PALETTE_PATTERN.match(value):
            raise ValueError(
                f"palette.custom must be hex colors joined by '-', e.g. '{DEFAULT_CUSTOM_PALETTE}'"
            )
        return value


class AccessibilityConfig(BaseModel):
    high_text_contrast: bool = False


class Settings(BaseModel):
    """Everything that determines how tags are colored."""

    palette: PaletteConfig = Field(default_factory=PaletteConfig)
    mix_colors: bool = True
    transition: bool = True
    accessibility: AccessibilityConfig = Field(default_factory=AccessibilityConfig)
    known_tags: dict[str, int] = Field(default_factory=dict)  # tag path -> sibling order
    tag_colors: dict[str, int] = Field(default_factory=dict)  # tag path -> pinned palette index
    version: int = CURRENT_VERSION

    def color_options(self) -> ColorOptions:
        return ColorOptions(
            is_mixing=self.mix_colors,
            is_transition=self.transition,
            high_text_contrast=self.accessibility.high_text_contrast,
        )


def _rename_legacy_keys(data: dict[str, Any]) -> None:
    for old, new in _LEGACY_KEYS.items():
        if old in data and new not in data:
            data[new] = data.pop(old)
    accessibility = data.get("accessibility")
    if isinstance(accessibility, dict) and "highTextContrast" in accessibility:
        accessibility.setdefault("high_text_contrast", accessibility.pop("highTextContrast"))


def migrate_settings(raw: dict[str, Any] | None) -> tuple[dict[str, Any], bool]:
    """Bring raw settings data up to the current version.

    Versions:
        2: the palette was a plain size number
        3: palette becomes {selected, custom, seed}; legacy chroma/lightness
           above the soft preset select the bright preset
        4: per-tag color overrides (tag_colors)

    Args:
        raw: Parsed YAML, possibly from an older version or None

    Returns:
        (migrated data, whether anything changed)

    Raises:
        ConfigError: If the version is not a number
    """
    data = dict(raw or {})
    _rename_legacy_keys(data)
    current = data.get("version") or 0
    if not isinstance(current, int):
        raise ConfigError(f"Settings version must be a number, got {current!r}")
    changed = False

    if current < 2:  # noqa: PLR2004
        if not isinstance(data.get("palette"), dict):
            data["palette"] = LEGACY_PALETTE_SIZE
        current = 2
        changed = True

    if current < 3:  # noqa: PLR2004
        if not isinstance(data.get("palette"), dict):
            palette = PaletteConfig().model_dump(mode="json")
            palette["seed"] = data.get("seed") or 0
            chroma = data.get("chroma") or 0
            lightness = data.get("lightness") or 0
            if chroma > SOFT_CHROMA or lightness > SOFT_LIGHTNESS:
                palette["selected"] = PaletteType.ADAPTIVE_BRIGHT.value
            data["palette"] = palette
        for legacy in ("chroma", "lightness", "seed"):
            data.pop(legacy, None)
        current = 3
        changed = True

    if current < 4:  # noqa: PLR2004
        data["tag_colors"] = data.get("tag_colors") or {}
        current = 4
        changed = True

    if changed:
        data["version"] = current
        logger.changes(f"Migrated settings to version {current}")
    return data, changed


def load_settings(path: Path | str) -> Settings:
    """Load, migrate and validate a settings file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the content is not valid settings
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with path.open() as f:
        try:
            raw: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse {path}: {e}") from e

    if raw is not None and not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    data, _ = migrate_settings(raw)
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e


def discover_settings_path(explicit: Path | None = None) -> Path:
    """Pick the settings file to use.

    Search order:
    1. Explicit path argument
    2. Global context (set via CLI --config)
    3. Current directory / tagtint.yaml
    """
    if explicit is not None:
        return explicit
    ctx_path = context.get_config_path()
    if ctx_path is not None:
        return ctx_path
    return Path(SETTINGS_FILENAME)


def load_or_default(path: Path) -> Settings:
    """Load settings, or defaults if the file does not exist yet."""
    if not path.exists():
        logger.debug(f"No settings at {path}, using defaults")
        return Settings()
    return load_settings(path)


def _merge_into(target: MutableMapping[str, Any], values: dict[str, Any]) -> None:
    for key, value in values.items():
        existing = target.get(key)
        if isinstance(value, dict) and isinstance(existing, MutableMapping) and value:
            for stale in [k for k in existing if k not in value]:
                del existing[stale]
            _merge_into(existing, value)
        else:
            target[key] = value


def save_settings(settings: Settings, path: Path | str) -> None:
    """Write settings, keeping comments and layout of an existing file."""
    path = Path(path)
    yaml_rt = YAML()
    yaml_rt.preserve_quotes = True  # type: ignore[assignment]

    values = settings.model_dump(mode="json")
    data: Any = None
    if path.exists():
        with path.open() as f:
            data = yaml_rt.load(f)  # type: ignore[no-untyped-call]

    if isinstance(data, MutableMapping):
        _merge_into(data, values)
        # Legacy keys were migrated on load
        for stale in [key for key in data if key not in values]:
            del data[stale]
    else:
        data = values

    with path.open("w") as f:
        yaml_rt.dump(data, f)  # type: ignore[no-untyped-call]
