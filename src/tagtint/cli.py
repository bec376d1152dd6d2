"""Command-line interface for tagtint."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from . import context
from .exceptions import TagTintError
from .logger import setup_logger
from .models import PaletteType, Theme
from .palette import generate_palettes
from .scanner import scan_notes
from .service import TagTintService
from .settings import (
    PaletteConfig,
    Settings,
    discover_settings_path,
    load_or_default,
    save_settings,
)
from .tags import tag_key

app = typer.Typer(
    name="tagtint",
    help="Distinct, theme-aware, readable colors for nested tags, rendered as CSS",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to settings file (default: tagtint.yaml)"),
    ] = None,
) -> None:
    """Global options for tagtint commands."""
    setup_logger(verbose)
    context.set_config_path(config)


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _load_settings() -> tuple[Settings, Path]:
    path = discover_settings_path()
    try:
        return load_or_default(path), path
    except TagTintError as e:
        raise _fail(str(e)) from None


def _save(settings: Settings, path: Path) -> None:
    try:
        save_settings(settings, path)
    except OSError as e:
        raise _fail(f"Cannot write {path}: {e}") from None


def _parse_orders(pairs: list[str] | None) -> dict[str, int]:
    orders: dict[str, int] = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        key = tag_key(name)
        if not sep or not key:
            raise _fail(f"Invalid --order '{pair}', expected TAG=N")
        try:
            orders[key] = int(value)
        except ValueError:
            raise _fail(f"Invalid --order '{pair}': '{value}' is not a number") from None
    return orders


def _palette_config(
    base: PaletteConfig,
    selected: PaletteType | None,
    custom: str | None,
    seed: int | None,
) -> PaletteConfig:
    updates = {
        key: value
        for key, value in (("selected", selected), ("custom", custom), ("seed", seed))
        if value is not None
    }
    try:
        return PaletteConfig.model_validate({**base.model_dump(), **updates})
    except ValidationError as e:
        raise _fail(f"Invalid palette options: {e}") from None


SelectedOption = Annotated[
    PaletteType | None, typer.Option("--selected", help="Palette recipe to use")
]
CustomOption = Annotated[
    str | None, typer.Option("--custom", help="Custom palette, e.g. 'e12729-f37324-f8cc1b'")
]
SeedOption = Annotated[
    int | None, typer.Option("--seed", min=0, help="Rotate the palette by this many colors")
]


@app.command()
def init(
    path: Annotated[Path | None, typer.Argument(help="Settings file to create")] = None,
    *,
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing file")] = False,
) -> None:
    """Write a settings file with default values."""
    target = path or discover_settings_path()
    if target.exists() and not force:
        raise _fail(f"{target} already exists (use --force to overwrite)")
    if force and target.exists():
        target.unlink()
    _save(Settings(), target)
    typer.echo(f"Settings written to {target}")


@app.command()
def palette(
    selected: SelectedOption = None,
    custom: CustomOption = None,
    seed: SeedOption = None,
    theme: Annotated[
        Theme | None, typer.Option("--theme", help="Only show one theme's palette")
    ] = None,
) -> None:
    """Print the palettes generated for the current (or given) palette options."""
    settings, _ = _load_settings()
    config = _palette_config(settings.palette, selected, custom, seed)
    palettes = generate_palettes(config)

    themes = [theme] if theme else [Theme.LIGHT, Theme.DARK]
    for current in themes:
        typer.echo(f"{current.value}:")
        for index, value in enumerate(palettes.for_theme(current)):
            typer.echo(f"  {index}: {value}")


@app.command()
def color(
    tag: Annotated[str, typer.Argument(help="Tag path, e.g. 'project/alpha'")],
    *,
    theme: Annotated[Theme, typer.Option("--theme", help="Palette theme")] = Theme.LIGHT,
    order: Annotated[
        list[str] | None,
        typer.Option("--order", help="Sibling order override TAG=N (repeatable)"),
    ] = None,
) -> None:
    """Show the colors a tag gets."""
    settings, _ = _load_settings()
    orders = _parse_orders(order)
    if orders:
        known = {tag_key(name): value for name, value in settings.known_tags.items()}
        settings.known_tags = {**known, **orders}

    service = TagTintService(settings)
    try:
        result = service.colors_for(tag, theme)
    except ValueError as e:
        raise _fail(str(e)) from None

    typer.echo(f"background: {result.background}")
    typer.echo(f"color: {result.color}")
    typer.echo("gradient:")
    for stop in result.linear_gradient:
        typer.echo(f"  {stop}")


@app.command()
def scan(
    notes_dir: Annotated[Path, typer.Argument(help="Directory of Markdown notes")],
    *,
    save: Annotated[
        bool, typer.Option("--save/--no-save", help="Store newly seen tags in the settings")
    ] = False,
) -> None:
    """List the tags found in notes with their sibling order."""
    settings, path = _load_settings()
    try:
        counts = scan_notes(notes_dir)
    except FileNotFoundError as e:
        raise _fail(str(e)) from None

    service = TagTintService(settings)
    changed = service.observe_tags(counts)
    tags_map = service.tag_manager.tags_map
    for name, count in counts.items():
        key = name.lower()
        typer.echo(f"{key}\torder={tags_map.get(key, 0)}\tcount={count}")

    if save and changed:
        _save(settings, path)
        typer.echo(f"Known tags saved to {path}")


@app.command()
def css(
    notes_dir: Annotated[Path, typer.Argument(help="Directory of Markdown notes")],
    *,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
    save: Annotated[
        bool, typer.Option("--save/--no-save", help="Store newly seen tags in the settings")
    ] = True,
) -> None:
    """Generate the stylesheet for every tag found in notes."""
    settings, path = _load_settings()
    try:
        counts = scan_notes(notes_dir)
    except FileNotFoundError as e:
        raise _fail(str(e)) from None

    service = TagTintService(settings)
    changed = service.observe_tags(counts)
    service.reload()
    stylesheet = service.stylesheet()

    if save and changed:
        _save(settings, path)

    if output:
        output.write_text(stylesheet, encoding="utf-8")
        typer.echo(f"Stylesheet written to {output}")
    else:
        typer.echo(stylesheet)


@app.command("set-palette")
def set_palette(
    selected: SelectedOption = None,
    custom: CustomOption = None,
    seed: SeedOption = None,
) -> None:
    """Change the palette and move pinned tag colors to their closest match."""
    settings, path = _load_settings()
    config = _palette_config(settings.palette, selected, custom, seed)

    service = TagTintService(settings)
    service.reload()
    changed = service.apply_palette_config(config)
    _save(settings, path)

    if changed:
        typer.echo(
            f"Palette set to {config.selected.value}; "
            f"{len(settings.tag_colors)} pinned tags remapped"
        )
    else:
        typer.echo("Palette unchanged")


@app.command()
def pin(
    tag: Annotated[str, typer.Argument(help="Tag path")],
    index: Annotated[int, typer.Argument(help="Palette index (wraps around the palette)")],
) -> None:
    """Pin a tag to a palette color."""
    settings, path = _load_settings()
    service = TagTintService(settings)
    try:
        service.set_tag_color(tag, index)
    except ValueError as e:
        raise _fail(str(e)) from None
    _save(settings, path)
    typer.echo(f"Pinned {tag} to palette index {index}")


@app.command()
def unpin(tag: Annotated[str, typer.Argument(help="Tag path")]) -> None:
    """Let a pinned tag go back to its automatic color."""
    settings, path = _load_settings()
    service = TagTintService(settings)
    if not service.clear_tag_color(tag):
        raise _fail(f"{tag} has no pinned color")
    _save(settings, path)
    typer.echo(f"Unpinned {tag}")


def main() -> int:
    """Main entry point."""
    app()
    return 0


if __name__ == "__main__":
    main()
