"""Custom exceptions for tagtint."""


class TagTintError(Exception):
    """Base exception for all tagtint errors."""

    pass


class ConfigError(TagTintError):
    """Raised when a settings file is invalid or cannot be migrated."""

    pass


class PaletteError(TagTintError):
    """Raised when a custom palette string is malformed."""

    pass
