"""Error types raised at the input boundary (profiles, catalog, config).

The generation pipeline itself degrades gracefully and does not raise for
thin or empty exercise pools.
"""


class SpotterError(Exception):
    """Base class for all Spotter errors."""


class ProfileValidationError(SpotterError, ValueError):
    """A user profile field is missing, out of range, or not a known value."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class CatalogError(SpotterError):
    """The exercise catalog or safety tag table could not be loaded."""


class ConfigError(SpotterError):
    """The configuration file is unreadable or malformed."""
