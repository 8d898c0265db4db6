from __future__ import annotations


class PaletteError(Exception):
    """Base class for palette and color-role errors."""


class InvalidParameterError(PaletteError, ValueError):
    """A caller passed an unusable parameter (e.g. a non-positive cluster count)."""


class InvalidColorError(PaletteError, ValueError):
    """A color string could not be parsed as #rrggbb / #rgb."""


class ImageLoadError(PaletteError):
    """An image source could not be fetched or decoded."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason
