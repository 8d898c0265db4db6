from __future__ import annotations

from collections.abc import Sequence

from promo_kit.palette.errors import InvalidColorError

RGB = tuple[int, int, int]
HSL = tuple[float, float, float]

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def hex_to_rgb(hex_color: str) -> RGB:
    """
    Parse "#rrggbb" (or "rrggbb", or "#rgb" shorthand) into 8-bit channels.
    """
    s = (hex_color or "").strip().lstrip("#")
    if len(s) == 3:
        s = "".join([c * 2 for c in s])
    if len(s) != 6 or not set(s) <= _HEX_DIGITS:
        raise InvalidColorError(f"not a hex color: {hex_color!r}")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def rgb_to_hex(rgb: Sequence[float]) -> str:
    r, g, b = (max(0, min(255, int(round(float(c))))) for c in rgb[:3])
    return f"#{r:02x}{g:02x}{b:02x}"


def normalize_hex(hex_color: str) -> str:
    return rgb_to_hex(hex_to_rgb(hex_color))


def rgb_to_hsl(rgb: Sequence[int]) -> HSL:
    """
    Standard RGB -> HSL. Hue is in turns, [0, 1); achromatic colors get h = s = 0.
    """
    r, g, b = (c / 255 for c in rgb[:3])
    hi, lo = max(r, g, b), min(r, g, b)
    lightness = (hi + lo) / 2
    d = hi - lo
    if d == 0:
        return (0.0, 0.0, lightness)

    saturation = d / (2 - hi - lo) if lightness > 0.5 else d / (hi + lo)
    if hi == r:
        hue = (g - b) / d + (6 if g < b else 0)
    elif hi == g:
        hue = (b - r) / d + 2
    else:
        hue = (r - g) / d + 4
    return ((hue / 6) % 1.0, saturation, lightness)


def hex_to_hsl(hex_color: str) -> HSL:
    return rgb_to_hsl(hex_to_rgb(hex_color))


def hue_distance(a: float, b: float) -> float:
    # Hue is circular: 0.98 and 0.01 are neighbours.
    d = abs(a - b) % 1.0
    return min(d, 1.0 - d)
