"""
Semantic color roles (primary / accent / neutral) derived from a palette.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass

from promo_kit.palette.colors import hex_to_hsl, hue_distance

MIDTONE_MIN = 0.25
MIDTONE_MAX = 0.75


@dataclass(frozen=True)
class ColorRoles:
    primary: str
    accent: str
    neutral: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


FALLBACK_ROLES = ColorRoles(primary="#5468ff", accent="#ff4d6d", neutral="#111827")


def assign_roles(palette: Sequence[str]) -> ColorRoles:
    """
    Pick primary, accent and neutral colors out of a palette.

    - primary: most saturated color in the midtone band (0.25 < L < 0.75),
      ties to lightness nearest 0.5; palette[0] when nothing is a midtone.
    - accent: color whose hue is circularly farthest from the primary's.
    - neutral: darkest color.

    Remaining ties go to palette order. Every role is returned exactly as it
    appears in the palette; an empty palette gets FALLBACK_ROLES.

    Raises:
        InvalidColorError: a palette entry is not a hex color.
    """
    if not palette:
        return FALLBACK_ROLES

    colors = list(palette)
    hsl = [hex_to_hsl(c) for c in colors]

    midtones = [i for i, (_, _, l) in enumerate(hsl) if MIDTONE_MIN < l < MIDTONE_MAX]
    if midtones:
        p = min(midtones, key=lambda i: (-hsl[i][1], abs(hsl[i][2] - 0.5), i))
    else:
        p = 0
    primary_hue = hsl[p][0]

    if len(colors) < 2:
        a = p
    else:
        a = min(range(len(colors)), key=lambda i: (-hue_distance(hsl[i][0], primary_hue), i))

    n = min(range(len(colors)), key=lambda i: (hsl[i][2], i))

    return ColorRoles(primary=colors[p], accent=colors[a], neutral=colors[n])


def theme_css_vars(roles: ColorRoles) -> dict[str, str]:
    # CSS custom properties the UI and exported document theme themselves from.
    return {"--brand": roles.primary, "--accent": roles.accent, "--neutral": roles.neutral}
