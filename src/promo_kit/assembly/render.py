from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from promo_kit.palette.colors import hex_to_rgb, normalize_hex, rgb_to_hsl
from promo_kit.palette.roles import ColorRoles, assign_roles

_ROLE_TAGS = (("primary", "BRAND"), ("accent", "ACCENT"), ("neutral", "NEUTRAL"))


@dataclass(frozen=True)
class RenderedPalette:
    image: Image.Image
    roles: ColorRoles

    def to_png_bytes(self) -> bytes:
        buf = BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()


def render_palette_strip(
    palette: Sequence[str],
    roles: ColorRoles | None = None,
    swatch: tuple[int, int] = (120, 120),
    gap: int = 12,
    background_hex: str = "#ffffff",
) -> RenderedPalette:
    """
    Deterministic palette card for the export document:
    - one swatch per color, left to right in palette order
    - hex label under each swatch
    - role tag (BRAND / ACCENT / NEUTRAL) under swatches picked for a role

    An empty palette renders a "Palette not ready" placeholder card.
    """
    roles = roles or assign_roles(palette)
    role_hex = {field: normalize_hex(getattr(roles, field)) for field, _ in _ROLE_TAGS}
    sw, sh = swatch
    pad = max(8, gap)
    label_h = max(18, int(sh * 0.22))
    tag_h = max(16, int(sh * 0.18))

    count = max(1, len(palette))
    width = pad * 2 + count * sw + (count - 1) * gap
    height = pad * 2 + sh + label_h + tag_h

    base = Image.new("RGB", (width, height), hex_to_rgb(background_hex))
    draw = ImageDraw.Draw(base)
    label_font = _load_font(max(11, int(label_h * 0.7)))
    tag_font = _load_font(max(10, int(tag_h * 0.65)))

    if not palette:
        draw.rounded_rectangle([(pad, pad), (pad + sw, pad + sh)], radius=10, outline=(180, 180, 190), width=2)
        _draw_centered(draw, "Palette not ready", (pad, pad + sh + 4, width - pad, height - pad), label_font, (120, 130, 150))
        return RenderedPalette(image=base, roles=roles)

    for i, raw_hex in enumerate(palette):
        hex_color = normalize_hex(raw_hex)
        rgb = hex_to_rgb(hex_color)
        x1 = pad + i * (sw + gap)
        y1 = pad
        draw.rounded_rectangle([(x1, y1), (x1 + sw, y1 + sh)], radius=max(4, int(sw * 0.08)), fill=rgb)
        # Light swatches need an outline to stay visible on a white card.
        if rgb_to_hsl(rgb)[2] > 0.9:
            draw.rounded_rectangle(
                [(x1, y1), (x1 + sw, y1 + sh)], radius=max(4, int(sw * 0.08)), outline=(210, 210, 215), width=1
            )

        label_box = (x1, y1 + sh + 2, x1 + sw, y1 + sh + label_h)
        _draw_centered(draw, hex_color, label_box, label_font, (40, 40, 48))

        tags = [tag for field, tag in _ROLE_TAGS if role_hex[field] == hex_color]
        if tags:
            tag_box = (x1, y1 + sh + label_h, x1 + sw, y1 + sh + label_h + tag_h)
            _draw_centered(draw, " / ".join(tags), tag_box, tag_font, hex_to_rgb(roles.primary))

    return RenderedPalette(image=base, roles=roles)


def _draw_centered(
    draw: ImageDraw.ImageDraw,
    text: str,
    box: tuple[int, int, int, int],
    font,
    fill,
) -> None:
    x1, y1, x2, y2 = box
    try:
        bbox = draw.textbbox((0, 0), text, font=font)
        tw = bbox[2] - bbox[0]
        th = bbox[3] - bbox[1]
    except Exception:
        tw, th = (0, 0)
    tx = x1 + max(0, (x2 - x1 - tw) // 2)
    ty = y1 + max(0, (y2 - y1 - th) // 2)
    draw.text((tx, ty), text, font=font, fill=fill)


def _load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Prefer a TTF font (system or bundled). If we can't find one, fall back to the
    default bitmap font (which is small and not ideal, but avoids crashing).
    """
    candidates: list[str] = [
        "assets/fonts/DejaVuSans.ttf",
        "assets/fonts/Inter-Regular.ttf",
        "/System/Library/Fonts/Supplemental/Arial.ttf",
        "/Library/Fonts/Arial.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "C:\\Windows\\Fonts\\arial.ttf",
    ]
    for c in candidates:
        p = Path(c)
        if p.exists():
            try:
                return ImageFont.truetype(str(p), size=size)
            except OSError:
                continue
    return ImageFont.load_default()
