"""
Image-source loading for palette extraction.

A source is raw bytes, a local path, an http(s) URL, a base64 ``data:`` URL,
or an already-decoded Pillow image. Everything comes back as an RGB image.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from io import BytesIO
from pathlib import Path
from typing import Union

import httpx
from PIL import Image, UnidentifiedImageError

from promo_kit.config import settings
from promo_kit.palette.errors import ImageLoadError

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path, Image.Image]


def describe_source(source: ImageSource) -> str:
    """Short, log-safe description of a source (never the full payload)."""
    if isinstance(source, Image.Image):
        return f"<image {source.size[0]}x{source.size[1]}>"
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    text = str(source)
    if text.startswith("data:"):
        return f"{text.split(',', 1)[0]},..."
    if len(text) > 160:
        return text[:157] + "..."
    return text


def _is_url(text: str) -> bool:
    lowered = text[:8].lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def _decode_data_url(text: str) -> bytes:
    header, sep, payload = text.partition(",")
    if not sep or ";base64" not in header:
        raise ImageLoadError(describe_source(text), "only base64 data URLs are supported")
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise ImageLoadError(describe_source(text), f"bad base64 payload: {exc}") from exc


def decode_image(raw: bytes, label: str = "<bytes>") -> Image.Image:
    if not raw:
        raise ImageLoadError(label, "empty payload")
    try:
        img = Image.open(BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageLoadError(label, f"decode failed: {exc}") from exc
    return img.convert("RGB")


async def fetch_url(url: str, client: httpx.AsyncClient) -> bytes:
    """
    GET an image, reading at most `settings.image_max_bytes`. Oversize bodies are
    rejected from Content-Length when present, otherwise as soon as the running
    total passes the limit.
    """
    label = describe_source(url)
    limit = settings.image_max_bytes
    try:
        async with client.stream(
            "GET",
            url,
            timeout=settings.image_fetch_timeout_s,
            headers={"User-Agent": settings.image_fetch_user_agent},
            follow_redirects=True,
        ) as resp:
            if resp.status_code < 200 or resp.status_code >= 300:
                raise ImageLoadError(label, f"HTTP {resp.status_code}")

            declared = resp.headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > limit:
                raise ImageLoadError(label, f"payload too large ({declared} bytes declared)")

            buf = bytearray()
            async for chunk in resp.aiter_bytes():
                buf.extend(chunk)
                if len(buf) > limit:
                    raise ImageLoadError(label, f"payload too large (over {limit} bytes)")
    except httpx.HTTPError as exc:
        raise ImageLoadError(label, f"request failed: {exc}") from exc
    return bytes(buf)


async def load_image(source: ImageSource, client: httpx.AsyncClient) -> Image.Image:
    """Fetch (if needed) and decode one source into an RGB image.

    Raises:
        ImageLoadError: the source could not be read, fetched or decoded.
    """
    label = describe_source(source)

    if isinstance(source, Image.Image):
        return source.convert("RGB")

    if isinstance(source, (bytes, bytearray)):
        raw = bytes(source)
    elif isinstance(source, str) and _is_url(source):
        raw = await fetch_url(source, client)
    elif isinstance(source, str) and source.startswith("data:"):
        raw = _decode_data_url(source)
    elif isinstance(source, (str, Path)):
        try:
            raw = await asyncio.to_thread(Path(source).read_bytes)
        except OSError as exc:
            raise ImageLoadError(label, f"read failed: {exc}") from exc
    else:
        raise ImageLoadError(label, f"unsupported source type {type(source).__name__}")

    # Pillow decoding is CPU bound; keep it off the event loop.
    img = await asyncio.to_thread(decode_image, raw, label)
    logger.debug("loaded %s (%dx%d)", label, img.size[0], img.size[1])
    return img
