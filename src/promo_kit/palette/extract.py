from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Any

import httpx
import numpy as np
from PIL import Image

from promo_kit.config import settings
from promo_kit.palette.colors import rgb_to_hex
from promo_kit.palette.kmeans import kmeans, validate_k
from promo_kit.palette.sources import ImageSource, describe_source, load_image

logger = logging.getLogger(__name__)


def sample_pixels(images: Iterable[Image.Image], size: tuple[int, int] | None = None) -> np.ndarray:
    """
    Downsample every image to a fixed raster and pool all of its pixels.

    Returns an (N, 3) uint8 array; N is 0 when no images are given.
    """
    size = tuple(size or settings.palette_sample_size)
    chunks: list[np.ndarray] = []
    for img in images:
        small = img.convert("RGB").resize(size, Image.Resampling.BILINEAR)
        chunks.append(np.asarray(small, dtype=np.uint8).reshape(-1, 3))
    if not chunks:
        return np.empty((0, 3), dtype=np.uint8)
    return np.concatenate(chunks, axis=0)


async def _load_all(sources: Sequence[ImageSource], client: httpx.AsyncClient | None) -> list[Any]:
    if client is not None:
        return await asyncio.gather(*(load_image(src, client) for src in sources), return_exceptions=True)
    # The owned client lives exactly as long as the loads it serves.
    async with httpx.AsyncClient() as owned:
        return await asyncio.gather(*(load_image(src, owned) for src in sources), return_exceptions=True)


async def load_images(
    sources: Sequence[ImageSource],
    client: httpx.AsyncClient | None = None,
) -> list[Image.Image]:
    """
    Load sources concurrently. Failures are logged and dropped; order of the
    survivors follows the input order. Without a `client`, one is opened and
    closed around the loads.
    """
    if not sources:
        return []

    # Shielded so a cancelled caller leaves in-flight loads to finish; their results are dropped.
    results = await asyncio.shield(_load_all(sources, client))

    images: list[Image.Image] = []
    for src, res in zip(sources, results):
        if isinstance(res, BaseException):
            logger.warning("skipping image %s: %s", describe_source(src), res)
            continue
        images.append(res)
    return images


async def extract_palette(
    sources: Sequence[ImageSource],
    k: int | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    rng: np.random.Generator | None = None,
) -> list[str]:
    """Extract a ``k``-color palette summarizing all sources combined.

    Only the first ``settings.palette_max_images`` sources are used. Sources
    that fail to load are skipped; if none load, every slot is the neutral
    gray ``#c8c8c8``.

    Args:
        sources: Image sources (bytes, paths, URLs, data URLs, Pillow images).
        k: Number of colors; defaults to ``settings.palette_default_k``.
        client: Optional shared HTTP client for URL sources. When omitted a
            client is created and closed for this call.
        rng: Optional random generator for centroid seeding (pass a seeded
            one for reproducible output).

    Returns:
        ``k`` lowercase ``#rrggbb`` strings, in centroid index order.

    Raises:
        InvalidParameterError: ``k`` is not a positive integer.
    """
    k = validate_k(settings.palette_default_k if k is None else k)
    picked = list(sources or [])[: settings.palette_max_images]

    images = await load_images(picked, client)

    pixels = sample_pixels(images)
    if picked and not images:
        logger.warning("no usable images out of %d; returning neutral palette", len(picked))

    centroids = kmeans(pixels, k, iterations=settings.palette_iterations, rng=rng)
    palette = [rgb_to_hex(c) for c in centroids]
    logger.info("extracted %d colors from %d/%d images", k, len(images), len(picked))
    return palette
