"""
Fixed-round k-means over RGB pixel samples.
"""

from __future__ import annotations

import numpy as np

from promo_kit.palette.errors import InvalidParameterError

NEUTRAL_GRAY = (200, 200, 200)

# Elements (rows * k) per distance-matrix block; keeps each block near 24 MB of float64 whatever k is.
_ASSIGN_BUDGET = 1 << 20


def validate_k(k: int) -> int:
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise InvalidParameterError(f"cluster count must be an integer, got {k!r}")
    if k <= 0:
        raise InvalidParameterError(f"cluster count must be >= 1, got {k}")
    return int(k)


def kmeans(
    pixels: np.ndarray,
    k: int,
    iterations: int = 8,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Cluster RGB samples into exactly ``k`` integer centroids.

    Centroids are seeded by drawing ``k`` pixels uniformly with replacement,
    then refined for exactly ``iterations`` rounds (no convergence test).
    A centroid that attracts no pixels in a round keeps its previous value.

    Args:
        pixels: Array of shape (N, 3) with channel values in [0, 255].
        k: Number of centroids to return.
        iterations: Number of assign/update rounds.
        rng: Random generator used for seeding. A fresh unseeded generator is
            used when omitted, so results vary between runs.

    Returns:
        Array of shape (k, 3), dtype int, in centroid index order.
    """
    k = validate_k(k)
    data = np.asarray(pixels, dtype=np.float64).reshape(-1, 3)
    if len(data) == 0:
        return np.tile(np.array(NEUTRAL_GRAY, dtype=np.int64), (k, 1))

    if rng is None:
        rng = np.random.default_rng()
    centroids = data[rng.integers(0, len(data), size=k)].copy()

    for _ in range(max(0, int(iterations))):
        labels = assign_labels(data, centroids)
        counts = np.bincount(labels, minlength=k)
        sums = np.zeros((k, 3), dtype=np.float64)
        np.add.at(sums, labels, data)

        filled = counts > 0
        # Round half up, per channel.
        centroids[filled] = np.floor(sums[filled] / counts[filled, None] + 0.5)

    return centroids.astype(np.int64)


def assign_labels(data: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the nearest centroid (squared Euclidean) for every row of ``data``.

    ``argmin`` returns the first minimum, so ties go to the lowest centroid index.
    """
    labels = np.empty(len(data), dtype=np.int64)
    rows = max(1, _ASSIGN_BUDGET // max(1, len(centroids)))
    for start in range(0, len(data), rows):
        block = data[start : start + rows]
        d2 = ((block[:, np.newaxis, :] - centroids[np.newaxis, :, :]) ** 2).sum(axis=2)
        labels[start : start + len(block)] = np.argmin(d2, axis=1)
    return labels
