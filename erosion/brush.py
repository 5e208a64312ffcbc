"""Precomputed erosion brushes."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time

import numpy as np

from erosion.heightfield import validate_dimensions


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrushEntry:
    """Neighbour cells of one cell and their normalized erosion weights."""

    indices: np.ndarray
    weights: np.ndarray

    def __len__(self) -> int:
        return int(self.indices.shape[0])


def brush_template(radius: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Offsets strictly inside the circle of `radius` with linear falloff weights.

    Offsets are ordered row by row, ``dy`` outer and ``dx`` inner.
    """

    span = np.arange(-radius, radius + 1, dtype=np.int64)
    dy, dx = np.meshgrid(span, span, indexing="ij")
    sqr_dist = dx * dx + dy * dy
    inside = sqr_dist < radius * radius
    weights = 1.0 - np.sqrt(sqr_dist[inside].astype(np.float64)) / radius
    return dx[inside], dy[inside], weights


class BrushCache:
    """Per-cell brush table for one ``(map_size, radius)`` pair.

    Entries are stored in three flat arrays: the brush of cell ``i`` is
    ``indices[offsets[i]:offsets[i + 1]]`` with matching ``weights``.
    """

    def __init__(self) -> None:
        self.map_size: int | None = None
        self.radius: int | None = None
        self.offsets = np.zeros(1, dtype=np.int64)
        self.indices = np.zeros(0, dtype=np.int32)
        self.weights = np.zeros(0, dtype=np.float32)

    def ensure(self, map_size: int, radius: int) -> bool:
        """Build the table unless it already matches; return True on rebuild."""

        if self.map_size == map_size and self.radius == radius:
            return False
        validate_dimensions(map_size, radius)

        start = time.perf_counter()
        offsets, indices, weights = _build_tables(map_size, radius)
        self.offsets = offsets
        self.indices = indices
        self.weights = weights
        self.map_size = map_size
        self.radius = radius
        logger.debug(
            f"Built erosion brush for {map_size}x{map_size}, radius {radius}: "
            f"{indices.shape[0]} entries in {time.perf_counter() - start:.3f}s"
        )
        return True

    def entry(self, cell_index: int) -> BrushEntry:
        start = self.offsets[cell_index]
        stop = self.offsets[cell_index + 1]
        return BrushEntry(self.indices[start:stop], self.weights[start:stop])

    def __len__(self) -> int:
        return int(self.offsets.shape[0] - 1)


def _row_validity(
    cy: int,
    map_size: int,
    columns: np.ndarray,
    tdx: np.ndarray,
    tdy: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    target_x = columns[:, None] + tdx[None, :]
    target_y = cy + tdy
    valid = (target_x >= 0) & (target_x < map_size) & ((target_y >= 0) & (target_y < map_size))[None, :]
    return target_x, target_y, valid


def _build_tables(map_size: int, radius: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    tdx, tdy, tweights = brush_template(radius)
    columns = np.arange(map_size, dtype=np.int64)

    # Rows are processed one at a time so scratch memory stays at map_size * template_size.
    counts = np.empty(map_size * map_size, dtype=np.int64)
    for cy in range(map_size):
        _, _, valid = _row_validity(cy, map_size, columns, tdx, tdy)
        counts[cy * map_size:(cy + 1) * map_size] = valid.sum(axis=1)

    offsets = np.zeros(map_size * map_size + 1, dtype=np.int64)
    np.cumsum(counts, out=offsets[1:])
    indices = np.empty(int(offsets[-1]), dtype=np.int32)
    weights = np.empty(int(offsets[-1]), dtype=np.float32)

    for cy in range(map_size):
        target_x, target_y, valid = _row_validity(cy, map_size, columns, tdx, tdy)
        weight_sum = np.where(valid, tweights[None, :], 0.0).sum(axis=1)

        cell, k = np.nonzero(valid)
        start = offsets[cy * map_size]
        stop = offsets[(cy + 1) * map_size]
        indices[start:stop] = target_y[k] * map_size + target_x[cell, k]
        weights[start:stop] = tweights[k] / weight_sum[cell]

    return offsets, indices, weights
