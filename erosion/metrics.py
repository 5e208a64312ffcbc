"""Erosion run statistics and heightfield summaries."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class DropletRunStats:
    """Counters collected during one `erode` call."""

    droplets: int = 0
    discarded_spawns: int = 0
    steps: int = 0
    left_map: int = 0
    stalled: int = 0
    expired: int = 0
    speed_resets: int = 0
    eroded: float = 0.0
    deposited: float = 0.0
    seconds: float = 0.0

    @property
    def lost_sediment(self) -> float:
        """Sediment still carried when droplets ended."""

        return self.eroded - self.deposited


@dataclass(frozen=True)
class HeightfieldStats:
    min_height: float
    max_height: float
    mean_height: float
    total_height: float
    negative_cells: int
    above_one_cells: int


def heightfield_stats(heightfield: np.ndarray) -> HeightfieldStats:
    """Summarize a heightfield, in float64 to keep totals comparable."""

    values = np.asarray(heightfield, dtype=np.float64)
    if values.size == 0:
        raise ValueError("heightfield must not be empty")
    return HeightfieldStats(
        min_height=float(values.min()),
        max_height=float(values.max()),
        mean_height=float(values.mean()),
        total_height=float(values.sum()),
        negative_cells=int(np.count_nonzero(values < 0.0)),
        above_one_cells=int(np.count_nonzero(values > 1.0)),
    )
