"""Beach flattening height curve."""

from __future__ import annotations

import numpy as np

from erosion.config import RemapConfig
from erosion.heightfield import flat_view


def remap_value(value: float, control_points: tuple[tuple[float, float], ...] = RemapConfig().control_points) -> float:
    """Map one height through the piecewise-linear curve.

    Negative heights and heights past the last control point are returned
    unchanged.
    """

    if value < 0.0:
        return value
    for (x0, y0), (x1, y1) in zip(control_points, control_points[1:]):
        if value < x1:
            t = (value - x0) / (x1 - x0)
            return y0 * (1.0 - t) + y1 * t
    return value


def remap(heightfield: np.ndarray, map_size: int, *, config: RemapConfig | None = None) -> None:
    """Apply the beach curve to every cell in place."""

    cfg = config or RemapConfig()
    if len(cfg.control_points) < 2:
        raise ValueError("remap needs at least two control points")
    xs = np.array([p[0] for p in cfg.control_points], dtype=np.float64)
    ys = np.array([p[1] for p in cfg.control_points], dtype=np.float64)
    if np.any(np.diff(xs) <= 0.0):
        raise ValueError("remap control points must be strictly increasing in x")

    flat = flat_view(heightfield, map_size)
    values = flat.astype(np.float64)
    curved = np.interp(values, xs, ys)
    passthrough = (values < 0.0) | (values >= xs[-1])
    flat[:] = np.where(passthrough, values, curved)
