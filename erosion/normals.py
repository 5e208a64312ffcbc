"""Sobel terrain normals for slope-aware placement."""

from __future__ import annotations

import numpy as np
from scipy.ndimage import correlate

from erosion.config import NormalConfig
from erosion.heightfield import flat_view


_SOBEL_X = np.array(
    [
        [-1.0, 0.0, 1.0],
        [-2.0, 0.0, 2.0],
        [-1.0, 0.0, 1.0],
    ]
)
_SOBEL_Y = _SOBEL_X.T.copy()


def get_normal(
    heightfield: np.ndarray,
    map_size: int,
    x: int,
    y: int,
    *,
    strength: float = NormalConfig().strength,
) -> np.ndarray:
    """Unit normal ``(x, y, z)`` at cell ``(x, y)``, y pointing up.

    Neighbour coordinates are clamped to the map. The right neighbour clamps
    its row against ``map_size`` rather than ``map_size - 1``, matching the
    terrain shader this mirrors; it only differs for rows outside the map.
    """

    flat = flat_view(heightfield, map_size)
    last = map_size - 1

    def at(u: int, v: int, v_limit: int = last) -> float:
        u = min(max(u, 0), last)
        v = min(max(v, 0), v_limit)
        return float(flat[v * map_size + u])

    bl = at(x - 1, y + 1)
    b = at(x, y + 1)
    br = at(x + 1, y + 1)
    left = at(x - 1, y)
    right = at(x + 1, y, map_size)
    tl = at(x - 1, y - 1)
    t = at(x, y - 1)
    tr = at(x + 1, y - 1)

    dx = tr + 2.0 * right + br - tl - 2.0 * left - bl
    dy = bl + 2.0 * b + br - tl - 2.0 * t - tr

    normal = np.array([-dx, 1.0 / strength, -dy], dtype=np.float64)
    return normal / np.linalg.norm(normal)


def normal_map(heightfield: np.ndarray, map_size: int, *, strength: float = NormalConfig().strength) -> np.ndarray:
    """Normals for every cell as a ``(map_size, map_size, 3)`` array."""

    grid = flat_view(heightfield, map_size).reshape(map_size, map_size).astype(np.float64)
    dx = correlate(grid, _SOBEL_X, mode="nearest")
    dy = correlate(grid, _SOBEL_Y, mode="nearest")

    normals = np.stack((-dx, np.full_like(grid, 1.0 / strength), -dy), axis=-1)
    normals /= np.linalg.norm(normals, axis=-1, keepdims=True)
    return normals


def slope_map(heightfield: np.ndarray, map_size: int, *, strength: float = NormalConfig().strength) -> np.ndarray:
    """Slope as ``1 - normal.y``: 0 on flat ground, approaching 1 on cliffs."""

    return 1.0 - normal_map(heightfield, map_size, strength=strength)[..., 1]
