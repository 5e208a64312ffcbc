"""Heightfield validation and bilinear sampling."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np


class InvalidDimensionError(ValueError):
    """Raised when a map size, brush radius or heightfield shape cannot be simulated."""


class HeightAndGradient(NamedTuple):
    height: float
    gradient_x: float
    gradient_y: float


def validate_dimensions(map_size: int, erosion_radius: int | None = None) -> None:
    if map_size < 2:
        raise InvalidDimensionError(f"map_size must be >= 2, got {map_size}")
    if erosion_radius is not None and erosion_radius < 1:
        raise InvalidDimensionError(f"erosion_radius must be >= 1, got {erosion_radius}")


def flat_view(heightfield: np.ndarray, map_size: int) -> np.ndarray:
    """Return a 1-D view sharing memory with `heightfield`.

    Flat and square 2-D arrays are both accepted. The view must alias the
    caller's buffer, otherwise in-place edits would be silently lost, so
    non-contiguous input is rejected instead of copied.
    """

    if not isinstance(heightfield, np.ndarray):
        raise TypeError(f"heightfield must be a numpy array, got {type(heightfield).__name__}")
    if not np.issubdtype(heightfield.dtype, np.floating):
        raise TypeError(f"heightfield must have a floating dtype, got {heightfield.dtype}")
    validate_dimensions(map_size)
    if heightfield.size != map_size * map_size:
        raise InvalidDimensionError(
            f"heightfield has {heightfield.size} values, expected {map_size}x{map_size}={map_size * map_size}"
        )
    if not heightfield.flags.c_contiguous:
        raise ValueError("heightfield must be C-contiguous to be modified in place")
    return heightfield.reshape(-1)


def sample_height_and_gradient(heightfield: np.ndarray, map_size: int, x: float, y: float) -> HeightAndGradient:
    """Bilinearly interpolate height and gradient at a sub-cell position.

    The caller guarantees ``0 <= x, y < map_size - 1``; positions are not
    checked here.
    """

    coord_x = int(x)
    coord_y = int(y)
    # Offset inside the cell: (0, 0) at the NW node, (1, 1) at the SE node.
    u = x - coord_x
    v = y - coord_y

    nw_index = coord_y * map_size + coord_x
    height_nw = float(heightfield[nw_index])
    height_ne = float(heightfield[nw_index + 1])
    height_sw = float(heightfield[nw_index + map_size])
    height_se = float(heightfield[nw_index + map_size + 1])

    gradient_x = (height_ne - height_nw) * (1.0 - v) + (height_se - height_sw) * v
    gradient_y = (height_sw - height_nw) * (1.0 - u) + (height_se - height_ne) * u

    height = (
        height_nw * (1.0 - u) * (1.0 - v)
        + height_ne * u * (1.0 - v)
        + height_sw * (1.0 - u) * v
        + height_se * u * v
    )
    return HeightAndGradient(height, gradient_x, gradient_y)
