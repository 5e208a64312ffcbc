"""Radial falloff applied to map borders to shape an island."""

from __future__ import annotations

import numpy as np

from erosion.config import GradientType
from erosion.heightfield import flat_view


STAR_SQUARE_BLEND = 0.7


def gradient_mask(map_size: int, gradient_type: GradientType) -> np.ndarray:
    """Return the ``(map_size, map_size)`` height multiplier for a falloff shape.

    The falloff is measured from ``(map_size / 2, map_size / 2)`` with a radius
    of ``map_size / 2``; the multiplier is ``1 - falloff``.
    """

    radius = map_size / 2.0
    yy, xx = np.indices((map_size, map_size), dtype=np.float64)
    ax = np.abs(xx - radius)
    ay = np.abs(yy - radius)

    gradient_type = GradientType(gradient_type)
    if gradient_type == GradientType.SQUARE:
        falloff = _chebyshev(ax, ay, radius)
    elif gradient_type == GradientType.DIAMOND:
        falloff = _manhattan(ax, ay, radius)
    elif gradient_type == GradientType.STAR:
        falloff = _lerp(_manhattan(ax, ay, radius), _chebyshev(ax, ay, radius), STAR_SQUARE_BLEND)
    else:
        falloff = np.minimum((ax * ax + ay * ay) / (radius * radius), 1.0)
    return 1.0 - falloff


def apply_gradient(
    heightfield: np.ndarray,
    map_size: int,
    normalized_offset: float,
    gradient_type: GradientType,
) -> None:
    """Multiply every height by the border falloff of `gradient_type`, in place.

    `normalized_offset` is accepted for call compatibility and ignored; the
    falloff is always centred on the map.
    """

    flat = flat_view(heightfield, map_size)
    flat *= gradient_mask(map_size, gradient_type).ravel()


def _chebyshev(ax: np.ndarray, ay: np.ndarray, radius: float) -> np.ndarray:
    return np.maximum(ax, ay) / radius


def _manhattan(ax: np.ndarray, ay: np.ndarray, radius: float) -> np.ndarray:
    return np.minimum((ax + ay) / radius, 1.0)


def _lerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    return a * (1.0 - t) + b * t
