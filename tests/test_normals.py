from __future__ import annotations

import numpy as np
import pytest

from erosion.noise import fractal_heightmap
from erosion.normals import get_normal, normal_map, slope_map
from erosion.rng import make_generator


def test_flat_map_normals_point_up() -> None:
    size = 12
    field = np.full(size * size, 0.37, dtype=np.float32)

    for y in range(size):
        for x in range(size):
            np.testing.assert_allclose(get_normal(field, size, x, y), [0.0, 1.0, 0.0], atol=1e-9)

    normals = normal_map(field, size)
    np.testing.assert_allclose(normals[..., 1], 1.0, atol=1e-9)
    assert float(np.abs(slope_map(field, size)).max()) < 1e-9


def test_normal_tilts_away_from_rising_ground() -> None:
    size = 16
    yy, xx = np.indices((size, size), dtype=np.float64)
    field = (0.01 * xx).astype(np.float32).ravel()

    normal = get_normal(field, size, 8, 8)

    assert normal.shape == (3,)
    assert np.linalg.norm(normal) == pytest.approx(1.0)
    assert normal[0] < 0.0
    assert normal[2] == pytest.approx(0.0, abs=1e-6)
    # Sobel dX on a 0.01 ramp is 0.08, against an up component of 1/20.
    expected = np.array([-0.08, 0.05, 0.0])
    np.testing.assert_allclose(normal, expected / np.linalg.norm(expected), atol=1e-5)


def test_normal_map_matches_pointwise_estimator() -> None:
    size = 24
    field = fractal_heightmap(size, make_generator(3), base_res=2, octaves=3)

    normals = normal_map(field, size)
    for y in range(size):
        for x in range(size):
            np.testing.assert_allclose(normals[y, x], get_normal(field, size, x, y), atol=1e-6)


def test_edge_cells_replicate_boundary() -> None:
    size = 8
    yy, xx = np.indices((size, size), dtype=np.float64)
    field = (0.02 * yy).astype(np.float32).ravel()

    corner = get_normal(field, size, 0, 0)
    # Clamped rows: top uses rows (0, 0, 1), so dY is half the interior value.
    interior = get_normal(field, size, 4, 4)
    assert corner[2] < 0.0
    assert abs(corner[2]) < abs(interior[2])


def test_custom_strength_flattens_or_steepens() -> None:
    size = 10
    yy, xx = np.indices((size, size), dtype=np.float64)
    field = (0.05 * xx).astype(np.float32).ravel()

    soft = get_normal(field, size, 5, 5, strength=1.0)
    hard = get_normal(field, size, 5, 5, strength=100.0)
    assert soft[1] > hard[1]
