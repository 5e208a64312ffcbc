from __future__ import annotations

import numpy as np
import pytest

from erosion.brush import BrushCache, brush_template
from erosion.heightfield import InvalidDimensionError


def test_brush_weights_are_normalized_and_indices_valid() -> None:
    cache = BrushCache()
    cache.ensure(24, 4)

    assert len(cache) == 24 * 24
    for cell in range(len(cache)):
        entry = cache.entry(cell)
        assert len(entry) > 0
        assert np.all(entry.weights >= 0.0)
        assert abs(float(entry.weights.sum()) - 1.0) < 1e-5
        assert int(entry.indices.min()) >= 0
        assert int(entry.indices.max()) < 24 * 24


def test_brush_template_is_strict_circle_with_linear_falloff() -> None:
    dx, dy, weights = brush_template(3)

    assert np.all(dx * dx + dy * dy < 9)
    # 25 lattice points lie strictly inside a circle of radius 3.
    assert dx.shape[0] == 25
    centre = int(np.flatnonzero((dx == 0) & (dy == 0))[0])
    assert weights[centre] == pytest.approx(1.0)
    assert weights[centre] == weights.max()
    np.testing.assert_allclose(weights, 1.0 - np.sqrt(dx * dx + dy * dy) / 3.0)


def test_interior_entry_matches_template_and_edges_are_trimmed() -> None:
    size, radius = 20, 3
    cache = BrushCache()
    cache.ensure(size, radius)
    dx, dy, weights = brush_template(radius)

    interior = cache.entry(10 * size + 10)
    expected_indices = (10 + dy) * size + (10 + dx)
    assert np.array_equal(interior.indices, expected_indices)
    np.testing.assert_allclose(interior.weights, weights / weights.sum(), rtol=1e-6)

    corner = cache.entry(0)
    assert len(corner) < len(interior)
    ys, xs = np.divmod(corner.indices, size)
    assert np.all(xs < radius) and np.all(ys < radius)
    assert corner.indices[0] == 0
    assert corner.weights[0] == corner.weights.max()


def test_ensure_is_idempotent_and_rebuilds_on_change() -> None:
    cache = BrushCache()

    assert cache.ensure(16, 3) is True
    indices = cache.indices
    assert cache.ensure(16, 3) is False
    assert cache.indices is indices

    assert cache.ensure(16, 4) is True
    assert cache.radius == 4
    assert cache.ensure(18, 4) is True
    assert len(cache) == 18 * 18


def test_brush_wider_than_map_still_covers_every_cell() -> None:
    cache = BrushCache()
    cache.ensure(9, 6)

    for cell in range(81):
        entry = cache.entry(cell)
        assert cell in entry.indices
        assert abs(float(entry.weights.sum()) - 1.0) < 1e-5


@pytest.mark.parametrize(("map_size", "radius"), [(1, 3), (16, 0), (0, 1)])
def test_invalid_dimensions_are_rejected(map_size: int, radius: int) -> None:
    with pytest.raises(InvalidDimensionError):
        BrushCache().ensure(map_size, radius)


def test_tables_use_compact_dtypes() -> None:
    cache = BrushCache()
    cache.ensure(32, 4)
    entries = int(cache.offsets[-1])

    assert cache.indices.dtype == np.int32
    assert cache.weights.dtype == np.float32
    assert cache.indices.shape[0] == entries == cache.weights.shape[0]
    # Four bytes per index plus four per weight.
    assert cache.indices.nbytes + cache.weights.nbytes == 8 * entries
