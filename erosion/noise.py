"""Fractal value noise for initial island heightmaps."""

from __future__ import annotations

import numpy as np


def _smoothstep(t: np.ndarray) -> np.ndarray:
    return t * t * (3.0 - 2.0 * t)


def value_noise_2d(size: int, rng: np.random.Generator, *, res: int) -> np.ndarray:
    """Square value noise in [-1, 1] interpolated from a ``(res + 1)^2`` lattice."""

    if size <= 0:
        raise ValueError("size must be positive")
    if res < 1:
        raise ValueError("res must be >= 1")

    lattice = rng.uniform(-1.0, 1.0, size=(res + 1, res + 1)).astype(np.float32)
    coords = np.linspace(0.0, float(res), num=size, endpoint=False, dtype=np.float32)
    i0 = np.floor(coords).astype(np.int32)
    i1 = np.minimum(i0 + 1, res)
    t = _smoothstep(coords - i0)

    top = lattice[i0[:, None], i0[None, :]] * (1.0 - t[None, :]) + lattice[i0[:, None], i1[None, :]] * t[None, :]
    bottom = lattice[i1[:, None], i0[None, :]] * (1.0 - t[None, :]) + lattice[i1[:, None], i1[None, :]] * t[None, :]
    return (top * (1.0 - t[:, None]) + bottom * t[:, None]).astype(np.float32)


def fractal_heightmap(
    map_size: int,
    rng: np.random.Generator,
    *,
    base_res: int = 4,
    octaves: int = 6,
    lacunarity: float = 2.0,
    gain: float = 0.5,
) -> np.ndarray:
    """Flat row-major fBm heightmap rescaled to exactly span [0, 1]."""

    if octaves < 1:
        raise ValueError("octaves must be >= 1")

    field = np.zeros((map_size, map_size), dtype=np.float32)
    amplitude = 1.0
    for octave in range(octaves):
        res = max(1, int(round(base_res * lacunarity**octave)))
        field += amplitude * value_noise_2d(map_size, rng, res=res)
        amplitude *= gain

    lo = float(field.min())
    hi = float(field.max())
    if hi - lo < 1e-12:
        return np.zeros(map_size * map_size, dtype=np.float32)
    return ((field - lo) / (hi - lo)).astype(np.float32).ravel()
