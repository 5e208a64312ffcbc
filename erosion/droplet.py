"""Particle-based hydraulic erosion.

Each droplet spawns on a random cell, follows the bilinear height gradient one
cell-length per step, erodes through a precomputed radial brush while it has
spare carrying capacity and drops sediment on a single node when it slows down
or climbs. Droplets run strictly one after another: every droplet reads the
terrain the previous one left behind.
"""

from __future__ import annotations

import logging
import math
import time

import numpy as np

from erosion.border import apply_gradient
from erosion.brush import BrushCache
from erosion.config import ErosionConfig, GradientType, NormalConfig, RemapConfig
from erosion.heightfield import flat_view, sample_height_and_gradient, validate_dimensions
from erosion.metrics import DropletRunStats
from erosion.normals import get_normal
from erosion.remap import remap
from erosion.rng import RandomSource


logger = logging.getLogger(__name__)

_MIN_DIRECTION_LENGTH = 1e-4


class ErosionSimulator:
    """Owns the brush cache and random stream reused across `erode` calls."""

    def __init__(
        self,
        config: ErosionConfig | None = None,
        *,
        seed: int | None = None,
        remap_config: RemapConfig | None = None,
        normal_config: NormalConfig | None = None,
    ) -> None:
        self.config = config or ErosionConfig()
        self.remap_config = remap_config or RemapConfig()
        self.normal_config = normal_config or NormalConfig()
        self.brush = BrushCache()
        self.random = RandomSource(seed)
        self.last_run = DropletRunStats()

    def initialize_brush(self, map_size: int, radius: int) -> bool:
        return self.brush.ensure(map_size, radius)

    def gradient(
        self,
        heightfield: np.ndarray,
        map_size: int,
        normalized_offset: float,
        gradient_type: GradientType,
    ) -> None:
        apply_gradient(heightfield, map_size, normalized_offset, gradient_type)

    def remap(self, heightfield: np.ndarray, map_size: int) -> None:
        remap(heightfield, map_size, config=self.remap_config)

    def get_normal(self, heightfield: np.ndarray, map_size: int, x: int, y: int) -> np.ndarray:
        return get_normal(heightfield, map_size, x, y, strength=self.normal_config.strength)

    def erode(
        self,
        heightfield: np.ndarray,
        map_size: int,
        droplet_count: int,
        reset_seed: bool = False,
    ) -> None:
        """Simulate `droplet_count` droplets on `heightfield`, mutating it in place."""

        if droplet_count < 0:
            raise ValueError(f"droplet_count must be non-negative, got {droplet_count}")
        cfg = self.config
        validate_dimensions(map_size, cfg.erosion_radius)
        flat = flat_view(heightfield, map_size)

        self.initialize_brush(map_size, cfg.erosion_radius)
        if reset_seed:
            self.random.reseed()

        stats = DropletRunStats()
        start = time.perf_counter()
        for _ in range(droplet_count):
            x, y = self.random.spawn_cell(map_size)
            _run_droplet(flat, map_size, float(x), float(y), self.brush, cfg, stats)
        stats.seconds = time.perf_counter() - start
        self.last_run = stats

        if droplet_count:
            logger.debug(
                f"Eroded {stats.droplets} droplets on {map_size}x{map_size} in {stats.seconds:.3f}s: "
                f"{stats.steps} steps, {stats.left_map} left the map, {stats.stalled} stalled, "
                f"{stats.speed_resets} speed resets"
            )


def _run_droplet(
    heightfield: np.ndarray,
    map_size: int,
    pos_x: float,
    pos_y: float,
    brush: BrushCache,
    cfg: ErosionConfig,
    stats: DropletRunStats,
) -> None:
    stats.droplets += 1
    limit = map_size - 1
    if pos_x >= limit or pos_y >= limit:
        # Last row and column have no SE neighbours to sample from.
        stats.discarded_spawns += 1
        return

    dir_x = 0.0
    dir_y = 0.0
    speed = cfg.initial_speed
    water = cfg.initial_water_volume
    sediment = 0.0

    for _ in range(cfg.max_droplet_lifetime):
        node_x = int(pos_x)
        node_y = int(pos_y)
        droplet_index = node_y * map_size + node_x

        height, gradient_x, gradient_y = sample_height_and_gradient(heightfield, map_size, pos_x, pos_y)

        dir_x = dir_x * cfg.inertia - gradient_x * (1.0 - cfg.inertia)
        dir_y = dir_y * cfg.inertia - gradient_y * (1.0 - cfg.inertia)
        length = math.sqrt(dir_x * dir_x + dir_y * dir_y)
        if length > _MIN_DIRECTION_LENGTH:
            dir_x /= length
            dir_y /= length

        pos_x += dir_x
        pos_y += dir_y

        if dir_x == 0.0 and dir_y == 0.0:
            stats.stalled += 1
            return
        if pos_x < 0.0 or pos_x >= limit or pos_y < 0.0 or pos_y >= limit:
            stats.left_map += 1
            return
        stats.steps += 1

        new_height = sample_height_and_gradient(heightfield, map_size, pos_x, pos_y).height
        delta_height = new_height - height

        sediment_capacity = max(
            -delta_height * speed * water * cfg.sediment_capacity_factor,
            cfg.min_sediment_capacity,
        )

        if sediment > sediment_capacity or delta_height > 0.0:
            if delta_height > 0.0:
                # Climbing: try to fill the pit behind the droplet.
                amount_to_deposit = min(delta_height, sediment)
            else:
                amount_to_deposit = (sediment - sediment_capacity) * cfg.deposit_speed
            sediment -= amount_to_deposit
            # Single node, not the brush, so small pits can be filled.
            heightfield[droplet_index + map_size + 1] += amount_to_deposit
            stats.deposited += amount_to_deposit
        else:
            # Never dig deeper than the height just descended.
            amount_to_erode = min((sediment_capacity - sediment) * cfg.erode_speed, -delta_height)
            start = brush.offsets[droplet_index]
            stop = brush.offsets[droplet_index + 1]
            removed = erode_brush(
                heightfield,
                brush.indices[start:stop],
                brush.weights[start:stop],
                amount_to_erode,
            )
            sediment += removed
            stats.eroded += removed

        speed, was_reset = next_speed(speed, delta_height, cfg.gravity)
        if was_reset:
            stats.speed_resets += 1
        water *= 1.0 - cfg.evaporate_speed

    stats.expired += 1


def erode_brush(heightfield: np.ndarray, indices: np.ndarray, weights: np.ndarray, amount: float) -> float:
    """Remove ``amount * weight`` from each brush cell, never more than the cell holds.

    Returns the total removed.
    """

    current = heightfield[indices].astype(np.float64)
    removed = np.minimum(current, amount * weights)
    heightfield[indices] = current - removed
    return float(removed.sum())


def next_speed(speed: float, delta_height: float, gravity: float) -> tuple[float, bool]:
    """Return the updated speed and whether it had to be reset to zero.

    A negative or NaN radicand would leave the speed undefined; the droplet is
    stopped instead.
    """

    radicand = speed * speed + delta_height * gravity
    if radicand >= 0.0:
        return math.sqrt(radicand), False
    return 0.0, True
