"""Interactive island session driving the erosion core."""

from __future__ import annotations

from collections.abc import Iterator
import logging
import time

import numpy as np

from erosion.config import GradientType, SimulatorConfig
from erosion.droplet import ErosionSimulator
from erosion.heightfield import InvalidDimensionError, flat_view
from erosion.metrics import HeightfieldStats, heightfield_stats
from erosion.noise import fractal_heightmap
from erosion.rng import derive_seed, make_generator


logger = logging.getLogger(__name__)


class IslandSession:
    """Holds one island heightmap and the simulator that erodes it.

    `initial_heightmap` is kept untouched so the island can be reshaped with a
    different border gradient without regenerating noise.
    """

    def __init__(
        self,
        config: SimulatorConfig | None = None,
        *,
        seed: int | None = None,
        initial_heightmap: np.ndarray | None = None,
    ) -> None:
        self.config = config or SimulatorConfig()
        island = self.config.island
        self.map_size = island.map_size

        if initial_heightmap is None:
            noise_seed = derive_seed(seed if seed is not None else time.time_ns(), "heightmap")
            initial_heightmap = fractal_heightmap(
                self.map_size,
                make_generator(noise_seed),
                base_res=island.noise_base_res,
                octaves=island.noise_octaves,
            )
        try:
            base = flat_view(initial_heightmap, self.map_size)
        except InvalidDimensionError as exc:
            raise InvalidDimensionError(f"initial heightmap does not match map_size {self.map_size}: {exc}") from exc

        self.initial_heightmap = base.astype(np.float32, copy=True)
        self.heightmap = self.initial_heightmap.copy()
        erosion_seed = derive_seed(seed, "droplets") if seed is not None else None
        self.simulator = ErosionSimulator(
            self.config.erosion,
            seed=erosion_seed,
            remap_config=self.config.remap,
            normal_config=self.config.normal,
        )
        self.gradient_type = island.gradient_type
        self.total_droplets = 0

    def prepare(self, gradient_type: GradientType | None = None) -> None:
        """Shape the island and warm the brush cache with a zero-droplet pass."""

        self.reset(gradient_type)
        self.simulator.erode(self.heightmap, self.map_size, 0, reset_seed=True)
        logger.info(
            f"Prepared {self.map_size}x{self.map_size} island ({self.gradient_type.name.lower()} border), "
            f"seed {self.simulator.random.seed}"
        )

    def reset(self, gradient_type: GradientType | None = None) -> None:
        """Restore the initial heightmap and reshape it; brush and RNG are kept."""

        if gradient_type is not None:
            self.gradient_type = GradientType(gradient_type)
        self.heightmap[:] = self.initial_heightmap
        self.simulator.gradient(
            self.heightmap,
            self.map_size,
            self.config.island.normalized_offset,
            self.gradient_type,
        )
        self.simulator.remap(self.heightmap, self.map_size)
        self.total_droplets = 0

    def erode(self, droplets: int | None = None) -> None:
        count = self.config.island.droplets_per_frame if droplets is None else droplets
        self.simulator.erode(self.heightmap, self.map_size, count)
        self.total_droplets += count

    def burst(self) -> float:
        """Erode the configured burst of droplets and return the elapsed seconds."""

        self.erode(self.config.island.burst_droplets)
        seconds = self.simulator.last_run.seconds
        logger.info(f"Eroded {self.config.island.burst_droplets} droplets. Time elapsed: {seconds:.3f} s")
        return seconds

    def erode_in_batches(self, total: int, batch_size: int | None = None) -> Iterator[int]:
        """Erode `total` droplets in batches, yielding the count done after each."""

        size = self.config.island.droplets_per_frame if batch_size is None else batch_size
        if size <= 0:
            raise ValueError("batch_size must be positive")
        if total < 0:
            raise ValueError("total must be non-negative")
        done = 0
        while done < total:
            step = min(size, total - done)
            self.erode(step)
            done += step
            yield done

    def normal_at(self, x: int, y: int) -> np.ndarray:
        return self.simulator.get_normal(self.heightmap, self.map_size, x, y)

    def display_heightmap(self) -> np.ndarray:
        """Copy of the heightmap clamped to [0, 1] as a square grid."""

        return np.clip(self.heightmap, 0.0, 1.0).reshape(self.map_size, self.map_size)

    def stats(self) -> HeightfieldStats:
        return heightfield_stats(self.heightmap)
