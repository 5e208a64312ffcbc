"""Configuration models for droplet erosion and island shaping."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Any


DEFAULT_MAP_SIZE = 512


class GradientType(IntEnum):
    """Falloff shape used to flatten the map borders."""

    SQUARE = 0
    CIRCLE = 1
    DIAMOND = 2
    STAR = 3


@dataclass(frozen=True)
class ErosionConfig:
    """Controls the droplet simulation."""

    erosion_radius: int = 6
    # 0 turns instantly downhill, 1 never changes direction.
    inertia: float = 0.05
    sediment_capacity_factor: float = 6.0
    # Keeps carry capacity away from zero on flat terrain.
    min_sediment_capacity: float = 0.01
    erode_speed: float = 0.3
    deposit_speed: float = 0.3
    evaporate_speed: float = 0.01
    gravity: float = 4.0
    max_droplet_lifetime: int = 60
    initial_water_volume: float = 1.0
    initial_speed: float = 1.0


@dataclass(frozen=True)
class RemapConfig:
    """Piecewise-linear height curve that flattens the beach band."""

    control_points: tuple[tuple[float, float], ...] = (
        (0.0, 0.0),
        (0.15, 0.16),
        (0.2, 0.16),
        (1.0, 1.0),
    )


@dataclass(frozen=True)
class NormalConfig:
    """Sobel normal estimation."""

    strength: float = 20.0


@dataclass(frozen=True)
class IslandConfig:
    """Defaults for an interactive island session."""

    map_size: int = DEFAULT_MAP_SIZE
    gradient_type: GradientType = GradientType.SQUARE
    normalized_offset: float = 0.5
    droplets_per_frame: int = 350
    burst_droplets: int = 100000
    noise_base_res: int = 4
    noise_octaves: int = 6


@dataclass(frozen=True)
class SimulatorConfig:
    """Primary configuration."""

    erosion: ErosionConfig = field(default_factory=ErosionConfig)
    remap: RemapConfig = field(default_factory=RemapConfig)
    normal: NormalConfig = field(default_factory=NormalConfig)
    island: IslandConfig = field(default_factory=IslandConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
