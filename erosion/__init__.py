"""Droplet hydraulic erosion for island heightmaps."""

from .config import DEFAULT_MAP_SIZE, ErosionConfig, GradientType, SimulatorConfig
from .droplet import ErosionSimulator
from .heightfield import InvalidDimensionError
from .session import IslandSession

__all__ = [
    "DEFAULT_MAP_SIZE",
    "ErosionConfig",
    "ErosionSimulator",
    "GradientType",
    "InvalidDimensionError",
    "IslandSession",
    "SimulatorConfig",
]
