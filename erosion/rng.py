"""Seedable random streams for droplet spawning and initial terrain."""

from __future__ import annotations

import hashlib
import logging
import time

import numpy as np


logger = logging.getLogger(__name__)


def _normalize_seed(seed: int) -> int:
    return int(seed) & ((1 << 64) - 1)


def derive_seed(parent_seed: int, key: str, *, namespace: str = "erosion") -> int:
    """Derive a deterministic child seed from a parent seed and label."""

    if not key:
        raise ValueError("derive key must be non-empty")
    payload = f"{namespace}:{_normalize_seed(parent_seed)}:{key}".encode("utf-8")
    digest = hashlib.blake2b(payload, digest_size=8, person=b"rngfork00").digest()
    return int.from_bytes(digest, byteorder="big", signed=False)


def make_generator(seed: int) -> np.random.Generator:
    return np.random.Generator(np.random.PCG64(np.uint64(_normalize_seed(seed))))


class RandomSource:
    """Single mutable RNG stream shared by consecutive erosion calls.

    The stream is only restarted by `reseed`. With an injected seed every
    reseed restarts the same sequence; without one the clock picks a new seed.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._injected_seed = seed
        self.seed = 0
        self._generator = make_generator(0)
        self.reseed()

    def reseed(self) -> int:
        if self._injected_seed is not None:
            seed = _normalize_seed(self._injected_seed)
        else:
            seed = _normalize_seed(time.time_ns())
        self.seed = seed
        self._generator = make_generator(seed)
        logger.debug(f"Random source reseeded with {seed}")
        return seed

    def spawn_cell(self, map_size: int) -> tuple[int, int]:
        """Draw an integer-valued start cell in ``[0, map_size)`` on both axes."""

        x = int(np.floor(self._generator.random() * map_size))
        y = int(np.floor(self._generator.random() * map_size))
        return x, y

    def state(self) -> dict:
        return self._generator.bit_generator.state

    def set_state(self, state: dict) -> None:
        self._generator.bit_generator.state = state
