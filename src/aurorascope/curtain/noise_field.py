"""
Coherent noise source for the curtains.

The renderer only needs a callable ``(x, y, z) -> float`` in [0, 1];
PerlinNoise wraps ``noise.pnoise3`` to provide one.
"""

from typing import Callable

import noise

NoiseFn = Callable[[float, float, float], float]


class PerlinNoise:
    """
    Layered 3D Perlin noise remapped from [-1, 1] to [0, 1].

    Args:
        seed: Integer offset into the permutation table.
        octaves: Number of noise layers summed together.
        persistence: Amplitude falloff per octave.
    """

    def __init__(self, seed: int = 0, octaves: int = 4, persistence: float = 0.5):
        self.seed = seed
        self.octaves = octaves
        self.persistence = persistence

    def __call__(self, x: float, y: float = 0.0, z: float = 0.0) -> float:
        v = noise.pnoise3(
            x, y, z,
            octaves=self.octaves,
            persistence=self.persistence,
            base=self.seed,
        )
        return min(1.0, max(0.0, 0.5 + 0.5 * v))


def constant_noise(value: float = 0.5) -> NoiseFn:
    """Flat noise field, useful for pinning geometry down."""
    def _sample(x: float, y: float = 0.0, z: float = 0.0) -> float:
        return value
    return _sample
