"""
Elevation Shaping Module
========================

Reshapes raw noise into low-biased, terraced ("plateau") elevation.
"""

from typing import Union

import numpy as np

from ..config import ShapingConfig, TerrainConfig

ArrayLike = Union[float, np.ndarray]


def smoothstep(edge0: float, edge1: float, x: ArrayLike) -> ArrayLike:
    """Hermite step; edges may be reversed for a falling ramp"""
    t = np.clip((np.asarray(x, dtype=np.float64) - edge0) / (edge1 - edge0), 0.0, 1.0)
    result = t * t * (3.0 - 2.0 * t)
    return float(result) if np.ndim(result) == 0 else result


def apply_bias(normalized: ArrayLike, bias: float) -> ArrayLike:
    """Push normalized heights toward 0 (bias > 0.5 means more low terrain)"""
    power = bias / (1.0 - bias)
    result = np.power(np.clip(np.asarray(normalized, dtype=np.float64), 0.0, 1.0), power)
    return float(result) if np.ndim(result) == 0 else result


def apply_plateaus(normalized: ArrayLike, levels: int, strength: float,
                   transition: float) -> ArrayLike:
    """
    Quantize [0, 1] into ``levels`` flat terraces.

    Inside a level the value is pinned to the level midpoint; within
    ``transition`` of a level boundary it eases (smoothstep) from the
    boundary onto the midpoint. The terraced value is blended with the
    input by ``strength``.
    """
    v = np.clip(np.asarray(normalized, dtype=np.float64), 0.0, 1.0)
    level_height = 1.0 / levels
    level = np.minimum(np.floor(v * levels), levels - 1)
    level_base = level * level_height
    pos = (v - level_base) / level_height

    rising = level_base + smoothstep(0.0, transition, pos) * level_height * 0.5
    topping = (level_base + level_height * 0.5
               + smoothstep(1.0 - transition, 1.0, pos) * level_height * 0.5)
    flat = level_base + level_height * 0.5

    plateau = np.where(pos < transition, rising,
                       np.where(pos > 1.0 - transition, topping, flat))
    result = v * (1.0 - strength) + plateau * strength
    return float(result) if np.ndim(result) == 0 else result


class ElevationShaper:
    """
    Noise-to-height transform.

    Maps fractal noise in [-1, 1] to [0, 1], applies the low-elevation
    bias and plateau terracing, then scales into the configured height
    range.
    """

    def __init__(self, terrain: TerrainConfig, shaping: ShapingConfig):
        self.terrain = terrain
        self.shaping = shaping

    def shape(self, noise: ArrayLike) -> ArrayLike:
        """Noise in [-1, 1] to shaped normalized height in [0, 1]"""
        normalized = (np.asarray(noise, dtype=np.float64) + 1.0) / 2.0
        biased = apply_bias(normalized, self.shaping.low_elevation_bias)
        return apply_plateaus(
            biased,
            self.shaping.plateau_levels,
            self.shaping.plateau_strength,
            self.shaping.plateau_transition,
        )

    def to_world(self, normalized: ArrayLike) -> ArrayLike:
        return normalized * self.terrain.height_range + self.terrain.min_height

    def to_normalized(self, height: ArrayLike) -> ArrayLike:
        return (height - self.terrain.min_height) / self.terrain.height_range

    def __call__(self, noise: ArrayLike) -> ArrayLike:
        return self.to_world(self.shape(noise))
