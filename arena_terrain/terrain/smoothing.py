"""
Smoothing Module
================

Blur passes that remove generation seams after features and ramps.
"""

import math
from typing import Optional

import numpy as np
from scipy.ndimage import convolve

from ..config import SmoothingConfig

# center + 4 neighbors, equal weights
BOX_KERNEL = np.array([
    [0.0, 1.0, 0.0],
    [1.0, 1.0, 1.0],
    [0.0, 1.0, 0.0],
]) / 5.0

# heavier center, diagonals at half weight
RAMP_KERNEL = np.array([
    [0.5, 1.0, 0.5],
    [1.0, 4.0, 1.0],
    [0.5, 1.0, 0.5],
]) / 10.0


def box_blur(heights: np.ndarray, iterations: int) -> np.ndarray:
    """5-neighbor average, edge cells reuse their nearest valid neighbor"""
    for _ in range(max(0, int(iterations))):
        heights = convolve(heights, BOX_KERNEL, mode='nearest')
    return heights


def masked_blur(heights: np.ndarray, mask: np.ndarray, iterations: int) -> np.ndarray:
    """Weighted 9-neighbor blur applied only where ``mask`` is set"""
    for _ in range(max(0, int(iterations))):
        blurred = convolve(heights, RAMP_KERNEL, mode='nearest')
        heights = np.where(mask, blurred, heights)
    return heights


class Smoother:
    """
    Global and ramp-focused smoothing.

    Order: light global pass, ramp corridors, lighter global pass. The
    global passes are short so terraces survive.
    """

    def __init__(self, smoothing: SmoothingConfig):
        self.cfg = smoothing

    def iterations_for(self, amount: float) -> int:
        return int(math.floor(amount * self.cfg.iterations_per_unit + 1e-9))

    def smooth(self, heights: np.ndarray, smoothness: float,
               ramp_mask: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Run the full smoothing sequence.

        Args:
            heights: Height field after features and ramps
            smoothness: TerrainConfig.smoothness (0-1)
            ramp_mask: Cells within the widened ramp corridors, if any

        Returns:
            New smoothed height field
        """
        heights = box_blur(heights, self.iterations_for(smoothness * self.cfg.first_pass))
        if ramp_mask is not None and ramp_mask.any():
            heights = masked_blur(heights, ramp_mask, self.cfg.ramp_iterations)
        heights = box_blur(heights, self.iterations_for(smoothness * self.cfg.second_pass))
        return heights
