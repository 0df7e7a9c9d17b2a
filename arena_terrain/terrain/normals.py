"""
Normal Field Module
===================

Per-cell surface normals and slope angles from a height field.
"""

from typing import Union

import numpy as np


def compute_normals(heights: np.ndarray, cell_width: float, cell_depth: float) -> np.ndarray:
    """
    Unit surface normals via central differences.

    Edge cells reuse their own height in place of the missing neighbor
    (no wraparound). The planar part of each normal points toward lower
    ground.

    Returns:
        Array of shape (rows, cols, 3) holding (nx, ny, nz)
    """
    padded = np.pad(heights, 1, mode='edge')
    left = padded[1:-1, :-2]
    right = padded[1:-1, 2:]
    up = padded[:-2, 1:-1]
    down = padded[2:, 1:-1]

    nx = (left - right) / (2.0 * cell_width)
    nz = (up - down) / (2.0 * cell_depth)
    ny = np.ones_like(heights, dtype=np.float64)

    length = np.sqrt(nx * nx + ny * ny + nz * nz)
    return np.stack([nx / length, ny / length, nz / length], axis=-1)


def slope_degrees(normal_y: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Slope angle from the vertical normal component (0 = flat, 90 = wall)"""
    angle = np.degrees(np.arccos(np.clip(normal_y, 0.0, 1.0)))
    return float(angle) if np.ndim(angle) == 0 else angle


def slope_map(normals: np.ndarray) -> np.ndarray:
    """Slope angle of every cell"""
    return slope_degrees(normals[..., 1])
