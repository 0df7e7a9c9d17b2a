"""
Terrain Metrics Module
======================

Connectivity and distribution statistics for generated terrain.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np
from scipy.ndimage import label

from ..terrain import TerrainData, slope_map, world_to_cell

# 4-connected flood fill
FOUR_CONNECTED = np.array([
    [0, 1, 0],
    [1, 1, 1],
    [0, 1, 0],
])


@dataclass
class ReachabilityReport:
    """Result of a walkable flood fill from one start cell"""
    start_cell: Tuple[int, int]
    start_traversable: bool
    reachable_cells: int
    total_cells: int
    max_normalized_height: float
    summit_reachable: bool

    @property
    def reachable_fraction(self) -> float:
        return self.reachable_cells / self.total_cells if self.total_cells else 0.0

    def to_dict(self) -> Dict:
        return {
            'start_cell': list(self.start_cell),
            'start_traversable': self.start_traversable,
            'reachable_cells': self.reachable_cells,
            'reachable_fraction': self.reachable_fraction,
            'max_normalized_height': self.max_normalized_height,
            'summit_reachable': self.summit_reachable,
        }


def traversable_mask(terrain: TerrainData, max_slope: float = 45.0) -> np.ndarray:
    """Cells whose slope is below the walkable limit"""
    return slope_map(terrain.normals) < max_slope


def reachable_mask(terrain: TerrainData, start: Tuple[float, float] = (0.0, 0.0),
                   max_slope: float = 45.0) -> np.ndarray:
    """
    Walkable cells connected to the world point ``start``.

    Flood fill over 4-connected traversable cells; empty when the start
    cell itself is too steep.
    """
    walkable = traversable_mask(terrain, max_slope)
    row, col = _nearest_cell(terrain, *start)
    if not walkable[row, col]:
        return np.zeros_like(walkable)
    labels, _ = label(walkable, structure=FOUR_CONNECTED)
    return labels == labels[row, col]


def analyze_reachability(terrain: TerrainData, start: Tuple[float, float] = (0.0, 0.0),
                         max_slope: float = 45.0,
                         summit_threshold: float = 0.8) -> ReachabilityReport:
    """
    Check that high ground can be walked to from ``start``.

    Args:
        terrain: Published terrain
        start: World (x, z) of the flood-fill origin
        max_slope: Walkable slope limit in degrees
        summit_threshold: Normalized height counted as a summit

    Returns:
        ReachabilityReport
    """
    reach = reachable_mask(terrain, start, max_slope)
    normalized = terrain.normalized_heights()
    reached_heights = normalized[reach]
    max_height = float(reached_heights.max()) if reached_heights.size else 0.0
    return ReachabilityReport(
        start_cell=_nearest_cell(terrain, *start),
        start_traversable=bool(reach.any()),
        reachable_cells=int(reach.sum()),
        total_cells=int(reach.size),
        max_normalized_height=max_height,
        summit_reachable=bool(reached_heights.size and max_height >= summit_threshold),
    )


def terrain_stats(terrain: TerrainData, max_slope: float = 45.0,
                  slide_slope: Optional[float] = 50.0) -> Dict:
    """Elevation and slope distribution"""
    slopes = slope_map(terrain.normals)
    heights = terrain.heights
    normalized = terrain.normalized_heights()
    total = heights.size

    stats = {
        'seed': terrain.seed,
        'resolution': terrain.resolution,
        'extent': [terrain.width, terrain.depth],
        'elevation': {
            'min': float(heights.min()),
            'max': float(heights.max()),
            'mean': float(heights.mean()),
            'std': float(heights.std()),
        },
        'slope': {
            'mean': float(slopes.mean()),
            'max': float(slopes.max()),
            'traversable_pct': float((slopes < max_slope).sum() / total * 100),
        },
        'bands': {
            'low_pct': float((normalized < 0.45).sum() / total * 100),
            'mid_pct': float(((normalized >= 0.45) & (normalized < 0.75)).sum() / total * 100),
            'high_pct': float((normalized >= 0.75).sum() / total * 100),
        },
    }
    if slide_slope is not None:
        stats['slope']['sliding_pct'] = float((slopes >= slide_slope).sum() / total * 100)
    return stats


def _nearest_cell(terrain: TerrainData, x: float, z: float) -> Tuple[int, int]:
    last = terrain.resolution - 1
    # round to nearest rather than floor so (0, 0) hits the true center cell
    row, col = world_to_cell(x + terrain.cell_width / 2, z + terrain.cell_depth / 2,
                             terrain.resolution, terrain.width, terrain.depth)
    return min(row, last), min(col, last)
