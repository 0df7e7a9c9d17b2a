"""
Terrain Query Module
====================

Read-only sampling of a published terrain snapshot at world coordinates.
"""

import math
from typing import Dict, Optional, Tuple

from ..terrain import TerrainData

FLAT_NORMAL = (0.0, 1.0, 0.0)
FLAT_HEIGHT = 0.0


def _clamp(value: float, low: float, high: float) -> float:
    # NaN falls to the low bound
    if not value >= low:
        return low
    if value > high:
        return high
    return value


class TerrainQuery:
    """
    Height, normal and slope lookups.

    Provides:
    - Bilinear height sampling
    - Nearest-cell normal sampling (no interpolation: normals change
      slowly across a cell, and the per-tick locomotion path calls this
      several times per entity)
    - Slope classification

    Out-of-range coordinates clamp to the nearest valid cell. A query
    without terrain (generation not yet published) answers flat ground
    at height 0 instead of failing.
    """

    def __init__(self, terrain: Optional[TerrainData] = None,
                 max_traversable_slope: float = 45.0):
        self.terrain = terrain
        self.max_traversable_slope = max_traversable_slope
        self._stats: Optional[Dict] = None

    @property
    def available(self) -> bool:
        return self.terrain is not None

    # ==================== Coordinates ====================

    def world_to_grid(self, x: float, z: float) -> Tuple[float, float]:
        """Fractional (col, row) grid coordinates, clamped to the grid"""
        t = self.terrain
        last = t.resolution - 1
        gx = _clamp((x / t.width + 0.5) * last, 0.0, float(last))
        gz = _clamp((z / t.depth + 0.5) * last, 0.0, float(last))
        return gx, gz

    def grid_to_world(self, row: int, col: int) -> Tuple[float, float]:
        """World (x, z) of a grid cell"""
        t = self.terrain
        last = t.resolution - 1
        return (col / last - 0.5) * t.width, (row / last - 0.5) * t.depth

    def cell(self, x: float, z: float) -> Tuple[int, int]:
        """(row, col) of the cell whose normal answers for world (x, z)"""
        gx, gz = self.world_to_grid(x, z)
        return int(gz), int(gx)

    def contains(self, x: float, z: float) -> bool:
        if self.terrain is None:
            return True
        return (abs(x) <= self.terrain.width / 2) and (abs(z) <= self.terrain.depth / 2)

    def clamp_to_arena(self, x: float, z: float) -> Tuple[float, float]:
        if self.terrain is None:
            return x, z
        half_w = self.terrain.width / 2
        half_d = self.terrain.depth / 2
        return _clamp(x, -half_w, half_w), _clamp(z, -half_d, half_d)

    # ==================== Sampling ====================

    def height(self, x: float, z: float) -> float:
        """Bilinear height at world (x, z)"""
        t = self.terrain
        if t is None:
            return FLAT_HEIGHT
        gx, gz = self.world_to_grid(x, z)
        last = t.resolution - 1
        ix = min(int(gx), last - 1)
        iz = min(int(gz), last - 1)
        fx = gx - ix
        fz = gz - iz

        h = t.heights
        h00 = h[iz, ix]
        h10 = h[iz, ix + 1]
        h01 = h[iz + 1, ix]
        h11 = h[iz + 1, ix + 1]

        h0 = h00 * (1.0 - fx) + h10 * fx
        h1 = h01 * (1.0 - fx) + h11 * fx
        return float(h0 * (1.0 - fz) + h1 * fz)

    def normal(self, x: float, z: float) -> Tuple[float, float, float]:
        """Unit normal of the cell containing world (x, z)"""
        t = self.terrain
        if t is None:
            return FLAT_NORMAL
        n = t.normals[self.cell(x, z)]
        return float(n[0]), float(n[1]), float(n[2])

    def slope_degrees(self, x: float, z: float) -> float:
        """Slope angle at world (x, z): 0 flat, 90 vertical"""
        ny = self.normal(x, z)[1]
        return math.degrees(math.acos(_clamp(ny, 0.0, 1.0)))

    def is_traversable(self, x: float, z: float) -> bool:
        return self.slope_degrees(x, z) < self.max_traversable_slope

    def normalized_height(self, x: float, z: float) -> float:
        """Height mapped to [0, 1] over the configured range"""
        if self.terrain is None:
            return 0.0
        cfg = self.terrain.config
        return (self.height(x, z) - cfg.min_height) / cfg.height_range

    # ==================== Statistics ====================

    def get_stats(self) -> Dict:
        """Terrain statistics (cached)"""
        if self._stats is None:
            from ..metrics import terrain_stats
            self._stats = terrain_stats(self.terrain, self.max_traversable_slope) if self.terrain else {}
        return self._stats
