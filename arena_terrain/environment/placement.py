"""
Placement Module
================

Team spawn points and obstacle / tree sites chosen against terrain slope.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..config import ArenaConfig, PlacementConfig
from ..metrics import reachable_mask
from .query import TerrainQuery


@dataclass(frozen=True)
class SpawnPoint:
    """Ground position for one entity at match start"""
    x: float
    y: float
    z: float
    team_id: int
    slot: int = 0


@dataclass(frozen=True)
class PlacementSite:
    """Accepted obstacle or tree position"""
    x: float
    y: float
    z: float
    slope: float
    kind: str = 'rock'


def find_nearest_walkable(query: TerrainQuery, x: float, z: float,
                          max_search: float = 12.0, step: float = 1.0,
                          max_slope: Optional[float] = None,
                          region: Optional[np.ndarray] = None) -> Tuple[float, float]:
    """
    Nearest point with a walkable slope, searched in growing square rings.

    ``region`` optionally limits the answer to cells set in a boolean
    grid, such as the area reachable from the summit. Returns the
    original point when nothing acceptable lies within ``max_search``.
    """
    limit = query.max_traversable_slope if max_slope is None else max_slope

    def accepts(px, pz):
        if query.slope_degrees(px, pz) >= limit:
            return False
        return region is None or bool(region[query.cell(px, pz)])

    x, z = query.clamp_to_arena(x, z)
    if accepts(x, z):
        return x, z

    rings = int(max_search / step)
    for radius in range(1, rings + 1):
        best = None
        for dx in range(-radius, radius + 1):
            for dz in range(-radius, radius + 1):
                if max(abs(dx), abs(dz)) != radius:
                    continue
                cx, cz = query.clamp_to_arena(x + dx * step, z + dz * step)
                if accepts(cx, cz):
                    d = math.hypot(cx - x, cz - z)
                    if best is None or d < best[0]:
                        best = (d, cx, cz)
        if best is not None:
            return best[1], best[2]
    return x, z


def summit_region(query: TerrainQuery) -> Optional[np.ndarray]:
    """Walkable cells connected to the arena center, or None when there are none"""
    if not query.available:
        return None
    mask = reachable_mask(query.terrain, (0.0, 0.0), query.max_traversable_slope)
    return mask if mask.any() else None


def spawn_points(query: TerrainQuery, arena: ArenaConfig, placement: PlacementConfig,
                 team_count: int = 2, squad_size: int = 1) -> List[SpawnPoint]:
    """
    Team spawn positions.

    Teams are spread evenly on a circle of ``arena.spawn_distance``
    around the center; squad members line up sideways from the team
    anchor. Every spawn is nudged onto walkable ground, preferring ground
    connected to the arena center so each team can reach the summit.
    """
    connected = summit_region(query)
    points = []
    for team in range(team_count):
        angle = (team / team_count) * math.pi * 2 + math.pi / 2
        anchor_x = math.cos(angle) * arena.spawn_distance
        anchor_z = math.sin(angle) * arena.spawn_distance
        # sideways = tangent of the spawn circle
        side_x, side_z = -math.sin(angle), math.cos(angle)

        for slot in range(squad_size):
            offset = (slot - (squad_size - 1) / 2) * placement.squad_spacing
            nominal_x = anchor_x + side_x * offset
            nominal_z = anchor_z + side_z * offset
            x, z = find_nearest_walkable(query, nominal_x, nominal_z,
                                         max_search=placement.spawn_search_radius,
                                         region=connected)
            if connected is not None and not connected[query.cell(x, z)]:
                x, z = find_nearest_walkable(query, nominal_x, nominal_z,
                                             max_search=placement.spawn_search_radius)
            points.append(SpawnPoint(x=x, y=query.height(x, z), z=z, team_id=team, slot=slot))
    return points


def placement_sites(query: TerrainQuery, arena: ArenaConfig, placement: PlacementConfig,
                    count: int, seed: Optional[int] = None,
                    max_slope: Optional[float] = None,
                    kinds: Tuple[str, ...] = ('rock',)) -> List[PlacementSite]:
    """
    Rejection-sample obstacle or tree sites.

    Args:
        query: Terrain query
        arena: Arena extent
        placement: Placement rules
        count: Number of sites wanted
        seed: Seed for the sampler
        max_slope: Slope limit; defaults to the obstacle limit, or the
                   per-type tree limit for tree kinds
        kinds: Kinds to cycle through ('rock', 'wall', 'pine', 'oak', 'dead')

    Returns:
        Up to ``count`` sites, fewer if the attempt budget runs out
    """
    rng = np.random.default_rng(seed)
    half_w = arena.half_width - placement.min_edge_distance
    half_d = arena.half_depth - placement.min_edge_distance
    if half_w <= 0 or half_d <= 0:
        return []

    sites: List[PlacementSite] = []
    attempts = 0
    while len(sites) < count and attempts < placement.max_attempts:
        attempts += 1
        kind = kinds[len(sites) % len(kinds)]
        limit = max_slope
        if limit is None:
            limit = placement.tree_max_slope.get(kind, placement.obstacle_max_slope)

        x = float(rng.uniform(-half_w, half_w))
        z = float(rng.uniform(-half_d, half_d))
        slope = query.slope_degrees(x, z)
        if slope > limit:
            continue
        # steeper candidates are accepted less often
        if rng.random() < placement.flat_area_bias * (slope / limit if limit > 0 else 0.0):
            continue
        if any(math.hypot(s.x - x, s.z - z) < placement.min_spacing for s in sites):
            continue
        sites.append(PlacementSite(x=x, y=query.height(x, z), z=z, slope=slope, kind=kind))
    return sites
