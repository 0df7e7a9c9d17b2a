"""
Environment Module
==================

Terrain queries, snapshot publication and site placement.
"""

from .query import TerrainQuery, FLAT_NORMAL, FLAT_HEIGHT
from .service import TerrainService
from .placement import (
    SpawnPoint,
    PlacementSite,
    find_nearest_walkable,
    summit_region,
    spawn_points,
    placement_sites,
)

__all__ = [
    'TerrainQuery',
    'FLAT_NORMAL',
    'FLAT_HEIGHT',
    'TerrainService',
    'SpawnPoint',
    'PlacementSite',
    'find_nearest_walkable',
    'summit_region',
    'spawn_points',
    'placement_sites',
]
