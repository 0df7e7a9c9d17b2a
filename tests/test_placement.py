"""Tests for spawn and obstacle placement"""

import math

import numpy as np
import pytest

from arena_terrain.config import ArenaConfig, PlacementConfig
from arena_terrain.environment import (
    TerrainQuery,
    find_nearest_walkable,
    placement_sites,
    spawn_points,
    summit_region,
)


def test_spawn_points_on_walkable_ground(terrain, config):
    query = TerrainQuery(terrain)
    spawns = spawn_points(query, config.arena, config.placement, team_count=4)
    assert len(spawns) == 4
    assert [s.team_id for s in spawns] == [0, 1, 2, 3]
    for spawn in spawns:
        assert query.contains(spawn.x, spawn.z)
        assert query.is_traversable(spawn.x, spawn.z)
        assert spawn.y == pytest.approx(query.height(spawn.x, spawn.z))


def test_spawn_layout_on_flat_ground(flat_query):
    arena = ArenaConfig(width=32.0, depth=32.0, spawn_distance=10.0)
    spawns = spawn_points(flat_query, arena, PlacementConfig(), team_count=2, squad_size=3)
    assert len(spawns) == 6

    team0 = [s for s in spawns if s.team_id == 0]
    team1 = [s for s in spawns if s.team_id == 1]
    # first team on +z, second opposite
    assert all(s.z == pytest.approx(10.0) for s in team0)
    assert all(s.z == pytest.approx(-10.0) for s in team1)
    # squad lines up along the tangent, spaced evenly
    xs = sorted(s.x for s in team0)
    assert xs == pytest.approx([-3.0, 0.0, 3.0], abs=1e-9)


def test_spawn_leaves_isolated_mesa(make_terrain):
    """A flat mesa top is walkable but cut off, so the spawn moves off it"""
    mesa = make_terrain(lambda x, z: np.where((np.abs(x) < 4.0) & (z > 6.0) & (z < 14.0), 20.0, 0.0))
    query = TerrainQuery(mesa)
    arena = ArenaConfig(width=32.0, depth=32.0, spawn_distance=10.0)
    assert query.is_traversable(0.0, 10.0)

    region = summit_region(query)
    spawn = spawn_points(query, arena, PlacementConfig(), team_count=2)[0]
    assert spawn.y == pytest.approx(0.0)
    assert region[query.cell(spawn.x, spawn.z)]


def test_summit_region_without_terrain():
    assert summit_region(TerrainQuery()) is None


def test_find_nearest_walkable(make_terrain):
    steep = math.tan(math.radians(70.0))
    query = TerrainQuery(make_terrain(lambda x, z: np.where(x > 0.0, steep * x, 0.0)))
    x, z = find_nearest_walkable(query, 8.0, 3.0)
    assert query.is_traversable(x, z)
    assert x <= 0.0
    assert (x, z) != (8.0, 3.0)

    assert find_nearest_walkable(query, -5.0, 2.0) == (-5.0, 2.0)


def test_find_nearest_walkable_gives_up(make_terrain):
    steep = math.tan(math.radians(70.0))
    query = TerrainQuery(make_terrain(lambda x, z: steep * x))
    assert find_nearest_walkable(query, 0.0, 0.0, max_search=3.0) == (0.0, 0.0)


def test_placement_sites_respect_rules(terrain, config):
    query = TerrainQuery(terrain)
    placement = config.placement
    sites = placement_sites(query, config.arena, placement, count=8, seed=4)
    assert 0 < len(sites) <= 8
    limit = config.arena.half_width - placement.min_edge_distance
    for site in sites:
        assert site.slope <= placement.obstacle_max_slope
        assert abs(site.x) <= limit and abs(site.z) <= limit
    for i, a in enumerate(sites):
        for b in sites[i + 1:]:
            assert math.hypot(a.x - b.x, a.z - b.z) >= placement.min_spacing


def test_placement_sites_deterministic(terrain, config):
    query = TerrainQuery(terrain)
    a = placement_sites(query, config.arena, config.placement, count=6, seed=9)
    b = placement_sites(query, config.arena, config.placement, count=6, seed=9)
    assert a == b


def test_tree_kinds_use_their_slope_limits(terrain, config):
    query = TerrainQuery(terrain)
    sites = placement_sites(query, config.arena, config.placement, count=9, seed=2,
                            kinds=('pine', 'oak', 'dead'))
    for site in sites:
        assert site.slope <= config.placement.tree_max_slope[site.kind]


def test_no_room_for_sites(flat_query):
    arena = ArenaConfig(width=16.0, depth=16.0)
    assert placement_sites(flat_query, arena, PlacementConfig(), count=3, seed=1) == []
