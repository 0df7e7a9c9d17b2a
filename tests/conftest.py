import math

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest

from arena_terrain.config import Config, TerrainConfig
from arena_terrain.environment import TerrainQuery
from arena_terrain.terrain import TerrainData, TerrainGenerator, compute_normals, grid_coordinates


@pytest.fixture(scope='session')
def config() -> Config:
    """Seeded config at a resolution small enough for fast tests"""
    return Config(terrain=TerrainConfig(seed=42, resolution=128))


@pytest.fixture(scope='session')
def generation(config):
    return TerrainGenerator(config).build()


@pytest.fixture(scope='session')
def terrain(generation) -> TerrainData:
    return generation.terrain


@pytest.fixture
def make_terrain():
    """
    Build a TerrainData from a height function h(x, z).

    Heights are evaluated on the grid the generator would use, and the
    height range is widened so the function is never clipped.
    """

    def factory(height_fn, resolution: int = 33, width: float = 32.0,
                depth: float = 32.0) -> TerrainData:
        x, z = grid_coordinates(resolution, width, depth)
        heights = np.asarray(height_fn(x, z), dtype=np.float64) * np.ones_like(x)
        low = float(heights.min()) - 1.0
        high = float(heights.max()) + 1.0
        return TerrainData(
            heights=heights,
            normals=compute_normals(heights, width / (resolution - 1), depth / (resolution - 1)),
            width=width,
            depth=depth,
            resolution=resolution,
            config=TerrainConfig(resolution=resolution, min_height=low, max_height=high, seed=1),
            seed=1,
        )

    return factory


@pytest.fixture
def flat_query(make_terrain) -> TerrainQuery:
    return TerrainQuery(make_terrain(lambda x, z: np.zeros_like(x)))


@pytest.fixture
def cliff_query(make_terrain) -> TerrainQuery:
    """Plane rising along +x at 50 degrees"""
    grade = math.tan(math.radians(50.0))
    return TerrainQuery(make_terrain(lambda x, z: grade * x))
