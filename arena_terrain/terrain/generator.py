"""
Terrain Generator Module
========================

Procedural generation of arena height and normal fields.
Single Responsibility: only runs the generation pipeline

    noise -> shaping -> features -> ramps -> smoothing -> normals

and packages the result as an immutable TerrainData snapshot.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from ..config import Config
from .features import FeaturePlacer
from .noise import NoiseField
from .normals import compute_normals
from .ramps import ConnectivityRouter
from .shaping import ElevationShaper
from .smoothing import Smoother
from .types import TerrainData, TerrainFeature, RampPath, grid_coordinates

logger = logging.getLogger(__name__)

MAX_RANDOM_SEED = 10000


class GenerationCancelled(Exception):
    """Raised between stages when a newer generation has superseded this one"""


@dataclass
class GenerationResult:
    """Snapshot plus the transient layout used to build it"""
    terrain: TerrainData
    plateaus: List[TerrainFeature] = field(default_factory=list)
    peaks: List[TerrainFeature] = field(default_factory=list)
    ramps: List[RampPath] = field(default_factory=list)
    elapsed: float = 0.0


class TerrainGenerator:
    """
    Seeded arena terrain generator.

    Creates terrain with:
    - Low-biased fractal noise terraced into plateaus
    - Guaranteed mid plateaus and a summit near the center
    - Ramp corridors connecting elevation tiers
    - Global and ramp-focused smoothing
    - Per-cell normals

    Configuration is validated up front; a config that passes validation
    always generates.
    """

    def __init__(self, config: Optional[Config] = None,
                 feature_rng=None, ramp_rng=None,
                 seed_source: Optional[np.random.Generator] = None):
        """
        Initialize generator.

        Args:
            config: Configuration object
            feature_rng: Optional uniform source for feature placement
            ramp_rng: Optional uniform source for ramp layout
            seed_source: Generator used to pick a seed when config seed is 0
        """
        self.config = (config or Config()).validate()
        self.feature_rng = feature_rng
        self.ramp_rng = ramp_rng
        self.seed_source = seed_source or np.random.default_rng()

        self.shaper = ElevationShaper(self.config.terrain, self.config.shaping)
        self.placer = FeaturePlacer(self.config.terrain, self.config.arena, self.config.features)
        self.router = ConnectivityRouter(self.config.arena, self.config.ramps)
        self.smoother = Smoother(self.config.smoothing)

    def resolve_seed(self) -> int:
        seed = self.config.terrain.seed
        if seed == 0:
            seed = int(self.seed_source.integers(1, MAX_RANDOM_SEED))
            logger.info("Seed 0 requested, using random seed %d", seed)
        return seed

    def generate(self, cancelled: Optional[Callable[[], bool]] = None) -> TerrainData:
        """Generate the terrain snapshot"""
        return self.build(cancelled).terrain

    def build(self, cancelled: Optional[Callable[[], bool]] = None) -> GenerationResult:
        """
        Run every pipeline stage.

        Args:
            cancelled: Optional callable polled between stages; when it
                       returns True the run stops with GenerationCancelled

        Returns:
            GenerationResult with the terrain and its layout
        """
        started = time.perf_counter()
        terrain_cfg = self.config.terrain
        arena = self.config.arena
        seed = self.resolve_seed()

        def checkpoint(stage: str):
            if cancelled is not None and cancelled():
                logger.info("Generation for seed %d cancelled before %s", seed, stage)
                raise GenerationCancelled(stage)

        heights = self._base_heights(seed)

        checkpoint('features')
        plateaus, peaks = self.placer.place(heights, seed, self.feature_rng)

        checkpoint('ramps')
        hub = (peaks[0].x, peaks[0].z) if peaks else None
        ramps = self.router.route(heights, seed, self.ramp_rng, hub)

        checkpoint('smoothing')
        ramp_mask = self.router.corridor_mask(
            terrain_cfg.resolution, ramps, self.config.smoothing.ramp_margin)
        heights = self.smoother.smooth(heights, terrain_cfg.smoothness, ramp_mask)
        heights = np.clip(heights, terrain_cfg.min_height, terrain_cfg.max_height)

        checkpoint('normals')
        cell_width = arena.width / (terrain_cfg.resolution - 1)
        cell_depth = arena.depth / (terrain_cfg.resolution - 1)
        normals = compute_normals(heights, cell_width, cell_depth)

        terrain = TerrainData(
            heights=heights,
            normals=normals,
            width=arena.width,
            depth=arena.depth,
            resolution=terrain_cfg.resolution,
            config=terrain_cfg,
            seed=seed,
        )
        elapsed = time.perf_counter() - started
        logger.info("Generated %dx%d terrain for seed %d in %.2fs",
                    terrain_cfg.resolution, terrain_cfg.resolution, seed, elapsed)
        return GenerationResult(terrain=terrain, plateaus=plateaus, peaks=peaks,
                                ramps=ramps, elapsed=elapsed)

    def _base_heights(self, seed: int) -> np.ndarray:
        """Shaped fractal noise in world units"""
        cfg = self.config.terrain
        x, z = grid_coordinates(cfg.resolution, self.config.arena.width, self.config.arena.depth)
        noise = NoiseField(seed).fractal(x, z, cfg.octaves, cfg.persistence, cfg.base_frequency)
        return np.asarray(self.shaper(noise), dtype=np.float64)


def generate_terrain(config: Optional[Config] = None) -> TerrainData:
    """Convenience one-shot generation"""
    return TerrainGenerator(config).generate()
