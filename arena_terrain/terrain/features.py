"""
Feature Placement Module
========================

Stamps guaranteed mid-elevation plateaus and high peaks onto the shaped
field so every arena has high ground worth fighting over.
"""

import logging
import math
from typing import List, Tuple

import numpy as np

from ..config import ArenaConfig, FeatureConfig, TerrainConfig
from .noise import SeededRandom
from .shaping import smoothstep
from .types import TerrainFeature, grid_coordinates

logger = logging.getLogger(__name__)


class FeaturePlacer:
    """
    Deterministic landmark placement.

    Mid plateaus are spread around the arena at evenly spaced angles.
    The first peak (the summit) sits within a small offset of the center
    with a radius large enough that its full-strength core covers the
    center; remaining peaks may land anywhere inside the edge margin.
    """

    def __init__(self, terrain: TerrainConfig, arena: ArenaConfig, features: FeatureConfig):
        self.terrain = terrain
        self.arena = arena
        self.cfg = features

    def plan(self, seed: int, rng=None) -> Tuple[List[TerrainFeature], List[TerrainFeature]]:
        """
        Choose feature positions.

        Args:
            seed: Resolved generation seed
            rng: Optional uniform source with ``random()``; defaults to an
                 LCG seeded with ``seed + seed_offset``

        Returns:
            Tuple of (mid_plateaus, high_peaks)
        """
        if rng is None:
            rng = SeededRandom(seed + self.cfg.seed_offset)
        cfg = self.cfg
        half_size = min(self.arena.width, self.arena.depth) / 2

        mids = []
        for i in range(cfg.mid_count):
            angle = (i / cfg.mid_count) * math.pi * 2 + rng.random() * 0.8
            distance = cfg.mid_min_distance + rng.random() * max(
                0.0, half_size - cfg.edge_margin - cfg.mid_min_distance)
            radius = cfg.mid_radius + rng.random() * cfg.mid_radius_jitter
            target = cfg.mid_height[0] + rng.random() * (cfg.mid_height[1] - cfg.mid_height[0])
            mids.append(TerrainFeature(
                x=math.cos(angle) * distance,
                z=math.sin(angle) * distance,
                radius=radius,
                target_height=target,
            ))

        peaks = []
        for i in range(cfg.peak_count):
            if i == 0:
                offset = rng.random() * cfg.summit_offset
                angle = rng.random() * math.pi * 2
                x, z = math.cos(angle) * offset, math.sin(angle) * offset
                radius = cfg.summit_radius + rng.random() * cfg.summit_radius_jitter
            else:
                angle = rng.random() * math.pi * 2
                distance = cfg.peak_min_distance + rng.random() * max(
                    0.0, half_size - cfg.edge_margin - cfg.peak_min_distance)
                x, z = math.cos(angle) * distance, math.sin(angle) * distance
                radius = cfg.peak_radius + rng.random() * cfg.peak_radius_jitter
            target = cfg.peak_height[0] + rng.random() * (cfg.peak_height[1] - cfg.peak_height[0])
            peaks.append(TerrainFeature(x=x, z=z, radius=radius, target_height=target))

        return mids, peaks

    def apply(self, heights: np.ndarray, features: List[TerrainFeature]) -> np.ndarray:
        """
        Raise terrain toward each feature's target (in place).

        Cells inside the core keep the full target; the effect fades to
        zero at the radius. Existing terrain above the target is kept.
        """
        resolution = heights.shape[0]
        x, z = grid_coordinates(resolution, self.arena.width, self.arena.depth)

        for feature in features:
            distance = np.hypot(x - feature.x, z - feature.z)
            inside = distance < feature.radius
            if not np.any(inside):
                continue
            target = feature.target_height * self.terrain.height_range + self.terrain.min_height
            blend = smoothstep(feature.radius, feature.radius * self.cfg.core_fraction, distance)
            raised = heights + (target - heights) * blend
            np.copyto(heights, raised, where=inside & (raised > heights))
        return heights

    def place(self, heights: np.ndarray, seed: int,
              rng=None) -> Tuple[List[TerrainFeature], List[TerrainFeature]]:
        """Plan and apply: mid plateaus first, then peaks"""
        mids, peaks = self.plan(seed, rng)
        self.apply(heights, mids)
        self.apply(heights, peaks)
        logger.debug("Placed %d plateaus and %d peaks (summit at %.1f, %.1f)",
                     len(mids), len(peaks),
                     peaks[0].x if peaks else float('nan'),
                     peaks[0].z if peaks else float('nan'))
        return mids, peaks
