"""
Connectivity Router Module
==========================

Carves gently graded ramp corridors linking elevation tiers.
"""

import logging
import math
from typing import List, Optional, Tuple

import numpy as np

from ..config import ArenaConfig, RampConfig
from .noise import SeededRandom
from .shaping import smoothstep
from .types import RampPath, grid_coordinates, world_to_cell

logger = logging.getLogger(__name__)


class ConnectivityRouter:
    """
    Ramp network generator.

    Creates:
    - Radial ramps from inside the summit core out to the arena edge
    - Cross ramps on a mid-radius circle linking angular sectors

    Each ramp blends the heights inside its corridor toward an eased
    line between the heights currently found at its two endpoints.
    Cross ramps are carved first and the radial ramps last, so the
    summit connections are never cut by a later corridor.
    """

    def __init__(self, arena: ArenaConfig, ramps: RampConfig):
        self.arena = arena
        self.cfg = ramps

    def plan(self, seed: int, rng=None,
             hub: Tuple[float, float] = (0.0, 0.0)) -> List[RampPath]:
        """
        Ramp segments for a seed (or an injected uniform source).

        Args:
            seed: Resolved generation seed
            rng: Optional uniform source with ``random()``
            hub: World (x, z) the radial ramps start around (the summit)

        Returns:
            Radial ramps followed by cross ramps
        """
        if rng is None:
            rng = SeededRandom(seed)
        cfg = self.cfg
        half_width = self.arena.half_width
        half_depth = self.arena.half_depth
        hub_x, hub_z = hub

        ramps = []
        outer_radius = min(half_width, half_depth) - cfg.edge_inset
        for i in range(cfg.radial_count):
            base_angle = (i / cfg.radial_count) * math.pi * 2
            angle = base_angle + (rng.random() - 0.5) * cfg.radial_angle_jitter
            inner_radius = cfg.inner_radius + rng.random() * cfg.inner_radius_jitter
            width = cfg.width + rng.random() * cfg.width_jitter
            ramps.append(RampPath(
                start_x=hub_x + math.cos(angle) * inner_radius,
                start_z=hub_z + math.sin(angle) * inner_radius,
                end_x=math.cos(angle) * outer_radius,
                end_z=math.sin(angle) * outer_radius,
                width=width,
            ))

        mid_radius = (half_width + half_depth) / 4
        for i in range(cfg.cross_count):
            angle1 = (i / cfg.cross_count) * math.pi * 2 + rng.random() * cfg.cross_angle_jitter
            angle2 = angle1 + cfg.cross_span + rng.random() * cfg.cross_span_jitter
            ramps.append(RampPath(
                start_x=math.cos(angle1) * mid_radius,
                start_z=math.sin(angle1) * mid_radius,
                end_x=math.cos(angle2) * mid_radius,
                end_z=math.sin(angle2) * mid_radius,
                width=cfg.width * cfg.cross_width_factor,
            ))

        return ramps

    def profile(self, progress: np.ndarray) -> np.ndarray:
        """Share of the endpoint height difference covered at ``progress``"""
        ease = self.cfg.easing
        return (1.0 - ease) * progress + ease * smoothstep(0.0, 1.0, progress)

    def apply(self, heights: np.ndarray, ramps: List[RampPath]) -> np.ndarray:
        """
        Blend a set of ramp corridors toward their graded profiles (in place).

        Endpoint heights are sampled before any of the set is carved.
        Where corridors overlap, a cell follows the ramp whose centerline
        is nearest relative to that ramp's width, so each centerline
        keeps its own profile.
        """
        resolution = heights.shape[0]
        width, depth = self.arena.width, self.arena.depth
        x, z = grid_coordinates(resolution, width, depth)

        nearest = np.full(heights.shape, np.inf)
        target = np.zeros_like(heights)
        weight = np.zeros_like(heights)
        for ramp in ramps:
            distance = ramp.distance(x, z)
            relative = distance / ramp.width
            closer = (relative < 1.0) & (relative < nearest)
            if not np.any(closer):
                continue

            start_height = heights[world_to_cell(ramp.start_x, ramp.start_z, resolution, width, depth)]
            end_height = heights[world_to_cell(ramp.end_x, ramp.end_z, resolution, width, depth)]

            progress = ramp.progress(x[closer], z[closer])
            target[closer] = start_height + (end_height - start_height) * self.profile(progress)
            weight[closer] = smoothstep(ramp.width, ramp.width * self.cfg.core_fraction,
                                        distance[closer])
            nearest[closer] = relative[closer]

        heights[:] = heights * (1.0 - weight) + target * weight
        return heights

    def route(self, heights: np.ndarray, seed: int, rng=None,
              hub: Optional[Tuple[float, float]] = None) -> List[RampPath]:
        """Plan, then carve cross ramps followed by radial ramps"""
        ramps = self.plan(seed, rng, hub or (0.0, 0.0))
        radial, cross = ramps[:self.cfg.radial_count], ramps[self.cfg.radial_count:]
        self.apply(heights, cross)
        self.apply(heights, radial)
        logger.debug("Carved %d radial and %d cross ramps", len(radial), len(cross))
        return ramps

    def corridor_mask(self, resolution: int, ramps: List[RampPath],
                      margin: float = 1.0) -> np.ndarray:
        """Cells within ``width * margin`` of any ramp"""
        x, z = grid_coordinates(resolution, self.arena.width, self.arena.depth)
        mask = np.zeros((resolution, resolution), dtype=bool)
        for ramp in ramps:
            mask |= ramp.distance(x, z) < ramp.width * margin
        return mask
