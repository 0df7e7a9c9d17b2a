"""
Terrain Types Module
====================

Data containers shared by the generation pipeline and its consumers.
"""

from dataclasses import dataclass, asdict
from typing import Tuple

import numpy as np

from ..config import TerrainConfig


@dataclass(frozen=True)
class TerrainFeature:
    """Guaranteed landmark stamped onto the field during generation"""
    x: float
    z: float
    radius: float
    target_height: float  # normalized 0-1


@dataclass(frozen=True)
class RampPath:
    """Graded corridor between two world points"""
    start_x: float
    start_z: float
    end_x: float
    end_z: float
    width: float  # corridor half-width

    def progress(self, px, pz):
        """Projected progress along the segment, clamped to [0, 1]"""
        dx = self.end_x - self.start_x
        dz = self.end_z - self.start_z
        length_sq = dx * dx + dz * dz
        if length_sq == 0:
            return np.zeros(np.broadcast(np.asarray(px), np.asarray(pz)).shape)
        t = ((px - self.start_x) * dx + (pz - self.start_z) * dz) / length_sq
        return np.clip(t, 0.0, 1.0)

    def distance(self, px, pz):
        """Distance from points to the segment"""
        t = self.progress(px, pz)
        proj_x = self.start_x + t * (self.end_x - self.start_x)
        proj_z = self.start_z + t * (self.end_z - self.start_z)
        return np.hypot(px - proj_x, pz - proj_z)


def grid_coordinates(resolution: int, width: float, depth: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    World (x, z) of every grid cell.

    Returned arrays are indexed [row, col] = [z, x]; the grid spans the
    arena exactly, from -width/2 to +width/2.
    """
    xs = (np.arange(resolution) / (resolution - 1) - 0.5) * width
    zs = (np.arange(resolution) / (resolution - 1) - 0.5) * depth
    return np.meshgrid(xs, zs)


def world_to_cell(x: float, z: float, resolution: int, width: float, depth: float) -> Tuple[int, int]:
    """Nearest-below grid cell (row, col) for a world point, clamped"""
    hx = (x / width + 0.5) * (resolution - 1)
    hz = (z / depth + 0.5) * (resolution - 1)
    col = int(min(max(np.floor(hx), 0), resolution - 1))
    row = int(min(max(np.floor(hz), 0), resolution - 1))
    return row, col


@dataclass(frozen=True, eq=False)
class TerrainData:
    """
    Published terrain snapshot.

    Created once per match and read-only afterwards: both arrays are
    flagged non-writeable on construction.
    """
    heights: np.ndarray  # (resolution, resolution) world units
    normals: np.ndarray  # (resolution, resolution, 3) unit vectors
    width: float
    depth: float
    resolution: int
    config: TerrainConfig
    seed: int  # seed actually used (resolved when config.seed == 0)

    def __post_init__(self):
        self.heights.flags.writeable = False
        self.normals.flags.writeable = False

    @property
    def cell_width(self) -> float:
        return self.width / (self.resolution - 1)

    @property
    def cell_depth(self) -> float:
        return self.depth / (self.resolution - 1)

    def normalized_heights(self) -> np.ndarray:
        return (self.heights - self.config.min_height) / self.config.height_range

    def save_to_npz(self, filepath: str):
        """Save snapshot to NPZ file"""
        np.savez_compressed(
            filepath,
            heights=self.heights,
            normals=self.normals,
            width=self.width,
            depth=self.depth,
            resolution=self.resolution,
            seed=self.seed,
            **{f'config_{k}': v for k, v in asdict(self.config).items()}
        )

    @classmethod
    def load_from_npz(cls, filepath: str) -> 'TerrainData':
        """Load snapshot from NPZ file"""
        data = np.load(filepath)
        config = TerrainConfig(
            resolution=int(data['config_resolution']),
            base_frequency=float(data['config_base_frequency']),
            octaves=int(data['config_octaves']),
            persistence=float(data['config_persistence']),
            min_height=float(data['config_min_height']),
            max_height=float(data['config_max_height']),
            smoothness=float(data['config_smoothness']),
            seed=int(data['config_seed']),
        )
        return cls(
            heights=np.array(data['heights'], dtype=np.float64),
            normals=np.array(data['normals'], dtype=np.float64),
            width=float(data['width']),
            depth=float(data['depth']),
            resolution=int(data['resolution']),
            config=config,
            seed=int(data['seed']),
        )
