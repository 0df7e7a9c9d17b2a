"""
Terrain Module
==============

Noise, elevation shaping, landmark and ramp placement, smoothing and
normals: the full procedural generation pipeline.
"""

from .types import TerrainData, TerrainFeature, RampPath, grid_coordinates, world_to_cell
from .noise import NoiseField, SeededRandom, sample, fractal_sample
from .shaping import ElevationShaper, apply_bias, apply_plateaus, smoothstep
from .features import FeaturePlacer
from .ramps import ConnectivityRouter
from .smoothing import Smoother, box_blur, masked_blur
from .normals import compute_normals, slope_degrees, slope_map
from .generator import TerrainGenerator, GenerationResult, GenerationCancelled, generate_terrain

__all__ = [
    'TerrainData',
    'TerrainFeature',
    'RampPath',
    'grid_coordinates',
    'world_to_cell',
    'NoiseField',
    'SeededRandom',
    'sample',
    'fractal_sample',
    'ElevationShaper',
    'apply_bias',
    'apply_plateaus',
    'smoothstep',
    'FeaturePlacer',
    'ConnectivityRouter',
    'Smoother',
    'box_blur',
    'masked_blur',
    'compute_normals',
    'slope_degrees',
    'slope_map',
    'TerrainGenerator',
    'GenerationResult',
    'GenerationCancelled',
    'generate_terrain',
]
