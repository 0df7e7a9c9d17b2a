"""
Arena Terrain - Modular Architecture
====================================

Seeded procedural terrain for arena combat, plus the terrain-aware
locomotion and fall-damage rules that play out on it.

Key Features:
- Deterministic fractal-noise heightmaps with terraced plateaus
- Guaranteed mid plateaus, a central summit and connecting ramps
- Immutable published snapshots with last-writer-wins regeneration
- Slope-aware movement: cliff blocking, sliding, stamina
- Apex-tracked fall damage with stagger
- Reachability metrics, multi-seed surveys and plotting

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import Config, ConfigError, TerrainConfig, ArenaConfig, default_config
from .terrain import (
    TerrainData,
    TerrainGenerator,
    GenerationResult,
    GenerationCancelled,
    NoiseField,
    generate_terrain,
)
from .environment import TerrainQuery, TerrainService, spawn_points, placement_sites
from .locomotion import (
    MovementIntent,
    LocomotionState,
    LocomotionController,
    FallTracker,
    FallImpact,
    fall_damage,
)
from .simulation import SimulationRegistry, EntityRecord
from .metrics import analyze_reachability, reachable_mask, terrain_stats
from .visualization import TerrainVisualizer
from .pipeline import SurveyRunner

__all__ = [
    'Config', 'ConfigError', 'TerrainConfig', 'ArenaConfig', 'default_config',
    'TerrainData', 'TerrainGenerator', 'GenerationResult', 'GenerationCancelled',
    'NoiseField', 'generate_terrain',
    'TerrainQuery', 'TerrainService', 'spawn_points', 'placement_sites',
    'MovementIntent', 'LocomotionState', 'LocomotionController',
    'FallTracker', 'FallImpact', 'fall_damage',
    'SimulationRegistry', 'EntityRecord',
    'analyze_reachability', 'reachable_mask', 'terrain_stats',
    'TerrainVisualizer',
    'SurveyRunner',
]
