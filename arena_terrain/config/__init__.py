"""
Configuration Module
====================

Centralized configuration management for arena terrain and locomotion.
"""

from .settings import (
    Config,
    ConfigError,
    TerrainConfig,
    ArenaConfig,
    ShapingConfig,
    FeatureConfig,
    RampConfig,
    SmoothingConfig,
    LocomotionConfig,
    FallConfig,
    PlacementConfig,
    default_config,
    MAX_SEED,
)

__all__ = [
    'Config',
    'ConfigError',
    'TerrainConfig',
    'ArenaConfig',
    'ShapingConfig',
    'FeatureConfig',
    'RampConfig',
    'SmoothingConfig',
    'LocomotionConfig',
    'FallConfig',
    'PlacementConfig',
    'default_config',
    'MAX_SEED',
]
