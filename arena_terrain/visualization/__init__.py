"""
Visualization Module
====================

Heightmap, slope and reachability figures.
"""

from .plots import VisualizationConfig, TerrainVisualizer

__all__ = [
    'VisualizationConfig',
    'TerrainVisualizer',
]
