"""
Metrics Module
==============

Reachability analysis and terrain statistics.
"""

from .terrain_metrics import (
    ReachabilityReport,
    traversable_mask,
    reachable_mask,
    analyze_reachability,
    terrain_stats,
)

__all__ = [
    'ReachabilityReport',
    'traversable_mask',
    'reachable_mask',
    'analyze_reachability',
    'terrain_stats',
]
