"""
Simulation Module
=================

Entity records and the per-tick locomotion / fall loop.
"""

from .registry import EntityRecord, TickReport, GravityIntegrator, SimulationRegistry

__all__ = [
    'EntityRecord',
    'TickReport',
    'GravityIntegrator',
    'SimulationRegistry',
]
