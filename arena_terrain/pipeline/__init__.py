"""
Pipeline Module
===============

Multi-seed survey runner.
"""

from .runner import SurveyRunner, SeedResult, SurveySummary

__all__ = [
    'SurveyRunner',
    'SeedResult',
    'SurveySummary',
]
