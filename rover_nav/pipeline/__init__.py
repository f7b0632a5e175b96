"""
Pipeline Module
===============

Strategy comparison runner.
"""

from .runner import ExperimentRunner, ScenarioResult, AggregatedResults

__all__ = [
    'ExperimentRunner',
    'ScenarioResult',
    'AggregatedResults',
]
