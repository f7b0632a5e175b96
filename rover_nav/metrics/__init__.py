"""
Metrics Module
==============

Path metrics, statistics, and run classification.
"""

from .path_metrics import (
    PathMetrics,
    compute_path_metrics,
    summarize,
    RunStatus,
    RunClassifier,
)

__all__ = [
    'PathMetrics',
    'compute_path_metrics',
    'summarize',
    'RunStatus',
    'RunClassifier',
]
