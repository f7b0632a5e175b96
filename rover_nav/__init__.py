"""
Rover Search - Battery-Bounded Grid Search
==========================================

Depth-first, breadth-first and greedy best-first search for a rover
crossing a terrain grid where every move drains its battery.

Search states are (row, col, remaining battery), so a cell reached again
with a different charge is explored again.

Key Features:
- Terrain cost table (Flat 2, Hill 4, Goal 2, Ditch impassable)
- Full visited-order trace plus reconstructed path per run
- Multi-goal Manhattan heuristic for best-first search
- Seeded random grid generation and strategy comparison runner

Author: Rover Navigation Team
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Rover Navigation Team"

from .config import Config, SearchConfig, MapConfig
from .terrain import TerrainType, TerrainProperties, MapGenerator, GeneratedMap, default_grid
from .environment import GridMap, GridValidationError, as_grid
from .energy import BatteryModel, PathCheck
from .planning import (
    MinPriorityQueue,
    SearchState,
    SearchInputError,
    StateSpace,
    SearchResult,
    VisitRecord,
    depth_first_search,
    breadth_first_search,
    best_first_search,
    run_search,
)
from .metrics import PathMetrics, compute_path_metrics, RunStatus, RunClassifier
from .pipeline import ExperimentRunner

__all__ = [
    'Config', 'SearchConfig', 'MapConfig',
    'TerrainType', 'TerrainProperties', 'MapGenerator', 'GeneratedMap', 'default_grid',
    'GridMap', 'GridValidationError', 'as_grid',
    'BatteryModel', 'PathCheck',
    'MinPriorityQueue', 'SearchState', 'SearchInputError', 'StateSpace',
    'SearchResult', 'VisitRecord',
    'depth_first_search', 'breadth_first_search', 'best_first_search', 'run_search',
    'PathMetrics', 'compute_path_metrics', 'RunStatus', 'RunClassifier',
    'ExperimentRunner',
]
