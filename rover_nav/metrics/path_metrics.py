"""
Path Metrics Module
===================

Metrics for search results and run classification.
"""

import numpy as np
from typing import Dict, Optional, Tuple
from dataclasses import dataclass, field

from ..energy import BatteryModel
from ..environment import GridMap


@dataclass
class PathMetrics:
    """
    Metrics for one search result.

    Tracks:
    - Path steps and battery usage
    - Terrain breakdown of entered cells
    - Search effort (expanded states vs distinct cells)
    """

    steps: int = 0               # state transitions along the path
    battery_start: int = 0
    battery_used: int = 0
    final_battery: Optional[int] = None

    nodes_expanded: int = 0
    distinct_cells: int = 0

    terrain_steps: Dict[str, int] = field(default_factory=dict)

    @property
    def revisit_ratio(self) -> float:
        """Expanded states per distinct cell (1.0 means no cell revisited)"""
        if self.distinct_cells == 0:
            return 0.0
        return self.nodes_expanded / self.distinct_cells

    @property
    def battery_fraction_used(self) -> float:
        if self.battery_start <= 0:
            return 0.0
        return self.battery_used / self.battery_start

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization"""
        return {
            'steps': self.steps,
            'battery_start': self.battery_start,
            'battery_used': self.battery_used,
            'final_battery': self.final_battery,
            'battery_fraction_used': self.battery_fraction_used,
            'nodes_expanded': self.nodes_expanded,
            'distinct_cells': self.distinct_cells,
            'revisit_ratio': self.revisit_ratio,
            'terrain_steps': self.terrain_steps,
        }


def compute_path_metrics(result, grid: GridMap, battery: int) -> PathMetrics:
    """
    Compute metrics for a SearchResult.

    Args:
        result: SearchResult from any driver
        grid: Grid the search ran on
        battery: Initial battery of the search

    Returns:
        PathMetrics object
    """
    model = BatteryModel(grid)

    metrics = PathMetrics(
        battery_start=battery,
        nodes_expanded=result.nodes_expanded,
        distinct_cells=len({(v.row, v.col) for v in result.visited_order}),
    )

    if result.path:
        metrics.steps = len(result.path) - 1
        metrics.battery_used = model.path_cost(result.path)
        metrics.final_battery = result.final_battery
        metrics.terrain_steps = model.terrain_steps(result.path)

    return metrics


def summarize(values) -> Dict[str, Optional[float]]:
    """Mean/std of a list, None when empty"""
    if not values:
        return {'mean': None, 'std': None}
    arr = np.asarray(values, dtype=float)
    return {'mean': float(arr.mean()), 'std': float(arr.std())}


class RunStatus:
    """Enumeration of run status types"""
    SUCCESS = 'success'
    NO_PATH = 'no_path'
    ERROR = 'error'


class RunClassifier:
    """
    Classifies search outcomes.

    Categories:
    - success: Path reached a Goal cell within the battery budget
    - no_path: Search exhausted without reaching a goal
    - error: Returned path failed validation
    """

    def classify(self, result, grid: GridMap, battery: int) -> Tuple[str, Optional[str]]:
        """
        Classify run outcome.

        Returns:
            Tuple of (status, failure_type)
        """
        if not result.path:
            return RunStatus.NO_PATH, 'no_path'

        check = BatteryModel(grid).validate_path(result.path, battery)
        if not check.valid:
            return RunStatus.ERROR, check.reason

        row, col = result.path[-1]
        if not grid.is_goal(row, col):
            return RunStatus.ERROR, 'not_at_goal'

        return RunStatus.SUCCESS, None
