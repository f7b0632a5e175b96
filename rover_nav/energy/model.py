"""
Battery Model Module
====================

Battery accounting along grid paths.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..environment import GridMap
from ..terrain import TerrainType


Cell = Tuple[int, int]


@dataclass
class PathCheck:
    """Outcome of validating a path against a grid and battery budget"""
    valid: bool
    reason: str = ''
    final_battery: Optional[int] = None

    def to_dict(self) -> Dict:
        return {
            'valid': self.valid,
            'reason': self.reason,
            'final_battery': self.final_battery,
        }


class BatteryModel:
    """
    Battery drain model.

    Entering a cell costs its terrain cost; the start cell costs nothing.
    """

    def __init__(self, grid: GridMap):
        self.grid = grid

    def step_cost(self, row: int, col: int) -> Optional[int]:
        """Cost to enter a cell, None if outside the grid or impassable"""
        if not self.grid.in_bounds(row, col):
            return None
        return self.grid.cost_at(row, col)

    def path_cost(self, path: Sequence[Cell]) -> Optional[int]:
        """Total battery used along a path, None if any step is impassable"""
        total = 0
        for row, col in path[1:]:
            cost = self.step_cost(row, col)
            if cost is None:
                return None
            total += cost
        return total

    def battery_profile(self, path: Sequence[Cell], battery: int) -> List[int]:
        """
        Remaining battery at each cell of the path.

        The first entry is the initial battery. Values are not clamped, so
        a negative entry marks where the budget ran out.

        Raises:
            ValueError: if a step enters an impassable or out-of-bounds cell
        """
        if not path:
            return []

        profile = [battery]
        for row, col in path[1:]:
            cost = self.step_cost(row, col)
            if cost is None:
                raise ValueError(f"Cell ({row}, {col}) cannot be entered")
            profile.append(profile[-1] - cost)
        return profile

    def terrain_steps(self, path: Sequence[Cell]) -> Dict[str, int]:
        """Number of cells entered per terrain type"""
        counts = {t.name_lower: 0 for t in TerrainType}
        for row, col in path[1:]:
            counts[self.grid.terrain_at(row, col).name_lower] += 1
        return counts

    def validate_path(self, path: Sequence[Cell], battery: int) -> PathCheck:
        """Check adjacency, passability and that battery never goes negative"""
        if not path:
            return PathCheck(False, 'empty_path')

        remaining = battery
        prev = None
        for i, (row, col) in enumerate(path):
            if not self.grid.in_bounds(row, col):
                return PathCheck(False, f'out_of_bounds_at_{i}')
            if prev is not None:
                if abs(row - prev[0]) + abs(col - prev[1]) != 1:
                    return PathCheck(False, f'not_adjacent_at_{i}')
                cost = self.grid.cost_at(row, col)
                if cost is None:
                    return PathCheck(False, f'impassable_at_{i}')
                remaining -= cost
                if remaining < 0:
                    return PathCheck(False, f'battery_exhausted_at_{i}')
            prev = (row, col)

        return PathCheck(True, 'ok', remaining)
