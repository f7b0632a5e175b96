"""
State Space Module
==================

Expanded-state graph over (row, col, battery).

The same cell may be reached several times with different remaining
battery; each arrival is a distinct state.
"""

from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from ..environment import GridMap


Cell = Tuple[int, int]

# Canonical exploration order: up, down, left, right
DIRECTIONS: Tuple[Cell, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class SearchInputError(ValueError):
    """Raised when a search request is invalid before the search starts"""


class SearchState(NamedTuple):
    """Expanded state; equality and hashing over all three fields"""
    row: int
    col: int
    battery: int

    @property
    def cell(self) -> Cell:
        return (self.row, self.col)


class StateSpace:
    """
    Feasibility, successor and goal queries for one search request.

    Args:
        grid: Grid snapshot (not modified)
        goal: Optional goal cell used only for the heuristic when the grid
            holds no Goal cell
    """

    def __init__(self, grid: GridMap, goal: Optional[Cell] = None):
        self.grid = grid
        self.fallback_goal = tuple(goal) if goal is not None else None
        self._goals: List[Cell] = grid.goal_cells()

    # ==================== Graph ====================

    @staticmethod
    def neighbors(row: int, col: int) -> List[Cell]:
        """Four axis-aligned neighbors in canonical order (bounds unchecked)"""
        return [(row + dr, col + dc) for dr, dc in DIRECTIONS]

    def feasible(self, row: int, col: int, battery: int) -> bool:
        """True if the cell can be entered with the given battery"""
        if not self.grid.in_bounds(row, col):
            return False
        cost = self.grid.cost_at(row, col)
        return cost is not None and battery - cost >= 0

    def successors(self, state: SearchState) -> Iterator[SearchState]:
        """Feasible neighbor states in canonical order"""
        for row, col in self.neighbors(state.row, state.col):
            if self.feasible(row, col, state.battery):
                yield SearchState(row, col, state.battery - self.grid.cost_at(row, col))

    def is_goal(self, row: int, col: int) -> bool:
        return self.grid.is_goal(row, col)

    # ==================== Heuristic ====================

    @property
    def has_heuristic_target(self) -> bool:
        return bool(self._goals) or self.fallback_goal is not None

    def heuristic(self, row: int, col: int) -> int:
        """Manhattan distance to the nearest Goal cell, else to the fallback goal"""
        if self._goals:
            return min(abs(row - gr) + abs(col - gc) for gr, gc in self._goals)
        if self.fallback_goal is None:
            raise SearchInputError("No Goal cell in grid and no goal supplied")
        gr, gc = self.fallback_goal
        return abs(row - gr) + abs(col - gc)


def reconstruct_path(parent: Dict[SearchState, Optional[SearchState]],
                     final: SearchState) -> List[Cell]:
    """Walk the predecessor map back from `final` and return start-to-goal cells"""
    path = []
    current: Optional[SearchState] = final
    while current is not None:
        path.append(current.cell)
        current = parent[current]
    path.reverse()
    return path
