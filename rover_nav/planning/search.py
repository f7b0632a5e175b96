"""
Search Drivers Module
=====================

Depth-first, breadth-first and greedy best-first search over the
expanded (row, col, battery) state space.

Every driver runs synchronously to completion and returns a SearchResult.
Not finding a goal is a normal outcome (empty path, final_battery None).
"""

import numbers
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Set, Tuple, Union

from ..environment import GridMap, as_grid
from .priority_queue import MinPriorityQueue
from .state_space import Cell, SearchInputError, SearchState, StateSpace, reconstruct_path


class VisitRecord(NamedTuple):
    """One entry of the visited-order trace"""
    row: int
    col: int
    battery: int


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one search run"""
    strategy: str
    visited_order: List[VisitRecord] = field(default_factory=list)
    path: List[Cell] = field(default_factory=list)
    final_battery: Optional[int] = None

    @property
    def nodes_expanded(self) -> int:
        return len(self.visited_order)

    @property
    def found(self) -> bool:
        return bool(self.path)

    def to_dict(self) -> Dict:
        """Plain structure for JSON output"""
        return {
            'strategy': self.strategy,
            'visited_order': [
                {'row': v.row, 'col': v.col, 'battery': v.battery}
                for v in self.visited_order
            ],
            'path': [list(cell) for cell in self.path],
            'nodes_expanded': self.nodes_expanded,
            'final_battery': self.final_battery,
        }


GridLike = Union[GridMap, Sequence[Sequence[str]]]


def _prepare(grid: GridLike, start: Cell, battery: int,
             goal: Optional[Cell]) -> Tuple[StateSpace, SearchState]:
    """Validate the request and build the state space and start state"""
    grid = as_grid(grid)

    if isinstance(battery, bool) or not isinstance(battery, numbers.Integral):
        raise SearchInputError(f"battery must be an integer, got {battery!r}")
    if battery < 0:
        raise SearchInputError(f"battery must be non-negative, got {battery}")

    row, col = _cell(start, 'start')
    if not grid.in_bounds(row, col):
        raise SearchInputError(f"start {(row, col)} is outside the {grid.rows}x{grid.cols} grid")

    if goal is not None:
        goal = _cell(goal, 'goal')
        if not grid.in_bounds(*goal):
            raise SearchInputError(f"goal {goal} is outside the {grid.rows}x{grid.cols} grid")

    return StateSpace(grid, goal), SearchState(row, col, int(battery))


def _cell(value, name: str) -> Cell:
    try:
        row, col = value
    except (TypeError, ValueError) as e:
        raise SearchInputError(f"{name} must be a (row, col) pair, got {value!r}") from e
    if not all(isinstance(v, numbers.Integral) and not isinstance(v, bool) for v in (row, col)):
        raise SearchInputError(f"{name} must hold integer coordinates, got {value!r}")
    return int(row), int(col)


def _success(strategy: str, trace: List[VisitRecord],
             parent: Dict[SearchState, Optional[SearchState]],
             state: SearchState) -> SearchResult:
    return SearchResult(
        strategy=strategy,
        visited_order=trace,
        path=reconstruct_path(parent, state),
        final_battery=state.battery,
    )


def depth_first_search(grid: GridLike, start: Cell, battery: int,
                       goal: Optional[Cell] = None) -> SearchResult:
    """
    Exhaustive iterative DFS.

    Returns the first goal state finalized, which is not necessarily the
    shortest or cheapest. Successors are pushed in reverse canonical order
    so the stack explores up, down, left, right.
    """
    space, start_state = _prepare(grid, start, battery, goal)

    stack = [start_state]
    visited: Set[SearchState] = set()
    parent: Dict[SearchState, Optional[SearchState]] = {start_state: None}
    trace: List[VisitRecord] = []

    while stack:
        state = stack.pop()
        if state in visited:
            continue
        visited.add(state)
        trace.append(VisitRecord(*state))

        if space.is_goal(state.row, state.col):
            return _success('depth-first', trace, parent, state)

        for nxt in reversed(list(space.successors(state))):
            if nxt in visited:
                continue
            stack.append(nxt)
            # First discovery wins
            parent.setdefault(nxt, state)

    return SearchResult(strategy='depth-first', visited_order=trace)


def breadth_first_search(grid: GridLike, start: Cell, battery: int,
                         goal: Optional[Cell] = None) -> SearchResult:
    """
    FIFO search; minimizes the number of state transitions to a goal.

    Not necessarily the cheapest path in battery terms.
    """
    space, start_state = _prepare(grid, start, battery, goal)

    queue = deque([start_state])
    visited: Set[SearchState] = set()
    parent: Dict[SearchState, Optional[SearchState]] = {start_state: None}
    trace: List[VisitRecord] = []

    while queue:
        state = queue.popleft()
        if state in visited:
            continue
        visited.add(state)
        trace.append(VisitRecord(*state))

        if space.is_goal(state.row, state.col):
            return _success('breadth-first', trace, parent, state)

        for nxt in space.successors(state):
            if nxt in visited or nxt in parent:
                continue
            parent[nxt] = state
            queue.append(nxt)

    return SearchResult(strategy='breadth-first', visited_order=trace)


def best_first_search(grid: GridLike, start: Cell, battery: int,
                      goal: Optional[Cell] = None) -> SearchResult:
    """
    Greedy best-first search ordered by the heuristic alone.

    Priority is the Manhattan distance to the nearest Goal cell (or to
    `goal` when the grid has none), computed once at enqueue time. This is
    not A*: accumulated cost is ignored and the result is not optimal.
    """
    space, start_state = _prepare(grid, start, battery, goal)
    if not space.has_heuristic_target:
        raise SearchInputError(
            "best-first search needs a Goal cell in the grid or a supplied goal")

    frontier = MinPriorityQueue()
    frontier.push(start_state, space.heuristic(start_state.row, start_state.col))
    visited: Set[SearchState] = set()
    parent: Dict[SearchState, Optional[SearchState]] = {start_state: None}
    trace: List[VisitRecord] = []

    while frontier:
        state = frontier.pop()
        if state in visited:
            continue
        visited.add(state)
        trace.append(VisitRecord(*state))

        if space.is_goal(state.row, state.col):
            return _success('best-first', trace, parent, state)

        for nxt in space.successors(state):
            if nxt in visited or nxt in parent:
                continue
            parent[nxt] = state
            frontier.push(nxt, space.heuristic(nxt.row, nxt.col))

    return SearchResult(strategy='best-first', visited_order=trace)


STRATEGIES: Dict[str, Callable[..., SearchResult]] = {
    'depth-first': depth_first_search,
    'breadth-first': breadth_first_search,
    'best-first': best_first_search,
}

_ALIASES = {
    'dfs': 'depth-first',
    'bfs': 'breadth-first',
    'best': 'best-first',
    'greedy': 'best-first',
}


def resolve_strategy(name: str) -> str:
    """Canonical strategy name for a name or alias"""
    key = name.strip().lower().replace('_', '-')
    key = _ALIASES.get(key, key)
    if key not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {name}")
    return key


def run_search(strategy: str, grid: GridLike, start: Cell, battery: int,
               goal: Optional[Cell] = None) -> SearchResult:
    """Run the named strategy ('depth-first', 'breadth-first', 'best-first')"""
    return STRATEGIES[resolve_strategy(strategy)](grid, start, battery, goal)
