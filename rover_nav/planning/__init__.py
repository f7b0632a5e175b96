"""
Planning Module
===============

Expanded-state search: DFS, BFS and greedy best-first.
"""

from .priority_queue import MinPriorityQueue
from .state_space import (
    SearchState,
    SearchInputError,
    StateSpace,
    reconstruct_path,
)
from .search import (
    SearchResult,
    VisitRecord,
    depth_first_search,
    breadth_first_search,
    best_first_search,
    run_search,
    resolve_strategy,
    STRATEGIES,
)

__all__ = [
    'MinPriorityQueue',
    'SearchState',
    'SearchInputError',
    'StateSpace',
    'reconstruct_path',
    'SearchResult',
    'VisitRecord',
    'depth_first_search',
    'breadth_first_search',
    'best_first_search',
    'run_search',
    'resolve_strategy',
    'STRATEGIES',
]
