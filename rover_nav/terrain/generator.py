"""
Terrain Generator Module
========================

Procedural generation of random rover grids, plus the fixed demo grid.
Single Responsibility: Only generates terrain layouts and start/goal cells.
"""

import numpy as np
from scipy.ndimage import gaussian_filter
from typing import Tuple, Optional, List
from dataclasses import dataclass

from .types import TerrainType
from ..config import MapConfig


def default_grid() -> List[List[str]]:
    """The 6x6 demonstration grid (start (0,0), goal (5,5))"""
    return [
        ["F", "H", "F", "F", "D", "F"],
        ["H", "D", "H", "F", "H", "F"],
        ["F", "F", "D", "H", "F", "F"],
        ["F", "H", "F", "D", "H", "F"],
        ["D", "F", "F", "H", "F", "H"],
        ["F", "D", "H", "F", "H", "G"],
    ]


@dataclass
class GeneratedMap:
    """Container for a generated scenario"""
    terrain: np.ndarray  # TerrainType values
    start: Tuple[int, int]
    goal: Tuple[int, int]  # first placed goal, used as heuristic fallback

    @property
    def shape(self) -> Tuple[int, int]:
        return self.terrain.shape

    def goal_cells(self) -> List[Tuple[int, int]]:
        return [(int(r), int(c)) for r, c in np.argwhere(self.terrain == TerrainType.GOAL)]


class MapGenerator:
    """
    Procedural grid generator for rover search scenarios.

    Creates terrain with:
    - Flat background
    - Smooth hill regions
    - Ditch clusters (impassable)
    - One or more goal cells away from the start
    """

    def __init__(self, config: Optional[MapConfig] = None, seed: Optional[int] = None):
        self.config = config or MapConfig()
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.rows = self.config.rows
        self.cols = self.config.cols

    def generate(self) -> GeneratedMap:
        """Generate terrain plus start and goal cells"""
        terrain = np.full((self.rows, self.cols), TerrainType.FLAT, dtype=np.int8)

        # 1. Hill regions
        self._add_regions(terrain, TerrainType.HILL, self.config.hill_fraction)

        # 2. Ditch regions (independent field so ditches can cut through hills)
        self._add_regions(terrain, TerrainType.DITCH, self.config.ditch_fraction)

        # 3. Start cell is always enterable
        start = self._pick_start()
        terrain[start] = TerrainType.FLAT

        # 4. Goals
        goals = self._place_goals(terrain, start)

        return GeneratedMap(terrain=terrain, start=start, goal=goals[0])

    def _add_regions(self, terrain: np.ndarray, terrain_type: TerrainType, fraction: float):
        """Threshold a smoothed noise field so roughly `fraction` cells get terrain_type"""
        if fraction <= 0.0:
            return

        noise = self.rng.standard_normal((self.rows, self.cols))
        field = gaussian_filter(noise, sigma=self.config.smoothing_sigma, mode='wrap')

        threshold = np.quantile(field, 1.0 - min(fraction, 1.0))
        terrain[field > threshold] = terrain_type

    def _pick_start(self) -> Tuple[int, int]:
        if self.config.random_start:
            return (int(self.rng.integers(0, self.rows)),
                    int(self.rng.integers(0, self.cols)))
        return (0, 0)

    def _place_goals(self, terrain: np.ndarray, start: Tuple[int, int]) -> List[Tuple[int, int]]:
        """Place goal cells, preferring the half of the grid farthest from start"""
        candidates = [
            (r, c) for r in range(self.rows) for c in range(self.cols)
            if (r, c) != start
        ]
        if not candidates:
            # 1x1 grid: the start itself is the goal
            terrain[start] = TerrainType.GOAL
            return [start]

        distances = np.array([abs(r - start[0]) + abs(c - start[1]) for r, c in candidates])
        far = [cell for cell, d in zip(candidates, distances) if d >= np.median(distances)]

        count = min(self.config.goal_count, len(far))
        picks = self.rng.choice(len(far), size=count, replace=False)

        goals = [far[int(i)] for i in sorted(picks)]
        for r, c in goals:
            terrain[r, c] = TerrainType.GOAL
        return goals
