"""
Environment World Module
========================

Grid map representing the terrain snapshot a search runs over.
"""

import numpy as np
from pathlib import Path
from typing import Tuple, List, Dict, Iterable, Sequence, Union

from ..terrain import TerrainType, TerrainProperties


Cell = Tuple[int, int]

_LETTERS = frozenset(t.symbol for t in TerrainType)


class GridValidationError(ValueError):
    """Raised when a grid is empty, ragged or holds unknown terrain"""


class GridMap:
    """
    Immutable rectangular terrain grid.

    Contains:
    - Terrain type map (row-major, zero-based (row, col))

    Provides:
    - Bounds and terrain queries
    - Goal cell lookup
    - Text parsing/formatting
    - Map statistics
    """

    def __init__(self, terrain: np.ndarray):
        """
        Initialize grid.

        Args:
            terrain: 2-D integer array of TerrainType values

        Raises:
            GridValidationError: if the array is not a non-empty 2-D grid
                of known terrain values
        """
        terrain = np.asarray(terrain)
        if terrain.ndim != 2 or terrain.shape[0] == 0 or terrain.shape[1] == 0:
            raise GridValidationError(
                f"Grid must be a non-empty 2-D array, got shape {terrain.shape}")
        if not np.issubdtype(terrain.dtype, np.integer):
            raise GridValidationError(
                f"Grid array must hold integer terrain values, got {terrain.dtype}")

        known = np.isin(terrain, [int(t) for t in TerrainType])
        if not known.all():
            r, c = np.argwhere(~known)[0]
            raise GridValidationError(
                f"Unknown terrain value {int(terrain[r, c])} at ({r}, {c})")

        self._terrain = terrain.astype(np.int8, copy=True)
        self._terrain.setflags(write=False)

        # Goal cells are fixed for the lifetime of the snapshot
        self._goals: List[Cell] = [
            (int(r), int(c)) for r, c in np.argwhere(self._terrain == TerrainType.GOAL)
        ]

    # ==================== Construction ====================

    @classmethod
    def from_symbols(cls, rows: Sequence[Sequence[Union[str, int, TerrainType]]]) -> 'GridMap':
        """
        Build a grid from nested rows of terrain symbols.

        Raises:
            GridValidationError: on empty input, ragged rows or unknown symbols
        """
        rows = [list(row) for row in rows]
        if not rows or not rows[0]:
            raise GridValidationError("Grid must have at least one row and one column")

        width = len(rows[0])
        values = np.empty((len(rows), width), dtype=np.int8)
        for r, row in enumerate(rows):
            if len(row) != width:
                raise GridValidationError(
                    f"Row {r} has {len(row)} cells, expected {width}")
            for c, symbol in enumerate(row):
                try:
                    values[r, c] = TerrainType.from_symbol(symbol)
                except ValueError as e:
                    raise GridValidationError(f"{e} at ({r}, {c})") from e
        return cls(values)

    @classmethod
    def from_text(cls, text: str) -> 'GridMap':
        """
        Parse a grid from text.

        One row per line. Symbols may be separated by whitespace or written
        contiguously ("FHFD"). A lone word that is not made only of
        single-letter symbols ("Flat") is read as one cell. Blank lines and
        lines starting with '#' are ignored.
        """
        rows = []
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            tokens = line.split()
            if len(tokens) == 1 and all(ch.upper() in _LETTERS for ch in tokens[0]):
                tokens = list(tokens[0])
            rows.append(tokens)
        return cls.from_symbols(rows)

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> 'GridMap':
        """Load grid from a text file"""
        return cls.from_text(Path(filepath).read_text())

    # ==================== Property Access ====================

    @property
    def terrain(self) -> np.ndarray:
        """Terrain type map (read-only)"""
        return self._terrain

    @property
    def rows(self) -> int:
        return self._terrain.shape[0]

    @property
    def cols(self) -> int:
        return self._terrain.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    # ==================== Cell Queries ====================

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if cell is within grid bounds"""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def terrain_at(self, row: int, col: int) -> TerrainType:
        """Get terrain type at cell"""
        return TerrainType(int(self._terrain[row, col]))

    def cost_at(self, row: int, col: int):
        """Battery cost to enter cell, None if impassable"""
        return TerrainProperties.get_cost(self.terrain_at(row, col))

    def is_goal(self, row: int, col: int) -> bool:
        return bool(self._terrain[row, col] == TerrainType.GOAL)

    def goal_cells(self) -> List[Cell]:
        """All Goal-marked cells in row-major order"""
        return list(self._goals)

    def with_cell(self, row: int, col: int,
                  terrain: Union[str, TerrainType]) -> 'GridMap':
        """Return a copy with one cell replaced"""
        if not self.in_bounds(row, col):
            raise GridValidationError(f"Cell ({row}, {col}) is outside the grid")
        values = self._terrain.copy()
        values[row, col] = TerrainType.from_symbol(terrain)
        return GridMap(values)

    # ==================== Conversion ====================

    def to_symbols(self) -> List[List[str]]:
        return [[TerrainType(int(v)).symbol for v in row] for row in self._terrain]

    def to_text(self) -> str:
        return '\n'.join(' '.join(row) for row in self.to_symbols())

    # ==================== Statistics ====================

    def get_stats(self) -> Dict:
        """Terrain distribution and goal count"""
        total_cells = self.rows * self.cols

        terrain_counts = {}
        for t in TerrainType:
            count = int(np.sum(self._terrain == t))
            terrain_counts[t.name_lower] = {
                'count': count,
                'percentage': float(count / total_cells * 100)
            }

        return {
            'rows': self.rows,
            'cols': self.cols,
            'total_cells': total_cells,
            'terrain_distribution': terrain_counts,
            'goal_count': len(self._goals),
        }

    # ==================== Dunder ====================

    def __eq__(self, other) -> bool:
        if not isinstance(other, GridMap):
            return NotImplemented
        return np.array_equal(self._terrain, other._terrain)

    def __hash__(self) -> int:
        return hash((self.shape, self._terrain.tobytes()))

    def __repr__(self) -> str:
        return f"GridMap({self.rows}x{self.cols}, goals={len(self._goals)})"


def as_grid(grid: Union[GridMap, Iterable[Sequence]]) -> GridMap:
    """Coerce a GridMap or nested symbol rows into a GridMap"""
    if isinstance(grid, GridMap):
        return grid
    if isinstance(grid, np.ndarray) and np.issubdtype(grid.dtype, np.integer):
        return GridMap(grid)
    return GridMap.from_symbols(grid)
