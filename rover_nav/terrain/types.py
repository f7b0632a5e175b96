"""
Terrain Types Module
====================

Defines terrain type enumeration and the battery cost table.
"""

import numbers
from enum import IntEnum
from typing import Dict, Optional, Union


class TerrainType(IntEnum):
    """
    Terrain type enumeration.

    Values are integers for efficient numpy array storage.
    """
    FLAT = 0
    HILL = 1
    DITCH = 2
    GOAL = 3

    @classmethod
    def from_symbol(cls, symbol: Union[str, int, 'TerrainType']) -> 'TerrainType':
        """
        Parse a grid symbol.

        Accepts single-letter symbols ('F', 'H', 'D', 'G'), full names
        ('flat', 'Hill', ...) or an existing TerrainType.

        Raises:
            ValueError: if the symbol is not a known terrain
        """
        if isinstance(symbol, TerrainType):
            return symbol
        if isinstance(symbol, numbers.Integral) and not isinstance(symbol, bool):
            if int(symbol) in cls._value2member_map_:
                return cls(int(symbol))
        elif isinstance(symbol, str):
            text = symbol.strip().upper()
            if text in _SYMBOL_LOOKUP:
                return _SYMBOL_LOOKUP[text]
            if text in cls.__members__:
                return cls[text]
        raise ValueError(f"Unknown terrain symbol: {symbol!r}")

    @property
    def symbol(self) -> str:
        """Single-letter grid symbol"""
        return self.name[0]

    @property
    def name_lower(self) -> str:
        """Get lowercase name"""
        return self.name.lower()

    def is_traversable(self) -> bool:
        """Check if terrain can be entered"""
        return self != TerrainType.DITCH


_SYMBOL_LOOKUP: Dict[str, TerrainType] = {t.symbol: t for t in TerrainType}


class TerrainProperties:
    """
    Static terrain properties lookup.

    Battery consumed when entering a cell of each terrain. Ditch has no
    finite cost and can never be entered.
    """

    COST: Dict[TerrainType, Optional[int]] = {
        TerrainType.FLAT: 2,
        TerrainType.HILL: 4,
        TerrainType.DITCH: None,
        TerrainType.GOAL: 2,
    }

    @classmethod
    def get_cost(cls, terrain_type: TerrainType) -> Optional[int]:
        """Battery cost to enter terrain, None if impassable"""
        return cls.COST[TerrainType(terrain_type)]

    @classmethod
    def min_cost(cls) -> int:
        """Cheapest finite entry cost"""
        return min(c for c in cls.COST.values() if c is not None)
