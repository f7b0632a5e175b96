"""
Terrain Module
==============

Terrain types, battery costs, and grid generation.
"""

from .types import TerrainType, TerrainProperties
from .generator import MapGenerator, GeneratedMap, default_grid

__all__ = [
    'TerrainType',
    'TerrainProperties',
    'MapGenerator',
    'GeneratedMap',
    'default_grid',
]
