"""
Environment Module
==================

Grid snapshot the searches run over.
"""

from .world import GridMap, GridValidationError, as_grid

__all__ = [
    'GridMap',
    'GridValidationError',
    'as_grid',
]
