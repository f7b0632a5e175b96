"""
Configuration Module
====================

Centralized configuration management for the rover search package.
"""

from .settings import (
    Config,
    SearchConfig,
    MapConfig,
)

__all__ = [
    'Config',
    'SearchConfig',
    'MapConfig',
]
