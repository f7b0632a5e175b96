"""
Energy Module
=============

Battery drain accounting and path validation.
"""

from .model import BatteryModel, PathCheck

__all__ = [
    'BatteryModel',
    'PathCheck',
]
