"""
Utility functions for attitude estimation.

This module provides angle operations and the exponential smoothing helper
shared by the estimators and the evaluation code.
"""

from .angles import wrap_angle, wrap_angle_array, angle_diff
from .smoothing import ema_update, ema_time_constant

__all__ = [
    'wrap_angle',
    'wrap_angle_array',
    'angle_diff',
    'ema_update',
    'ema_time_constant',
]
