"""
Angle wrapping and manipulation utilities.

Provides functions for handling angular quantities and ensuring they remain
within proper bounds (typically [-π, π] for radians).

Critical for:
- Heading comparisons near north (±180° wrap for southbound tracks)
- Heading error statistics in attitude evaluation
"""

import numpy as np
from typing import Union


def wrap_angle(angle: float) -> float:
    """
    Wrap angle to [-π, π] range.

    Args:
        angle: Angle in radians (can be any value)

    Returns:
        Wrapped angle in range [-π, π]

    Example:
        >>> wrap_angle(3.5 * np.pi)  # 630° -> -90°
        -1.5707963267948966
    """
    # Use atan2 trick for robust wrapping
    return float(np.arctan2(np.sin(angle), np.cos(angle)))


def wrap_angle_array(angles: np.ndarray) -> np.ndarray:
    """
    Wrap array of angles to [-π, π] range.

    Vectorized version of wrap_angle().
    """
    return np.arctan2(np.sin(angles), np.cos(angles))


def angle_diff(angle1: Union[float, np.ndarray],
               angle2: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Compute the shortest angular difference between two angles.

    Returns angle1 - angle2, wrapped to [-π, π].

    Args:
        angle1: First angle in radians (estimated)
        angle2: Second angle in radians (reference)

    Returns:
        Shortest signed difference angle1 - angle2 in [-π, π]

    Example:
        >>> angle_diff(np.pi - 0.1, -np.pi + 0.1)  # Nearly opposite
        -0.2
    """
    if isinstance(angle1, np.ndarray) or isinstance(angle2, np.ndarray):
        return wrap_angle_array(np.asarray(angle1) - np.asarray(angle2))
    else:
        return wrap_angle(angle1 - angle2)
