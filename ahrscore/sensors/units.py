"""
Unit conversion utilities for GPS velocity and accelerometer data.

GPS receivers commonly report ground speed in knots while the estimators
work in m/s, and accelerometers are read in g while finite-difference
accelerations come out in m/s². All function names state both the input
and output units.
"""

import numpy as np
from typing import Union

from ahrscore.sensors.gravity import STANDARD_GRAVITY

# Type alias for numeric types
Numeric = Union[float, np.ndarray]

# International nautical mile per hour, m/s
MPS_PER_KNOT = 1852.0 / 3600.0


# ============================================================================
# Velocity Unit Conversions
# ============================================================================

def knots_to_mps(knots: Numeric) -> Numeric:
    """
    Convert speed from knots to m/s.

    Example:
        >>> print(f"{knots_to_mps(100.0):.3f} m/s")
        51.444 m/s
    """
    return knots * MPS_PER_KNOT


def mps_to_knots(mps: Numeric) -> Numeric:
    """Convert speed from m/s to knots."""
    return mps / MPS_PER_KNOT


def track_and_speed_to_enu(
    track_rad: Numeric,
    ground_speed_mps: Numeric,
    vertical_speed_mps: Numeric = 0.0,
) -> np.ndarray:
    """
    Convert a GPS track/ground-speed pair to ENU velocity components.

    Args:
        track_rad: Track angle from north toward east, radians.
        ground_speed_mps: Horizontal speed, m/s.
        vertical_speed_mps: Climb rate, m/s (positive up).

    Returns:
        Velocity [v_E, v_N, v_U]. Shape (3,) for scalars, (N, 3) for arrays.

    Example:
        >>> track_and_speed_to_enu(0.0, 50.0)  # due north
        array([ 0., 50.,  0.])
    """
    track_rad, ground_speed_mps, vertical_speed_mps = np.broadcast_arrays(
        np.asarray(track_rad, dtype=np.float64),
        np.asarray(ground_speed_mps, dtype=np.float64),
        np.asarray(vertical_speed_mps, dtype=np.float64),
    )
    v_e = ground_speed_mps * np.sin(track_rad)
    v_n = ground_speed_mps * np.cos(track_rad)
    return np.stack([v_e, v_n, vertical_speed_mps], axis=-1)


# ============================================================================
# Acceleration Unit Conversions
# ============================================================================

def mps2_to_g(mps2: Numeric, g: float = STANDARD_GRAVITY) -> Numeric:
    """
    Convert acceleration from m/s² to units of g.

    Example:
        >>> mps2_to_g(9.80665)
        1.0
    """
    return mps2 / g


def g_to_mps2(accel_g: Numeric, g: float = STANDARD_GRAVITY) -> Numeric:
    """Convert acceleration from units of g to m/s²."""
    return accel_g * g
