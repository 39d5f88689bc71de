"""
Sensor data structures and conversions for attitude estimation.

Modules:
    types: FrameConvention, Measurement, MeasurementSeries
    gravity: Gravity magnitude (standard and WGS-84 latitude model)
    units: Knots/m-s and g/m-s² conversions

Design principles:
    - Measurement bundles are frozen (immutable) dataclasses
    - All arrays are float64 NumPy arrays
    - Frame conventions: E (earth, ENU), B (body, FLU)

Example:
    >>> from ahrscore.sensors import Measurement, knots_to_mps
    >>> meas = Measurement(
    ...     t=0.1, w=[knots_to_mps(90.0), 0.0, 0.0], w_valid=True,
    ...     a=[0.0, 0.0, -1.0],
    ... )
"""

from ahrscore.sensors.types import (
    FrameConvention,
    Measurement,
    MeasurementSeries,
)

from ahrscore.sensors.gravity import (
    STANDARD_GRAVITY,
    gravity_magnitude,
    gravity_magnitude_wgs84,
)

from ahrscore.sensors.units import (
    MPS_PER_KNOT,
    knots_to_mps,
    mps_to_knots,
    track_and_speed_to_enu,
    mps2_to_g,
    g_to_mps2,
)

__all__ = [
    # Data types
    "FrameConvention",
    "Measurement",
    "MeasurementSeries",
    # Gravity
    "STANDARD_GRAVITY",
    "gravity_magnitude",
    "gravity_magnitude_wgs84",
    # Units
    "MPS_PER_KNOT",
    "knots_to_mps",
    "mps_to_knots",
    "track_and_speed_to_enu",
    "mps2_to_g",
    "g_to_mps2",
]
