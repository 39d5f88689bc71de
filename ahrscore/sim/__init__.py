"""
Simulation utilities for generating synthetic AHRS measurements from ground truth trajectories.

Modules:
    measurements_from_trajectory: GPS velocity, accelerometer and magnetometer
                                  samples from a velocity/attitude history

The accelerometer model is built from the specific force of the trajectory,
independently of the estimator's apparent-gravity construction.
"""

from ahrscore.sim.measurements_from_trajectory import (
    DEFAULT_MAG_FIELD_ENU,
    GRAVITY_ENU_G,
    specific_force_body,
    accel_body_from_trajectory,
    mag_body_from_attitude,
    straight_track,
    coordinated_turn,
    generate_measurements,
)

__all__ = [
    "DEFAULT_MAG_FIELD_ENU",
    "GRAVITY_ENU_G",
    "specific_force_body",
    "accel_body_from_trajectory",
    "mag_body_from_attitude",
    "straight_track",
    "coordinated_turn",
    "generate_measurements",
]
