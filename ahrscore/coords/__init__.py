"""Rotation representations used by the attitude estimators.

This module provides functions for working with the orientation of a
vehicle relative to the earth frame:
- Quaternions (scalar-first, Hamilton product)
- Rotation matrices
- Euler angles (roll, pitch, heading)
"""

from ahrscore.coords.rotations import (
    euler_to_quat,
    euler_to_rotation_matrix,
    quat_conjugate,
    quat_from_axis_angle,
    quat_from_two_vectors,
    quat_multiply,
    quat_normalize,
    quat_to_euler,
    quat_to_rotation_matrix,
    rotation_matrix_to_euler,
)

__all__ = [
    "euler_to_quat",
    "euler_to_rotation_matrix",
    "quat_conjugate",
    "quat_from_axis_angle",
    "quat_from_two_vectors",
    "quat_multiply",
    "quat_normalize",
    "quat_to_euler",
    "quat_to_rotation_matrix",
    "rotation_matrix_to_euler",
]
