"""Quaternion, rotation matrix and Euler angle utilities.

This module provides the orientation helpers shared by every attitude
estimator in the package:
- Rotation matrices (3x3 orthogonal matrices, SO(3))
- Quaternions (unit quaternions, q = [q0, q1, q2, q3])
- Euler angles (roll-pitch-heading, ZYX convention)
- Minimal-rotation quaternion between two vectors

Conventions:
- Earth frame ENU (x=East, y=North, z=Up), body frame FLU
  (x=Forward, y=Left, z=Up)
- Quaternions: [q0, q1, q2, q3] where q0 is the scalar part (Hamilton)
- A quaternion q describes a body orientation: v_earth = R(q) @ v_body,
  so the columns of R(q) are the body axes expressed in the earth frame
- Euler angles: [roll, pitch, heading] in radians (ZYX/3-2-1 convention)
  - Roll φ: about the body forward axis, positive right wing down
  - Pitch θ: about the body lateral axis, positive nose up
  - Heading ψ: compass heading, from north toward east (clockwise seen
    from above)
  - R = Rz(π/2 - ψ) @ Ry(-θ) @ Rx(φ)
- The identity quaternion is a level body with its forward axis pointing
  east (heading π/2)
- Rotation matrices: 3x3 numpy arrays

Degenerate inputs (zero-length vectors) are not guarded: the arithmetic
propagates NaN so that callers can decide how to react.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray


def _as_vector(v: ArrayLike, name: str) -> NDArray[np.float64]:
    v = np.asarray(v, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"{name} must have shape (3,), got {v.shape}")
    return v


def _as_quat(q: ArrayLike) -> NDArray[np.float64]:
    q = np.asarray(q, dtype=np.float64)
    if q.shape != (4,):
        raise ValueError(f"Expected 4-element quaternion, got shape {q.shape}")
    return q


def euler_to_rotation_matrix(
    roll: float,
    pitch: float,
    heading: float,
) -> NDArray[np.float64]:
    """Convert Euler angles to rotation matrix.

    Converts roll-pitch-heading Euler angles (ZYX convention) to a 3x3
    rotation matrix that transforms vectors from body frame (FLU) to earth
    frame (ENU).

    Args:
        roll: Roll angle φ in radians (positive right wing down).
        pitch: Pitch angle θ in radians (positive nose up).
        heading: Heading angle ψ in radians (from north toward east).

    Returns:
        3x3 rotation matrix R such that v_earth = R @ v_body.

    Example:
        >>> R = euler_to_rotation_matrix(0.0, 0.0, 0.0)
        >>> R @ np.array([1.0, 0.0, 0.0])  # forward points north
        array([0., 1., 0.])
    """
    cr = np.cos(roll)
    sr = np.sin(roll)
    cp = np.cos(pitch)
    sp = np.sin(pitch)
    ch = np.cos(heading)
    sh = np.sin(heading)

    # Rz(π/2 - ψ) @ Ry(-θ) @ Rx(φ)
    R = np.array(
        [
            [sh * cp, -sh * sp * sr - ch * cr, -sh * sp * cr + ch * sr],
            [ch * cp, -ch * sp * sr + sh * cr, -ch * sp * cr - sh * sr],
            [sp, cp * sr, cp * cr],
        ],
        dtype=np.float64,
    )

    return R


def rotation_matrix_to_euler(R: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert rotation matrix to Euler angles.

    Extracts roll-pitch-heading Euler angles (ZYX convention) from a 3x3
    rotation matrix. Handles gimbal lock when pitch is near ±90°.

    Args:
        R: 3x3 rotation matrix (orthogonal matrix in SO(3)).

    Returns:
        Euler angles as numpy array [roll, pitch, heading] in radians.

    Raises:
        ValueError: If R is not a 3x3 matrix.
    """
    if R.shape != (3, 3):
        raise ValueError(f"Expected 3x3 matrix, got shape {R.shape}")

    # Vertical component of the forward axis
    sin_pitch = R[2, 0]

    if abs(sin_pitch) >= 1.0:
        # Gimbal lock: only one combination of heading and roll is
        # observable, roll set to zero
        pitch = np.copysign(np.pi / 2.0, sin_pitch)
        heading = np.arctan2(R[1, 1], -R[0, 1])
        roll = 0.0
    else:
        pitch = np.arcsin(sin_pitch)
        roll = np.arctan2(R[2, 1], R[2, 2])
        # East and north components of the forward axis
        heading = np.arctan2(R[0, 0], R[1, 0])

    return np.array([roll, pitch, heading], dtype=np.float64)


def euler_to_quat(
    roll: float,
    pitch: float,
    heading: float,
) -> NDArray[np.float64]:
    """Convert Euler angles to quaternion.

    Args:
        roll: Roll angle φ in radians (positive right wing down).
        pitch: Pitch angle θ in radians (positive nose up).
        heading: Heading angle ψ in radians (from north toward east).

    Returns:
        Unit quaternion as numpy array [q0, q1, q2, q3].

    Example:
        >>> q = euler_to_quat(0.0, 0.0, np.pi / 2)  # facing east
        >>> q  # identity
        array([1., 0., 0., 0.])
    """
    # Rotation angles about earth z, body y and body x
    yaw = np.pi / 2.0 - heading
    cr = np.cos(roll / 2.0)
    sr = np.sin(roll / 2.0)
    cp = np.cos(pitch / 2.0)
    sp = -np.sin(pitch / 2.0)
    cy = np.cos(yaw / 2.0)
    sy = np.sin(yaw / 2.0)

    q0 = cr * cp * cy + sr * sp * sy
    q1 = sr * cp * cy - cr * sp * sy
    q2 = cr * sp * cy + sr * cp * sy
    q3 = cr * cp * sy - sr * sp * cy

    return np.array([q0, q1, q2, q3], dtype=np.float64)


def quat_to_euler(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert quaternion to Euler angles.

    Extracts roll-pitch-heading Euler angles (ZYX convention) from a
    unit quaternion. This is the conversion every estimator uses to report
    its attitude.

    Args:
        q: Unit quaternion as numpy array [q0, q1, q2, q3].

    Returns:
        Euler angles as numpy array [roll, pitch, heading] in radians.
        Heading is in [-π, π], measured from north toward east.

    Raises:
        ValueError: If q is not a 4-element array.

    Example:
        >>> quat_to_euler(np.array([1.0, 0.0, 0.0, 0.0]))  # level, facing east
        array([0.        , 0.        , 1.57079633])
    """
    q = _as_quat(q)
    q0, q1, q2, q3 = q

    sin_roll_cos_pitch = 2.0 * (q0 * q1 + q2 * q3)
    cos_roll_cos_pitch = 1.0 - 2.0 * (q1 * q1 + q2 * q2)
    roll = np.arctan2(sin_roll_cos_pitch, cos_roll_cos_pitch)

    # Clamp to avoid numerical issues with arcsin
    sin_pitch = np.clip(2.0 * (q1 * q3 - q0 * q2), -1.0, 1.0)
    pitch = np.arcsin(sin_pitch)

    # Forward axis: east component R[0, 0], north component R[1, 0]
    east_cos_pitch = 1.0 - 2.0 * (q2 * q2 + q3 * q3)
    north_cos_pitch = 2.0 * (q1 * q2 + q0 * q3)
    heading = np.arctan2(east_cos_pitch, north_cos_pitch)

    return np.array([roll, pitch, heading], dtype=np.float64)


def quat_to_rotation_matrix(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert quaternion to rotation matrix.

    Args:
        q: Unit quaternion as numpy array [q0, q1, q2, q3].

    Returns:
        3x3 rotation matrix R such that v_earth = R @ v_body. The first
        column is the body forward axis expressed in the earth frame.

    Raises:
        ValueError: If q is not a 4-element array.
    """
    q = _as_quat(q)
    q0, q1, q2, q3 = q

    R = np.array(
        [
            [
                1.0 - 2.0 * (q2 * q2 + q3 * q3),
                2.0 * (q1 * q2 - q0 * q3),
                2.0 * (q1 * q3 + q0 * q2),
            ],
            [
                2.0 * (q1 * q2 + q0 * q3),
                1.0 - 2.0 * (q1 * q1 + q3 * q3),
                2.0 * (q2 * q3 - q0 * q1),
            ],
            [
                2.0 * (q1 * q3 - q0 * q2),
                2.0 * (q2 * q3 + q0 * q1),
                1.0 - 2.0 * (q1 * q1 + q2 * q2),
            ],
        ],
        dtype=np.float64,
    )

    return R


def quat_multiply(p: NDArray[np.float64], q: NDArray[np.float64]) -> NDArray[np.float64]:
    """Hamilton product p ⊗ q.

    The composition satisfies R(p ⊗ q) = R(p) @ R(q): the rotation q is
    applied first, then p.

    Args:
        p: Left quaternion [p0, p1, p2, p3].
        q: Right quaternion [q0, q1, q2, q3].

    Returns:
        Product quaternion as numpy array.
    """
    p0, p1, p2, p3 = _as_quat(p)
    q0, q1, q2, q3 = _as_quat(q)

    return np.array(
        [
            p0 * q0 - p1 * q1 - p2 * q2 - p3 * q3,
            p0 * q1 + p1 * q0 + p2 * q3 - p3 * q2,
            p0 * q2 - p1 * q3 + p2 * q0 + p3 * q1,
            p0 * q3 + p1 * q2 - p2 * q1 + p3 * q0,
        ],
        dtype=np.float64,
    )


def quat_conjugate(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return the conjugate (inverse for unit quaternions) of q."""
    q = _as_quat(q)
    return np.array([q[0], -q[1], -q[2], -q[3]], dtype=np.float64)


def quat_normalize(q: NDArray[np.float64]) -> NDArray[np.float64]:
    """Scale q to unit norm. A zero quaternion yields NaN."""
    q = _as_quat(q)
    return q / np.linalg.norm(q)


def quat_from_axis_angle(axis: ArrayLike, angle: float) -> NDArray[np.float64]:
    """Quaternion for a rotation of ``angle`` radians about ``axis``.

    The axis does not need to be normalized; its direction is all that
    matters. A zero-length axis yields NaN.

    Args:
        axis: Rotation axis, shape (3,).
        angle: Rotation angle in radians (right-hand rule).

    Returns:
        Unit quaternion [cos(angle/2), sin(angle/2) * axis_hat].
    """
    axis = _as_vector(axis, "axis")
    axis = axis / np.linalg.norm(axis)
    half = 0.5 * angle
    return np.concatenate(([np.cos(half)], np.sin(half) * axis))


def quat_from_two_vectors(v_from: ArrayLike, v_to: ArrayLike) -> NDArray[np.float64]:
    """Minimal-rotation quaternion carrying one direction onto another.

    Returns the unit quaternion q of smallest rotation angle such that
    R(q) @ v_from_hat = v_to_hat. Only directions are used; magnitudes
    are ignored.

    Args:
        v_from: Source vector, shape (3,).
        v_to: Target vector, shape (3,).

    Returns:
        Unit quaternion [q0, q1, q2, q3].

    Notes:
        - Parallel vectors give the identity quaternion.
        - Anti-parallel vectors give a half turn about an axis orthogonal
          to v_from (the rotation axis is not unique in that case).
        - Zero-length vectors give NaN.

    Example:
        >>> q = quat_from_two_vectors([1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
        >>> np.round(quat_to_rotation_matrix(q) @ [1.0, 0.0, 0.0], 12)
        array([0., 1., 0.])
    """
    a = _as_vector(v_from, "v_from")
    b = _as_vector(v_to, "v_to")
    a = a / np.linalg.norm(a)
    b = b / np.linalg.norm(b)

    d = np.dot(a, b)
    if d < -1.0 + 1e-12:
        # Half turn about any axis perpendicular to a
        axis = np.cross(a, [1.0, 0.0, 0.0])
        if np.linalg.norm(axis) < 1e-6:
            axis = np.cross(a, [0.0, 1.0, 0.0])
        axis = axis / np.linalg.norm(axis)
        return np.array([0.0, axis[0], axis[1], axis[2]], dtype=np.float64)

    # q = [1 + a·b, a × b] normalized is the half-angle form
    q = np.concatenate(([1.0 + d], np.cross(a, b)))
    return q / np.linalg.norm(q)
