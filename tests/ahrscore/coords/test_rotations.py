"""Unit tests for quaternion, rotation matrix and Euler angle helpers.

Test cases include:
- Known rotations in ENU/FLU (heading, roll, pitch)
- Agreement with scipy.spatial.transform.Rotation (ZYX convention)
- Hamilton product composition
- Minimal-rotation quaternion between two vectors, including the
  parallel, anti-parallel and zero-length cases
"""

import unittest

import numpy as np
from scipy.spatial.transform import Rotation

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


def scipy_matrix(roll, pitch, heading):
    """Same rotation built from scipy: yaw π/2 - heading, then -pitch, then roll."""
    return Rotation.from_euler('ZYX', [np.pi / 2.0 - heading, -pitch, roll]).as_matrix()


class TestEulerToRotationMatrix(unittest.TestCase):
    """Test cases for Euler angles to rotation matrix conversion."""

    def test_zero_angles_face_north(self) -> None:
        R = euler_to_rotation_matrix(0.0, 0.0, 0.0)
        np.testing.assert_allclose(R @ [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(R @ [0.0, 1.0, 0.0], [-1.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(R @ [0.0, 0.0, 1.0], [0.0, 0.0, 1.0], atol=1e-12)

    def test_heading_east_is_identity(self) -> None:
        """Heading +90° carries body forward onto earth east (ENU x)."""
        R = euler_to_rotation_matrix(0.0, 0.0, np.pi / 2.0)
        np.testing.assert_allclose(R, np.eye(3), atol=1e-12)

    def test_positive_pitch_raises_nose(self) -> None:
        """Positive pitch tilts the forward axis up (positive ENU z)."""
        R = euler_to_rotation_matrix(0.0, np.deg2rad(30.0), 0.0)
        forward = R @ [1.0, 0.0, 0.0]
        self.assertAlmostEqual(forward[2], 0.5, places=12)

    def test_positive_roll_lowers_right_wing(self) -> None:
        R = euler_to_rotation_matrix(np.deg2rad(30.0), 0.0, 0.0)
        right = R @ [0.0, -1.0, 0.0]
        self.assertAlmostEqual(right[2], -0.5, places=12)

    def test_matches_scipy_zyx(self) -> None:
        for roll, pitch, heading in [(0.1, -0.2, 0.3), (-1.0, 0.5, 2.5), (0.7, 1.2, -3.0)]:
            R = euler_to_rotation_matrix(roll, pitch, heading)
            np.testing.assert_allclose(R, scipy_matrix(roll, pitch, heading), atol=1e-12)

    def test_round_trip_through_matrix(self) -> None:
        euler = np.array([0.4, -0.3, -2.0])
        np.testing.assert_allclose(
            rotation_matrix_to_euler(euler_to_rotation_matrix(*euler)), euler, atol=1e-12
        )

    def test_gimbal_lock_keeps_heading(self) -> None:
        R = euler_to_rotation_matrix(0.0, np.pi / 2.0, 0.7)
        euler = rotation_matrix_to_euler(R)
        self.assertAlmostEqual(euler[1], np.pi / 2.0, places=6)
        self.assertAlmostEqual(euler[2], 0.7, places=6)

    def test_rejects_wrong_shape(self) -> None:
        with self.assertRaises(ValueError):
            rotation_matrix_to_euler(np.eye(4))


class TestQuaternionConversions(unittest.TestCase):
    """Test cases for quaternion <-> Euler <-> matrix conversions."""

    def test_identity_quaternion_faces_east(self) -> None:
        q = np.array([1.0, 0.0, 0.0, 0.0])
        np.testing.assert_allclose(quat_to_euler(q), [0.0, 0.0, np.pi / 2.0], atol=1e-12)
        np.testing.assert_allclose(quat_to_rotation_matrix(q), np.eye(3), atol=1e-12)
        np.testing.assert_allclose(euler_to_quat(0.0, 0.0, np.pi / 2.0), q, atol=1e-12)

    def test_quaternion_matches_matrix(self) -> None:
        euler = (0.2, -0.4, 1.9)
        q = euler_to_quat(*euler)
        self.assertAlmostEqual(np.linalg.norm(q), 1.0, places=12)
        np.testing.assert_allclose(
            quat_to_rotation_matrix(q), euler_to_rotation_matrix(*euler), atol=1e-12
        )

    def test_quaternion_round_trip(self) -> None:
        for euler in [(0.2, -0.4, 1.9), (-1.2, 0.3, -0.1), (0.0, 0.0, 3.0)]:
            np.testing.assert_allclose(quat_to_euler(euler_to_quat(*euler)), euler, atol=1e-12)

    def test_matches_scipy_scalar_last(self) -> None:
        q = euler_to_quat(-0.6, 0.3, 2.2)
        expected = Rotation.from_quat([q[1], q[2], q[3], q[0]]).as_matrix()
        np.testing.assert_allclose(quat_to_rotation_matrix(q), expected, atol=1e-12)
        np.testing.assert_allclose(expected, scipy_matrix(-0.6, 0.3, 2.2), atol=1e-12)

    def test_quat_to_euler_heading_range(self) -> None:
        """Heading near south wraps to ±π, not beyond."""
        euler = quat_to_euler(euler_to_quat(0.0, 0.0, np.deg2rad(-179.0)))
        self.assertAlmostEqual(euler[2], np.deg2rad(-179.0), places=12)

    def test_rejects_wrong_shape(self) -> None:
        with self.assertRaises(ValueError):
            quat_to_euler(np.zeros(3))
        with self.assertRaises(ValueError):
            quat_to_rotation_matrix(np.zeros(5))


class TestQuaternionAlgebra(unittest.TestCase):
    """Test cases for the Hamilton product and related helpers."""

    def test_product_composes_rotations(self) -> None:
        """R(p ⊗ q) = R(p) @ R(q)."""
        p = euler_to_quat(0.3, 0.1, -0.7)
        q = euler_to_quat(-0.2, 0.5, 1.4)
        np.testing.assert_allclose(
            quat_to_rotation_matrix(quat_multiply(p, q)),
            quat_to_rotation_matrix(p) @ quat_to_rotation_matrix(q),
            atol=1e-12,
        )

    def test_identity_is_neutral(self) -> None:
        q = euler_to_quat(0.3, -0.2, 0.9)
        identity = np.array([1.0, 0.0, 0.0, 0.0])
        np.testing.assert_allclose(quat_multiply(identity, q), q, atol=1e-15)
        np.testing.assert_allclose(quat_multiply(q, identity), q, atol=1e-15)

    def test_conjugate_inverts(self) -> None:
        q = euler_to_quat(0.3, -0.2, 0.9)
        np.testing.assert_allclose(
            quat_multiply(q, quat_conjugate(q)), [1.0, 0.0, 0.0, 0.0], atol=1e-12
        )

    def test_normalize(self) -> None:
        np.testing.assert_allclose(quat_normalize([2.0, 0.0, 0.0, 0.0]), [1.0, 0.0, 0.0, 0.0])

    def test_axis_angle_accepts_unnormalized_axis(self) -> None:
        q = quat_from_axis_angle([0.0, 0.0, 5.0], np.pi / 2.0)
        self.assertAlmostEqual(np.linalg.norm(q), 1.0, places=12)
        np.testing.assert_allclose(
            quat_to_rotation_matrix(q) @ [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], atol=1e-12
        )

    def test_axis_angle_matches_scipy_rotvec(self) -> None:
        axis = np.array([0.3, -0.5, 0.8])
        angle = 1.1
        expected = Rotation.from_rotvec(angle * axis / np.linalg.norm(axis)).as_matrix()
        np.testing.assert_allclose(
            quat_to_rotation_matrix(quat_from_axis_angle(axis, angle)), expected, atol=1e-12
        )


class TestQuatFromTwoVectors(unittest.TestCase):
    """Test cases for the minimal-rotation quaternion."""

    def test_maps_source_onto_target(self) -> None:
        rng = np.random.default_rng(7)
        for _ in range(20):
            a = rng.normal(size=3)
            b = rng.normal(size=3)
            q = quat_from_two_vectors(a, b)
            self.assertAlmostEqual(np.linalg.norm(q), 1.0, places=12)
            np.testing.assert_allclose(
                quat_to_rotation_matrix(q) @ (a / np.linalg.norm(a)),
                b / np.linalg.norm(b),
                atol=1e-10,
            )

    def test_rotation_angle_is_minimal(self) -> None:
        """The rotation angle equals the angle between the two vectors."""
        a = np.array([0.0, 0.2, -1.0])
        b = np.array([0.5, 0.0, -1.0])
        q = quat_from_two_vectors(a, b)
        angle = 2.0 * np.arccos(np.clip(q[0], -1.0, 1.0))
        expected = np.arccos(np.dot(a, b) / np.linalg.norm(a) / np.linalg.norm(b))
        self.assertAlmostEqual(angle, expected, places=10)

    def test_magnitudes_ignored(self) -> None:
        q1 = quat_from_two_vectors([0.0, 0.0, -1.0], [0.1, 0.0, -1.0])
        q2 = quat_from_two_vectors([0.0, 0.0, -3.0], [0.5, 0.0, -5.0])
        np.testing.assert_allclose(q1, q2, atol=1e-12)

    def test_parallel_vectors_give_identity(self) -> None:
        q = quat_from_two_vectors([0.0, 0.0, -1.0], [0.0, 0.0, -2.0])
        np.testing.assert_allclose(q, [1.0, 0.0, 0.0, 0.0], atol=1e-12)

    def test_antiparallel_vectors_give_half_turn(self) -> None:
        for a in ([0.0, 0.0, 1.0], [1.0, 0.0, 0.0], [0.3, -0.4, 0.5]):
            a = np.asarray(a)
            q = quat_from_two_vectors(a, -a)
            self.assertAlmostEqual(q[0], 0.0, places=12)
            self.assertAlmostEqual(np.linalg.norm(q), 1.0, places=12)
            np.testing.assert_allclose(
                quat_to_rotation_matrix(q) @ a, -a, atol=1e-12
            )

    def test_zero_vector_gives_nan(self) -> None:
        with np.errstate(invalid='ignore', divide='ignore'):
            q = quat_from_two_vectors([0.0, 0.0, 0.0], [0.0, 0.0, -1.0])
        self.assertTrue(np.all(np.isnan(q)))

    def test_rejects_wrong_shape(self) -> None:
        with self.assertRaises(ValueError):
            quat_from_two_vectors([1.0, 0.0], [0.0, 1.0, 0.0])


if __name__ == "__main__":
    unittest.main()
