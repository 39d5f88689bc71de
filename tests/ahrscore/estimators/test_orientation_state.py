"""Unit tests for OrientationState and the AttitudeEstimator interface."""

import unittest

import numpy as np
import pytest

from ahrscore.coords.rotations import euler_to_quat, euler_to_rotation_matrix
from ahrscore.estimators import AttitudeEstimator, OrientationState


class TestOrientationState(unittest.TestCase):
    """Test suite for OrientationState."""

    def test_defaults(self) -> None:
        state = OrientationState()
        np.testing.assert_array_equal(state.q, [1.0, 0.0, 0.0, 0.0])
        np.testing.assert_array_equal(state.rotation, np.eye(3))
        np.testing.assert_array_equal(state.north, np.zeros(3))
        assert state.t == 0.0
        assert state.is_finite()

    def test_rotation_derived_from_quaternion(self) -> None:
        euler = (0.1, -0.2, 2.0)
        state = OrientationState(q=euler_to_quat(*euler))
        np.testing.assert_allclose(state.rotation, euler_to_rotation_matrix(*euler), atol=1e-12)

    def test_set_quaternion_updates_rotation(self) -> None:
        state = OrientationState()
        q = euler_to_quat(0.0, 0.0, np.pi / 2.0)
        state.set_quaternion(q)
        np.testing.assert_allclose(state.rotation[:, 0], [1.0, 0.0, 0.0], atol=1e-12)
        roll, pitch, heading = state.roll_pitch_heading()
        assert isinstance(heading, float)
        assert heading == pytest.approx(np.pi / 2.0)

        q[0] = 0.0
        assert state.q[0] != 0.0

    def test_non_finite_quaternion(self) -> None:
        state = OrientationState()
        state.set_quaternion(np.array([np.nan, 0.0, 0.0, 0.0]))
        assert not state.is_finite()

    def test_copy_is_independent(self) -> None:
        state = OrientationState(q=euler_to_quat(0.1, 0.2, 0.3), north=np.array([0.4, 0.0, 0.9]), t=5.0)
        clone = state.copy()
        clone.north[0] = 9.0
        clone.set_quaternion(np.array([1.0, 0.0, 0.0, 0.0]))

        assert state.north[0] == 0.4
        assert clone.t == 5.0
        np.testing.assert_allclose(state.q, euler_to_quat(0.1, 0.2, 0.3))

    def test_shape_validation(self) -> None:
        with pytest.raises(ValueError, match="q"):
            OrientationState(q=np.zeros(3))
        with pytest.raises(ValueError, match="north"):
            OrientationState(north=np.zeros(2))


class TestAttitudeEstimatorInterface(unittest.TestCase):
    """The abstract interface cannot be instantiated directly."""

    def test_abstract(self) -> None:
        with pytest.raises(TypeError):
            AttitudeEstimator()
