"""Unit tests for angle wrapping and exponential smoothing helpers."""

import unittest

import numpy as np

from ahrscore.utils import (
    angle_diff,
    ema_time_constant,
    ema_update,
    wrap_angle,
    wrap_angle_array,
)


class TestAngleWrapping(unittest.TestCase):
    """Test angle wrapping to [-π, π]."""

    def test_wrap_scalar(self) -> None:
        self.assertAlmostEqual(wrap_angle(3.5 * np.pi), -0.5 * np.pi, places=12)
        self.assertAlmostEqual(wrap_angle(-3.5 * np.pi), 0.5 * np.pi, places=12)
        self.assertIsInstance(wrap_angle(np.float64(1.0)), float)

    def test_wrap_array(self) -> None:
        angles = np.array([0.0, 2.0 * np.pi, np.pi / 2.0 + 4.0 * np.pi])
        np.testing.assert_allclose(
            wrap_angle_array(angles), [0.0, 0.0, np.pi / 2.0], atol=1e-12
        )

    def test_diff_across_south(self) -> None:
        """Heading 179° vs -179° differs by 2°, not 358°."""
        diff = angle_diff(np.deg2rad(-179.0), np.deg2rad(179.0))
        self.assertAlmostEqual(diff, np.deg2rad(2.0), places=12)

    def test_diff_array(self) -> None:
        est = np.deg2rad([1.0, 359.0])
        ref = np.deg2rad([359.0, 1.0])
        np.testing.assert_allclose(angle_diff(est, ref), np.deg2rad([2.0, -2.0]), atol=1e-12)


class TestEmaUpdate(unittest.TestCase):
    """Test the exponential moving average step."""

    def test_scalar_step(self) -> None:
        self.assertAlmostEqual(ema_update(10.0, 15.0, 0.2), 11.0, places=12)

    def test_vector_step(self) -> None:
        avg = ema_update(np.zeros(3), np.array([10.0, -5.0, 1.0]), 0.2)
        np.testing.assert_allclose(avg, [2.0, -1.0, 0.2])

    def test_unit_gain_tracks_sample(self) -> None:
        np.testing.assert_array_equal(ema_update(np.ones(3), np.full(3, 7.0), 1.0), np.full(3, 7.0))

    def test_converges_to_constant_input(self) -> None:
        avg = 0.0
        for _ in range(200):
            avg = ema_update(avg, 4.0, 0.1)
        self.assertAlmostEqual(avg, 4.0, places=6)

    def test_rejects_invalid_gain(self) -> None:
        for k in (0.0, -0.1, 1.5):
            with self.assertRaises(ValueError):
                ema_update(0.0, 1.0, k)


class TestEmaTimeConstant(unittest.TestCase):
    """Test the effective EMA time constant."""

    def test_default_gains_at_10hz(self) -> None:
        self.assertAlmostEqual(ema_time_constant(0.2, 0.1), 0.448, places=3)
        self.assertAlmostEqual(ema_time_constant(0.02, 0.1), 4.95, places=2)

    def test_unit_gain_has_no_memory(self) -> None:
        self.assertEqual(ema_time_constant(1.0, 0.1), 0.0)

    def test_rejects_invalid_gain(self) -> None:
        with self.assertRaises(ValueError):
            ema_time_constant(0.0, 0.1)


if __name__ == "__main__":
    unittest.main()
