"""
Unit tests for batch processing of measurement series.

Covers the AttitudeTrack container, GPS outages in a batch run and the
hold-last-good-value policy for degenerate updates.
"""

import unittest
import warnings

import numpy as np
import pytest

from ahrscore.estimators import (
    AttitudeTrack,
    DegenerateGeometryWarning,
    HeuristicAHRS,
    run_attitude_estimator,
)
from ahrscore.sensors import MeasurementSeries
from ahrscore.sim import coordinated_turn, generate_measurements, straight_track


def _series_with_repeated_timestamp() -> MeasurementSeries:
    w = np.tile([10.0, 0.0, 0.0], (4, 1))
    w[3] = 0.0
    with pytest.warns(UserWarning, match="strictly increasing"):
        return MeasurementSeries(
            t=np.array([0.1, 0.1, 0.2, 0.3]),
            w=w,
            w_valid=np.array([True, True, True, False]),
            a=np.tile([0.0, 0.0, -1.0], (4, 1)),
            m=np.tile([0.4, 0.0, 0.9], (4, 1)),
            m_valid=np.ones(4, dtype=bool),
        )


class TestRunAttitudeEstimator(unittest.TestCase):
    """Batch runs over simulated series."""

    def test_output_shapes(self) -> None:
        t, vel, euler = coordinated_turn(duration=20.0, dt=0.1, speed_mps=50.0)
        series = generate_measurements(t, vel, euler, accel_noise_g=0.005, seed=1)

        with warnings.catch_warnings():
            warnings.simplefilter("error", DegenerateGeometryWarning)
            track = run_attitude_estimator(HeuristicAHRS(), series)

        assert isinstance(track, AttitudeTrack)
        assert len(track) == len(series)
        assert track.q.shape == (len(series), 4)
        assert track.euler.shape == (len(series), 3)
        assert track.north.shape == (len(series), 3)
        assert not np.any(track.degenerate)
        np.testing.assert_array_equal(track.t, series.t)
        np.testing.assert_array_equal(track.roll, track.euler[:, 0])
        np.testing.assert_array_equal(track.heading, track.euler[:, 2])

    def test_matches_manual_updates(self) -> None:
        t, vel, euler = coordinated_turn(duration=10.0, dt=0.1, speed_mps=50.0, straight_time=2.0)
        series = generate_measurements(t, vel, euler, vel_noise_mps=0.05, seed=5)

        track = run_attitude_estimator(HeuristicAHRS(), series)

        ahrs = HeuristicAHRS()
        for k, measurement in enumerate(series):
            ahrs.update(measurement)
            np.testing.assert_array_equal(track.q[k], ahrs.orientation.q)

    def test_estimator_is_not_reset(self) -> None:
        t, vel, euler = straight_track(duration=2.0, dt=0.1)
        series = generate_measurements(t, vel, euler)
        ahrs = HeuristicAHRS()
        run_attitude_estimator(ahrs, series)
        assert ahrs.orientation.t == pytest.approx(series.t[-1])

    def test_gps_outage_reverts_heading_to_north(self) -> None:
        t, vel, euler = straight_track(
            duration=30.0, dt=0.1, speed_mps=50.0, track_rad=np.deg2rad(90.0), roll=0.05
        )
        series = generate_measurements(t, vel, euler, gps_outages=[(10.0, 20.0)])
        track = run_attitude_estimator(HeuristicAHRS(), series)

        outage = ~series.w_valid
        assert np.any(outage)
        np.testing.assert_allclose(track.heading[outage], 0.0, atol=1e-9)
        np.testing.assert_allclose(track.heading[series.w_valid], np.pi / 2.0, atol=1e-9)
        np.testing.assert_allclose(track.roll, 0.05, atol=1e-9)


class TestHoldLastGood(unittest.TestCase):
    """Host policy for non-finite updates."""

    def test_hold_last_good(self) -> None:
        series = _series_with_repeated_timestamp()

        with pytest.warns(DegenerateGeometryWarning, match="2 of 4"):
            track = run_attitude_estimator(HeuristicAHRS(), series, hold_last_good=True)

        np.testing.assert_array_equal(track.degenerate, [False, True, True, False])
        assert np.all(np.isfinite(track.q))
        np.testing.assert_array_equal(track.q[1], track.q[0])
        np.testing.assert_array_equal(track.q[2], track.q[0])
        np.testing.assert_array_equal(track.north[2], track.north[0])

    def test_keep_non_finite(self) -> None:
        series = _series_with_repeated_timestamp()

        with pytest.warns(DegenerateGeometryWarning, match="kept non-finite"):
            track = run_attitude_estimator(HeuristicAHRS(), series, hold_last_good=False)

        assert np.all(np.isnan(track.q[1]))
        assert np.all(np.isnan(track.euler[2]))
        assert np.all(np.isfinite(track.q[3]))

    def test_single_summary_warning(self) -> None:
        series = _series_with_repeated_timestamp()

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            run_attitude_estimator(HeuristicAHRS(), series)

        degenerate = [w for w in caught if issubclass(w.category, DegenerateGeometryWarning)]
        assert len(degenerate) == 1


if __name__ == "__main__":
    unittest.main()
