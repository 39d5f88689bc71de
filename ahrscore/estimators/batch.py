"""
Batch processing of measurement series through an attitude estimator.

The estimators process one sample at a time. This module plays the role of
the host application for offline runs: it feeds a MeasurementSeries in
order, records the attitude after every update and applies a
hold-last-good-value policy when an update degenerates to NaN/Inf.
"""

import warnings
from dataclasses import dataclass

import numpy as np
from tqdm import tqdm

from ahrscore.coords.rotations import quat_to_euler
from ahrscore.estimators.base import AttitudeEstimator
from ahrscore.estimators.heuristic import DegenerateGeometryWarning
from ahrscore.sensors.types import MeasurementSeries


@dataclass
class AttitudeTrack:
    """
    Attitude history produced by a batch run.

    Attributes:
        t: Timestamps, shape (N,). Units: s.
        q: Orientation quaternions (body to earth), shape (N, 4).
        euler: Roll, pitch, heading, shape (N, 3). Units: rad.
        north: North-reference vectors, shape (N, 3).
        degenerate: True where the estimator produced a non-finite
                    quaternion, shape (N,).
    """

    t: np.ndarray
    q: np.ndarray
    euler: np.ndarray
    north: np.ndarray
    degenerate: np.ndarray

    def __len__(self) -> int:
        return self.t.shape[0]

    @property
    def roll(self) -> np.ndarray:
        return self.euler[:, 0]

    @property
    def pitch(self) -> np.ndarray:
        return self.euler[:, 1]

    @property
    def heading(self) -> np.ndarray:
        return self.euler[:, 2]


def run_attitude_estimator(
    estimator: AttitudeEstimator,
    series: MeasurementSeries,
    hold_last_good: bool = True,
    show_progress: bool = False,
) -> AttitudeTrack:
    """
    Feed every sample of a series through an estimator.

    Args:
        estimator: Attitude estimator, used as-is (not reset).
        series: Measurements in strictly increasing timestamp order.
        hold_last_good: If True, samples whose quaternion is not finite are
                        recorded with the last finite quaternion (identity
                        before the first one). The estimator's own state is
                        left untouched either way.
        show_progress: Display a tqdm progress bar.

    Returns:
        AttitudeTrack with one row per sample.

    Notes:
        Per-sample DegenerateGeometryWarnings are collected and reported
        as a single warning with the number of affected samples.

    Example:
        >>> from ahrscore.estimators import HeuristicAHRS
        >>> from ahrscore.sim import straight_track, generate_measurements
        >>> t, vel, euler = straight_track(duration=10.0, dt=0.1)
        >>> track = run_attitude_estimator(HeuristicAHRS(), generate_measurements(t, vel, euler))
    """
    n_samples = len(series)
    q_out = np.zeros((n_samples, 4))
    euler_out = np.zeros((n_samples, 3))
    north_out = np.zeros((n_samples, 3))
    degenerate = np.zeros(n_samples, dtype=bool)

    last_good_q = np.array([1.0, 0.0, 0.0, 0.0])
    last_good_north = np.zeros(3)

    samples = tqdm(series, total=n_samples, desc="Attitude update", unit="sample",
                   disable=not show_progress)

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DegenerateGeometryWarning)
        for k, measurement in enumerate(samples):
            estimator.update(measurement)
            state = estimator.orientation

            if state.is_finite():
                last_good_q = state.q.copy()
                last_good_north = state.north.copy()
                q_out[k] = state.q
                north_out[k] = state.north
            else:
                degenerate[k] = True
                if hold_last_good:
                    q_out[k] = last_good_q
                    north_out[k] = last_good_north
                else:
                    q_out[k] = state.q
                    north_out[k] = state.north

            euler_out[k] = quat_to_euler(q_out[k])

    n_degenerate = int(np.sum(degenerate))
    if n_degenerate > 0:
        policy = "held last good value" if hold_last_good else "kept non-finite output"
        warnings.warn(
            f"{n_degenerate} of {n_samples} updates produced a non-finite "
            f"orientation ({policy}).",
            DegenerateGeometryWarning,
            stacklevel=2,
        )

    return AttitudeTrack(
        t=series.t.copy(),
        q=q_out,
        euler=euler_out,
        north=north_out,
        degenerate=degenerate,
    )
