"""
Attitude estimators.

This package provides the orientation state, the estimator interface and
the heuristic (filter-free) AHRS estimator, plus a batch runner.
"""

from ahrscore.estimators.base import AttitudeEstimator, OrientationState
from ahrscore.estimators.heuristic import (
    KLONG,
    KSHORT,
    DegenerateGeometryWarning,
    HeuristicAHRS,
    HeuristicConfig,
    SmoothingMemory,
)
from ahrscore.estimators.batch import AttitudeTrack, run_attitude_estimator

__all__ = [
    "AttitudeEstimator",
    "OrientationState",
    "KSHORT",
    "KLONG",
    "DegenerateGeometryWarning",
    "HeuristicAHRS",
    "HeuristicConfig",
    "SmoothingMemory",
    "AttitudeTrack",
    "run_attitude_estimator",
]
