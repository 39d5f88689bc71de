"""
Evaluation Metrics for Attitude Estimation.

This module provides functions to compute roll/pitch/heading errors and
summary statistics for attitude estimators. Heading errors are wrapped to
[-π, π] so that 359° vs 1° counts as 2°.
"""

from typing import Dict, Optional, Union

import numpy as np

from ahrscore.utils.angles import angle_diff


def compute_attitude_errors(
    euler_true: np.ndarray, euler_est: np.ndarray
) -> np.ndarray:
    """
    Compute attitude errors between true and estimated Euler angles.

    Args:
        euler_true: True roll, pitch, heading, shape (N, 3) or (3,). rad.
        euler_est: Estimated roll, pitch, heading, same shape. rad.

    Returns:
        errors: Wrapped differences est - true, same shape. rad.

    Raises:
        ValueError: If inputs have incompatible shapes
    """
    euler_true = np.asarray(euler_true, dtype=np.float64)
    euler_est = np.asarray(euler_est, dtype=np.float64)

    if euler_true.shape != euler_est.shape:
        raise ValueError(
            f"Shape mismatch: truth {euler_true.shape} vs estimated {euler_est.shape}"
        )
    if euler_true.shape[-1] != 3:
        raise ValueError(
            f"Expected (..., 3) Euler angles, got shape {euler_true.shape}"
        )

    return angle_diff(euler_est, euler_true)


def compute_rmse(errors: np.ndarray, axis: Optional[int] = None) -> Union[float, np.ndarray]:
    """
    Compute Root Mean Square Error (RMSE).

    Args:
        errors: Error vectors, shape (N, d) or (N,)
        axis: Axis along which to compute RMSE
              None: scalar RMSE across all dimensions
              0: per-dimension RMSE (e.g. roll, pitch, heading)
              1: per-sample RMSE

    Returns:
        rmse: RMSE value(s)
    """
    errors = np.asarray(errors)

    if axis is None:
        return float(np.sqrt(np.mean(errors**2)))
    return np.sqrt(np.mean(errors**2, axis=axis))


def compute_error_stats(errors: np.ndarray) -> Dict[str, float]:
    """
    Compute error statistics.

    Args:
        errors: Error vectors, shape (N, d) or (N,)

    Returns:
        stats: Dictionary with keys:
               - 'mean': Mean error magnitude
               - 'median': Median error magnitude
               - 'std': Standard deviation
               - 'rmse': Root mean square error
               - 'p90': 90th percentile
               - 'p95': 95th percentile
               - 'max': Maximum error
    """
    errors = np.asarray(errors)

    # Compute error magnitudes if multi-dimensional
    if errors.ndim > 1:
        error_magnitudes = np.linalg.norm(errors, axis=1)
    else:
        error_magnitudes = np.abs(errors)

    stats = {
        "mean": float(np.mean(error_magnitudes)),
        "median": float(np.median(error_magnitudes)),
        "std": float(np.std(error_magnitudes)),
        "rmse": float(np.sqrt(np.mean(error_magnitudes**2))),
        "p90": float(np.percentile(error_magnitudes, 90)),
        "p95": float(np.percentile(error_magnitudes, 95)),
        "max": float(np.max(error_magnitudes)),
    }

    return stats


def summarize_attitude_errors(
    euler_true: np.ndarray, euler_est: np.ndarray
) -> Dict[str, Dict[str, float]]:
    """
    Per-axis error statistics in degrees.

    Returns:
        {'roll': stats, 'pitch': stats, 'heading': stats} where each stats
        dict comes from compute_error_stats() on the absolute error in deg.
    """
    errors_deg = np.rad2deg(compute_attitude_errors(euler_true, euler_est))
    return {
        name: compute_error_stats(errors_deg[:, i])
        for i, name in enumerate(("roll", "pitch", "heading"))
    }
