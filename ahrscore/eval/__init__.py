"""
Evaluation and Visualization Module.

This module provides evaluation metrics and visualization utilities
for attitude estimators.

Modules:
    metrics: Attitude error metrics (wrapped errors, RMSE, statistics)
    plots: Attitude and attitude-error time plots
"""

from .metrics import (
    compute_attitude_errors,
    compute_error_stats,
    compute_rmse,
    summarize_attitude_errors,
)
from .plots import (
    plot_attitude_error_time,
    plot_attitude_time,
    save_figure,
)

__all__ = [
    # Metrics
    "compute_attitude_errors",
    "compute_rmse",
    "compute_error_stats",
    "summarize_attitude_errors",
    # Plots
    "plot_attitude_time",
    "plot_attitude_error_time",
    "save_figure",
]
