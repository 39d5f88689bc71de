"""
Visualization Utilities for Attitude Estimation.

All functions return matplotlib Figure objects for flexible display/saving.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np

_AXIS_NAMES = ("Roll", "Pitch", "Heading")


def plot_attitude_time(
    t: np.ndarray,
    euler_dict: Dict[str, np.ndarray],
    euler_true: Optional[np.ndarray] = None,
    gps_valid: Optional[np.ndarray] = None,
    title: str = "Attitude vs Time",
) -> plt.Figure:
    """
    Plot roll, pitch and heading over time.

    Args:
        t: Timestamps, shape (N,)
        euler_dict: Dictionary of estimated attitudes {name: (N, 3) rad}
        euler_true: True attitude, shape (N, 3) rad (optional)
        gps_valid: GPS validity flags, shape (N,); invalid spans are shaded
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    fig, axes_arr = plt.subplots(3, 1, figsize=(12, 9), sharex=True)
    colors = ["blue", "red", "green", "orange", "purple"]

    for i, axis_name in enumerate(_AXIS_NAMES):
        ax = axes_arr[i]

        if euler_true is not None:
            ax.plot(t, np.rad2deg(euler_true[:, i]), color="k", linestyle="--",
                    linewidth=1.5, label="Truth")

        for j, (name, euler) in enumerate(euler_dict.items()):
            ax.plot(t, np.rad2deg(euler[:, i]), label=name,
                    color=colors[j % len(colors)], linewidth=1.2)

        if gps_valid is not None:
            ax.fill_between(t, 0, 1, where=~gps_valid, color="gray", alpha=0.2,
                            transform=ax.get_xaxis_transform(), label="GPS invalid")

        ax.set_ylabel(f"{axis_name} (deg)", fontsize=11)
        ax.grid(True, alpha=0.3)
        ax.legend(fontsize=9, loc="best")

    axes_arr[-1].set_xlabel("Time (s)", fontsize=11)
    fig.suptitle(title, fontsize=14, fontweight="bold", y=1.0)
    plt.tight_layout()
    return fig


def plot_attitude_error_time(
    t: np.ndarray,
    errors_dict: Dict[str, np.ndarray],
    title: str = "Attitude Error vs Time",
) -> plt.Figure:
    """
    Plot roll/pitch/heading errors over time.

    Args:
        t: Timestamps, shape (N,)
        errors_dict: Dictionary of error arrays {name: (N, 3) rad}
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    fig, axes_arr = plt.subplots(3, 1, figsize=(12, 9), sharex=True)
    colors = ["blue", "red", "green", "orange", "purple"]

    for i, axis_name in enumerate(_AXIS_NAMES):
        ax = axes_arr[i]
        for j, (name, errors) in enumerate(errors_dict.items()):
            ax.plot(t, np.rad2deg(errors[:, i]), label=name,
                    color=colors[j % len(colors)], linewidth=1.2)
        ax.set_ylabel(f"{axis_name} Error (deg)", fontsize=11)
        ax.grid(True, alpha=0.3)
        ax.axhline(y=0, color="k", linestyle="--", linewidth=0.8, alpha=0.5)
        ax.legend(fontsize=9)

    axes_arr[-1].set_xlabel("Time (s)", fontsize=11)
    fig.suptitle(title, fontsize=14, fontweight="bold", y=1.0)
    plt.tight_layout()
    return fig


def save_figure(
    fig: plt.Figure,
    out_dir: Union[str, Path],
    name: str,
    formats: Tuple[str, ...] = ("svg", "pdf", "png"),
) -> List[Path]:
    """
    Save figure in multiple formats.

    Args:
        fig: Matplotlib figure to save
        out_dir: Output directory
        name: Base filename (without extension)
        formats: Tuple of format extensions

    Returns:
        paths: List of saved file paths
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for fmt in formats:
        filepath = out_dir / f"{name}.{fmt}"
        fig.savefig(filepath, dpi=150, bbox_inches="tight")
        paths.append(filepath)

    return paths
