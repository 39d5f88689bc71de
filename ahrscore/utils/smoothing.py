"""
Exponential moving average helper.

    avg_k = k * new + (1 - k) * avg_{k-1}

The gain k sets the memory horizon: at a sample period Δt the effective
time constant is roughly Δt / k (k = 0.2 at 10 Hz → 0.5 s,
k = 0.02 at 10 Hz → 5 s).
"""

from typing import Union

import numpy as np


def ema_update(
    avg: Union[float, np.ndarray],
    new: Union[float, np.ndarray],
    k: float,
) -> Union[float, np.ndarray]:
    """
    One step of an exponential moving average.

    Args:
        avg: Previous average (scalar or array).
        new: New sample, same shape as avg.
        k: Smoothing gain in (0, 1]. k=1 tracks the raw sample.

    Returns:
        Updated average.

    Example:
        >>> ema_update(10.0, 15.0, 0.2)
        11.0
    """
    if not (0.0 < k <= 1.0):
        raise ValueError(f"k must be in (0, 1], got {k}")

    return k * new + (1.0 - k) * avg


def ema_time_constant(k: float, dt: float) -> float:
    """
    Effective time constant (seconds) of an EMA with gain k at period dt.

    Uses the exact relation τ = -dt / ln(1 - k); for k=1 the average has no
    memory and τ = 0.

    Example:
        >>> round(ema_time_constant(0.2, 0.1), 3)
        0.448
    """
    if not (0.0 < k <= 1.0):
        raise ValueError(f"k must be in (0, 1], got {k}")
    if k == 1.0:
        return 0.0
    return float(-dt / np.log(1.0 - k))
