"""
Heuristic AHRS examples.

Runnable demonstrations of filter-free attitude estimation from GPS
velocity, accelerometer and magnetometer samples.

Examples:
    - example_heuristic_ahrs.py: Straight leg, level turn and GPS outage
    - example_gain_comparison.py: Smoothing gain vs attitude error
"""

__all__ = []
