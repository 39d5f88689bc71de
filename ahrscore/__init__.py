"""Core modules for heuristic attitude and heading reference.

This package contains reusable components for filter-free AHRS:
- coords: Quaternion, rotation matrix and Euler angle utilities
- sensors: Measurement types, frame conventions, gravity and units
- estimators: Orientation state and the heuristic AHRS estimator
- sim: Synthetic measurements from ground truth trajectories
- eval: Attitude error metrics and plots
"""

__version__ = "0.1.0"
