"""
Base classes for attitude estimators.

This module defines the orientation state every attitude estimator owns and
the common interface through which a host feeds measurements and reads the
attitude back.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from ahrscore.coords.rotations import quat_to_euler, quat_to_rotation_matrix
from ahrscore.sensors.types import Measurement


@dataclass
class OrientationState:
    """
    Current orientation of the tracked vehicle.

    Attributes:
        q: Orientation quaternion, body to earth, shape (4,).
           Scalar-first [q0, q1, q2, q3]. Identity at construction
           (level, forward axis pointing east).
        rotation: Rotation matrix R(q), shape (3, 3). v_E = rotation @ v_B.
                  Always derived from q; update both through set_quaternion().
        north: North-reference vector in the earth frame, shape (3,).
               Magnetometer reading projected through R(q).
        t: Timestamp of the last processed measurement, seconds.
    """

    q: np.ndarray = field(default_factory=lambda: np.array([1.0, 0.0, 0.0, 0.0]))
    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    north: np.ndarray = field(default_factory=lambda: np.zeros(3))
    t: float = 0.0

    def __post_init__(self) -> None:
        """Validate shapes and derive the rotation matrix from q."""
        if self.q.shape != (4,):
            raise ValueError(
                f"OrientationState.q must have shape (4,), got {self.q.shape}"
            )
        if self.north.shape != (3,):
            raise ValueError(
                f"OrientationState.north must have shape (3,), got {self.north.shape}"
            )
        self.rotation = quat_to_rotation_matrix(self.q)

    def set_quaternion(self, q: np.ndarray) -> None:
        """Replace q and recompute the rotation matrix elements."""
        self.q = np.asarray(q, dtype=np.float64).copy()
        self.rotation = quat_to_rotation_matrix(self.q)

    def roll_pitch_heading(self) -> Tuple[float, float, float]:
        """Roll, pitch and heading (radians) derived from q."""
        roll, pitch, heading = quat_to_euler(self.q)
        return float(roll), float(pitch), float(heading)

    def is_finite(self) -> bool:
        """False when q carries NaN/Inf from a degenerate update."""
        return bool(np.all(np.isfinite(self.q)))

    def copy(self) -> "OrientationState":
        return OrientationState(
            q=self.q.copy(),
            north=self.north.copy(),
            t=self.t,
        )


class AttitudeEstimator(ABC):
    """Abstract base class for attitude estimators.

    The estimator holds (does not inherit) an OrientationState, exposes it
    read-only through ``orientation`` and mutates it only inside update().
    Calls to update() must be serialized by the host in strictly increasing
    timestamp order.
    """

    def __init__(self):
        self._orientation = OrientationState()

    @property
    def orientation(self) -> OrientationState:
        """Current orientation state (do not modify)."""
        return self._orientation

    @abstractmethod
    def update(self, measurement: Measurement) -> None:
        """
        Process one measurement bundle and update the orientation.

        Args:
            measurement: Sample with timestamp later than the previous one.
        """
        pass

    def reset(self) -> None:
        """Return to the freshly constructed state."""
        self._orientation = OrientationState()

    @abstractmethod
    def valid(self) -> bool:
        """Whether the current estimate is usable."""
        pass

    def roll_pitch_heading(self) -> Tuple[float, float, float]:
        """Roll, pitch and heading in radians."""
        return self._orientation.roll_pitch_heading()

    @abstractmethod
    def roll_pitch_heading_uncertainty(self) -> Tuple[float, float, float]:
        """One-sigma uncertainty of roll, pitch and heading in radians."""
        pass
