"""
Data structures for the inputs of the attitude estimators.

This module defines the shared data types consumed by ahrscore.estimators:
    - Frame convention definitions (earth frame, body frame, quaternion meaning)
    - Single-sample measurement bundles (GPS velocity, accelerometer, magnetometer)
    - Time-series of measurements for batch processing and datasets

Time Base Convention:
    All timestamps are float seconds (monotonic clock or GPS time). Successive
    samples fed to an estimator must have strictly increasing timestamps.

Frame Conventions:
    - E: Earth frame, ENU (x=East, y=North, z=Up)
    - B: Body frame, FLU (x=Forward, y=Left, z=Up)

See FrameConvention for the explicit definitions.
"""

import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, Union

import numpy as np


@dataclass(frozen=True)
class FrameConvention:
    """
    Explicit coordinate frame and orientation conventions.

    Attributes:
        earth_frame: Name of the earth frame. Only 'ENU' is supported.
        earth_axes: Axis definitions in the earth frame.
        body_frame_axes: Body frame axis definitions.
        quaternion_convention: Quaternion component order ('scalar_first').
        quaternion_meaning: What the orientation quaternion represents
                            ('body_to_earth': v_E = R(q) @ v_B).
        accel_units: Units of accelerometer readings ('g').

    Notes:
        - Heading 0 points north, π/2 points east.
        - Gravity is [0, 0, -1] g in the earth frame.
        - The accelerometer reports gravity minus acceleration, i.e. the
          negated specific force. A level, stationary sensor reads
          [0, 0, -1] g; a sensor that reports specific force must be
          negated before use.
        - The apparent gravity of a vehicle accelerating at a_E (in g) is
          therefore [-a_1, -a_2, -a_3 - 1]. See apparent_gravity().

    Example:
        >>> frame = FrameConvention()
        >>> frame.north_unit_vector()
        array([0., 1., 0.])
        >>> frame.apparent_gravity(np.zeros(3))
        array([-0., -0., -1.])
    """

    earth_frame: str = 'ENU'
    earth_axes: tuple = ('x=East', 'y=North', 'z=Up')
    body_frame_axes: tuple = ('x=forward', 'y=left', 'z=up')
    quaternion_convention: str = 'scalar_first'
    quaternion_meaning: str = 'body_to_earth'
    accel_units: str = 'g'

    def __post_init__(self) -> None:
        """Validate frame convention consistency."""
        if self.earth_frame != 'ENU':
            raise ValueError(
                f"earth_frame must be 'ENU', got '{self.earth_frame}'"
            )
        if self.earth_axes != ('x=East', 'y=North', 'z=Up'):
            raise ValueError(
                f"For ENU, earth_axes should be ('x=East', 'y=North', 'z=Up'), "
                f"got {self.earth_axes}"
            )
        if self.quaternion_convention != 'scalar_first':
            raise ValueError(
                f"quaternion_convention must be 'scalar_first', "
                f"got '{self.quaternion_convention}'"
            )
        if self.quaternion_meaning != 'body_to_earth':
            raise ValueError(
                f"quaternion_meaning must be 'body_to_earth', "
                f"got '{self.quaternion_meaning}'"
            )

    def apparent_gravity(self, accel_earth_g: np.ndarray) -> np.ndarray:
        """
        Apparent gravity in the earth frame.

        Unit gravity [0, 0, -1] combined with the negated earth-frame
        acceleration of the vehicle: what the accelerometer reads, expressed
        in the earth frame, when the vehicle accelerates at accel_earth_g.

        Args:
            accel_earth_g: Earth-frame (ENU) acceleration, shape (3,). Units: g.

        Returns:
            Apparent gravity [-a1, -a2, -a3 - 1], shape (3,). Units: g.
        """
        accel_earth_g = np.asarray(accel_earth_g, dtype=np.float64)
        return np.array(
            [-accel_earth_g[0], -accel_earth_g[1], -accel_earth_g[2] - 1.0]
        )

    def north_unit_vector(self) -> np.ndarray:
        """Unit vector pointing north in the earth frame."""
        return np.array([0.0, 1.0, 0.0])

    def heading_to_unit_vector(self, heading_rad: float) -> np.ndarray:
        """
        Convert heading angle to a horizontal unit vector in the earth frame.

            heading=0   → [0, 1, 0] (North)
            heading=π/2 → [1, 0, 0] (East)

        Args:
            heading_rad: Heading angle in radians, from north toward east.

        Returns:
            Unit direction vector, shape (3,).
        """
        return np.array([np.sin(heading_rad), np.cos(heading_rad), 0.0])


def _as_float_vector(value: Any, owner: str, name: str) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"{owner}.{name} must have shape (3,), got {arr.shape}")
    return arr


@dataclass(frozen=True)
class Measurement:
    """
    One timestamped sample bundle consumed by an attitude estimator update.

    Attributes:
        t: Sample timestamp in seconds (monotonic clock or GPS time).
        w: GPS-derived velocity in the earth frame E, shape (3,). Units: m/s.
        w_valid: Whether the GPS velocity is trustworthy this sample.
        a: Accelerometer reading in body frame B, shape (3,). Units: g.
        m: Magnetometer reading in body frame B, shape (3,). Any unit.
        m_valid: Whether the magnetometer reading is trustworthy.

    Notes:
        - Array-likes are converted to float64 arrays on construction.
        - frozen=True: an estimator never modifies the sample it is given.

    Example:
        >>> meas = Measurement(
        ...     t=1.0, w=[5.0, 0.0, 0.0], w_valid=True,
        ...     a=[0.0, 0.0, -1.0], m=[0.0, 0.4, -0.9], m_valid=True,
        ... )
    """

    t: float
    w: np.ndarray
    w_valid: bool
    a: np.ndarray
    m: np.ndarray = field(default_factory=lambda: np.zeros(3))
    m_valid: bool = False

    def __post_init__(self) -> None:
        """Convert arrays and validate shapes."""
        object.__setattr__(self, 't', float(self.t))
        object.__setattr__(self, 'w', _as_float_vector(self.w, 'Measurement', 'w'))
        object.__setattr__(self, 'a', _as_float_vector(self.a, 'Measurement', 'a'))
        object.__setattr__(self, 'm', _as_float_vector(self.m, 'Measurement', 'm'))
        object.__setattr__(self, 'w_valid', bool(self.w_valid))
        object.__setattr__(self, 'm_valid', bool(self.m_valid))


@dataclass(frozen=True)
class MeasurementSeries:
    """
    Time-series of measurement bundles.

    Column-oriented storage of N samples for batch runs, simulation output
    and datasets on disk. Iterating yields Measurement objects in order.

    Attributes:
        t: Timestamps in seconds, shape (N,).
        w: GPS velocity in earth frame E, shape (N, 3). Units: m/s.
        w_valid: GPS velocity validity flags, shape (N,). dtype bool.
        a: Accelerometer readings in body frame B, shape (N, 3). Units: g.
        m: Magnetometer readings in body frame B, shape (N, 3).
        m_valid: Magnetometer validity flags, shape (N,). dtype bool.
        meta: Optional metadata dict (sample rate, scenario name, ...).

    Notes:
        Timestamps that are not strictly increasing trigger a UserWarning:
        the estimators divide by the time step.
    """

    t: np.ndarray
    w: np.ndarray
    w_valid: np.ndarray
    a: np.ndarray
    m: np.ndarray
    m_valid: np.ndarray
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate shape consistency of the series."""
        if self.t.ndim != 1:
            raise ValueError(
                f"MeasurementSeries.t must be 1D array, got shape {self.t.shape}"
            )

        n_samples = self.t.shape[0]

        for name in ('w', 'a', 'm'):
            arr = getattr(self, name)
            if arr.shape != (n_samples, 3):
                raise ValueError(
                    f"MeasurementSeries.{name} must have shape ({n_samples}, 3), "
                    f"got {arr.shape}"
                )

        for name in ('w_valid', 'm_valid'):
            arr = getattr(self, name)
            if arr.shape != (n_samples,):
                raise ValueError(
                    f"MeasurementSeries.{name} must have shape ({n_samples},), "
                    f"got {arr.shape}"
                )
            object.__setattr__(self, name, arr.astype(bool))

        if n_samples > 1 and not np.all(np.diff(self.t) > 0):
            warnings.warn(
                "MeasurementSeries timestamps are not strictly increasing; "
                "estimators will produce NaN/Inf accelerations at repeated samples.",
                UserWarning,
            )

    def __len__(self) -> int:
        return self.t.shape[0]

    def __getitem__(self, k: int) -> Measurement:
        return Measurement(
            t=self.t[k],
            w=self.w[k],
            w_valid=self.w_valid[k],
            a=self.a[k],
            m=self.m[k],
            m_valid=self.m_valid[k],
        )

    def __iter__(self) -> Iterator[Measurement]:
        for k in range(len(self)):
            yield self[k]

    def save_npz(self, path: Union[str, Path]) -> None:
        """Save the series to a compressed .npz file (meta is not stored)."""
        np.savez_compressed(
            path,
            t=self.t,
            w=self.w,
            w_valid=self.w_valid,
            a=self.a,
            m=self.m,
            m_valid=self.m_valid,
        )

    @classmethod
    def load_npz(cls, path: Union[str, Path]) -> "MeasurementSeries":
        """Load a series previously written with save_npz()."""
        with np.load(path) as data:
            return cls(
                t=data['t'],
                w=data['w'],
                w_valid=data['w_valid'],
                a=data['a'],
                m=data['m'],
                m_valid=data['m_valid'],
                meta={'source': str(path)},
            )
