"""
Heuristic attitude and heading reference (AHRS) estimator.

This module estimates roll, pitch and heading of a moving vehicle from GPS
velocity, accelerometer and magnetometer samples without a statistical
filter (no gain, no covariance). Each update is a direct geometric
construction in four stages:

    1. Velocity/acceleration smoothing
       Short time-constant EMA of GPS velocity; earth-frame acceleration from
       the finite difference of successive GPS velocities, smoothed the same
       way. Everything is reset to zero while GPS velocity is invalid.
    2. Gravity alignment
       Apparent gravity ae = [-z1, -z2, -z3 - 1] (g units) is matched to the
       accelerometer reading with the minimal-rotation quaternion q. This
       fixes roll and pitch but leaves rotation about ae undetermined.
    3. Heading-ambiguity resolution
       The body forward axis under q is swept about ae onto the reference
       heading (GPS track, or north without GPS): E = p ⊗ q.
    4. Magnetic projection and bookkeeping
       The magnetometer reading is projected into the earth frame to give
       the north-reference vector; GPS velocity and time are stored for the
       next finite difference.

Frame Conventions:
    - E: Earth frame ENU (z up); B: body frame FLU (x forward, z up)
    - Gravity is [0, 0, -1] g; the accelerometer reads gravity minus
      acceleration, so a level, stationary sensor reads [0, 0, -1]
    - Orientation quaternion is body to earth: v_E = R(E) @ v_B

Degenerate geometry (zero-length normalizations, repeated timestamps) is not
guarded: NaN/Inf propagate into the quaternion exactly as the arithmetic
dictates, and a DegenerateGeometryWarning is emitted so the host can apply
its own hold or re-initialization policy. Accumulated NaN in the smoothing
memory persists until the next sample with invalid GPS velocity.
"""

import warnings
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

from ahrscore.coords.rotations import (
    quat_from_axis_angle,
    quat_from_two_vectors,
    quat_multiply,
    quat_to_rotation_matrix,
)
from ahrscore.estimators.base import AttitudeEstimator
from ahrscore.sensors.gravity import STANDARD_GRAVITY, gravity_magnitude
from ahrscore.sensors.types import FrameConvention, Measurement
from ahrscore.utils.smoothing import ema_update

KSHORT = 0.2  # Short-term moving average gain, ~0.5 s at 10 Hz
KLONG = 0.02  # Long-term moving average gain, ~5 s at 10 Hz


class DegenerateGeometryWarning(RuntimeWarning):
    """An update produced a non-finite orientation quaternion."""


@dataclass(frozen=True)
class HeuristicConfig:
    """
    Tuning constants of the heuristic estimator.

    Attributes:
        k_short: Gain of the short-term EMA applied to GPS velocity and to
                 the GPS-derived acceleration. Range (0, 1]. Default: 0.2.
        k_long: Gain of the long-term diagnostic EMAs. Range (0, 1].
                Default: 0.02.
        g_mps2: Gravity magnitude used to convert m/s² to g.
                Default: 9.80665 m/s².
        default_heading: Earth-frame heading reference used when GPS velocity
                         is invalid ("assumed north"). Default: (0, 1, 0).
        frame: Frame convention (apparent gravity model).

    Example:
        >>> config = HeuristicConfig(k_short=0.3)
        >>> config_local = HeuristicConfig.for_latitude(np.deg2rad(47.5))
    """

    k_short: float = KSHORT
    k_long: float = KLONG
    g_mps2: float = STANDARD_GRAVITY
    default_heading: Tuple[float, float, float] = (0.0, 1.0, 0.0)
    frame: FrameConvention = field(default_factory=FrameConvention)

    def __post_init__(self) -> None:
        """Validate gains, gravity and default heading."""
        if not (0.0 < self.k_short <= 1.0):
            raise ValueError(f"k_short must be in (0, 1], got {self.k_short}")
        if not (0.0 < self.k_long <= 1.0):
            raise ValueError(f"k_long must be in (0, 1], got {self.k_long}")
        if not self.g_mps2 > 0.0:
            raise ValueError(f"g_mps2 must be positive, got {self.g_mps2}")

        heading = np.asarray(self.default_heading, dtype=np.float64)
        if heading.shape != (3,):
            raise ValueError(
                f"default_heading must have 3 components, got shape {heading.shape}"
            )
        if not np.linalg.norm(heading) > 0.0:
            raise ValueError("default_heading must be a nonzero vector")
        object.__setattr__(self, 'default_heading', tuple(float(x) for x in heading))

    @classmethod
    def for_latitude(cls, lat_rad: float, **kwargs) -> "HeuristicConfig":
        """Configuration using WGS-84 gravity at the given latitude."""
        return cls(g_mps2=gravity_magnitude(lat_rad), **kwargs)

    def default_heading_unit(self) -> np.ndarray:
        heading = np.asarray(self.default_heading, dtype=np.float64)
        return heading / np.linalg.norm(heading)


@dataclass
class SmoothingMemory:
    """
    Filter memory carried between updates.

    Attributes:
        z: Smoothed earth-frame acceleration, shape (3,). Units: g.
        w_prev: Previous raw GPS velocity (finite-difference base). m/s.
        w_short: Short-term EMA of GPS velocity. m/s.
        w_long: Long-term EMA of GPS velocity. m/s.
        a_short, a_long: Short/long-term EMAs of the accelerometer. g.
        m_short, m_long: Short/long-term EMAs of the magnetometer.

    Notes:
        Only z, w_prev and w_short take part in the attitude construction.
        The long-term and accelerometer/magnetometer averages are
        diagnostics, read through HeuristicAHRS.diagnostics().
    """

    z: np.ndarray = field(default_factory=lambda: np.zeros(3))
    w_prev: np.ndarray = field(default_factory=lambda: np.zeros(3))
    w_short: np.ndarray = field(default_factory=lambda: np.zeros(3))
    w_long: np.ndarray = field(default_factory=lambda: np.zeros(3))
    a_short: np.ndarray = field(default_factory=lambda: np.zeros(3))
    a_long: np.ndarray = field(default_factory=lambda: np.zeros(3))
    m_short: np.ndarray = field(default_factory=lambda: np.zeros(3))
    m_long: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def reset_velocity(self) -> None:
        """Zero the velocity history and the acceleration estimate together."""
        self.w_prev = np.zeros(3)
        self.w_short = np.zeros(3)
        self.w_long = np.zeros(3)
        self.z = np.zeros(3)


class HeuristicAHRS(AttitudeEstimator):
    """
    Deterministic, filter-free attitude estimator.

    One instance tracks one vehicle. Call update() once per Measurement in
    strictly increasing timestamp order, then read the attitude through
    roll_pitch_heading() or the orientation accessor.

    Attributes:
        config: HeuristicConfig with the smoothing gains and references.
        memory: SmoothingMemory (velocity/acceleration history).
        inertial: True while no GPS acceleration compensation is applied
                  (GPS velocity invalid, sensor frame treated as inertial).
        heading_valid: True while the heading is slaved to the GPS track
                       rather than the default heading.

    Notes:
        A vehicle parked with GPS velocity flagged valid at exactly zero
        speed has no track to align with. Starting up parked, the smoothed
        velocity is exactly zero, the reference heading is 0/0 and every
        such update yields a NaN quaternion and a
        DegenerateGeometryWarning. After a stop the smoothed velocity only
        decays, so the output stays finite but the heading follows
        whatever direction GPS noise gives it. Hosts should mark the GPS
        velocity invalid below a minimum ground speed (the heading then
        falls back to the default) or hold the last good attitude, as
        run_attitude_estimator() does.

    Example:
        >>> ahrs = HeuristicAHRS()
        >>> for k in range(1, 50):
        ...     ahrs.update(Measurement(
        ...         t=0.1 * k, w=[20.0, 0.0, 0.0], w_valid=True,
        ...         a=[0.0, 0.0, -1.0],
        ...     ))
        >>> roll, pitch, heading = ahrs.roll_pitch_heading()
        >>> round(np.rad2deg(heading))  # east
        90
    """

    def __init__(self, config: Optional[HeuristicConfig] = None):
        super().__init__()
        self.config = config if config is not None else HeuristicConfig()
        self.memory = SmoothingMemory()
        self.inertial = True
        self.heading_valid = False

    def reset(self) -> None:
        super().reset()
        self.memory = SmoothingMemory()
        self.inertial = True
        self.heading_valid = False

    def update(self, measurement: Measurement) -> None:
        """
        Process one measurement bundle.

        Args:
            measurement: Sample whose timestamp is strictly later than the
                         previous one (used as a time-step divisor).

        Warns:
            DegenerateGeometryWarning: If the resulting quaternion is not
                finite. The NaN/Inf value is kept in the state.
        """
        cfg = self.config

        with np.errstate(divide='ignore', invalid='ignore'):
            self._smooth_velocity(measurement)

            ae = cfg.frame.apparent_gravity(self.memory.z)

            # Orientation carrying ae onto the accelerometer reading:
            # R(q) @ a = ae. Rotation about ae is still free.
            q = quat_from_two_vectors(measurement.a, ae)

            e = self._resolve_heading(q, ae, measurement.w_valid)

            self._orientation.set_quaternion(e)

            # Bookkeeping for the next finite difference
            self.memory.w_prev = measurement.w.copy()
            self._orientation.t = measurement.t

            if measurement.m_valid:
                self._orientation.north = self._orientation.rotation @ measurement.m

            self._update_diagnostics(measurement)

        self.inertial = not measurement.w_valid
        self.heading_valid = measurement.w_valid

        if not self._orientation.is_finite():
            warnings.warn(
                f"Degenerate geometry at t={measurement.t:.6f} s: "
                f"orientation quaternion is not finite ({self._orientation.q}).",
                DegenerateGeometryWarning,
                stacklevel=2,
            )

    def _smooth_velocity(self, measurement: Measurement) -> None:
        mem = self.memory
        k = self.config.k_short

        if not measurement.w_valid:
            mem.reset_velocity()
            return

        if not np.any(mem.w_prev):
            # Startup after a gap: no acceleration spike
            mem.w_prev = measurement.w.copy()

        mem.w_short = ema_update(mem.w_short, measurement.w, k)

        # Earth-frame acceleration from GPS, in g. This is what makes the
        # sensor frame non-inertial.
        dt = measurement.t - self._orientation.t
        accel_g = (measurement.w - mem.w_prev) / dt / self.config.g_mps2
        mem.z = ema_update(mem.z, accel_g, k)

    def _resolve_heading(
        self,
        q: np.ndarray,
        ae: np.ndarray,
        w_valid: bool,
    ) -> np.ndarray:
        # Reference heading: GPS track if available, else assumed north
        if w_valid:
            w_short = self.memory.w_short
            we = w_short / np.linalg.norm(w_short)
        else:
            we = self.config.default_heading_unit()

        # Sensor forward direction in the earth frame
        xe = quat_to_rotation_matrix(q)[:, 0]

        u = np.cross(ae, xe)
        u = u / np.linalg.norm(u)
        v = np.cross(ae, we)
        v = v / np.linalg.norm(v)

        # Signed angle about ae sweeping u onto v; |alpha| = acos(u·v)
        ae_hat = ae / np.linalg.norm(ae)
        alpha = np.arctan2(np.dot(np.cross(u, v), ae_hat), np.dot(u, v))

        p = quat_from_axis_angle(ae, alpha)
        return quat_multiply(p, q)

    def _update_diagnostics(self, measurement: Measurement) -> None:
        mem = self.memory
        cfg = self.config

        if measurement.w_valid:
            mem.w_long = ema_update(mem.w_long, measurement.w, cfg.k_long)

        mem.a_short = ema_update(mem.a_short, measurement.a, cfg.k_short)
        mem.a_long = ema_update(mem.a_long, measurement.a, cfg.k_long)

        if measurement.m_valid:
            mem.m_short = ema_update(mem.m_short, measurement.m, cfg.k_short)
            mem.m_long = ema_update(mem.m_long, measurement.m, cfg.k_long)

    def diagnostics(self) -> Dict[str, np.ndarray]:
        """
        Copies of the smoothed signals carried between updates.

        Returns:
            Dict with keys:
                'accel_earth_g': smoothed GPS acceleration z (ENU, g)
                'velocity_short', 'velocity_long': GPS velocity EMAs (m/s)
                'accel_short', 'accel_long': accelerometer EMAs (body, g)
                'mag_short', 'mag_long': magnetometer EMAs (body)

        The velocity averages are zero while GPS is invalid; the
        magnetometer averages only move on samples with a valid reading.
        """
        mem = self.memory
        return {
            'accel_earth_g': mem.z.copy(),
            'velocity_short': mem.w_short.copy(),
            'velocity_long': mem.w_long.copy(),
            'accel_short': mem.a_short.copy(),
            'accel_long': mem.a_long.copy(),
            'mag_short': mem.m_short.copy(),
            'mag_long': mem.m_long.copy(),
        }

    def valid(self) -> bool:
        """Always True: the heuristic performs no self-consistency check."""
        return True

    def roll_pitch_heading_uncertainty(self) -> Tuple[float, float, float]:
        """No covariance is carried, so no uncertainty can be reported."""
        return 0.0, 0.0, 0.0
