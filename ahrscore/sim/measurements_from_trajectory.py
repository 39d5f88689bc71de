"""
Generate synthetic AHRS measurements from a ground truth trajectory.

This module implements the sensor forward models from first principles:
    - GPS velocity: the earth-frame velocity itself (optionally noisy)
    - Accelerometer: specific force rotated into the body frame,
          f_B = R(q)^T @ (a_E - g_E),   g_E = [0, 0, -1]   (units of g)
      where a_E = dv/dt / g is the earth-frame acceleration. The sensor
      reports gravity minus acceleration, i.e. the negated specific force:
          a_B = -f_B
    - Magnetometer: earth magnetic field rotated into the body frame,
          m_B = R(q)^T @ m_E

For a stationary, level vehicle the accelerometer reads [0, 0, -1] g; in a
coordinated level turn at bank φ it reads [0, 0, -1/cos(φ)].

Frame Conventions:
    - E: Earth frame ENU (x=East, y=North, z=Up)
    - B: Body frame FLU (x=Forward, y=Left, z=Up)
    - Quaternion q is body to earth (v_E = R(q) @ v_B)
"""

from typing import Optional, Sequence, Tuple
import numpy as np

from ahrscore.coords.rotations import euler_to_quat, quat_to_rotation_matrix
from ahrscore.sensors.gravity import STANDARD_GRAVITY
from ahrscore.sensors.types import MeasurementSeries
from ahrscore.sensors.units import track_and_speed_to_enu

# Gravity in the earth frame, units of g
GRAVITY_ENU_G = np.array([0.0, 0.0, -1.0])

# Typical mid-latitude field direction: north and 65° down, normalized
DEFAULT_MAG_FIELD_ENU = np.array([0.0, np.cos(np.deg2rad(65.0)), -np.sin(np.deg2rad(65.0))])


def specific_force_body(
    accel_earth_g: np.ndarray,
    quat_b_to_e: np.ndarray,
) -> np.ndarray:
    """
    Compute specific force in body frame from earth-frame acceleration.

    Forward model:
        f_B = R(q)^T @ (a_E - g_E)

    A stationary, level body feels +1 g along its up axis.

    Args:
        accel_earth_g: Earth-frame (ENU) acceleration.
                       Shape: (N, 3) or (3,). Units: g.
        quat_b_to_e: Quaternion(s) representing body-to-earth rotation.
                     Shape: (N, 4) or (4,). Scalar-first [q0, q1, q2, q3].

    Returns:
        Specific force in body frame.
        Shape: (N, 3) or (3,). Units: g.
    """
    single_sample = accel_earth_g.ndim == 1
    if single_sample:
        accel_earth_g = accel_earth_g.reshape(1, -1)
        quat_b_to_e = quat_b_to_e.reshape(1, -1)

    N = accel_earth_g.shape[0]

    f_b = np.zeros((N, 3))
    for i in range(N):
        C_B_E = quat_to_rotation_matrix(quat_b_to_e[i])
        f_b[i] = C_B_E.T @ (accel_earth_g[i] - GRAVITY_ENU_G)

    if single_sample:
        return f_b[0]
    return f_b


def accel_body_from_trajectory(
    accel_earth_g: np.ndarray,
    quat_b_to_e: np.ndarray,
) -> np.ndarray:
    """
    Compute accelerometer readings in body frame from earth-frame acceleration.

    The sensor reports the negated specific force: a_B = -f_B.

    Args:
        accel_earth_g: Earth-frame (ENU) acceleration.
                       Shape: (N, 3) or (3,). Units: g.
        quat_b_to_e: Body-to-earth quaternion(s), shape (N, 4) or (4,).

    Returns:
        Accelerometer readings in body frame.
        Shape: (N, 3) or (3,). Units: g.

    Example:
        >>> a_b = accel_body_from_trajectory(np.zeros(3), np.array([1.0, 0, 0, 0]))
        >>> print(a_b)  # [0, 0, -1] (level, stationary)
    """
    return -specific_force_body(accel_earth_g, quat_b_to_e)


def mag_body_from_attitude(
    quat_b_to_e: np.ndarray,
    field_earth: np.ndarray = DEFAULT_MAG_FIELD_ENU,
) -> np.ndarray:
    """
    Compute magnetometer readings in body frame.

    Args:
        quat_b_to_e: Body-to-earth quaternion(s), shape (N, 4) or (4,).
        field_earth: Magnetic field in earth frame, shape (3,).

    Returns:
        Magnetometer readings, shape (N, 3) or (3,).
    """
    single_sample = quat_b_to_e.ndim == 1
    if single_sample:
        quat_b_to_e = quat_b_to_e.reshape(1, -1)

    m_b = np.array([quat_to_rotation_matrix(q).T @ field_earth for q in quat_b_to_e])

    if single_sample:
        return m_b[0]
    return m_b


def straight_track(
    duration: float = 60.0,
    dt: float = 0.1,
    speed_mps: float = 50.0,
    track_rad: float = 0.0,
    roll: float = 0.0,
    pitch: float = 0.0,
    t0: Optional[float] = None,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Constant-velocity straight and level trajectory.

    The body heading equals the GPS track.

    Args:
        duration: Duration in seconds.
        dt: Sample period in seconds.
        speed_mps: Ground speed, m/s.
        track_rad: Track angle from north toward east, radians.
        roll, pitch: Constant body roll/pitch, radians.
        t0: First timestamp. Default: dt (strictly after the estimator's
            initial reference time of zero).

    Returns:
        Tuple (t, vel_earth, euler):
            t: timestamps (N,)
            vel_earth: ENU velocity (N, 3), m/s
            euler: roll, pitch, heading (N, 3), rad
    """
    if t0 is None:
        t0 = dt
    n_samples = int(round(duration / dt))
    t = t0 + dt * np.arange(n_samples)

    vel = np.tile(track_and_speed_to_enu(track_rad, speed_mps), (n_samples, 1))
    euler = np.tile([roll, pitch, track_rad], (n_samples, 1))

    return t, vel, euler


def coordinated_turn(
    duration: float = 60.0,
    dt: float = 0.1,
    speed_mps: float = 50.0,
    turn_rate: float = np.deg2rad(3.0),
    track0_rad: float = 0.0,
    straight_time: float = 10.0,
    g: float = STANDARD_GRAVITY,
    t0: Optional[float] = None,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Straight leg followed by a constant-rate level turn.

    Bank angle during the turn is atan(V·ω/g) (positive for right turns).

    Args:
        duration: Total duration in seconds.
        dt: Sample period in seconds.
        speed_mps: Ground speed, m/s.
        turn_rate: Track rate during the turn, rad/s (positive = right).
        track0_rad: Initial track, radians.
        straight_time: Length of the initial straight leg, seconds.
        g: Gravity magnitude for the bank angle, m/s².
        t0: First timestamp. Default: dt.

    Returns:
        Tuple (t, vel_earth, euler) as in straight_track().
    """
    if t0 is None:
        t0 = dt
    n_samples = int(round(duration / dt))
    t = t0 + dt * np.arange(n_samples)

    turn_time = np.clip(t - t0 - straight_time, 0.0, None)
    track = track0_rad + turn_rate * turn_time
    bank = np.where(turn_time > 0.0, np.arctan(speed_mps * turn_rate / g), 0.0)

    vel = track_and_speed_to_enu(track, speed_mps * np.ones(n_samples))
    euler = np.column_stack([bank, np.zeros(n_samples), np.arctan2(np.sin(track), np.cos(track))])

    return t, vel, euler


def _outage_mask(t: np.ndarray, outages: Sequence[Tuple[float, float]]) -> np.ndarray:
    mask = np.zeros(t.shape[0], dtype=bool)
    for start, end in outages:
        mask |= (t >= start) & (t < end)
    return mask


def generate_measurements(
    t: np.ndarray,
    vel_earth: np.ndarray,
    euler: np.ndarray,
    g: float = STANDARD_GRAVITY,
    accel_noise_g: float = 0.0,
    vel_noise_mps: float = 0.0,
    mag_noise: float = 0.0,
    gps_outages: Sequence[Tuple[float, float]] = (),
    mag_outages: Sequence[Tuple[float, float]] = (),
    field_earth: np.ndarray = DEFAULT_MAG_FIELD_ENU,
    seed: Optional[int] = None,
) -> MeasurementSeries:
    """
    Generate a synthetic measurement series from a ground truth trajectory.

    Steps:
        1. Earth-frame acceleration a_E = dv/dt / g (np.gradient)
        2. Accelerometer a_B = -R(q)^T @ (a_E - g_E)
        3. Magnetometer m_B = R(q)^T @ m_E
        4. Gaussian noise and validity masks

    Args:
        t: Timestamps, shape (N,). Strictly increasing.
        vel_earth: ENU velocity, shape (N, 3). Units: m/s.
        euler: True roll, pitch, heading, shape (N, 3). Units: rad.
        g: Gravity magnitude used to express acceleration in g.
        accel_noise_g: Accelerometer noise standard deviation, g.
        vel_noise_mps: GPS velocity noise standard deviation, m/s.
        mag_noise: Magnetometer noise standard deviation (field units).
        gps_outages: (start, end) intervals in seconds with invalid GPS.
                     Velocity is reported as zeros during an outage.
        mag_outages: (start, end) intervals with invalid magnetometer.
        field_earth: Earth magnetic field in ENU, shape (3,).
        seed: Random seed for reproducibility.

    Returns:
        MeasurementSeries with meta['quat_true'] and meta['euler_true'].

    Example:
        >>> t, vel, euler = coordinated_turn(duration=60.0)
        >>> series = generate_measurements(t, vel, euler, accel_noise_g=0.01, seed=42)
        >>> print(len(series))  # 600
    """
    if t.ndim != 1:
        raise ValueError(f"t must be 1D array, got shape {t.shape}")
    n_samples = t.shape[0]
    if vel_earth.shape != (n_samples, 3):
        raise ValueError(
            f"vel_earth must have shape ({n_samples}, 3), got {vel_earth.shape}"
        )
    if euler.shape != (n_samples, 3):
        raise ValueError(
            f"euler must have shape ({n_samples}, 3), got {euler.shape}"
        )

    rng = np.random.default_rng(seed)

    quat = np.array([euler_to_quat(*e) for e in euler])

    if n_samples > 1:
        accel_earth_g = np.gradient(vel_earth, t, axis=0) / g
    else:
        accel_earth_g = np.zeros((n_samples, 3))

    a_b = accel_body_from_trajectory(accel_earth_g, quat)
    m_b = mag_body_from_attitude(quat, field_earth)
    w = vel_earth.astype(np.float64, copy=True)

    if accel_noise_g > 0.0:
        a_b = a_b + rng.normal(0.0, accel_noise_g, size=a_b.shape)
    if vel_noise_mps > 0.0:
        w = w + rng.normal(0.0, vel_noise_mps, size=w.shape)
    if mag_noise > 0.0:
        m_b = m_b + rng.normal(0.0, mag_noise, size=m_b.shape)

    gps_out = _outage_mask(t, gps_outages)
    w[gps_out] = 0.0

    return MeasurementSeries(
        t=t.astype(np.float64),
        w=w,
        w_valid=~gps_out,
        a=a_b,
        m=m_b,
        m_valid=~_outage_mask(t, mag_outages),
        meta={
            'quat_true': quat,
            'euler_true': euler.copy(),
            'accel_earth_g': accel_earth_g,
            'field_earth': np.asarray(field_earth, dtype=np.float64),
            'seed': seed,
        },
    )
