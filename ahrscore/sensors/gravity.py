"""
Gravity magnitude used to express GPS-derived accelerations in units of g.

The heuristic estimator divides finite-difference GPS accelerations (m/s²)
by the local gravity magnitude so that they can be combined with the
accelerometer reading (in g). Standard gravity is the default; the WGS-84
latitude model is available when the operating latitude is known.

The WGS-84 gravity formula accounts for:
    - Earth's oblate spheroid shape (equatorial bulge)
    - Centrifugal force from Earth's rotation
    - Latitude-dependent variation (±0.05 m/s² from equator to poles)
"""

from typing import Optional
import numpy as np

# Standard gravity (CGPM 1901), m/s²
STANDARD_GRAVITY = 9.80665


def gravity_magnitude_wgs84(lat_rad: float) -> float:
    """
    Compute gravity magnitude using the WGS-84 latitude model.

        g(φ) = 9.7803 * (1 + 0.0053024·sin²(φ) - 0.000005·sin²(2φ))

    where φ is geodetic latitude in radians.

    Physical Interpretation:
        - Equator (φ=0°):   g ≈ 9.780 m/s²
        - 45° latitude:     g ≈ 9.806 m/s²
        - Poles (φ=±90°):   g ≈ 9.832 m/s²

    Args:
        lat_rad: Geodetic latitude in radians. Range: [-π/2, +π/2].

    Returns:
        Gravity magnitude g in m/s².

    Notes:
        - Sea level; no altitude correction.

    Example:
        >>> g_45n = gravity_magnitude_wgs84(np.deg2rad(45.0))
        >>> print(f"45°N: {g_45n:.4f} m/s²")  # ~9.8062
    """
    sin_lat = np.sin(lat_rad)
    sin_lat_sq = sin_lat * sin_lat
    sin_2lat = np.sin(2.0 * lat_rad)
    sin_2lat_sq = sin_2lat * sin_2lat

    g = 9.7803 * (1.0 + 0.0053024 * sin_lat_sq - 0.000005 * sin_2lat_sq)

    return float(g)


def gravity_magnitude(
    lat_rad: Optional[float] = None,
    default_g: float = STANDARD_GRAVITY,
) -> float:
    """
    Compute gravity magnitude with automatic fallback.

    Behavior:
        - If lat_rad is provided: WGS-84 latitude-dependent gravity
        - If lat_rad is None: return default_g

    Args:
        lat_rad: Geodetic latitude in radians (optional).
        default_g: Fallback gravity magnitude when lat_rad is None.
                   Default: 9.80665 m/s² (standard gravity).

    Returns:
        Gravity magnitude in m/s².

    Example:
        >>> gravity_magnitude()
        9.80665
        >>> round(gravity_magnitude(lat_rad=np.deg2rad(40.0)), 4)
        9.8017
    """
    if lat_rad is None:
        return default_g
    return gravity_magnitude_wgs84(lat_rad)
