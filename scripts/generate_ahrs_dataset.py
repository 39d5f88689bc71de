"""
Generate Heuristic AHRS Dataset (GPS Velocity + Accelerometer + Magnetometer).

This script generates synthetic measurement series for the heuristic AHRS:
a straight leg followed by a constant-rate level turn, flown at constant
ground speed, with optional sensor noise and GPS/magnetometer outages.

Key Learning Objectives:
    - A banked turn tilts the apparent gravity vector; roll is only
      recoverable once the GPS-derived acceleration is removed
    - Heading is slaved to the GPS track and lost during GPS outages
    - The magnetometer gives an independent north reference

Files written to the output directory:
    measurements.npz   MeasurementSeries (t, w, w_valid, a, m, m_valid)
    truth.npz          True quaternion, Euler angles and earth-frame acceleration
    config.json        Generation parameters and reference performance
"""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ahrscore.estimators import HeuristicAHRS, HeuristicConfig, run_attitude_estimator
from ahrscore.eval import summarize_attitude_errors
from ahrscore.sensors import MeasurementSeries, knots_to_mps
from ahrscore.sim import coordinated_turn, generate_measurements

PRESETS: Dict[str, Dict] = {
    "baseline": {
        "accel_noise": 0.002,
        "vel_noise": 0.02,
        "mag_noise": 0.005,
        "gps_outages": [],
        "mag_outages": [],
        "output_dir": "data/sim/ahrs_baseline",
    },
    "noisy": {
        "accel_noise": 0.02,
        "vel_noise": 0.2,
        "mag_noise": 0.03,
        "gps_outages": [],
        "mag_outages": [],
        "output_dir": "data/sim/ahrs_noisy",
    },
    "gps_dropout": {
        "accel_noise": 0.005,
        "vel_noise": 0.05,
        "mag_noise": 0.01,
        "gps_outages": [(40.0, 55.0), (80.0, 85.0)],
        "mag_outages": [],
        "output_dir": "data/sim/ahrs_gps_dropout",
    },
    "mag_dropout": {
        "accel_noise": 0.005,
        "vel_noise": 0.05,
        "mag_noise": 0.01,
        "gps_outages": [],
        "mag_outages": [(30.0, 60.0)],
        "output_dir": "data/sim/ahrs_mag_dropout",
    },
}


def save_dataset(
    output_dir: Path,
    series: MeasurementSeries,
    config: Dict,
) -> None:
    """Save dataset to disk."""
    output_dir.mkdir(parents=True, exist_ok=True)

    series.save_npz(output_dir / "measurements.npz")
    np.savez_compressed(
        output_dir / "truth.npz",
        t=series.t,
        quat=series.meta["quat_true"],
        euler=series.meta["euler_true"],
        accel_earth_g=series.meta["accel_earth_g"],
        field_earth=series.meta["field_earth"],
    )

    with open(output_dir / "config.json", "w") as f:
        json.dump(config, f, indent=2)

    print(f"\n  Saved dataset to: {output_dir}")
    print("    Files: measurements.npz, truth.npz, config.json")
    print(f"    Samples: {len(series)}")


def generate_dataset(
    output_dir: Optional[str] = None,
    preset: Optional[str] = None,
    duration: float = 120.0,
    dt: float = 0.1,
    speed_kt: float = 120.0,
    turn_rate_deg: float = 3.0,
    track_deg: float = 0.0,
    straight_time: float = 20.0,
    accel_noise: float = 0.005,
    vel_noise: float = 0.05,
    mag_noise: float = 0.01,
    gps_outages: Optional[List[Tuple[float, float]]] = None,
    mag_outages: Optional[List[Tuple[float, float]]] = None,
    seed: int = 42,
) -> Path:
    """
    Generate a heuristic AHRS dataset.

    Args:
        output_dir: Output directory path. Default: the preset's directory,
                    or data/sim/ahrs_custom.
        preset: Preset configuration name (noise and outage settings).
        duration: Total duration (s).
        dt: Sample period (s).
        speed_kt: Ground speed (knots).
        turn_rate_deg: Turn rate after the straight leg (deg/s).
        track_deg: Initial track (deg from north toward east).
        straight_time: Length of the initial straight leg (s).
        accel_noise: Accelerometer noise std (g).
        vel_noise: GPS velocity noise std (m/s).
        mag_noise: Magnetometer noise std (field units).
        gps_outages: (start, end) GPS outage intervals (s).
        mag_outages: (start, end) magnetometer outage intervals (s).
        seed: Random seed.

    Returns:
        The directory the dataset was written to.
    """
    gps_outages = list(gps_outages or [])
    mag_outages = list(mag_outages or [])

    if preset is not None:
        settings = PRESETS[preset]
        accel_noise = settings["accel_noise"]
        vel_noise = settings["vel_noise"]
        mag_noise = settings["mag_noise"]
        gps_outages = list(settings["gps_outages"])
        mag_outages = list(settings["mag_outages"])
        if output_dir is None:
            output_dir = settings["output_dir"]
    if output_dir is None:
        output_dir = "data/sim/ahrs_custom"

    print("\n" + "=" * 70)
    print(f"Generating Heuristic AHRS Dataset: {Path(output_dir).name}")
    print("=" * 70)

    print("\nStep 1: Generating trajectory (straight leg + level turn)...")
    speed_mps = knots_to_mps(speed_kt)
    t, vel, euler = coordinated_turn(
        duration=duration,
        dt=dt,
        speed_mps=speed_mps,
        turn_rate=np.deg2rad(turn_rate_deg),
        track0_rad=np.deg2rad(track_deg),
        straight_time=straight_time,
    )
    print(f"  Duration: {duration:.1f} s")
    print(f"  Ground speed: {speed_kt:.0f} kt ({speed_mps:.1f} m/s)")
    print(f"  Turn rate: {turn_rate_deg:.1f} deg/s")
    print(f"  Bank angle: {np.rad2deg(np.max(np.abs(euler[:, 0]))):.1f} deg")
    print(f"  Samples: {len(t)}")

    print("\nStep 2: Generating measurements...")
    print(f"  Accel noise: {accel_noise:.4f} g")
    print(f"  GPS velocity noise: {vel_noise:.3f} m/s")
    print(f"  Mag noise: {mag_noise:.3f}")
    print(f"  GPS outages: {gps_outages if gps_outages else 'none'}")
    print(f"  Mag outages: {mag_outages if mag_outages else 'none'}")
    series = generate_measurements(
        t, vel, euler,
        accel_noise_g=accel_noise,
        vel_noise_mps=vel_noise,
        mag_noise=mag_noise,
        gps_outages=gps_outages,
        mag_outages=mag_outages,
        seed=seed,
    )

    print("\nStep 3: Reference run of the heuristic AHRS...")
    start = time.time()
    track = run_attitude_estimator(HeuristicAHRS(HeuristicConfig()), series)
    elapsed = time.time() - start
    stats = summarize_attitude_errors(euler, track.euler)
    print(f"  Time: {elapsed:.3f} s")
    for axis in ("roll", "pitch", "heading"):
        print(f"  {axis.capitalize()} RMSE: {stats[axis]['rmse']:.2f} deg")

    config = {
        "dataset": "heuristic_ahrs",
        "preset": preset,
        "trajectory": {
            "type": "coordinated_turn",
            "duration_s": float(duration),
            "speed_kt": float(speed_kt),
            "turn_rate_deg_s": float(turn_rate_deg),
            "initial_track_deg": float(track_deg),
            "straight_time_s": float(straight_time),
        },
        "frames": {
            "earth": "ENU",
            "body": "FLU",
            "accelerometer": "gravity minus acceleration, level reads [0, 0, -1] g",
        },
        "dt_s": dt,
        "sample_rate_hz": 1.0 / dt,
        "num_samples": len(series),
        "sensors": {
            "accelerometer": {"noise_std_g": accel_noise},
            "gps_velocity": {
                "noise_std_mps": vel_noise,
                "outages_s": [list(o) for o in gps_outages],
            },
            "magnetometer": {
                "noise_std": mag_noise,
                "outages_s": [list(o) for o in mag_outages],
            },
        },
        "performance": {
            axis: {"rmse_deg": stats[axis]["rmse"], "max_deg": stats[axis]["max"]}
            for axis in ("roll", "pitch", "heading")
        },
        "seed": seed,
    }

    save_dataset(Path(output_dir), series, config)

    print("\n" + "=" * 70)
    print("Dataset generation complete!")
    print("=" * 70)

    return Path(output_dir)


def _parse_interval(text: str) -> Tuple[float, float]:
    start, end = (float(x) for x in text.split(":"))
    if end <= start:
        raise argparse.ArgumentTypeError(f"Outage end must follow start, got '{text}'")
    return start, end


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate Heuristic AHRS Dataset",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Presets:
  baseline        Low noise, no outages
  noisy           High accelerometer and GPS velocity noise
  gps_dropout     Two GPS outages (heading reverts to north)
  mag_dropout     Magnetometer outage (north reference frozen)

Examples:
  # Generate baseline dataset
  python scripts/generate_ahrs_dataset.py --preset baseline

  # Custom parameters
  python scripts/generate_ahrs_dataset.py \\
      --output data/sim/my_ahrs \\
      --speed-kt 90 --turn-rate 6 \\
      --gps-outage 30:45
        """,
    )

    parser.add_argument(
        "--preset",
        type=str,
        choices=sorted(PRESETS),
        help="Use preset configuration (overrides noise and outage parameters)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory (default: preset directory or data/sim/ahrs_custom)",
    )

    traj_group = parser.add_argument_group("Trajectory Parameters")
    traj_group.add_argument(
        "--duration", type=float, default=120.0, help="Total duration in seconds (default: 120.0)"
    )
    traj_group.add_argument(
        "--dt", type=float, default=0.1, help="Sample period in seconds (default: 0.1)"
    )
    traj_group.add_argument(
        "--speed-kt", type=float, default=120.0, help="Ground speed in knots (default: 120)"
    )
    traj_group.add_argument(
        "--turn-rate", type=float, default=3.0, help="Turn rate in deg/s (default: 3.0)"
    )
    traj_group.add_argument(
        "--track", type=float, default=0.0, help="Initial track in degrees (default: 0)"
    )
    traj_group.add_argument(
        "--straight-time", type=float, default=20.0,
        help="Straight leg before the turn in seconds (default: 20.0)",
    )

    noise_group = parser.add_argument_group("Sensor Noise Parameters")
    noise_group.add_argument(
        "--accel-noise", type=float, default=0.005, help="Accelerometer noise in g (default: 0.005)"
    )
    noise_group.add_argument(
        "--vel-noise", type=float, default=0.05, help="GPS velocity noise in m/s (default: 0.05)"
    )
    noise_group.add_argument(
        "--mag-noise", type=float, default=0.01, help="Magnetometer noise (default: 0.01)"
    )
    noise_group.add_argument(
        "--gps-outage", type=_parse_interval, action="append", default=[],
        metavar="START:END", help="GPS outage interval in seconds (repeatable)",
    )
    noise_group.add_argument(
        "--mag-outage", type=_parse_interval, action="append", default=[],
        metavar="START:END", help="Magnetometer outage interval in seconds (repeatable)",
    )

    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")

    args = parser.parse_args()

    generate_dataset(
        output_dir=args.output,
        preset=args.preset,
        duration=args.duration,
        dt=args.dt,
        speed_kt=args.speed_kt,
        turn_rate_deg=args.turn_rate,
        track_deg=args.track,
        straight_time=args.straight_time,
        accel_noise=args.accel_noise,
        vel_noise=args.vel_noise,
        mag_noise=args.mag_noise,
        gps_outages=args.gps_outage,
        mag_outages=args.mag_outage,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()
