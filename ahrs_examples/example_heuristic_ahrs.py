"""
Example: Heuristic AHRS (GPS velocity + accelerometer + magnetometer)

Demonstrates filter-free attitude estimation for a vehicle flying a straight
leg, a constant-rate turn and a GPS outage. Shows how GPS-derived
acceleration removes the turn's centripetal term from the accelerometer and
how the heading falls back to north while GPS is unavailable.

Implements:
    - Velocity/acceleration smoothing from GPS
    - Gravity alignment (minimal-rotation quaternion)
    - Heading-ambiguity resolution against the GPS track
    - Magnetometer projection to an earth-frame north reference

Key Insight: Roll and pitch come from apparent gravity alone; heading needs
            an independent cue (GPS track) and is lost during GPS outages.

Usage:
    python ahrs_examples/example_heuristic_ahrs.py
    python ahrs_examples/example_heuristic_ahrs.py --scenario straight --no-plots
    python ahrs_examples/example_heuristic_ahrs.py --data data/sim/ahrs_baseline
"""

import argparse
import json
import sys
import time
from pathlib import Path

import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ahrscore.estimators import HeuristicAHRS, HeuristicConfig, run_attitude_estimator
from ahrscore.eval import (
    compute_attitude_errors,
    plot_attitude_error_time,
    plot_attitude_time,
    save_figure,
    summarize_attitude_errors,
)
from ahrscore.sensors import MeasurementSeries, mps_to_knots
from ahrscore.sim import coordinated_turn, generate_measurements, straight_track


SCENARIOS = {
    'straight': {
        'description': 'Straight and level at 090°',
        'gps_outages': [],
    },
    'turn': {
        'description': 'Straight leg then 3°/s right turn',
        'gps_outages': [],
    },
    'outage': {
        'description': 'Turn with a 20 s GPS outage',
        'gps_outages': [(40.0, 60.0)],
    },
}


def build_series(scenario: str, seed: int, duration: float = 90.0, dt: float = 0.1):
    """Generate the synthetic measurement series for a scenario."""
    if scenario == 'straight':
        t, vel, euler = straight_track(
            duration=duration, dt=dt, speed_mps=60.0, track_rad=np.deg2rad(90.0)
        )
    else:
        t, vel, euler = coordinated_turn(
            duration=duration, dt=dt, speed_mps=60.0, turn_rate=np.deg2rad(3.0)
        )

    return generate_measurements(
        t, vel, euler,
        accel_noise_g=0.005,
        vel_noise_mps=0.05,
        mag_noise=0.01,
        gps_outages=SCENARIOS[scenario]['gps_outages'],
        seed=seed,
    )


def load_series(data_dir: Path):
    """Load measurements.npz / truth.npz written by scripts/generate_ahrs_dataset.py."""
    series = MeasurementSeries.load_npz(data_dir / "measurements.npz")
    with np.load(data_dir / "truth.npz") as truth:
        euler_true = truth['euler']
    return series, euler_true


def plot_results(series, track, euler_true, figs_dir: Path):
    """Save attitude and attitude-error figures."""
    import matplotlib.pyplot as plt

    fig = plot_attitude_time(
        series.t,
        {"Heuristic AHRS": track.euler},
        euler_true=euler_true,
        gps_valid=series.w_valid,
        title="Heuristic AHRS: Attitude",
    )
    save_figure(fig, figs_dir, "heuristic_ahrs_attitude", formats=("png",))

    errors = compute_attitude_errors(euler_true, track.euler)
    fig = plot_attitude_error_time(
        series.t, {"Heuristic AHRS": errors}, title="Heuristic AHRS: Attitude Error"
    )
    save_figure(fig, figs_dir, "heuristic_ahrs_error", formats=("png",))
    plt.close('all')


def main():
    """Main execution."""
    parser = argparse.ArgumentParser(description="Heuristic AHRS example")
    parser.add_argument("--scenario", choices=sorted(SCENARIOS), default="outage",
                        help="Synthetic scenario (default: outage)")
    parser.add_argument("--data", type=str, default=None,
                        help="Dataset directory from scripts/generate_ahrs_dataset.py")
    parser.add_argument("--k-short", type=float, default=0.2,
                        help="Short-term smoothing gain (default: 0.2)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--no-plots", action="store_true", help="Skip figure generation")
    parser.add_argument("--figs-dir", type=str, default=str(Path(__file__).parent / "figs"),
                        help="Figure output directory")
    args = parser.parse_args()

    print("\n" + "=" * 70)
    print("Heuristic AHRS (GPS + Accelerometer + Magnetometer)")
    print("=" * 70)

    if args.data is not None:
        print(f"\nLoading dataset: {args.data}")
        series, euler_true = load_series(Path(args.data))
        scenario_name = Path(args.data).name
    else:
        scenario_name = args.scenario
        print(f"\nScenario: {scenario_name} ({SCENARIOS[scenario_name]['description']})")
        series = build_series(scenario_name, args.seed)
        euler_true = series.meta['euler_true']

    speed = np.linalg.norm(series.w[series.w_valid], axis=1)
    print(f"  Samples:         {len(series)}")
    print(f"  Duration:        {series.t[-1] - series.t[0]:.1f} s")
    if speed.size:
        print(f"  Ground speed:    {np.mean(speed):.1f} m/s ({mps_to_knots(np.mean(speed)):.0f} kt)")
    print(f"  GPS valid:       {100.0 * np.mean(series.w_valid):.1f}%")

    print("\nRunning heuristic AHRS...")
    ahrs = HeuristicAHRS(HeuristicConfig(k_short=args.k_short))
    start = time.time()
    track = run_attitude_estimator(ahrs, series, show_progress=True)
    print(f"  Time: {time.time() - start:.3f} s")

    stats = summarize_attitude_errors(euler_true, track.euler)
    gps_stats = summarize_attitude_errors(
        euler_true[series.w_valid], track.euler[series.w_valid]
    )

    if not args.no_plots:
        figs_dir = Path(args.figs_dir)
        print("\nGenerating plots...")
        plot_results(series, track, euler_true, figs_dir)
        print(f"  Figures saved to: {figs_dir}/")

    print("\n" + "=" * 70)
    print("RESULTS (degrees)")
    print("=" * 70)
    print(f"{'Axis':<10} {'RMSE':>8} {'Max':>8} {'RMSE (GPS valid)':>18}")
    for axis in ("roll", "pitch", "heading"):
        print(f"{axis:<10} {stats[axis]['rmse']:>8.2f} {stats[axis]['max']:>8.2f} "
              f"{gps_stats[axis]['rmse']:>18.2f}")
    print(f"\nDegenerate updates: {int(np.sum(track.degenerate))}")

    diag = ahrs.diagnostics()
    load_factor = float(np.linalg.norm(diag['accel_long']))
    print("\nLong-term averages (end of run):")
    print(f"  Load factor:     {load_factor:.3f} g")
    print(f"  Ground speed:    {np.linalg.norm(diag['velocity_long']):.1f} m/s")
    print(f"  Field magnitude: {np.linalg.norm(diag['mag_long']):.3f}")
    print("=" * 70)
    print("KEY INSIGHT: Roll/pitch need only apparent gravity (GPS removes")
    print("             the turn's acceleration); heading follows the GPS track")
    print("             and reverts to north while GPS is invalid.")
    print("=" * 70)

    summary = {
        "scenario": scenario_name,
        "n_samples": len(series),
        "n_degenerate": int(np.sum(track.degenerate)),
        "load_factor_g": load_factor,
        "rmse_deg": {axis: stats[axis]['rmse'] for axis in stats},
        "rmse_gps_valid_deg": {axis: gps_stats[axis]['rmse'] for axis in gps_stats},
    }
    print(f"[AHRS_SUMMARY] {json.dumps(summary)}")


if __name__ == "__main__":
    main()
