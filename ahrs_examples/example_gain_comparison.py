"""
Example: Smoothing-Gain Comparison for the Heuristic AHRS

Runs the heuristic AHRS over several noisy realizations of a level turn
for a range of short-term smoothing gains k_short and compares the
resulting roll/heading errors.

A small gain averages out GPS velocity noise (which is amplified by the
finite difference into the acceleration estimate) but lags the roll-in and
roll-out of the turn. A large gain follows the manoeuvre closely but passes
the noise straight into roll and pitch.

Usage:
    python ahrs_examples/example_gain_comparison.py
    python ahrs_examples/example_gain_comparison.py --runs 5 --no-plots
"""

import argparse
import json
import sys
from pathlib import Path

import numpy as np
from tqdm import tqdm

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ahrscore.estimators import HeuristicAHRS, HeuristicConfig, run_attitude_estimator
from ahrscore.eval import compute_attitude_errors, compute_rmse, save_figure
from ahrscore.utils import ema_time_constant
from ahrscore.sim import coordinated_turn, generate_measurements

GAINS = (0.05, 0.1, 0.2, 0.4, 1.0)


def run_comparison(n_runs: int, gains=GAINS, dt: float = 0.1, seed: int = 0):
    """
    Monte Carlo comparison of smoothing gains.

    Returns:
        Dict mapping k_short to an (n_runs, 3) array of roll/pitch/heading
        RMSE in degrees.
    """
    t, vel, euler = coordinated_turn(
        duration=60.0, dt=dt, speed_mps=60.0, turn_rate=np.deg2rad(3.0),
        straight_time=15.0,
    )

    results = {k: np.zeros((n_runs, 3)) for k in gains}
    for run in tqdm(range(n_runs), desc="Monte Carlo runs"):
        series = generate_measurements(
            t, vel, euler,
            accel_noise_g=0.01,
            vel_noise_mps=0.1,
            mag_noise=0.01,
            seed=seed + run,
        )
        for k in gains:
            ahrs = HeuristicAHRS(HeuristicConfig(k_short=k))
            track = run_attitude_estimator(ahrs, series)
            errors = compute_attitude_errors(euler, track.euler)
            results[k][run] = np.rad2deg(compute_rmse(errors, axis=0))

    return results


def plot_comparison(results, figs_dir: Path):
    import matplotlib.pyplot as plt

    gains = sorted(results)
    mean_rmse = np.array([results[k].mean(axis=0) for k in gains])

    fig, ax = plt.subplots(figsize=(8, 5))
    for i, name in enumerate(("Roll", "Pitch", "Heading")):
        ax.semilogx(gains, mean_rmse[:, i], marker="o", label=name)
    ax.set_xlabel("k_short")
    ax.set_ylabel("RMSE (deg)")
    ax.set_title("Heuristic AHRS: Smoothing Gain vs Attitude Error")
    ax.grid(True, which="both", alpha=0.3)
    ax.legend()
    plt.tight_layout()

    save_figure(fig, figs_dir, "heuristic_ahrs_gain_comparison", formats=("png",))
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description="Heuristic AHRS smoothing-gain comparison")
    parser.add_argument("--runs", type=int, default=10, help="Monte Carlo runs (default: 10)")
    parser.add_argument("--seed", type=int, default=0, help="Base random seed (default: 0)")
    parser.add_argument("--no-plots", action="store_true", help="Skip figure generation")
    parser.add_argument("--figs-dir", type=str, default=str(Path(__file__).parent / "figs"),
                        help="Figure output directory")
    args = parser.parse_args()

    print("\n" + "=" * 70)
    print("Heuristic AHRS: Smoothing Gain Comparison")
    print("=" * 70)
    print(f"\n  Runs per gain: {args.runs}")
    print(f"  Gains: {', '.join(str(k) for k in GAINS)}")

    results = run_comparison(args.runs, seed=args.seed)

    print("\n" + "=" * 70)
    print("RESULTS (mean RMSE over runs, degrees)")
    print("=" * 70)
    print(f"{'k_short':>8} {'tau @10Hz':>10} {'Roll':>8} {'Pitch':>8} {'Heading':>8}")
    for k in GAINS:
        roll, pitch, heading = results[k].mean(axis=0)
        tau = ema_time_constant(k, 0.1)
        print(f"{k:>8.2f} {tau:>9.2f}s {roll:>8.2f} {pitch:>8.2f} {heading:>8.2f}")

    best = min(GAINS, key=lambda k: results[k][:, 0].mean())
    print(f"\nLowest roll error at k_short = {best}")
    print("=" * 70)

    if not args.no_plots:
        figs_dir = Path(args.figs_dir)
        plot_comparison(results, figs_dir)
        print(f"Figure saved to: {figs_dir}/")

    summary = {
        "runs": args.runs,
        "best_k_short_roll": best,
        "mean_rmse_deg": {str(k): results[k].mean(axis=0).tolist() for k in GAINS},
    }
    print(f"[AHRS_SUMMARY] {json.dumps(summary)}")


if __name__ == "__main__":
    main()
