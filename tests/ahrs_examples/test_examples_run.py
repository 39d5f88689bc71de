"""Smoke tests for the heuristic AHRS example scripts and dataset generator.

Runs each script in a subprocess with the Agg backend and validates the
machine-readable [AHRS_SUMMARY] JSON line:
- no degenerate updates on the synthetic scenarios
- roll/pitch RMSE while GPS is valid stays below 4 degrees
"""

import json
import os
import re
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from typing import Any, Dict, Optional


def parse_ahrs_summary(stdout: str) -> Optional[Dict[str, Any]]:
    """Parse the [AHRS_SUMMARY] JSON line from script output.

    Returns:
        Parsed JSON dictionary, or None if not found.

    Raises:
        ValueError: If the summary line is malformed.
    """
    match = re.search(r'\[AHRS_SUMMARY\]\s*(\{.*\})', stdout)
    if not match:
        return None

    try:
        return json.loads(match.group(1))
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed AHRS_SUMMARY JSON: {e}")


class TestExampleScriptsRun(unittest.TestCase):
    """Smoke tests: example scripts should run without errors."""

    def setUp(self):
        self.python_exe = sys.executable
        self.workspace_root = Path(__file__).parent.parent.parent
        self.env = os.environ.copy()
        self.env.update({
            "MPLBACKEND": "Agg",
            "PYTHONPATH": str(self.workspace_root),
        })

    def _run(self, *args, timeout=180):
        result = subprocess.run(
            [self.python_exe, *[str(a) for a in args]],
            cwd=str(self.workspace_root),
            env=self.env,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        self.assertEqual(
            result.returncode, 0,
            f"Script failed:\nSTDOUT:\n{result.stdout}\nSTDERR:\n{result.stderr}",
        )
        return result

    def test_heuristic_example_outage_scenario(self):
        script = self.workspace_root / "ahrs_examples" / "example_heuristic_ahrs.py"
        with tempfile.TemporaryDirectory() as tmp:
            result = self._run(script, "--scenario", "outage", "--figs-dir", tmp)
            self.assertTrue((Path(tmp) / "heuristic_ahrs_attitude.png").exists())

        summary = parse_ahrs_summary(result.stdout)
        self.assertIsNotNone(summary, "Missing [AHRS_SUMMARY] line")
        self.assertEqual(summary["scenario"], "outage")
        self.assertEqual(summary["n_degenerate"], 0)
        # Coordinated turn at 60 m/s and 3 deg/s: 1/cos(atan(0.32)) = 1.05 g
        self.assertAlmostEqual(summary["load_factor_g"], 1.05, delta=0.02)
        self.assertLess(summary["rmse_gps_valid_deg"]["roll"], 4.0)
        self.assertLess(summary["rmse_gps_valid_deg"]["pitch"], 4.0)
        # Heading reverts to north during the outage
        self.assertGreater(summary["rmse_deg"]["heading"], summary["rmse_gps_valid_deg"]["heading"])

    def test_heuristic_example_straight_no_plots(self):
        script = self.workspace_root / "ahrs_examples" / "example_heuristic_ahrs.py"
        result = self._run(script, "--scenario", "straight", "--no-plots")

        summary = parse_ahrs_summary(result.stdout)
        self.assertIsNotNone(summary)
        self.assertLess(summary["rmse_deg"]["heading"], 2.0)
        self.assertAlmostEqual(summary["load_factor_g"], 1.0, delta=0.01)

    def test_gain_comparison(self):
        script = self.workspace_root / "ahrs_examples" / "example_gain_comparison.py"
        result = self._run(script, "--runs", "2", "--no-plots")

        summary = parse_ahrs_summary(result.stdout)
        self.assertIsNotNone(summary)
        self.assertEqual(summary["runs"], 2)
        self.assertEqual(len(summary["mean_rmse_deg"]), 5)

    def test_dataset_generation_and_reload(self):
        generator = self.workspace_root / "scripts" / "generate_ahrs_dataset.py"
        example = self.workspace_root / "ahrs_examples" / "example_heuristic_ahrs.py"

        with tempfile.TemporaryDirectory() as tmp:
            out_dir = Path(tmp) / "ahrs_dataset"
            self._run(
                generator, "--preset", "gps_dropout", "--output", out_dir, "--duration", "60",
            )
            for name in ("measurements.npz", "truth.npz", "config.json"):
                self.assertTrue((out_dir / name).exists(), name)

            with open(out_dir / "config.json") as f:
                config = json.load(f)
            self.assertEqual(config["preset"], "gps_dropout")
            self.assertEqual(config["num_samples"], 600)
            self.assertEqual(config["frames"]["earth"], "ENU")

            result = self._run(example, "--data", out_dir, "--no-plots")

        summary = parse_ahrs_summary(result.stdout)
        self.assertIsNotNone(summary)
        self.assertEqual(summary["n_samples"], 600)


if __name__ == "__main__":
    unittest.main()
