"""End-to-end tests for the command-line interface."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from sigmacomb.cli import main


def _track(track_id: int, charge: int, mc: int, eta: float = 0.2) -> dict:
    return {
        "track_id": track_id,
        "px": 0.1,
        "py": 0.05,
        "pz": 0.0,
        "charge": charge,
        "eta": eta,
        "dca_xy": 0.01,
        "dca_z": 0.01,
        "its_cluster_map": 1,
        "has_its_refit": True,
        "mc_particle_index": mc,
    }


EVENTS = {
    "events": [
        {
            "collision_id": 0,
            "tracks": [
                _track(10, 1, 3, eta=1.2),
                _track(11, -1, 4, eta=1.2),
                _track(12, 1, 5, eta=1.2),
                _track(20, 1, 2),
                _track(21, -1, 6),
            ],
            "lambdac_candidates": [
                {
                    "candidate_id": 0,
                    "prong_ids": [10, 11, 12],
                    "px": 2.0,
                    "py": 0.0,
                    "pz": 0.5,
                    "hfflag": 2,
                    "is_sel_lc_to_pkpi": 1,
                    "is_sel_lc_to_pikp": 0,
                    "mass_pkpi": 2.28,
                    "mass_pikp": 2.30,
                    "flag_mc_match_rec": 2,
                }
            ],
        }
    ]
}

MC = {
    "mc_particles": [
        {"pdg_code": 4222, "daughters": [1, 2]},
        {"pdg_code": 4122, "mothers": [0], "daughters": [3, 4, 5]},
        {"pdg_code": 211, "mothers": [0]},
        {"pdg_code": 2212, "mothers": [1]},
        {"pdg_code": -321, "mothers": [1]},
        {"pdg_code": 211, "mothers": [1]},
        {"pdg_code": -211},
    ]
}


class TestCli(unittest.TestCase):
    """Run the CLI on small JSON inputs."""

    def _write_inputs(self, tmpdir: str) -> tuple[Path, Path]:
        events = Path(tmpdir) / "events.json"
        events.write_text(json.dumps(EVENTS), encoding="utf-8")
        mc = Path(tmpdir) / "mc.json"
        mc.write_text(json.dumps(MC), encoding="utf-8")
        return events, mc

    def test_mc_run_writes_aligned_tables(self) -> None:
        import pandas as pd

        with tempfile.TemporaryDirectory() as tmpdir:
            events, mc = self._write_inputs(tmpdir)
            out = Path(tmpdir) / "sc.csv"
            rec = Path(tmpdir) / "rec.csv"
            gen = Path(tmpdir) / "gen.csv"
            rc = main(
                [
                    "--events", str(events),
                    "--out", str(out),
                    "--mc",
                    "--mc-particles", str(mc),
                    "--labels-rec-out", str(rec),
                    "--labels-gen-out", str(gen),
                    "--log-level", "WARNING",
                ]
            )
            candidates = pd.read_csv(out)
            labels_rec = pd.read_csv(rec)
            labels_gen = pd.read_csv(gen)

        self.assertEqual(rc, 0)
        self.assertEqual(list(candidates["prong_soft_pi_id"]), [20, 21])
        self.assertEqual(list(labels_rec["flag_mc_match"]), [2, 0])
        self.assertEqual(list(labels_rec["origin_mc"]), [1, 0])
        self.assertEqual(len(labels_gen), 7)
        self.assertEqual(list(labels_gen["flag_mc_match"]), [2, 0, 0, 0, 0, 0, 0])

    def test_data_run_skips_mc_outputs(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            events, _ = self._write_inputs(tmpdir)
            out = Path(tmpdir) / "sc.csv"
            rec = Path(tmpdir) / "rec.csv"
            rc = main(["--events", str(events), "--out", str(out), "--labels-rec-out", str(rec)])
            self.assertEqual(rc, 0)
            self.assertTrue(out.exists())
            self.assertFalse(rec.exists())

    def test_bad_configuration_rejected_before_processing(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            events, _ = self._write_inputs(tmpdir)
            out = Path(tmpdir) / "sc.csv"
            with self.assertRaises(SystemExit):
                main(
                    [
                        "--events", str(events),
                        "--out", str(out),
                        "--soft-pi-its-hit-map", "3",
                        "--soft-pi-its-hits-min", "4",
                    ]
                )
            self.assertFalse(out.exists())

    def test_mc_requires_inputs(self) -> None:
        with self.assertRaises(SystemExit):
            main(["--events", "e.json", "--out", "o.csv", "--mc"])


if __name__ == "__main__":
    unittest.main()
