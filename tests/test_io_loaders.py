"""Unit tests for JSON input loaders and table writers."""

from __future__ import annotations
__author__ = "Renato Quagliani <rquaglia@cern.ch>"


import json
import tempfile
import unittest
from pathlib import Path

from sigmacomb import McMatchLabel, Origin, SigmacCombiner
from sigmacomb.io import (
    lambdac_by_id,
    load_events_json,
    load_mc_particles_json,
    tracks_by_id,
    write_candidates_table,
    write_labels_table,
)


def _track(track_id: int, charge: int, eta: float = 0.2, mc: int = -1) -> dict:
    return {
        "track_id": track_id,
        "px": 0.1,
        "py": 0.05,
        "pz": 0.0,
        "charge": charge,
        "eta": eta,
        "dca_xy": 0.01,
        "dca_z": 0.01,
        "its_cluster_map": 3,
        "has_its_refit": True,
        "mc_particle_index": mc,
    }


EVENTS_PAYLOAD = {
    "events": [
        {
            "collision_id": 42,
            "tracks": [
                _track(10, 1, eta=1.5, mc=3),
                _track(11, -1, eta=1.5),
                _track(12, 1, eta=1.5),
                _track(20, -1),
                _track(21, 1),
            ],
            "lambdac_candidates": [
                {
                    "candidate_id": 5,
                    "prong_ids": [10, 11, 12],
                    "px": 2.0,
                    "py": 0.0,
                    "pz": 0.5,
                    "hfflag": 2,
                    "is_sel_lc_to_pkpi": 1,
                    "is_sel_lc_to_pikp": 1,
                    "mass_pkpi": 2.29,
                    "mass_pikp": 2.40,
                    "flag_mc_match_rec": -2,
                }
            ],
        }
    ]
}


class TestIOLoaders(unittest.TestCase):
    """Validate parsing of collision and MC inputs and table export."""

    def test_load_events_json_parses_event_payload(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "events.json"
            path.write_text(json.dumps(EVENTS_PAYLOAD), encoding="utf-8")
            [event] = load_events_json(path)
        self.assertEqual(event.collision_id, 42)
        self.assertEqual(len(event.tracks), 5)
        self.assertEqual(event.tracks[0].mc_particle_index, 3)
        self.assertIsNone(event.tracks[1].mc_particle_index)
        self.assertEqual(event.tracks[0].collision_id, 42)
        [lc] = event.lambdac_candidates
        self.assertEqual(lc.prong_ids, (10, 11, 12))
        self.assertEqual(lc.flag_mc_match_rec, -2)
        self.assertEqual(set(tracks_by_id([event])), {10, 11, 12, 20, 21})
        self.assertIs(lambdac_by_id([event])[5], lc)

    def test_missing_track_field_reports_location(self) -> None:
        payload = {"events": [{"collision_id": 1, "tracks": [{"track_id": 1}]}]}
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "events.json"
            path.write_text(json.dumps(payload), encoding="utf-8")
            with self.assertRaisesRegex(ValueError, "collision 1"):
                load_events_json(path)

    def test_load_mc_particles_json(self) -> None:
        payload = {
            "mc_particles": [
                {"pdg_code": 4222, "daughters": [1, 2]},
                {"pdg_code": 4122, "mothers": [0]},
                {"pdg_code": 211, "mothers": [0]},
            ]
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "mc.json"
            path.write_text(json.dumps(payload), encoding="utf-8")
            particles = load_mc_particles_json(path)
        self.assertEqual([p.index for p in particles], [0, 1, 2])
        self.assertEqual(particles[0].daughter_indices, (1, 2))
        self.assertEqual(particles[2].mother_indices, (0,))

    def test_write_tables_csv(self) -> None:
        import pandas as pd

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "events.json"
            path.write_text(json.dumps(EVENTS_PAYLOAD), encoding="utf-8")
            events = load_events_json(path)
            results = SigmacCombiner().combine_events(events)
            out = Path(tmpdir) / "sc.csv"
            write_candidates_table(out, results, lambdac_by_id(events))
            df = pd.read_csv(out)
            labels_out = Path(tmpdir) / "labels.csv"
            write_labels_table(labels_out, [McMatchLabel(-2, Origin.NON_PROMPT), McMatchLabel()])
            labels = pd.read_csv(labels_out)

        self.assertEqual(list(df["prong_soft_pi_id"]), [20, 21])
        self.assertEqual(list(df["charge"]), [0, 2])
        self.assertTrue(df["mass_sc_pikp"].isna().all())
        self.assertTrue((df["delta_mass_pkpi"] > 0.139).all())
        self.assertEqual(list(labels["flag_mc_match"]), [-2, 0])
        self.assertEqual(list(labels["origin_mc"]), [2, 0])

    def test_unsupported_suffix(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(ValueError):
                write_labels_table(Path(tmpdir) / "labels.txt", [])


if __name__ == "__main__":
    unittest.main()
