"""Unit tests for the soft-pion track selection and its configuration checks."""

from __future__ import annotations

import unittest
from dataclasses import replace

from sigmacomb import SoftPionSelection, SoftPionSelector, TrackState
from sigmacomb.selection import its_layers_from_hit_map

_GOOD = TrackState(
    track_id=1,
    px=0.1,
    py=0.0,
    pz=0.0,
    charge=1,
    eta=0.5,
    dca_xy=0.02,
    dca_z=-0.03,
    its_cluster_map=0b0000001,
    has_its_refit=True,
)


class TestSoftPionSelector(unittest.TestCase):
    """Validate each soft-pion cut on its own."""

    def test_default_track_passes(self) -> None:
        self.assertTrue(SoftPionSelector().accepts(_GOOD))

    def test_eta_range_is_symmetric(self) -> None:
        selector = SoftPionSelector()
        self.assertTrue(selector.accepts(replace(_GOOD, eta=-0.9)))
        self.assertFalse(selector.accepts(replace(_GOOD, eta=-0.91)))
        self.assertFalse(selector.accepts(replace(_GOOD, eta=0.95)))

    def test_dca_cuts_use_absolute_values(self) -> None:
        selector = SoftPionSelector()
        self.assertFalse(selector.accepts(replace(_GOOD, dca_xy=-0.07)))
        self.assertFalse(selector.accepts(replace(_GOOD, dca_z=0.066)))
        selector = SoftPionSelector(SoftPionSelection(dca_xy_max=0.1, dca_z_max=0.1))
        self.assertTrue(selector.accepts(replace(_GOOD, dca_xy=-0.07, dca_z=0.066)))

    def test_refit_required(self) -> None:
        self.assertFalse(SoftPionSelector().accepts(replace(_GOOD, has_its_refit=False)))

    def test_hits_only_count_on_selected_layers(self) -> None:
        """Clusters outside the configured layer set never count."""
        selector = SoftPionSelector(SoftPionSelection(its_hit_map=0b0000011, its_hits_min=1))
        self.assertEqual(selector.its_layers, frozenset({0, 1}))
        self.assertFalse(selector.accepts(replace(_GOOD, its_cluster_map=0b1111100)))
        self.assertTrue(selector.accepts(replace(_GOOD, its_cluster_map=0b0000010)))

        selector = SoftPionSelector(SoftPionSelection(its_hit_map=0b0000111, its_hits_min=2))
        self.assertEqual(selector.n_its_hits(replace(_GOOD, its_cluster_map=0b1111001)), 1)
        self.assertFalse(selector.accepts(replace(_GOOD, its_cluster_map=0b1111001)))
        self.assertTrue(selector.accepts(replace(_GOOD, its_cluster_map=0b0000101)))

    def test_select_preserves_order(self) -> None:
        tracks = [replace(_GOOD, track_id=i, eta=0.5 if i % 3 else 1.5) for i in range(9)]
        self.assertEqual([t.track_id for t in SoftPionSelector().select(tracks)], [1, 2, 4, 5, 7, 8])

    def test_layer_set_logged_on_construction(self) -> None:
        with self.assertLogs("sigmacomb.selection", level="INFO") as logs:
            SoftPionSelector(SoftPionSelection(its_hit_map=0b0000101))
        self.assertIn("[0, 2]", logs.output[0])

    def test_its_layers_from_hit_map(self) -> None:
        self.assertEqual(its_layers_from_hit_map(127), frozenset(range(7)))
        self.assertEqual(its_layers_from_hit_map(0), frozenset())


class TestSoftPionSelectionConfig(unittest.TestCase):
    """Nonsensical configurations are rejected at construction time."""

    def test_hit_map_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            SoftPionSelection(its_hit_map=128)
        with self.assertRaises(ValueError):
            SoftPionSelection(its_hit_map=-1)

    def test_min_hits_exceeding_selected_layers(self) -> None:
        with self.assertRaises(ValueError):
            SoftPionSelection(its_hit_map=0b0000011, its_hits_min=3)
        with self.assertRaises(ValueError):
            SoftPionSelection(its_hits_min=-1)

    def test_negative_cuts(self) -> None:
        with self.assertRaises(ValueError):
            SoftPionSelection(eta_max=-0.1)
        with self.assertRaises(ValueError):
            SoftPionSelection(dca_z_max=-0.01)


if __name__ == "__main__":
    unittest.main()
