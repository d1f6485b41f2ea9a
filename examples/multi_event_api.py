"""Multi-collision API example: Σc building plus MC truth matching.

Run from repository root without installation:
    PYTHONPATH=src python examples/multi_event_api.py
"""

from __future__ import annotations
__author__ = "Renato Quagliani <rquaglia@cern.ch>"


import logging
from pathlib import Path

from sigmacomb import LambdacSelection, SigmacCombiner, SigmacMcMatcher, SoftPionSelection
from sigmacomb.io import (
    lambdac_by_id,
    load_events_json,
    load_mc_particles_json,
    tracks_by_id,
    write_candidates_table,
    write_labels_table,
)


def main() -> int:
    """Load collisions, build Σc candidates, match them to MC and write parquet tables."""
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    events = load_events_json("examples/events.json")
    combiner = SigmacCombiner(
        lambdac_selection=LambdacSelection(y_max=0.8),
        soft_pion_selection=SoftPionSelection(its_hit_map=0b0000111, its_hits_min=1),
    )
    results = combiner.combine_events(events)
    lambdacs = lambdac_by_id(events)
    out_path = Path("examples/multi_event_output.parquet")
    write_candidates_table(out_path, results, lambdacs)
    print(f"Wrote {len(results)} candidates to {out_path}")

    matcher = SigmacMcMatcher(load_mc_particles_json("examples/mc_particles.json"))
    labels_rec = matcher.match_reconstructed(results, lambdacs, tracks_by_id(events))
    write_labels_table("examples/multi_event_labels_rec.parquet", labels_rec)
    write_labels_table("examples/multi_event_labels_gen.parquet", matcher.match_generated())
    print(f"Matched {sum(1 for lab in labels_rec if lab.flag)} of {len(labels_rec)} candidates")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
