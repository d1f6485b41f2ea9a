"""Example custom callback: keep Σc++ candidates in a Δm window and dump them."""

from __future__ import annotations
__author__ = "Renato Quagliani <rquaglia@cern.ch>"


import json
from pathlib import Path

from sigmacomb import sigmac_observables


def process(results, context):
    """Select doubly charged candidates with 0.16 < Δm(pK−π+) < 0.18 GeV/c2."""
    lambdacs = context["lambdac_by_id"]
    selected = []
    for r in results:
        if abs(r.charge) != 2:
            continue
        obs = sigmac_observables(r, lambdacs[r.prong_lc_id])
        if obs.delta_mass_pkpi is not None and 0.16 < obs.delta_mass_pkpi < 0.18:
            selected.append((r, obs))
    payload = {
        "n_selected": len(selected),
        "selected": [
            {
                "collision_id": r.collision_id,
                "lc_id": r.prong_lc_id,
                "soft_pi_id": r.prong_soft_pi_id,
                "charge": r.charge,
                "delta_mass_pkpi": obs.delta_mass_pkpi,
                "pt": obs.pt,
            }
            for r, obs in selected
        ],
    }
    out = Path(context["output_path"]).with_name("selected_candidates.json")
    out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    print(f"Wrote {out}")
