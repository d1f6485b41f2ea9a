"""Example custom callback: write a tiny summary of the Σc candidates per charge."""

from __future__ import annotations
__author__ = "Renato Quagliani <rquaglia@cern.ch>"


import json
from pathlib import Path

from sigmacomb import sigmac_observables


def process(results, context):
    """Count candidates per charge and keep the smallest pK−π+ mass difference."""
    lambdacs = context["lambdac_by_id"]
    by_charge = {-2: 0, 0: 0, 2: 0}
    best = None
    for cand in results:
        by_charge[cand.charge] += 1
        dm = sigmac_observables(cand, lambdacs[cand.prong_lc_id]).delta_mass_pkpi
        if dm is not None and (best is None or dm < best):
            best = dm
    summary = {
        "n_results": len(results),
        "n_per_charge": {str(k): v for k, v in by_charge.items()},
        "min_delta_mass_pkpi": best,
    }
    out_path = Path(context["output_path"]).with_name("summary.json")
    out_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    print(f"Custom analysis summary written to {out_path}")
