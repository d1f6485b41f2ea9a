"""Command-line interface for building Σc candidates and MC truth labels."""

from __future__ import annotations

import argparse
import importlib.util
import logging
from pathlib import Path
from typing import Any

from .combiner import SigmacCombiner
from .io import (
    lambdac_by_id,
    load_events_json,
    load_mc_particles_json,
    tracks_by_id,
    write_candidates_table,
    write_labels_table,
)
from .mcmatch import SigmacMcMatcher
from .models import LambdacSelection, SigmacCandidate, SoftPionSelection

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="sigmac-combiner",
        description="Build Σc0,++ → Λc+(→pK−π+) π−,+ candidates and optional MC truth labels.",
    )
    parser.add_argument(
        "--events",
        required=True,
        help="Input JSON with key 'events' (tracks and Lc candidates per collision).",
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Output table file for Sc candidates (.parquet, .csv, .pkl).",
    )

    lc = parser.add_argument_group("Lc candidate selection")
    lc.add_argument("--selection-flag-lc", type=int, default=1, help="Selection flag for Lc.")
    lc.add_argument(
        "--y-cand-lc-max",
        type=float,
        default=-1.0,
        help="Max. Lc rapidity (abs. value); negative disables the cut.",
    )
    lc.add_argument(
        "--m-pkpi-cand-lc-max",
        type=float,
        default=0.03,
        help="Max. spread (abs. value) between PDG(Lc) and Minv(pKpi).",
    )
    lc.add_argument(
        "--m-pikp-cand-lc-max",
        type=float,
        default=0.03,
        help="Max. spread (abs. value) between PDG(Lc) and Minv(piKp).",
    )

    pi = parser.add_argument_group("soft pion selection")
    pi.add_argument("--soft-pi-eta-max", type=float, default=0.9, help="Soft pion max |eta|.")
    pi.add_argument("--soft-pi-its-hit-map", type=int, default=127, help="Soft pion ITS layer bitmask.")
    pi.add_argument(
        "--soft-pi-its-hits-min",
        type=int,
        default=1,
        help="Minimum number of ITS layers crossed among those in the hit map.",
    )
    pi.add_argument("--soft-pi-dca-xy-max", type=float, default=0.065, help="Soft pion max |dcaXY| (cm).")
    pi.add_argument("--soft-pi-dca-z-max", type=float, default=0.065, help="Soft pion max |dcaZ| (cm).")

    mc = parser.add_argument_group("MC matching")
    mc.add_argument("--mc", action="store_true", help="Run reconstruction- and generation-level MC matching.")
    mc.add_argument("--mc-particles", default=None, help="Input JSON with key 'mc_particles'.")
    mc.add_argument("--labels-rec-out", default=None, help="Output table for reconstruction-level labels.")
    mc.add_argument("--labels-gen-out", default=None, help="Output table for generation-level labels.")

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    parser.add_argument(
        "--custom-script",
        default=None,
        help="Path to Python file with process(results, context) function.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint: load inputs, build candidates, optionally match to MC, write tables."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(levelname)s] %(name)s: %(message)s")

    if args.mc and (args.mc_particles is None or args.labels_rec_out is None or args.labels_gen_out is None):
        parser.error("--mc requires --mc-particles, --labels-rec-out and --labels-gen-out.")

    # Configuration errors surface here, before any collision is read.
    try:
        lc_selection = LambdacSelection(
            selection_flag_lc=args.selection_flag_lc,
            y_max=args.y_cand_lc_max,
            mass_pkpi_max=args.m_pkpi_cand_lc_max,
            mass_pikp_max=args.m_pikp_cand_lc_max,
        )
        soft_pi_selection = SoftPionSelection(
            eta_max=args.soft_pi_eta_max,
            its_hit_map=args.soft_pi_its_hit_map,
            its_hits_min=args.soft_pi_its_hits_min,
            dca_xy_max=args.soft_pi_dca_xy_max,
            dca_z_max=args.soft_pi_dca_z_max,
        )
    except ValueError as exc:
        parser.error(str(exc))
    combiner = SigmacCombiner(lambdac_selection=lc_selection, soft_pion_selection=soft_pi_selection)

    events = load_events_json(args.events)
    results = combiner.combine_events(events)
    lambdacs = lambdac_by_id(events)
    write_candidates_table(args.out, results, lambdacs)
    logger.info("Wrote %d Sc candidate(s) from %d collision(s) to %s", len(results), len(events), args.out)

    if args.mc:
        particles = load_mc_particles_json(args.mc_particles)
        matcher = SigmacMcMatcher(particles)
        labels_rec = matcher.match_reconstructed(results, lambdacs, tracks_by_id(events))
        labels_gen = matcher.match_generated()
        write_labels_table(args.labels_rec_out, labels_rec)
        write_labels_table(args.labels_gen_out, labels_gen)
        logger.info(
            "MC matching: %d/%d reconstructed and %d/%d generated Sc matched",
            sum(1 for lab in labels_rec if lab.flag != 0),
            len(labels_rec),
            sum(1 for lab in labels_gen if lab.flag != 0),
            len(labels_gen),
        )

    if args.custom_script:
        run_custom_script(
            script_path=args.custom_script,
            results=results,
            context={
                "events_path": args.events,
                "lambdac_selection": lc_selection,
                "soft_pion_selection": soft_pi_selection,
                "lambdac_by_id": lambdacs,
                "output_path": args.out,
            },
        )
    return 0


def run_custom_script(
    script_path: str, results: list[SigmacCandidate], context: dict[str, Any]
) -> None:
    """Execute user-supplied post-processing callback `process(results, context)`."""
    module = _load_module(script_path)
    process = getattr(module, "process", None)
    if process is None or not callable(process):
        raise ValueError(
            f"Custom script {script_path} must define callable process(results, context)."
        )
    process(results, context)


def _load_module(script_path: str):
    """Import a Python module from an arbitrary file path."""
    path = Path(script_path)
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot import custom script: {script_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


if __name__ == "__main__":
    raise SystemExit(main())
