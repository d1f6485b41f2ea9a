"""Input/output helpers for JSON inputs and tabular result export."""

from __future__ import annotations
__author__ = "Renato Quagliani <rquaglia@cern.ch>"


import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from .composite import sigmac_observables
from .models import (
    EventInput,
    LambdacCandidate,
    McMatchLabel,
    McParticle,
    SigmacCandidate,
    TrackState,
)


def load_events_json(path: str | Path) -> list[EventInput]:
    """Load multi-collision input JSON into `EventInput` objects.

    Expected shape:
    {
      "events": [
        {"collision_id": 0, "tracks": [...], "lambdac_candidates": [...]},
        ...
      ]
    }
    """
    data = _load_json(path)
    events_data = data.get("events")
    if not isinstance(events_data, list):
        raise ValueError("Events JSON must contain a list under key 'events'.")
    out: list[EventInput] = []
    for idx, event in enumerate(events_data):
        if not isinstance(event, dict):
            raise ValueError(f"Event entry at index {idx} must be an object.")
        collision_id = int(event.get("collision_id", idx))
        tracks_data = event.get("tracks")
        if not isinstance(tracks_data, list):
            raise ValueError(f"Collision {collision_id} must contain a list under key 'tracks'.")
        lcs_data = event.get("lambdac_candidates", [])
        if not isinstance(lcs_data, list):
            raise ValueError(
                f"Collision {collision_id} key 'lambdac_candidates' must be a list."
            )
        context = f"collision {collision_id}"
        tracks = tuple(
            _parse_track_item(item=item, idx=tidx, collision_id=collision_id, context=context)
            for tidx, item in enumerate(tracks_data)
        )
        lcs = tuple(
            _parse_lambdac_item(item=item, idx=lidx, collision_id=collision_id, context=context)
            for lidx, item in enumerate(lcs_data)
        )
        out.append(EventInput(collision_id=collision_id, tracks=tracks, lambdac_candidates=lcs))
    return out


def load_mc_particles_json(path: str | Path) -> list[McParticle]:
    """Load the generated-particle table.

    Each entry is `{"pdg_code": ..., "mothers": [...], "daughters": [...]}`;
    links are row indices into the same list.
    """
    data = _load_json(path)
    particles_data = data.get("mc_particles")
    if not isinstance(particles_data, list):
        raise ValueError("MC JSON must contain a list under key 'mc_particles'.")
    out: list[McParticle] = []
    for idx, item in enumerate(particles_data):
        if not isinstance(item, dict):
            raise ValueError(f"MC particle at index {idx} must be an object.")
        if "pdg_code" not in item:
            raise ValueError(f"MC particle at index {idx} must define 'pdg_code'.")
        out.append(
            McParticle(
                index=idx,
                pdg_code=int(item["pdg_code"]),
                mother_indices=_parse_index_list(item.get("mothers", []), "mothers", idx),
                daughter_indices=_parse_index_list(item.get("daughters", []), "daughters", idx),
            )
        )
    return out


def tracks_by_id(events: Iterable[EventInput]) -> dict[int, TrackState]:
    """Global track lookup keyed by track id."""
    return {t.track_id: t for event in events for t in event.tracks}


def lambdac_by_id(events: Iterable[EventInput]) -> dict[int, LambdacCandidate]:
    """Global Λc lookup keyed by candidate id."""
    return {c.candidate_id: c for event in events for c in event.lambdac_candidates}


def write_candidates_table(
    path: str | Path,
    candidates: Sequence[SigmacCandidate],
    lambdacs: Mapping[int, LambdacCandidate] | None = None,
) -> None:
    """Write Σc candidates into a Parquet/CSV/Pickle table.

    With `lambdacs` given, derived observables are added as extra columns.
    """
    pd = _require_pandas()
    _write_frame(pd.DataFrame(_candidate_rows(candidates, lambdacs)), path)


def write_labels_table(path: str | Path, labels: Sequence[McMatchLabel]) -> None:
    """Write MC match labels, one row per matched input row."""
    pd = _require_pandas()
    df = pd.DataFrame(
        {
            "flag_mc_match": [int(lab.flag) for lab in labels],
            "origin_mc": [int(lab.origin) for lab in labels],
        }
    )
    _write_frame(df, path)


def _write_frame(df, path: str | Path) -> None:
    """Dispatch DataFrame export on file suffix."""
    out = Path(path)
    suffix = out.suffix.lower()
    if suffix == ".parquet":
        df.to_parquet(out, index=False)
    elif suffix in (".pkl", ".pickle"):
        df.to_pickle(out)
    elif suffix == ".csv":
        df.to_csv(out, index=False)
    else:
        raise ValueError(
            f"Unsupported output format '{suffix}'. Use .parquet, .csv, or .pkl"
        )


def _candidate_rows(
    candidates: Sequence[SigmacCandidate],
    lambdacs: Mapping[int, LambdacCandidate] | None,
) -> list[dict[str, Any]]:
    """Flatten candidates into DataFrame-ready row dictionaries."""
    rows: list[dict[str, Any]] = []
    for cand in candidates:
        row: dict[str, Any] = {
            "collision_id": cand.collision_id,
            "px_lc": cand.px_lc,
            "py_lc": cand.py_lc,
            "pz_lc": cand.pz_lc,
            "px_soft_pi": cand.px_soft_pi,
            "py_soft_pi": cand.py_soft_pi,
            "pz_soft_pi": cand.pz_soft_pi,
            "prong_lc_id": cand.prong_lc_id,
            "prong_soft_pi_id": cand.prong_soft_pi_id,
            "hfflag": cand.hfflag,
            "charge": cand.charge,
            "status_spread_lc_to_pkpi": cand.status_spread_lc_to_pkpi,
            "status_spread_lc_to_pikp": cand.status_spread_lc_to_pikp,
        }
        if lambdacs is not None:
            obs = sigmac_observables(cand, lambdacs[cand.prong_lc_id])
            row.update(
                {
                    "pt": obs.pt,
                    "p": obs.p,
                    "eta": obs.eta,
                    "phi": obs.phi,
                    "y": obs.y,
                    "pt_lc": obs.pt_lc,
                    "pt_soft_pi": obs.pt_soft_pi,
                    "mass_sc_pkpi": obs.mass_pkpi,
                    "mass_sc_pikp": obs.mass_pikp,
                    "delta_mass_pkpi": obs.delta_mass_pkpi,
                    "delta_mass_pikp": obs.delta_mass_pikp,
                }
            )
        rows.append(row)
    return rows


def _require_pandas():
    """Import pandas lazily and provide a clear installation hint on failure."""
    try:
        import pandas as pd  # type: ignore
    except ModuleNotFoundError as exc:
        raise ModuleNotFoundError(
            "pandas is required to write output tables. Install pandas and pyarrow."
        ) from exc
    return pd


def _parse_track_item(item: Any, idx: int, collision_id: int, context: str) -> TrackState:
    """Parse one track dictionary into a `TrackState`."""
    if not isinstance(item, dict):
        raise ValueError(f"Track entry at index {idx} in {context} must be an object.")
    try:
        mc_index = item.get("mc_particle_index")
        return TrackState(
            track_id=int(item["track_id"]),
            px=float(item["px"]),
            py=float(item["py"]),
            pz=float(item["pz"]),
            charge=int(item["charge"]),
            eta=float(item["eta"]),
            dca_xy=float(item["dca_xy"]),
            dca_z=float(item["dca_z"]),
            its_cluster_map=int(item.get("its_cluster_map", 0)),
            has_its_refit=bool(item.get("has_its_refit", False)),
            collision_id=collision_id,
            mc_particle_index=None if mc_index is None or int(mc_index) < 0 else int(mc_index),
        )
    except KeyError as exc:
        raise ValueError(
            f"Track at index {idx} in {context} is missing field {exc.args[0]!r}."
        ) from exc


def _parse_lambdac_item(
    item: Any, idx: int, collision_id: int, context: str
) -> LambdacCandidate:
    """Parse one Λc candidate dictionary into a `LambdacCandidate`."""
    if not isinstance(item, dict):
        raise ValueError(f"Lc candidate at index {idx} in {context} must be an object.")
    prongs = item.get("prong_ids")
    if not isinstance(prongs, list) or len(prongs) != 3:
        raise ValueError(f"Lc candidate at index {idx} in {context} needs 3 'prong_ids'.")
    try:
        return LambdacCandidate(
            candidate_id=int(item["candidate_id"]),
            collision_id=collision_id,
            prong_ids=(int(prongs[0]), int(prongs[1]), int(prongs[2])),
            px=float(item["px"]),
            py=float(item["py"]),
            pz=float(item["pz"]),
            hfflag=int(item["hfflag"]),
            is_sel_lc_to_pkpi=int(item.get("is_sel_lc_to_pkpi", 0)),
            is_sel_lc_to_pikp=int(item.get("is_sel_lc_to_pikp", 0)),
            mass_pkpi=float(item["mass_pkpi"]),
            mass_pikp=float(item["mass_pikp"]),
            flag_mc_match_rec=int(item.get("flag_mc_match_rec", 0)),
        )
    except KeyError as exc:
        raise ValueError(
            f"Lc candidate at index {idx} in {context} is missing field {exc.args[0]!r}."
        ) from exc


def _parse_index_list(value: Any, key: str, idx: int) -> tuple[int, ...]:
    """Validate a list of row indices."""
    if not isinstance(value, list):
        raise ValueError(f"MC particle at index {idx}: '{key}' must be a list of indices.")
    return tuple(int(x) for x in value)


def _load_json(path: str | Path) -> dict[str, Any]:
    """Read and validate a JSON object document from disk."""
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"JSON document at {path} must be an object.")
    return data
