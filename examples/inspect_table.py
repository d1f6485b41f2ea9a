"""Summarise a Σc candidate table and plot the Λc-subtracted mass per hypothesis.

Optionally joins the reconstruction-level MC labels written with
`--labels-rec-out` (same row order as the candidates) to split signal from
combinatorial background.
"""

from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

HYPOTHESES = {
    "pkpi": ("status_spread_lc_to_pkpi", "delta_mass_pkpi"),
    "pikp": ("status_spread_lc_to_pikp", "delta_mass_pikp"),
}
CHARGE_LABELS = {0: "Σc0", 2: "Σc++", -2: "anti-Σc++"}


def read_table(path: str | Path) -> pd.DataFrame:
    p = Path(path)
    readers = {
        ".parquet": pd.read_parquet,
        ".csv": pd.read_csv,
        ".pkl": pd.read_pickle,
        ".pickle": pd.read_pickle,
    }
    reader = readers.get(p.suffix.lower())
    if reader is None:
        raise ValueError(f"Unsupported table format {p.suffix!r} for {p}")
    return reader(p)


def summarise(candidates: pd.DataFrame, labels: pd.DataFrame | None = None) -> pd.DataFrame:
    """Count candidates per Σc charge and Λc hypothesis, with Δm mean and width."""
    frame = candidates.copy()
    if labels is not None:
        if len(labels) != len(frame):
            raise ValueError(
                f"{len(labels)} labels for {len(frame)} candidates; tables are not aligned."
            )
        frame["signal"] = labels["flag_mc_match"].to_numpy() != 0
    rows = []
    for hypothesis, (status_col, dm_col) in HYPOTHESES.items():
        selected = frame[frame[status_col].astype(bool)]
        for charge, group in selected.groupby("charge"):
            row = {
                "charge": CHARGE_LABELS.get(int(charge), str(charge)),
                "hypothesis": hypothesis,
                "n": len(group),
                "dm_mean": group[dm_col].mean(),
                "dm_std": group[dm_col].std(),
            }
            if "signal" in group:
                row["n_signal"] = int(group["signal"].sum())
            rows.append(row)
    return pd.DataFrame(rows)


def plot_delta_mass(candidates: pd.DataFrame, out: Path) -> None:
    import matplotlib.pyplot as plt

    fig, axes = plt.subplots(1, len(HYPOTHESES), figsize=(10, 4), sharey=True)
    for ax, (hypothesis, (status_col, dm_col)) in zip(axes, HYPOTHESES.items()):
        selected = candidates[candidates[status_col].astype(bool)]
        for charge, group in selected.groupby("charge"):
            ax.hist(
                group[dm_col].dropna(),
                bins=80,
                range=(0.13, 0.25),
                histtype="step",
                label=CHARGE_LABELS.get(int(charge), str(charge)),
            )
        ax.set_title(f"Λc as {hypothesis}")
        ax.set_xlabel("m(Σc) − m(Λc) (GeV/c²)")
        ax.legend()
    fig.tight_layout()
    fig.savefig(out, dpi=120)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--input", required=True, help="Σc candidate table (.parquet/.csv/.pkl).")
    parser.add_argument("--labels", help="Reconstruction-level MC label table.")
    parser.add_argument("--plot", help="Write Δm histograms per hypothesis to this png.")
    args = parser.parse_args(argv)

    candidates = read_table(args.input)
    labels = read_table(args.labels) if args.labels else None
    print(summarise(candidates, labels).to_string(index=False))

    if args.plot:
        try:
            plot_delta_mass(candidates, Path(args.plot))
        except ModuleNotFoundError:
            print("matplotlib not installed; skipping plot.")
            return 0
        print(f"Saved plot: {args.plot}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
