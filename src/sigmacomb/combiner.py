"""Σc0,++ → Λc+(→pK−π+) π−,+ candidate building from Λc candidates and tracks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from .models import (
    EventInput,
    LambdacCandidate,
    LambdacDecayType,
    LambdacSelection,
    SigmacCandidate,
    SoftPionSelection,
    TrackState,
)
from .physics import lambdac_rapidity
from .pid import make_lambdac
from .selection import SoftPionSelector

logger = logging.getLogger(__name__)

ALLOWED_SIGMAC_CHARGES = (-2, 0, 2)


class InvalidSigmacChargeError(ValueError):
    """Λc prongs plus soft pion summed to a charge no Σc can carry."""

    def __init__(self, charge_lc: int, charge_soft_pi: int) -> None:
        self.charge_lc = charge_lc
        self.charge_soft_pi = charge_soft_pi
        super().__init__(
            f"Sc candidate with charge {charge_lc + charge_soft_pi} built, not possible! "
            f"Charge Lc: {charge_lc}, charge soft pion: {charge_soft_pi}"
        )


def sigmac_charge(lc_prong_charges: Sequence[int], soft_pi_charge: int) -> int:
    """Net Σc charge from the three Λc prong charges and the soft-pion charge."""
    if len(lc_prong_charges) != 3:
        raise ValueError(f"Expected 3 Λc prong charges, got {len(lc_prong_charges)}.")
    charge_lc = sum(int(c) for c in lc_prong_charges)
    charge = charge_lc + int(soft_pi_charge)
    if charge not in ALLOWED_SIGMAC_CHARGES:
        raise InvalidSigmacChargeError(charge_lc, int(soft_pi_charge))
    return charge


@dataclass
class SigmacCombiner:
    """Pair Λc candidates with soft-pion tracks into Σc candidates."""

    lambdac_selection: LambdacSelection = field(default_factory=LambdacSelection)
    soft_pion_selection: SoftPionSelection = field(default_factory=SoftPionSelection)
    selector: SoftPionSelector = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.selector = SoftPionSelector(self.soft_pion_selection)

    def preselect_lambdac(self, candidates: Sequence[LambdacCandidate]) -> list[LambdacCandidate]:
        """Keep Λc candidates passing the selection flag, decay type and rapidity cuts."""
        cfg = self.lambdac_selection
        out: list[LambdacCandidate] = []
        for cand in candidates:
            if (
                cand.is_sel_lc_to_pkpi < cfg.selection_flag_lc
                and cand.is_sel_lc_to_pikp < cfg.selection_flag_lc
            ):
                continue
            if not cand.hfflag & (1 << LambdacDecayType.LC_TO_PKPI):
                continue
            if cfg.y_max >= 0.0 and abs(lambdac_rapidity(cand)) > cfg.y_max:
                continue
            out.append(cand)
        return out

    def mass_window_status(self, candidate: LambdacCandidate) -> tuple[bool, bool]:
        """Return whether the pK−π+ and π+K−p masses lie near the Λc mass."""
        cfg = self.lambdac_selection
        mass_lc = make_lambdac().mass
        status_pkpi = (
            candidate.is_sel_lc_to_pkpi >= 1
            and abs(candidate.mass_pkpi - mass_lc) <= cfg.mass_pkpi_max
        )
        status_pikp = (
            candidate.is_sel_lc_to_pikp >= 1
            and abs(candidate.mass_pikp - mass_lc) <= cfg.mass_pikp_max
        )
        return status_pkpi, status_pikp

    def combine(
        self,
        tracks: Sequence[TrackState],
        lambdac_candidates: Sequence[LambdacCandidate],
        collision_id: int | None = None,
        prong_tracks: Mapping[int, TrackState] | None = None,
    ) -> list[SigmacCandidate]:
        """Build the Σc candidates of one collision.

        Every preselected Λc inside its mass window is combined with every
        selected soft-pion track (full combinatorial scan). Prong charges are
        resolved through `prong_tracks`, defaulting to the collision's tracks.
        """
        if prong_tracks is None:
            prong_tracks = {t.track_id: t for t in tracks}
        soft_pions = self.selector.select(tracks)

        results: list[SigmacCandidate] = []
        for cand_lc in self.preselect_lambdac(lambdac_candidates):
            status_pkpi, status_pikp = self.mass_window_status(cand_lc)
            if not (status_pkpi or status_pikp):
                continue
            prong_charges = self._prong_charges(cand_lc, prong_tracks)
            if prong_charges is None:
                continue
            for track in soft_pions:
                if track.track_id in cand_lc.prong_ids:
                    continue
                try:
                    charge = sigmac_charge(prong_charges, track.charge)
                except InvalidSigmacChargeError as exc:
                    logger.error(
                        ">>> %s (Lc %d, soft pion track %d)",
                        exc,
                        cand_lc.candidate_id,
                        track.track_id,
                    )
                    continue
                results.append(
                    SigmacCandidate(
                        collision_id=cand_lc.collision_id if collision_id is None else collision_id,
                        px_lc=cand_lc.px,
                        py_lc=cand_lc.py,
                        pz_lc=cand_lc.pz,
                        px_soft_pi=track.px,
                        py_soft_pi=track.py,
                        pz_soft_pi=track.pz,
                        prong_lc_id=cand_lc.candidate_id,
                        prong_soft_pi_id=track.track_id,
                        hfflag=cand_lc.hfflag,
                        charge=charge,
                        status_spread_lc_to_pkpi=status_pkpi,
                        status_spread_lc_to_pikp=status_pikp,
                    )
                )
        logger.debug(
            "Collision %s: %d Λc, %d soft pion(s) → %d Σc candidate(s)",
            collision_id,
            len(lambdac_candidates),
            len(soft_pions),
            len(results),
        )
        return results

    def combine_events(self, events: Sequence[EventInput]) -> list[SigmacCandidate]:
        """Run `combine` on a list of collisions and concatenate in input order.

        Λc prongs are resolved against the tracks of all collisions, keyed by
        track id.
        """
        prong_tracks = {t.track_id: t for event in events for t in event.tracks}
        out: list[SigmacCandidate] = []
        for event in events:
            out.extend(
                self.combine(
                    tracks=event.tracks,
                    lambdac_candidates=event.lambdac_candidates,
                    collision_id=event.collision_id,
                    prong_tracks=prong_tracks,
                )
            )
        return out

    @staticmethod
    def _prong_charges(
        candidate: LambdacCandidate, prong_tracks: Mapping[int, TrackState]
    ) -> tuple[int, int, int] | None:
        """Look up the prong charges of a Λc, or `None` if a prong is missing."""
        try:
            p0, p1, p2 = (prong_tracks[i] for i in candidate.prong_ids)
        except KeyError as exc:
            logger.warning(
                "Lc candidate %d references unknown prong track %s; skipped",
                candidate.candidate_id,
                exc.args[0],
            )
            return None
        return p0.charge, p1.charge, p2.charge
