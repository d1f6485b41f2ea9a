"""Derived observables of a Σc candidate as a composite of Λc and soft pion.

The Σc candidate row only stores the Λc and soft-pion momenta. Everything
else (Σc kinematics, invariant masses per Λc hypothesis, mass difference) is
computed here on demand.
"""

from __future__ import annotations
__author__ = "Renato Quagliani <rquaglia@cern.ch>"


from dataclasses import dataclass

from .mcmatch import channel_for_charge
from .models import LambdacCandidate, SigmacCandidate
from .physics import invariant_mass, pt_eta_phi, rapidity
from .pid import make_pion, mass_from_pdg


@dataclass(frozen=True)
class SigmacObservables:
    """Kinematics of one Σc candidate.

    Masses and mass differences of a Λc hypothesis outside its mass window
    are `None`.
    """

    pt: float
    p: float
    eta: float
    phi: float
    y: float
    pt_lc: float
    pt_soft_pi: float
    mass_pkpi: float | None
    mass_pikp: float | None
    delta_mass_pkpi: float | None
    delta_mass_pikp: float | None


def sigmac_observables(candidate: SigmacCandidate, lambdac: LambdacCandidate) -> SigmacObservables:
    """Compute Σc observables from the candidate and its Λc.

    For each accepted Λc hypothesis the Λc 4-vector is built from its summed
    momentum and its reconstructed mass under that hypothesis, and combined
    with the soft pion under the pion mass. `Δm = m(Σc) - m(Λc)`.
    """
    if lambdac.candidate_id != candidate.prong_lc_id:
        raise ValueError(
            f"Lc candidate {lambdac.candidate_id} is not the Lc of this Sc "
            f"candidate ({candidate.prong_lc_id})."
        )
    p_lc = (candidate.px_lc, candidate.py_lc, candidate.pz_lc)
    p_soft_pi = (candidate.px_soft_pi, candidate.py_soft_pi, candidate.pz_soft_pi)
    mass_pi = make_pion().mass

    def sc_mass(status: bool, mass_lc: float) -> tuple[float | None, float | None]:
        if not status:
            return None, None
        mass = invariant_mass((p_lc, p_soft_pi), (mass_lc, mass_pi))
        return mass, mass - mass_lc

    mass_pkpi, delta_pkpi = sc_mass(candidate.status_spread_lc_to_pkpi, lambdac.mass_pkpi)
    mass_pikp, delta_pikp = sc_mass(candidate.status_spread_lc_to_pikp, lambdac.mass_pikp)

    pt, eta, phi = pt_eta_phi(candidate.px, candidate.py, candidate.pz)
    p = (candidate.px**2 + candidate.py**2 + candidate.pz**2) ** 0.5
    mass_sc = mass_from_pdg(channel_for_charge(candidate.charge).pdg_sigmac)
    return SigmacObservables(
        pt=pt,
        p=p,
        eta=eta,
        phi=phi,
        y=rapidity(candidate.px, candidate.py, candidate.pz, mass_sc),
        pt_lc=pt_eta_phi(*p_lc)[0],
        pt_soft_pi=pt_eta_phi(*p_soft_pi)[0],
        mass_pkpi=mass_pkpi,
        mass_pikp=mass_pikp,
        delta_mass_pkpi=delta_pkpi,
        delta_mass_pikp=delta_pikp,
    )
