"""PDG species codes and masses used by candidate building and MC matching.

Masses are in GeV/c^2. Codes are signed PDG Monte Carlo numbers for the
particle; the antiparticle is the negated code.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParticleHypothesis:
    """Named particle species with its PDG code and mass."""

    name: str
    mass: float
    pdg_id: int


PDG_PION_PLUS = 211
PDG_KAON_PLUS = 321
PDG_PROTON = 2212
PDG_LAMBDAC_PLUS = 4122
PDG_SIGMAC_ZERO = 4112
PDG_SIGMAC_PLUSPLUS = 4222

_PION = ParticleHypothesis(name="pi", mass=0.13957039, pdg_id=PDG_PION_PLUS)
_KAON = ParticleHypothesis(name="K", mass=0.493677, pdg_id=PDG_KAON_PLUS)
_PROTON = ParticleHypothesis(name="p", mass=0.93827208816, pdg_id=PDG_PROTON)
_LAMBDAC = ParticleHypothesis(name="Lc", mass=2.28646, pdg_id=PDG_LAMBDAC_PLUS)
_SIGMAC0 = ParticleHypothesis(name="Sc0", mass=2.45375, pdg_id=PDG_SIGMAC_ZERO)
_SIGMACPP = ParticleHypothesis(name="Scpp", mass=2.45397, pdg_id=PDG_SIGMAC_PLUSPLUS)

_PDG_TO_HYPOTHESIS: dict[int, ParticleHypothesis] = {
    h.pdg_id: h for h in (_PION, _KAON, _PROTON, _LAMBDAC, _SIGMAC0, _SIGMACPP)
}


def make_pion() -> ParticleHypothesis:
    """Return the charged-pion hypothesis."""
    return _PION


def make_lambdac() -> ParticleHypothesis:
    """Return the Λc+ hypothesis."""
    return _LAMBDAC


def mass_from_pdg(pdg_code: int) -> float:
    """Look up the mass of a species by (signed) PDG code."""
    try:
        return _PDG_TO_HYPOTHESIS[abs(pdg_code)].mass
    except KeyError as exc:
        supported = ", ".join(str(k) for k in sorted(_PDG_TO_HYPOTHESIS))
        raise ValueError(
            f"No mass known for PDG code {pdg_code}. Supported codes: {supported}"
        ) from exc


def is_beauty_hadron(pdg_code: int) -> bool:
    """True for mesons and baryons carrying a b quark.

    Mesons carry the heaviest quark in the hundreds digit, baryons in the
    thousands digit of the PDG numbering scheme.
    """
    code = abs(pdg_code) % 10000
    if code < 100:
        return False
    return (code // 1000) % 10 == 5 or ((code // 1000) % 10 == 0 and (code // 100) % 10 == 5)
