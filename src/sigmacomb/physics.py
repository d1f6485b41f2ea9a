"""Kinematic helpers for Λc and Σc candidates."""

from __future__ import annotations
__author__ = "Renato Quagliani <rquaglia@cern.ch>"


import math
from typing import Iterable

from .models import LambdacCandidate, LorentzVector
from .pid import make_lambdac


def momentum_to_lorentz(px: float, py: float, pz: float, mass: float) -> LorentzVector:
    """Convert a 3-momentum plus mass hypothesis into a Lorentz 4-vector."""
    energy = (px * px + py * py + pz * pz + mass * mass) ** 0.5
    return LorentzVector(px=px, py=py, pz=pz, e=energy)


def sum_lorentz(vectors: Iterable[LorentzVector]) -> LorentzVector:
    """Sum an iterable of Lorentz vectors."""
    total = LorentzVector(0.0, 0.0, 0.0, 0.0)
    for vec in vectors:
        total = total + vec
    return total


def invariant_mass(
    momenta: Iterable[tuple[float, float, float]], masses: Iterable[float]
) -> float:
    """Invariant mass of a set of momenta under the given mass hypotheses."""
    return sum_lorentz(
        momentum_to_lorentz(px, py, pz, m)
        for (px, py, pz), m in zip(momenta, masses, strict=True)
    ).mass


def rapidity(px: float, py: float, pz: float, mass: float) -> float:
    """Rapidity `0.5 * ln((E + pz) / (E - pz))` for a given mass hypothesis."""
    energy = (px * px + py * py + pz * pz + mass * mass) ** 0.5
    if energy == abs(pz):
        return 1e9 if pz >= 0 else -1e9
    return 0.5 * math.log((energy + pz) / (energy - pz))


def pt_eta_phi(px: float, py: float, pz: float) -> tuple[float, float, float]:
    """Return `(pt, eta, phi)` of a 3-momentum, with phi in [0, 2pi)."""
    pt = math.hypot(px, py)
    p = math.sqrt(px * px + py * py + pz * pz)
    if p == abs(pz):
        eta = 1e9 if pz >= 0 else -1e9
    else:
        eta = 0.5 * math.log((p + pz) / (p - pz))
    phi = math.atan2(py, px)
    if phi < 0.0:
        phi += 2.0 * math.pi
    return pt, eta, phi


def lambdac_rapidity(candidate: LambdacCandidate) -> float:
    """Λc rapidity evaluated with the nominal Λc mass."""
    return rapidity(candidate.px, candidate.py, candidate.pz, make_lambdac().mass)
