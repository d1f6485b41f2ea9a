"""Core data models used by the Σc candidate builder.

This module defines:
- immutable event objects (`TrackState`, `LambdacCandidate`, `EventInput`)
- the Σc output row (`SigmacCandidate`) and truth objects (`McParticle`, `McMatchLabel`)
- decay-channel and origin codes
- configurable selection controls (`LambdacSelection`, `SoftPionSelection`).
"""

from __future__ import annotations
__author__ = "Renato Quagliani <rquaglia@cern.ch>"


import math
from dataclasses import dataclass
from enum import IntEnum

N_ITS_LAYERS = 7


class LambdacDecayType(IntEnum):
    """Bit positions of the three-prong decay-type bitmask."""

    DPLUS_TO_PIKPI = 0
    LC_TO_PKPI = 1
    DS_TO_KKPI = 2
    XIC_TO_PKPI = 3


class SigmacDecayType(IntEnum):
    """Bit positions of the Σc decay-channel flag."""

    SC0_TO_PKPIPI = 0
    SCPLUSPLUS_TO_PKPIPI = 1


class Origin(IntEnum):
    """Production origin of a matched charm hadron."""

    NONE = 0
    PROMPT = 1
    NON_PROMPT = 2


@dataclass(frozen=True)
class LorentzVector:
    """Simple 4-vector with convenience properties and addition."""

    px: float
    py: float
    pz: float
    e: float

    def __add__(self, other: "LorentzVector") -> "LorentzVector":
        return LorentzVector(
            self.px + other.px,
            self.py + other.py,
            self.pz + other.pz,
            self.e + other.e,
        )

    @property
    def p2(self) -> float:
        """Squared 3-momentum magnitude."""
        return self.px * self.px + self.py * self.py + self.pz * self.pz

    @property
    def mass2(self) -> float:
        """Invariant mass squared."""
        return self.e * self.e - self.p2

    @property
    def mass(self) -> float:
        """Invariant mass with signed handling for small negative mass2 values."""
        m2 = self.mass2
        return m2**0.5 if m2 >= 0.0 else -((-m2) ** 0.5)


@dataclass(frozen=True)
class TrackState:
    """Single reconstructed track with kinematics, DCA and ITS hit information.

    `its_cluster_map` has bit `i` set when ITS layer `i` has a cluster.
    `mc_particle_index` is the MC label (row in the generated-particle table),
    `None` for data or for fake tracks.
    """

    track_id: int
    px: float
    py: float
    pz: float
    charge: int
    eta: float
    dca_xy: float
    dca_z: float
    its_cluster_map: int = 0
    has_its_refit: bool = False
    collision_id: int | None = None
    mc_particle_index: int | None = None

    @property
    def pt(self) -> float:
        return math.hypot(self.px, self.py)

    @property
    def p(self) -> float:
        return math.sqrt(self.px * self.px + self.py * self.py + self.pz * self.pz)


@dataclass(frozen=True)
class LambdacCandidate:
    """Three-prong Λc+ → pK−π+ candidate (and charge conjugate) from upstream.

    `prong_ids` are track ids in stored prong order. The two selection flags and
    masses refer to the pK−π+ and the π+K−p prong-to-species assignments.
    """

    candidate_id: int
    collision_id: int
    prong_ids: tuple[int, int, int]
    px: float
    py: float
    pz: float
    hfflag: int
    is_sel_lc_to_pkpi: int
    is_sel_lc_to_pikp: int
    mass_pkpi: float
    mass_pikp: float
    flag_mc_match_rec: int = 0


@dataclass(frozen=True)
class SigmacCandidate:
    """One accepted Σc0,++ candidate: a Λc candidate paired with a soft pion."""

    collision_id: int
    px_lc: float
    py_lc: float
    pz_lc: float
    px_soft_pi: float
    py_soft_pi: float
    pz_soft_pi: float
    prong_lc_id: int
    prong_soft_pi_id: int
    hfflag: int
    charge: int
    status_spread_lc_to_pkpi: bool
    status_spread_lc_to_pikp: bool

    @property
    def px(self) -> float:
        return self.px_lc + self.px_soft_pi

    @property
    def py(self) -> float:
        return self.py_lc + self.py_soft_pi

    @property
    def pz(self) -> float:
        return self.pz_lc + self.pz_soft_pi


@dataclass(frozen=True)
class EventInput:
    """One collision with its soft-pion track candidates and Λc candidates."""

    collision_id: int
    tracks: tuple[TrackState, ...]
    lambdac_candidates: tuple[LambdacCandidate, ...]


@dataclass(frozen=True)
class McParticle:
    """Generated particle with its links into the same truth table."""

    index: int
    pdg_code: int
    mother_indices: tuple[int, ...] = ()
    daughter_indices: tuple[int, ...] = ()


@dataclass(frozen=True)
class McMatchLabel:
    """Signed decay-channel flag plus production origin (both 0 if unmatched)."""

    flag: int = 0
    origin: int = Origin.NONE


@dataclass(frozen=True)
class LambdacSelection:
    """Λc-level selection applied before pairing with soft pions.

    A negative `y_max` disables the rapidity cut.
    """

    selection_flag_lc: int = 1
    y_max: float = -1.0
    mass_pkpi_max: float = 0.03
    mass_pikp_max: float = 0.03

    def __post_init__(self) -> None:
        if self.mass_pkpi_max < 0.0 or self.mass_pikp_max < 0.0:
            raise ValueError("Λc mass-window spreads must be non-negative.")


@dataclass(frozen=True)
class SoftPionSelection:
    """Soft-pion track selection; `its_hit_map` bit `i` selects ITS layer `i`."""

    eta_max: float = 0.9
    its_hit_map: int = 0b1111111
    its_hits_min: int = 1
    dca_xy_max: float = 0.065
    dca_z_max: float = 0.065

    def __post_init__(self) -> None:
        if self.eta_max < 0.0:
            raise ValueError(f"Soft pion eta_max must be non-negative, got {self.eta_max}.")
        if self.dca_xy_max < 0.0 or self.dca_z_max < 0.0:
            raise ValueError("Soft pion DCA cuts must be non-negative.")
        if not 0 <= self.its_hit_map < (1 << N_ITS_LAYERS):
            raise ValueError(
                f"ITS hit map {self.its_hit_map} outside the {N_ITS_LAYERS}-layer range "
                f"[0, {(1 << N_ITS_LAYERS) - 1}]."
            )
        n_layers = bin(self.its_hit_map).count("1")
        if not 0 <= self.its_hits_min <= n_layers:
            raise ValueError(
                f"Minimum ITS hits {self.its_hits_min} cannot be satisfied with "
                f"{n_layers} layer(s) selected by hit map {self.its_hit_map:#09b}."
            )
