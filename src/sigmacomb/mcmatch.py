"""Monte Carlo truth matching of Σc0,++ candidates and generated particles.

Reconstruction level: the three Λc prongs and the soft pion are traced up the
generated ancestry to a common Σc of the expected species (daughters → Λc or
intermediate resonance → Σc, at most three generations).

Generation level: every generated Σc0,++ is checked for the Σc → Λc π decay
and for its Λc daughter decaying (directly or through a resonance) to pK−π+.

In both cases charge conjugation is accepted and reflected in the sign of the
decay-channel flag, and matched Σc are classified as prompt or non-prompt from
their production ancestry.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Mapping, Sequence

from .models import (
    LambdacCandidate,
    LambdacDecayType,
    McMatchLabel,
    McParticle,
    Origin,
    SigmacCandidate,
    SigmacDecayType,
    TrackState,
)
from .pid import (
    PDG_KAON_PLUS,
    PDG_LAMBDAC_PLUS,
    PDG_PION_PLUS,
    PDG_PROTON,
    PDG_SIGMAC_PLUSPLUS,
    PDG_SIGMAC_ZERO,
    is_beauty_hadron,
)

logger = logging.getLogger(__name__)

LAMBDAC_DAUGHTER_PDGS = (PDG_PROTON, -PDG_KAON_PLUS, PDG_PION_PLUS)


@dataclass(frozen=True)
class SigmacChannel:
    """Σc0 or Σc++ decay channel with its expected species."""

    decay_type: SigmacDecayType
    pdg_sigmac: int
    pdg_soft_pi: int

    @property
    def flag_bit(self) -> int:
        return 1 << self.decay_type

    @property
    def reco_daughter_pdgs(self) -> tuple[int, int, int, int]:
        """Final-state species: Λc prongs followed by the soft pion."""
        return (*LAMBDAC_DAUGHTER_PDGS, self.pdg_soft_pi)

    @property
    def gen_daughter_pdgs(self) -> tuple[int, int]:
        """Immediate daughters of the Σc."""
        return (PDG_LAMBDAC_PLUS, self.pdg_soft_pi)


SC0_CHANNEL = SigmacChannel(SigmacDecayType.SC0_TO_PKPIPI, PDG_SIGMAC_ZERO, -PDG_PION_PLUS)
SCPLUSPLUS_CHANNEL = SigmacChannel(
    SigmacDecayType.SCPLUSPLUS_TO_PKPIPI, PDG_SIGMAC_PLUSPLUS, PDG_PION_PLUS
)
SIGMAC_CHANNELS = (SC0_CHANNEL, SCPLUSPLUS_CHANNEL)


def channel_for_charge(charge: int) -> SigmacChannel:
    """Select the Σc channel from the candidate net charge."""
    if charge == 0:
        return SC0_CHANNEL
    if abs(charge) == 2:
        return SCPLUSPLUS_CHANNEL
    raise ValueError(f"No Σc channel for charge {charge}.")


def _get(particles: Sequence[McParticle], index: int, context: int) -> McParticle | None:
    """Fetch a particle by row index; malformed links are logged and yield `None`."""
    if 0 <= index < len(particles):
        return particles[index]
    logger.warning(
        "MC particle %d links to index %d outside the table of %d particles",
        context,
        index,
        len(particles),
    )
    return None


def find_mother(
    particles: Sequence[McParticle],
    index: int,
    pdg_mother: int,
    accept_antiparticles: bool = False,
    depth_max: int = -1,
) -> tuple[int, int]:
    """Walk the first-mother chain looking for an ancestor of species `pdg_mother`.

    Returns `(mother_index, sign)` where `sign` is -1 if the antiparticle was
    found, or `(-1, 0)` if no such ancestor lies within `depth_max` generations
    (unlimited if negative).
    """
    seen = {index}
    current = particles[index]
    stage = 0
    while depth_max < 0 or stage < depth_max:
        if not current.mother_indices:
            break
        mother_index = current.mother_indices[0]
        if mother_index in seen:
            logger.warning("Cyclic ancestry at MC particle %d", mother_index)
            break
        mother = _get(particles, mother_index, current.index)
        if mother is None:
            break
        if mother.pdg_code == pdg_mother:
            return mother_index, 1
        if accept_antiparticles and mother.pdg_code == -pdg_mother:
            return mother_index, -1
        seen.add(mother_index)
        current = mother
        stage += 1
    return -1, 0


def final_state_daughters(
    particles: Sequence[McParticle],
    index: int,
    depth_max: int = -1,
    final_pdgs: Sequence[int] = (),
) -> list[int]:
    """Indices of the decay products of a particle, followed `depth_max` generations deep.

    A daughter is final if it has no daughters of its own, the depth limit is
    reached, or its species is one of `final_pdgs` (either sign). A particle
    without daughters has no decay products.
    """
    final_species = {abs(pdg) for pdg in final_pdgs}
    out: list[int] = []

    def collect(idx: int, stage: int, path: frozenset[int]) -> None:
        particle = particles[idx]
        if stage > 0 and abs(particle.pdg_code) in final_species:
            out.append(idx)
            return
        if not particle.daughter_indices or (depth_max >= 0 and stage >= depth_max):
            if stage > 0:
                out.append(idx)
            return
        for daughter_index in particle.daughter_indices:
            if daughter_index in path:
                logger.warning("Cyclic decay chain at MC particle %d", daughter_index)
                continue
            if _get(particles, daughter_index, idx) is None:
                continue
            collect(daughter_index, stage + 1, path | {daughter_index})

    collect(index, 0, frozenset({index}))
    return out


def _consume_pdgs(pdg_codes: Sequence[int], expected: Sequence[int]) -> bool:
    """True if `pdg_codes` equals `expected` as a multiset."""
    remaining = list(expected)
    for pdg in pdg_codes:
        try:
            remaining.remove(pdg)
        except ValueError:
            return False
    return not remaining


def matched_mc_rec(
    particles: Sequence[McParticle],
    mc_indices: Sequence[int | None],
    pdg_mother: int,
    pdg_daughters: Sequence[int],
    accept_antiparticles: bool = False,
    depth_max: int = 1,
) -> tuple[int, int]:
    """Match reconstructed daughters to a common generated mother.

    `mc_indices` are the MC labels of the reconstructed daughters. Succeeds if
    they are distinct, the first one descends from a `pdg_mother` (or its
    antiparticle) within `depth_max` generations, that mother decays into
    exactly these particles and their species match `pdg_daughters` (with the
    sign flipped for the antiparticle). Returns `(mother_index, sign)`, or
    `(-1, 0)` if no match.
    """
    if len(mc_indices) != len(pdg_daughters):
        raise ValueError(
            f"{len(mc_indices)} daughters given for a {len(pdg_daughters)}-body pattern."
        )
    if any(idx is None or not 0 <= idx < len(particles) for idx in mc_indices):
        return -1, 0
    if len(set(mc_indices)) != len(mc_indices):
        return -1, 0

    mother_index, sign = find_mother(
        particles, mc_indices[0], pdg_mother, accept_antiparticles, depth_max
    )
    if mother_index < 0:
        return -1, 0
    all_daughters = set(
        final_state_daughters(particles, mother_index, depth_max, pdg_daughters)
    )
    if len(all_daughters) != len(mc_indices):
        return -1, 0
    if any(idx not in all_daughters for idx in mc_indices):
        return -1, 0
    if not _consume_pdgs(
        [particles[idx].pdg_code for idx in mc_indices],
        [sign * pdg for pdg in pdg_daughters],
    ):
        return -1, 0
    return mother_index, sign


def matched_mc_gen(
    particles: Sequence[McParticle],
    particle: McParticle,
    pdg_particle: int,
    pdg_daughters: Sequence[int],
    accept_antiparticles: bool = False,
    depth_max: int = 1,
) -> int:
    """Check a generated particle's species and decay products.

    Returns +1 (particle) or -1 (antiparticle) on a match, 0 otherwise.
    """
    if particle.pdg_code == pdg_particle:
        sign = 1
    elif accept_antiparticles and particle.pdg_code == -pdg_particle:
        sign = -1
    else:
        return 0
    daughters = final_state_daughters(particles, particle.index, depth_max, pdg_daughters)
    if len(daughters) != len(pdg_daughters):
        return 0
    if not _consume_pdgs(
        [particles[idx].pdg_code for idx in daughters],
        [sign * pdg for pdg in pdg_daughters],
    ):
        return 0
    return sign


def charm_hadron_origin(particles: Sequence[McParticle], particle: McParticle) -> Origin:
    """Non-prompt if any ancestor is a beauty hadron, prompt otherwise."""
    queue = deque(particle.mother_indices)
    seen = {particle.index}
    while queue:
        index = queue.popleft()
        if index in seen:
            continue
        seen.add(index)
        mother = _get(particles, index, particle.index)
        if mother is None:
            continue
        if is_beauty_hadron(mother.pdg_code):
            return Origin.NON_PROMPT
        queue.extend(mother.mother_indices)
    return Origin.PROMPT


@dataclass
class SigmacMcMatcher:
    """Assign truth labels to Σc candidates and generated particles of one truth table."""

    particles: Sequence[McParticle]
    depth_max_rec: int = 3

    def __post_init__(self) -> None:
        for row, particle in enumerate(self.particles):
            if particle.index != row:
                raise ValueError(
                    f"MC particle at row {row} carries index {particle.index}; "
                    "indices must follow table order."
                )

    def match_reconstructed(
        self,
        candidates: Sequence[SigmacCandidate],
        lambdac_by_id: Mapping[int, LambdacCandidate],
        tracks_by_id: Mapping[int, TrackState],
    ) -> list[McMatchLabel]:
        """One label per candidate, in candidate order."""
        return [
            self.match_reconstructed_one(cand, lambdac_by_id, tracks_by_id)
            for cand in candidates
        ]

    def match_reconstructed_one(
        self,
        candidate: SigmacCandidate,
        lambdac_by_id: Mapping[int, LambdacCandidate],
        tracks_by_id: Mapping[int, TrackState],
    ) -> McMatchLabel:
        cand_lc = lambdac_by_id.get(candidate.prong_lc_id)
        if cand_lc is None:
            logger.warning(
                "Sc candidate references unknown Lc candidate %d", candidate.prong_lc_id
            )
            return McMatchLabel()
        # Only Λc already matched to pK−π+ can lead to a Σc match.
        if abs(cand_lc.flag_mc_match_rec) != 1 << LambdacDecayType.LC_TO_PKPI:
            return McMatchLabel()

        track_ids = (*cand_lc.prong_ids, candidate.prong_soft_pi_id)
        mc_indices: list[int | None] = []
        for track_id in track_ids:
            track = tracks_by_id.get(track_id)
            if track is None:
                logger.warning("Sc candidate references unknown track %d", track_id)
                return McMatchLabel()
            mc_indices.append(track.mc_particle_index)

        channel = channel_for_charge(candidate.charge)
        index_rec, sign = matched_mc_rec(
            self.particles,
            mc_indices,
            channel.pdg_sigmac,
            channel.reco_daughter_pdgs,
            accept_antiparticles=True,
            depth_max=self.depth_max_rec,
        )
        if index_rec < 0:
            return McMatchLabel()
        origin = charm_hadron_origin(self.particles, self.particles[index_rec])
        return McMatchLabel(flag=sign * channel.flag_bit, origin=origin)

    def match_generated(self) -> list[McMatchLabel]:
        """One label per generated particle, in table order."""
        return [self.match_generated_one(particle) for particle in self.particles]

    def match_generated_one(self, particle: McParticle) -> McMatchLabel:
        for channel in SIGMAC_CHANNELS:
            sign = matched_mc_gen(
                self.particles,
                particle,
                channel.pdg_sigmac,
                channel.gen_daughter_pdgs,
                accept_antiparticles=True,
                depth_max=1,
            )
            if sign == 0:
                continue
            for daughter_index in particle.daughter_indices:
                daughter = _get(self.particles, daughter_index, particle.index)
                if daughter is None or abs(daughter.pdg_code) != PDG_LAMBDAC_PLUS:
                    continue
                if matched_mc_gen(
                    self.particles,
                    daughter,
                    PDG_LAMBDAC_PLUS,
                    LAMBDAC_DAUGHTER_PDGS,
                    accept_antiparticles=True,
                    depth_max=2,
                ):
                    origin = charm_hadron_origin(self.particles, particle)
                    return McMatchLabel(flag=sign * channel.flag_bit, origin=origin)
            return McMatchLabel()
        return McMatchLabel()
