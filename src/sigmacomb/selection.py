"""Soft-pion track quality selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .models import N_ITS_LAYERS, SoftPionSelection, TrackState

logger = logging.getLogger(__name__)


def its_layers_from_hit_map(hit_map: int) -> frozenset[int]:
    """Return the ITS layer indices whose bit is set in `hit_map`."""
    return frozenset(layer for layer in range(N_ITS_LAYERS) if hit_map & (1 << layer))


@dataclass(frozen=True)
class SoftPionSelector:
    """Stateless pass/fail predicate for soft-pion candidate tracks.

    The ITS layer set is derived once from the configured hit map; clusters on
    layers outside that set never count toward `its_hits_min`.
    """

    config: SoftPionSelection = field(default_factory=SoftPionSelection)
    its_layers: frozenset[int] = field(init=False)

    def __post_init__(self) -> None:
        layers = its_layers_from_hit_map(self.config.its_hit_map)
        object.__setattr__(self, "its_layers", layers)
        logger.info(
            "Soft pion ITS hit map %#09b: %d layer(s) %s, at least %d hit(s) required",
            self.config.its_hit_map,
            len(layers),
            sorted(layers),
            self.config.its_hits_min,
        )

    def n_its_hits(self, track: TrackState) -> int:
        """Count clusters of `track` on the selected ITS layers."""
        return sum(1 for layer in self.its_layers if track.its_cluster_map & (1 << layer))

    def accepts(self, track: TrackState) -> bool:
        cfg = self.config
        if abs(track.eta) > cfg.eta_max:
            return False
        if abs(track.dca_xy) > cfg.dca_xy_max:
            return False
        if abs(track.dca_z) > cfg.dca_z_max:
            return False
        if not track.has_its_refit:
            return False
        return self.n_its_hits(track) >= cfg.its_hits_min

    def select(self, tracks) -> list[TrackState]:
        """Return the accepted tracks, preserving input order."""
        return [t for t in tracks if self.accepts(t)]
