"""Public package exports for the Σc0,++ candidate builder."""
__author__ = "Renato Quagliani <rquaglia@cern.ch>"


from .combiner import InvalidSigmacChargeError, SigmacCombiner, sigmac_charge
from .composite import SigmacObservables, sigmac_observables
from .mcmatch import (
    SC0_CHANNEL,
    SCPLUSPLUS_CHANNEL,
    SigmacChannel,
    SigmacMcMatcher,
    channel_for_charge,
    charm_hadron_origin,
    matched_mc_gen,
    matched_mc_rec,
)
from .models import (
    EventInput,
    LambdacCandidate,
    LambdacDecayType,
    LambdacSelection,
    LorentzVector,
    McMatchLabel,
    McParticle,
    Origin,
    SigmacCandidate,
    SigmacDecayType,
    SoftPionSelection,
    TrackState,
)
from .pid import make_lambdac, make_pion
from .selection import SoftPionSelector

__all__ = [
    "SigmacCombiner",
    "SoftPionSelector",
    "SigmacMcMatcher",
    "InvalidSigmacChargeError",
    "sigmac_charge",
    "sigmac_observables",
    "SigmacObservables",
    "SigmacChannel",
    "SC0_CHANNEL",
    "SCPLUSPLUS_CHANNEL",
    "channel_for_charge",
    "charm_hadron_origin",
    "matched_mc_gen",
    "matched_mc_rec",
    "TrackState",
    "LambdacCandidate",
    "SigmacCandidate",
    "EventInput",
    "McParticle",
    "McMatchLabel",
    "LorentzVector",
    "LambdacDecayType",
    "SigmacDecayType",
    "Origin",
    "LambdacSelection",
    "SoftPionSelection",
    "make_pion",
    "make_lambdac",
]
