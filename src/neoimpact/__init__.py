"""
neoimpact: near-Earth asteroid impact risk for Python.

Educational library that pulls candidate asteroids from NASA's NeoWs feed,
estimates a simplified collision risk and impact energy, and scripts an
illustrative impact simulation. Not a production risk assessment.
"""

from __future__ import annotations

__version__ = "0.1.0-dev"

from neoimpact.errors import (
    InvalidOrbitalData,
    MissingApproachData,
    NeoImpactError,
    ProviderFetchFailure,
    SimulationBusy,
)
from neoimpact.core.bodies import CandidateBody, CloseApproach, DiameterRange
from neoimpact.core.risk import (
    ApproachPolicy,
    DistanceBand,
    RiskAssessment,
    collision_probability,
    estimate,
    estimate_many,
    probability_profile,
)
from neoimpact.data.neows import NeoWsClient
from neoimpact.presentation.report import AnalysisReport, Severity, classify_severity, format_energy
from neoimpact.presentation.simulation import IMPACT_SITES, ImpactEffects, ImpactSimulation, ImpactSite
from neoimpact.presentation.session import ImpactSession

__all__ = [
    "__version__",
    "NeoImpactError",
    "MissingApproachData",
    "InvalidOrbitalData",
    "ProviderFetchFailure",
    "SimulationBusy",
    "CandidateBody",
    "CloseApproach",
    "DiameterRange",
    "ApproachPolicy",
    "DistanceBand",
    "RiskAssessment",
    "collision_probability",
    "estimate",
    "estimate_many",
    "probability_profile",
    "NeoWsClient",
    "AnalysisReport",
    "Severity",
    "classify_severity",
    "format_energy",
    "IMPACT_SITES",
    "ImpactEffects",
    "ImpactSimulation",
    "ImpactSite",
    "ImpactSession",
]
