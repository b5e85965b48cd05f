"""Exception hierarchy for neoimpact."""

from __future__ import annotations


class NeoImpactError(Exception):
    """Base class for all neoimpact errors."""


class MissingApproachData(NeoImpactError, ValueError):
    """A body has no close-approach record to estimate from."""


class InvalidOrbitalData(NeoImpactError, ValueError):
    """A numeric orbital field is missing, negative, or not a finite number."""


class ProviderFetchFailure(NeoImpactError, RuntimeError):
    """The candidate feed could not be fetched or decoded."""


class SimulationBusy(NeoImpactError, RuntimeError):
    """An impact simulation is already running."""
