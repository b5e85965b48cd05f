"""One user session: fetch candidates, analyse a selection, simulate an impact."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Protocol

import numpy as np

from neoimpact.core.bodies import CandidateBody
from neoimpact.core.risk import ApproachPolicy, RiskAssessment, estimate
from neoimpact.errors import InvalidOrbitalData, MissingApproachData, ProviderFetchFailure
from neoimpact.presentation.report import AnalysisReport
from neoimpact.presentation.simulation import ImpactEffects, ImpactSimulation, ImpactSite

logger = logging.getLogger(__name__)


class CandidateProvider(Protocol):
    def fetch_candidates(self) -> list[CandidateBody]: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ImpactSession:
    """Composes a candidate provider, the risk estimator and the simulation.

    A failed fetch or analysis leaves the previous candidates and the
    previous assessment in place and records the message in ``error``.

    Args:
        provider: Source of candidate bodies (e.g. ``NeoWsClient``).
        clock: Returns the reference time for time-to-impact draws.
        rng: Random source for time-to-impact draws.
        policy: Close-approach selection policy.
        simulation: Simulation runner owned by this session.
    """

    def __init__(
        self,
        provider: CandidateProvider,
        *,
        clock: Callable[[], datetime] = _utc_now,
        rng: np.random.Generator | None = None,
        policy: ApproachPolicy = ApproachPolicy.NEAREST,
        simulation: ImpactSimulation | None = None,
    ) -> None:
        self.provider = provider
        self.clock = clock
        self.rng = rng if rng is not None else np.random.default_rng()
        self.policy = policy
        self.simulation = simulation if simulation is not None else ImpactSimulation()

        self.candidates: list[CandidateBody] = []
        self.selected: CandidateBody | None = None
        self.assessment: RiskAssessment | None = None
        self.report: AnalysisReport | None = None
        self.error: str | None = None

    def refresh(self) -> list[CandidateBody]:
        """Reload candidates from the provider.

        Returns:
            The current candidate list (unchanged if the fetch failed).
        """
        try:
            candidates = self.provider.fetch_candidates()
        except ProviderFetchFailure as e:
            logger.warning("Candidate fetch failed: %s", e)
            self.error = str(e)
            return self.candidates

        self.candidates = list(candidates)
        self.error = None
        logger.debug("Session loaded %d candidates", len(self.candidates))
        return self.candidates

    def select(self, body_id: str) -> RiskAssessment:
        """Analyse the candidate with ``body_id``.

        Any running simulation is cancelled first.

        Raises:
            KeyError: If no loaded candidate has that id.
            MissingApproachData: If the body has no close approaches.
            InvalidOrbitalData: If the body's numbers are malformed.
        """
        body = next((c for c in self.candidates if c.id == body_id), None)
        if body is None:
            raise KeyError(f"Unknown asteroid id: {body_id!r}")

        self.simulation.cancel()
        self._analyse(body)
        return self.assessment

    def reassess(self) -> RiskAssessment:
        """Re-run the analysis of the current selection with a fresh time to impact."""
        if self.selected is None:
            raise RuntimeError("No asteroid selected")
        self._analyse(self.selected)
        return self.assessment

    def _analyse(self, body: CandidateBody) -> None:
        try:
            assessment = estimate(body, now=self.clock(), rng=self.rng, policy=self.policy)
        except (MissingApproachData, InvalidOrbitalData) as e:
            self.error = str(e)
            raise

        self.selected = body
        self.assessment = assessment
        self.report = AnalysisReport.from_assessment(body, assessment)
        self.error = None

    async def simulate(
        self,
        site: ImpactSite,
        on_phase: Callable[[str], None] | None = None,
    ) -> ImpactEffects:
        """Run the impact timeline for the current assessment at ``site``.

        Raises:
            RuntimeError: If nothing has been selected yet.
            SimulationBusy: If a simulation is already running.
        """
        if self.assessment is None:
            raise RuntimeError("No asteroid selected")
        effects = ImpactEffects.from_assessment(self.assessment, site)
        await self.simulation.run(site, on_phase)
        return effects
