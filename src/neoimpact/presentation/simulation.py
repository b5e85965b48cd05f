"""Scripted impact simulation: impact sites and a timed phase sequence.

The sequence is a fixed, ordered list of phases, each held for a fixed
interval. A running sequence can be cancelled, and an instance refuses to
start a second run while one is in flight.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from neoimpact.core.risk import RiskAssessment
from neoimpact.errors import SimulationBusy

logger = logging.getLogger(__name__)

SIMULATION_PHASES: tuple[str, ...] = (
    "Asteroid entering atmosphere...",
    "Atmospheric compression heating...",
    "Impact imminent...",
    "IMPACT! Shockwave expanding...",
    "Crater formation...",
    "Debris ejection...",
    "Secondary effects spreading...",
    "Simulation complete.",
)

PHASE_INTERVAL_S: float = 1.5
"""How long each phase is held, in seconds."""

SHOCKWAVE_CRATER_RATIO: float = 10.0
"""Shockwave radius as a multiple of crater diameter."""


@dataclass(frozen=True)
class ImpactSite:
    """A predefined location where an impact can be simulated.

    Attributes:
        name: Display name.
        lat: Latitude in degrees.
        lng: Longitude in degrees.
        description: One-line description of the expected effects.
        is_ocean: Whether the site is over water.
    """

    name: str
    lat: float
    lng: float
    description: str
    is_ocean: bool

    def map_position(self) -> tuple[float, float]:
        """Marker position on the flat world map as (left %, top %)."""
        return 50 + (self.lng / 180) * 30, 50 - (self.lat / 90) * 30


IMPACT_SITES: tuple[ImpactSite, ...] = (
    ImpactSite("Pacific Ocean", 0, -150, "Deep ocean impact - massive tsunamis", True),
    ImpactSite("Sahara Desert", 23, 10, "Continental impact - global dust cloud", False),
    ImpactSite("Atlantic Ocean", 30, -40, "Atlantic impact - coastal devastation", True),
    ImpactSite("Siberia", 60, 100, "Remote land impact - limited casualties", False),
    ImpactSite("Mediterranean Sea", 35, 15, "Enclosed sea impact - regional effects", True),
)


def find_site(name: str) -> ImpactSite:
    """Look up a predefined impact site by name (case-insensitive).

    Raises:
        KeyError: If no site has that name.
    """
    for site in IMPACT_SITES:
        if site.name.lower() == name.lower():
            return site
    raise KeyError(f"Unknown impact site: {name!r}")


@dataclass(frozen=True)
class ImpactEffects:
    site: ImpactSite
    crater_diameter_km: float
    shockwave_radius_km: float
    secondary_effect: str

    @classmethod
    def from_assessment(cls, assessment: RiskAssessment, site: ImpactSite) -> ImpactEffects:
        return cls(
            site=site,
            crater_diameter_km=assessment.crater_diameter_km,
            shockwave_radius_km=assessment.crater_diameter_km * SHOCKWAVE_CRATER_RATIO,
            secondary_effect="Tsunami waves" if assessment.tsunami_risk else "Atmospheric effects",
        )


class ImpactSimulation:
    """Runs the phase sequence for one impact at a time.

    Args:
        phases: Ordered phase labels.
        interval_s: Hold time per phase in seconds.
        sleep: Coroutine used to wait between phases (``asyncio.sleep``).
    """

    def __init__(
        self,
        phases: tuple[str, ...] = SIMULATION_PHASES,
        interval_s: float = PHASE_INTERVAL_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.phases = phases
        self.interval_s = interval_s
        self._sleep = sleep
        self._task: asyncio.Task | None = None
        self.site: ImpactSite | None = None
        self.phase: str | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None

    async def run(
        self,
        site: ImpactSite,
        on_phase: Callable[[str], None] | None = None,
    ) -> list[str]:
        """Walk through every phase at ``site``.

        Args:
            site: Where the impact happens.
            on_phase: Called with each phase label as it starts.

        Returns:
            The phases shown, in order.

        Raises:
            SimulationBusy: If a run is already in progress.
            asyncio.CancelledError: If the run is cancelled.
        """
        if self._task is not None:
            raise SimulationBusy(f"Simulation already running at {self.site.name}")

        task = asyncio.current_task()
        self._task = task
        self.site = site
        shown: list[str] = []
        logger.info("Simulating impact at %s", site.name)

        try:
            for phase in self.phases:
                self.phase = phase
                shown.append(phase)
                if on_phase is not None:
                    on_phase(phase)
                await self._sleep(self.interval_s)
        except asyncio.CancelledError:
            logger.info("Simulation at %s cancelled during %r", site.name, self.phase)
            raise
        finally:
            # A cancelled run may unwind after a newer run has started
            if self._task is task:
                self._task = None

        return shown

    def cancel(self) -> bool:
        """Cancel the in-flight run, if any.

        The instance is free for a new run as soon as this returns, even
        before the cancelled task has unwound.

        Returns:
            True if a run was cancelled.
        """
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        task.cancel()
        return True
