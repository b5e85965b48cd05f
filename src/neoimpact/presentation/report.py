"""Human-readable analysis report built from a risk assessment."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import Enum

from neoimpact.core.bodies import CandidateBody
from neoimpact.core.risk import RiskAssessment
from neoimpact.utils.constants import EXTINCTION_ENERGY_J, REGIONAL_ENERGY_J

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Global impact severity by kinetic energy."""

    EXTINCTION_LEVEL = "EXTINCTION LEVEL"
    REGIONAL = "REGIONAL"
    LOCAL = "LOCAL"


def classify_severity(kinetic_energy_joules: float) -> Severity:
    if kinetic_energy_joules > EXTINCTION_ENERGY_J:
        return Severity.EXTINCTION_LEVEL
    elif kinetic_energy_joules > REGIONAL_ENERGY_J:
        return Severity.REGIONAL
    else:
        return Severity.LOCAL


def format_energy(energy_joules: float) -> str:
    """Format an energy with the largest fitting SI prefix (GJ to EJ)."""
    if energy_joules > 1e18:
        return f"{energy_joules / 1e18:.1f} EJ"
    elif energy_joules > 1e15:
        return f"{energy_joules / 1e15:.1f} PJ"
    elif energy_joules > 1e12:
        return f"{energy_joules / 1e12:.1f} TJ"
    return f"{energy_joules / 1e9:.1f} GJ"


@dataclass(frozen=True)
class AnalysisReport:
    """Display-ready summary of one assessment.

    Attributes:
        body_name: Name of the analysed body.
        headline: "COLLISION DETECTED!" or "Safe Passage".
        probability_text: Probability as a percentage, four decimals.
        velocity_text: Impact velocity in km/s.
        energy_text: Kinetic energy with an SI prefix.
        crater_text: Crater diameter in km.
        tsunami_risk: "HIGH" or "LOW".
        severity: Global impact severity.
        time_to_impact: ISO timestamp of the predicted impact, if any.
    """

    body_name: str
    headline: str
    probability_text: str
    velocity_text: str
    energy_text: str
    crater_text: str
    tsunami_risk: str
    severity: Severity
    time_to_impact: str | None

    @classmethod
    def from_assessment(cls, body: CandidateBody, assessment: RiskAssessment) -> AnalysisReport:
        report = cls(
            body_name=body.name,
            headline="COLLISION DETECTED!" if assessment.will_collide else "Safe Passage",
            probability_text=f"{assessment.probability * 100:.4f}%",
            velocity_text=f"{assessment.impact_velocity_km_s:.1f} km/s",
            energy_text=format_energy(assessment.kinetic_energy_joules),
            crater_text=f"{assessment.crater_diameter_km:.1f} km",
            tsunami_risk="HIGH" if assessment.tsunami_risk else "LOW",
            severity=classify_severity(assessment.kinetic_energy_joules),
            time_to_impact=(
                assessment.time_to_impact.isoformat()
                if assessment.time_to_impact is not None
                else None
            ),
        )
        logger.debug("Report for %s: %s (%s)", body.id, report.headline, report.severity.value)
        return report

    def as_dict(self) -> dict:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data
