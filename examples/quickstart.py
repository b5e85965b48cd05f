"""neoimpact quickstart: estimate impact risk for a hand-built asteroid."""

from datetime import datetime, timezone

from neoimpact import CandidateBody, CloseApproach, DiameterRange, estimate
from neoimpact.presentation.report import AnalysisReport

body = CandidateBody(
    id="demo-1",
    name="(DEMO 2026 AA)",
    diameter=DiameterRange(min_km=0.8, max_km=1.2),
    close_approaches=(
        CloseApproach(
            epoch=datetime(2026, 10, 20, tzinfo=timezone.utc),
            relative_velocity_km_s=20.0,
            miss_distance_km=5000.0,
        ),
    ),
    is_hazardous=False,
)

assessment = estimate(body)
report = AnalysisReport.from_assessment(body, assessment)

print(f"Asteroid:     {report.body_name}")
print(f"Result:       {report.headline}")
print(f"Probability:  {report.probability_text}")
print(f"Velocity:     {report.velocity_text}")
print(f"Energy:       {report.energy_text} ({report.severity.value})")
print(f"Crater:       {report.crater_text}")
print(f"Tsunami risk: {report.tsunami_risk}")
if report.time_to_impact:
    print(f"Impact at:    {report.time_to_impact}")
