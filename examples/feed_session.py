"""Fetch this week's NeoWs feed, analyse the top candidate and simulate an impact."""

import asyncio
import logging

from neoimpact import IMPACT_SITES, ImpactSession, NeoWsClient

logging.basicConfig(level=logging.INFO)

session = ImpactSession(NeoWsClient())
candidates = session.refresh()
if session.error:
    raise SystemExit(f"Error fetching asteroid data: {session.error}")

for body in candidates:
    hazard = " (hazardous)" if body.is_hazardous else ""
    print(f"{body.id:>10}  {body.name:<28} ~{body.diameter.average_km * 1000:.1f} m{hazard}")

session.select(candidates[0].id)
print(session.report.as_dict())

effects = asyncio.run(session.simulate(IMPACT_SITES[0], on_phase=print))
print(f"Crater {effects.crater_diameter_km:.1f} km, shockwave {effects.shockwave_radius_km:.0f} km, {effects.secondary_effect}")
