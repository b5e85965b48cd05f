"""Integration test: feed → parse → estimate → report → simulate end-to-end."""
from __future__ import annotations

import asyncio
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import numpy as np
import pytest

from neoimpact import (
    ImpactSession,
    ImpactSimulation,
    NeoWsClient,
    Severity,
    estimate,
)
from neoimpact.presentation.simulation import find_site

# Hardcoded feed response (no network calls)
FEED = {
    "element_count": 2,
    "near_earth_objects": {
        "2026-10-12": [
            {
                "id": "3726710",
                "name": "(2015 RC)",
                "absolute_magnitude_h": 24.3,
                "estimated_diameter": {
                    "kilometers": {
                        "estimated_diameter_min": 0.0366906138,
                        "estimated_diameter_max": 0.0820427065,
                    }
                },
                "is_potentially_hazardous_asteroid": False,
                "close_approach_data": [
                    {
                        "epoch_date_close_approach": 1791849600000,
                        "relative_velocity": {"kilometers_per_second": "19.4850295284"},
                        "miss_distance": {"kilometers": "5000"},
                        "orbiting_body": "Earth",
                    }
                ],
            }
        ],
        "2026-10-14": [
            {
                "id": "2153306",
                "name": "153306 (2001 JL1)",
                "absolute_magnitude_h": 17.0,
                "estimated_diameter": {
                    "kilometers": {
                        "estimated_diameter_min": 0.6,
                        "estimated_diameter_max": 1.4,
                    }
                },
                "is_potentially_hazardous_asteroid": True,
                "close_approach_data": [
                    {
                        "epoch_date_close_approach": 1792022400000,
                        "relative_velocity": {"kilometers_per_second": "15"},
                        "miss_distance": {"kilometers": "50000"},
                        "orbiting_body": "Earth",
                    }
                ],
            }
        ],
    },
}

NOW = datetime(2026, 10, 18, tzinfo=timezone.utc)


@pytest.fixture
def client() -> NeoWsClient:
    client = NeoWsClient(api_key="TEST")
    resp = MagicMock()
    resp.json.return_value = FEED
    client._session.get = MagicMock(return_value=resp)
    return client


def test_fetch_and_estimate(client: NeoWsClient):
    """Parse the feed and estimate every candidate."""
    bodies = client.fetch_candidates(today=date(2026, 10, 18))
    assert [b.id for b in bodies] == ["3726710", "2153306"]

    small, large = (estimate(b, now=NOW, rng=np.random.default_rng(0)) for b in bodies)
    assert small.will_collide is True
    assert small.probability == pytest.approx(1 - 5000 / 63710)
    assert large.will_collide is False
    assert large.probability == pytest.approx(2 * (0.1 - 50000 / 637100))
    assert large.kinetic_energy_joules > small.kinetic_energy_joules


def test_session_end_to_end(client: NeoWsClient):
    """Select a body, read its report and run the simulation."""
    fetch = lambda: client.fetch_candidates(today=date(2026, 10, 18))
    provider = MagicMock()
    provider.fetch_candidates.side_effect = fetch

    async def no_wait(seconds: float) -> None:
        return None

    session = ImpactSession(
        provider,
        clock=lambda: NOW,
        rng=np.random.default_rng(5),
        simulation=ImpactSimulation(sleep=no_wait),
    )
    session.refresh()
    assessment = session.select("3726710")

    assert assessment.time_to_impact is not None
    assert session.report.headline == "COLLISION DETECTED!"
    assert session.report.severity in (Severity.LOCAL, Severity.REGIONAL)

    effects = asyncio.run(session.simulate(find_site("Mediterranean Sea")))
    assert effects.shockwave_radius_km == pytest.approx(10 * assessment.crater_diameter_km)
