"""Collision risk and impact estimation for near-Earth asteroids.

A deliberately simplified, illustrative model: tiered probability by miss
distance, kinetic energy from a spherical stony body, and an empirical
crater scaling law. Not an orbital-mechanics propagator.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from neoimpact.core.bodies import CandidateBody, CloseApproach, parse_quantity
from neoimpact.errors import InvalidOrbitalData, MissingApproachData
from neoimpact.utils.constants import (
    ASTEROID_DENSITY_KG_M3,
    COLLISION_RADII,
    CRATER_ENERGY_SCALE_J,
    CRATER_EXPONENT,
    CRATER_SCALE_KM,
    EARTH_RADIUS_KM as RE,
    HAZARD_MULTIPLIER,
    IMPACT_WINDOW_DAYS,
    MAX_PROBABILITY,
    MID_BAND_RADII,
    NEAR_BAND_RADII,
    TSUNAMI_DIAMETER_THRESHOLD_KM,
)

logger = logging.getLogger(__name__)


class ApproachPolicy(Enum):
    """Which close-approach record drives the estimate."""

    NEAREST = "nearest"
    FIRST = "first"


class DistanceBand(Enum):
    """Miss-distance tier used for the probability formula."""

    NEAR = "near"  # d < 2 R
    MID = "mid"    # 2 R <= d < 10 R
    FAR = "far"    # d >= 10 R


@dataclass(frozen=True)
class RiskAssessment:
    """Collision risk and impact effects for one candidate body.

    Attributes:
        will_collide: Whether the miss distance is inside the impact radius.
        probability: Collision probability, capped at 0.95.
        impact_velocity_km_s: Relative velocity of the chosen approach in km/s.
        kinetic_energy_joules: Impact kinetic energy in J.
        crater_diameter_km: Crater diameter from the scaling law in km.
        tsunami_risk: Whether an impact would raise a tsunami warning.
        time_to_impact: Synthetic impact time (UTC), only set on collision.
        miss_distance_km: Miss distance of the chosen approach in km.
        diameter_km: Average estimated diameter in km.
        band: Distance band that produced the probability.
    """

    will_collide: bool
    probability: float            # 0-0.95
    impact_velocity_km_s: float
    kinetic_energy_joules: float
    crater_diameter_km: float
    tsunami_risk: bool
    time_to_impact: datetime | None
    miss_distance_km: float
    diameter_km: float
    band: DistanceBand


def distance_band(miss_distance_km: float) -> DistanceBand:
    """Classify a miss distance. Band edges belong to the upper band."""
    if miss_distance_km < RE * NEAR_BAND_RADII:
        return DistanceBand.NEAR
    elif miss_distance_km < RE * MID_BAND_RADII:
        return DistanceBand.MID
    else:
        return DistanceBand.FAR


def collision_probability(miss_distance_km: float, is_hazardous: bool = False) -> tuple[float, bool]:
    """
    Tiered collision probability for a single miss distance.

    Each band is a separate linear ramp with its own floor, so the curve is
    monotonically non-increasing inside a band and jumps at the band edges.

    Args:
        miss_distance_km: Miss distance in km (non-negative).
        is_hazardous: Whether the body is flagged potentially hazardous.

    Returns:
        Tuple of (probability, will_collide).
    """
    band = distance_band(miss_distance_km)

    if band is DistanceBand.NEAR:
        probability = max(0.1, 1 - miss_distance_km / (RE * 10))
        will_collide = miss_distance_km < RE * COLLISION_RADII
    elif band is DistanceBand.MID:
        probability = max(0.001, 0.1 - miss_distance_km / (RE * 100))
        will_collide = False
    else:
        probability = max(0.0001, 0.01 - miss_distance_km / (RE * 1000))
        will_collide = False

    # Hazardous bodies carry more orbital uncertainty
    if is_hazardous:
        probability *= HAZARD_MULTIPLIER

    return min(probability, MAX_PROBABILITY), will_collide


def probability_profile(distances_km: ArrayLike, is_hazardous: bool = False) -> NDArray[np.float64]:
    """Vectorised :func:`collision_probability` over many miss distances.

    Args:
        distances_km: Miss distances in km.
        is_hazardous: Whether to apply the hazard multiplier.

    Returns:
        Array of probabilities, same shape as ``distances_km``.
    """
    d = np.asarray(distances_km, dtype=np.float64)
    if np.any(~np.isfinite(d)) or np.any(d < 0):
        raise ValueError("distances_km must be non-negative and finite")

    near = np.maximum(0.1, 1 - d / (RE * 10))
    mid = np.maximum(0.001, 0.1 - d / (RE * 100))
    far = np.maximum(0.0001, 0.01 - d / (RE * 1000))

    probability = np.select(
        [d < RE * NEAR_BAND_RADII, d < RE * MID_BAND_RADII],
        [near, mid],
        default=far,
    )
    if is_hazardous:
        probability = probability * HAZARD_MULTIPLIER
    return np.minimum(probability, MAX_PROBABILITY)


def impact_mass_kg(diameter_km: float) -> float:
    """Mass of a uniform stony sphere of the given diameter."""
    radius_m = diameter_km * 500.0
    return (4.0 / 3.0) * math.pi * radius_m ** 3 * ASTEROID_DENSITY_KG_M3


def impact_energy_joules(diameter_km: float, velocity_km_s: float) -> float:
    """Kinetic energy E = 1/2 m v² in joules."""
    velocity_m_s = velocity_km_s * 1000.0
    return 0.5 * impact_mass_kg(diameter_km) * velocity_m_s ** 2


def crater_diameter_km(energy_joules: float) -> float:
    """Empirical crater scaling law: (E / 1e15)^0.25 · 1000 km."""
    return (energy_joules / CRATER_ENERGY_SCALE_J) ** CRATER_EXPONENT * CRATER_SCALE_KM


def select_approach(body: CandidateBody, policy: ApproachPolicy = ApproachPolicy.NEAREST) -> CloseApproach:
    """Pick the close-approach record that drives the estimate.

    Raises:
        MissingApproachData: If the body has no close-approach records.
    """
    approach = body.nearest_approach if policy is ApproachPolicy.NEAREST else body.first_approach
    if approach is None:
        logger.error("No close-approach data for %s", body.id)
        raise MissingApproachData(f"No close-approach data for {body.name} ({body.id})")
    return approach


def estimate(
    body: CandidateBody,
    *,
    now: datetime | None = None,
    rng: np.random.Generator | None = None,
    policy: ApproachPolicy = ApproachPolicy.NEAREST,
) -> RiskAssessment:
    """
    Estimate collision risk and impact effects for a candidate body.

    Args:
        body: Candidate asteroid with at least one close approach.
        now: Reference time for the synthetic time to impact (defaults to
            the current UTC time). Only read when an impact is predicted.
        rng: Random source for the time to impact offset (defaults to a
            fresh ``numpy.random.default_rng()``). Only read when an impact
            is predicted.
        policy: Close-approach selection policy.

    Returns:
        A fresh RiskAssessment.

    Raises:
        MissingApproachData: If the body has no close-approach records.
        InvalidOrbitalData: If velocity, miss distance or diameter are not
            non-negative finite numbers, or are so large that the impact
            energy is not finite.
    """
    approach = select_approach(body, policy)

    miss_distance_km = parse_quantity(approach.miss_distance_km, "miss distance")
    velocity_km_s = parse_quantity(approach.relative_velocity_km_s, "relative velocity")
    diameter_km = parse_quantity(body.diameter.average_km, "diameter")

    probability, will_collide = collision_probability(miss_distance_km, body.is_hazardous)

    try:
        kinetic_energy = impact_energy_joules(diameter_km, velocity_km_s)
        crater_km = crater_diameter_km(kinetic_energy)
    except OverflowError:
        kinetic_energy = crater_km = math.inf
    if not (math.isfinite(kinetic_energy) and math.isfinite(crater_km)):
        logger.error(
            "Impact energy overflow for %s (D=%r km, v=%r km/s)", body.id, diameter_km, velocity_km_s
        )
        raise InvalidOrbitalData(
            f"Impact energy out of range for {body.name} ({body.id}): "
            f"diameter {diameter_km!r} km, velocity {velocity_km_s!r} km/s"
        )
    tsunami_risk = diameter_km > TSUNAMI_DIAMETER_THRESHOLD_KM and will_collide

    time_to_impact = None
    if will_collide:
        if now is None:
            now = datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if rng is None:
            rng = np.random.default_rng()
        offset_days = float(rng.random()) * IMPACT_WINDOW_DAYS
        time_to_impact = now + timedelta(days=offset_days)

    logger.debug(
        "Risk estimate for %s: p=%.4f, collide=%s, E=%.3e J, miss=%.1f km",
        body.id, probability, will_collide, kinetic_energy, miss_distance_km,
    )
    return RiskAssessment(
        will_collide=will_collide,
        probability=probability,
        impact_velocity_km_s=velocity_km_s,
        kinetic_energy_joules=kinetic_energy,
        crater_diameter_km=crater_km,
        tsunami_risk=tsunami_risk,
        time_to_impact=time_to_impact,
        miss_distance_km=miss_distance_km,
        diameter_km=diameter_km,
        band=distance_band(miss_distance_km),
    )


def estimate_many(
    bodies: Iterable[CandidateBody],
    *,
    now: datetime | None = None,
    rng: np.random.Generator | None = None,
    policy: ApproachPolicy = ApproachPolicy.NEAREST,
) -> list[RiskAssessment]:
    """
    Batch estimate a sequence of candidate bodies.

    All estimates share one reference time, so times to impact are comparable.

    Returns:
        List of RiskAssessment objects, in input order.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    if rng is None:
        rng = np.random.default_rng()
    return [estimate(body, now=now, rng=rng, policy=policy) for body in bodies]
