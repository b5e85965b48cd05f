"""Candidate near-Earth bodies and their close-approach records.

This module provides the immutable input records consumed by the risk
estimator, and the parser that builds them from raw NeoWs JSON.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from neoimpact.errors import InvalidOrbitalData

logger = logging.getLogger(__name__)


def parse_quantity(value: Any, field_name: str) -> float:
    """Parse a non-negative finite number.

    NeoWs ships most numbers as strings, so both strings and numbers are
    accepted.

    Args:
        value: Raw value (string or number).
        field_name: Name used in the error message.

    Returns:
        The value as a float.

    Raises:
        InvalidOrbitalData: If the value is missing, not numeric, negative,
            NaN or infinite.
    """
    if isinstance(value, bool):
        logger.error("Invalid %s: %r", field_name, value)
        raise InvalidOrbitalData(f"Invalid {field_name}: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.error("Invalid %s: %r", field_name, value)
        raise InvalidOrbitalData(f"Invalid {field_name}: {value!r}") from None

    if not math.isfinite(number) or number < 0:
        logger.error("Invalid %s: %r", field_name, value)
        raise InvalidOrbitalData(f"Invalid {field_name}: {value!r}")
    return number


@dataclass(frozen=True)
class DiameterRange:
    """Estimated diameter bounds of a body.

    Attributes:
        min_km: Lower diameter estimate in km.
        max_km: Upper diameter estimate in km.
    """

    min_km: float
    max_km: float

    def __post_init__(self) -> None:
        low = parse_quantity(self.min_km, "diameter min")
        high = parse_quantity(self.max_km, "diameter max")
        if high < low:
            logger.error("Diameter max %r below min %r", self.max_km, self.min_km)
            raise InvalidOrbitalData(
                f"Diameter max {self.max_km!r} is below min {self.min_km!r}"
            )
        object.__setattr__(self, "min_km", low)
        object.__setattr__(self, "max_km", high)

    @property
    def average_km(self) -> float:
        return (self.min_km + self.max_km) / 2


@dataclass(frozen=True)
class CloseApproach:
    """A recorded pass of a body near a planet.

    Attributes:
        epoch: Time of closest approach (UTC).
        relative_velocity_km_s: Relative velocity in km/s.
        miss_distance_km: Miss distance in km.
        orbiting_body: Body being approached.
    """

    epoch: datetime
    relative_velocity_km_s: float
    miss_distance_km: float
    orbiting_body: str = "Earth"

    @classmethod
    def from_neows(cls, record: dict) -> CloseApproach:
        """Parse one ``close_approach_data`` entry.

        Raises:
            InvalidOrbitalData: If a required field is missing or malformed.
        """
        try:
            epoch_ms = record["epoch_date_close_approach"]
            velocity = record["relative_velocity"]["kilometers_per_second"]
            distance = record["miss_distance"]["kilometers"]
        except (KeyError, TypeError) as e:
            logger.error("Close approach record missing field: %s", e)
            raise InvalidOrbitalData(f"Close approach record missing field: {e}") from e

        epoch_ms = parse_quantity(epoch_ms, "close approach epoch")
        return cls(
            epoch=datetime.fromtimestamp(epoch_ms / 1000.0, tz=timezone.utc),
            relative_velocity_km_s=parse_quantity(velocity, "relative velocity"),
            miss_distance_km=parse_quantity(distance, "miss distance"),
            orbiting_body=record.get("orbiting_body") or "Earth",
        )


@dataclass(frozen=True)
class CandidateBody:
    """A near-Earth asteroid offered for analysis.

    Attributes:
        id: Stable NeoWs identifier.
        name: Display name.
        diameter: Estimated diameter range.
        close_approaches: Approach records in feed order.
        is_hazardous: NeoWs "potentially hazardous" classification.
        absolute_magnitude_h: Absolute magnitude (H), if known.
        orbit_class: Orbit class label (e.g. "APO"), if known.
    """

    id: str
    name: str
    diameter: DiameterRange
    close_approaches: tuple[CloseApproach, ...]
    is_hazardous: bool
    absolute_magnitude_h: float | None = None
    orbit_class: str | None = None

    @property
    def first_approach(self) -> CloseApproach | None:
        return self.close_approaches[0] if self.close_approaches else None

    @property
    def nearest_approach(self) -> CloseApproach | None:
        if not self.close_approaches:
            return None
        return min(self.close_approaches, key=lambda a: a.miss_distance_km)

    @classmethod
    def from_neows(cls, record: dict) -> CandidateBody:
        """Parse a raw NeoWs near-earth-object record.

        Args:
            record: One entry of ``near_earth_objects`` (feed) or a lookup
                response.

        Returns:
            A parsed CandidateBody.

        Raises:
            InvalidOrbitalData: If required fields are missing or malformed.
        """
        try:
            body_id = str(record["id"])
            name = str(record["name"])
            diameter_km = record["estimated_diameter"]["kilometers"]
            diameter = DiameterRange(
                min_km=parse_quantity(diameter_km["estimated_diameter_min"], "diameter min"),
                max_km=parse_quantity(diameter_km["estimated_diameter_max"], "diameter max"),
            )
            hazardous = record["is_potentially_hazardous_asteroid"]
        except (KeyError, TypeError) as e:
            logger.error("NEO record missing field: %s", e)
            raise InvalidOrbitalData(f"NEO record missing field: {e}") from e

        if not isinstance(hazardous, bool):
            logger.error("Invalid hazard flag for %s: %r", body_id, hazardous)
            raise InvalidOrbitalData(f"Invalid hazard flag for {body_id}: {hazardous!r}")

        approaches = tuple(
            CloseApproach.from_neows(a) for a in record.get("close_approach_data") or []
        )

        magnitude = record.get("absolute_magnitude_h")
        if magnitude is not None:
            try:
                magnitude = float(magnitude)
            except (TypeError, ValueError):
                logger.error("Invalid absolute magnitude for %s: %r", body_id, magnitude)
                raise InvalidOrbitalData(
                    f"Invalid absolute magnitude for {body_id}: {magnitude!r}"
                ) from None

        orbit_class = (
            (record.get("orbital_data") or {}).get("orbit_class") or {}
        ).get("orbit_class_type")

        logger.debug("Parsed NEO %s (%d approaches)", body_id, len(approaches))

        return cls(
            id=body_id,
            name=name,
            diameter=diameter,
            close_approaches=approaches,
            is_hazardous=hazardous,
            absolute_magnitude_h=magnitude,
            orbit_class=orbit_class,
        )
