"""NASA NeoWs (Near Earth Object Web Service) client.

Fetches the close-approach feed and turns it into a bounded list of
CandidateBody records for analysis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

import requests

from neoimpact.core.bodies import CandidateBody
from neoimpact.errors import InvalidOrbitalData, ProviderFetchFailure
from neoimpact.utils.constants import (
    DEFAULT_API_KEY,
    DEFAULT_CANDIDATE_LIMIT,
    DEFAULT_FEED_WINDOW_DAYS,
    DEFAULT_REQUEST_TIMEOUT_S,
    NEOWS_BASE_URL,
)

logger = logging.getLogger(__name__)


def _magnitude_key(record: dict) -> tuple[bool, float]:
    """Sort key on absolute magnitude; missing or non-numeric H sorts last."""
    magnitude = record.get("absolute_magnitude_h")
    if isinstance(magnitude, bool) or not isinstance(magnitude, (int, float)):
        return False, 0.0
    return True, float(magnitude)


@dataclass
class NeoWsClient:
    """Client for the NASA NeoWs REST API.

    A free key is available at https://api.nasa.gov; ``DEMO_KEY`` works with
    tight rate limits.

    Attributes:
        api_key: NASA API key.
        base_url: NeoWs base URL.
        timeout: Per-request timeout in seconds.
    """

    api_key: str = DEFAULT_API_KEY
    base_url: str = NEOWS_BASE_URL
    timeout: float = DEFAULT_REQUEST_TIMEOUT_S
    _session: requests.Session = field(default_factory=requests.Session, repr=False)

    def _request(self, path: str, params: dict | None = None) -> dict:
        """Make a GET request and decode the JSON body.

        Args:
            path: Path relative to ``base_url``.
            params: Extra query parameters.

        Returns:
            Decoded JSON object.

        Raises:
            ProviderFetchFailure: On transport errors, HTTP error status, or a
                body that is not a JSON object.
        """
        url = f"{self.base_url}{path}"
        query = {"api_key": self.api_key, **(params or {})}

        try:
            response = self._session.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.error("NeoWs request to %s failed: %s", url, e)
            raise ProviderFetchFailure(f"Failed to fetch asteroid data: {e}") from e
        except ValueError as e:
            logger.error("NeoWs returned invalid JSON from %s", url)
            raise ProviderFetchFailure(f"Invalid JSON from asteroid feed: {e}") from e

        if not isinstance(payload, dict):
            raise ProviderFetchFailure("Unexpected asteroid feed payload")
        return payload

    def fetch_feed(self, start_date: date, end_date: date) -> dict:
        """Fetch the raw close-approach feed for a date window.

        Args:
            start_date: First day of the window.
            end_date: Last day of the window (NeoWs caps windows at 7 days).

        Returns:
            Raw feed JSON.

        Raises:
            ProviderFetchFailure: If the request fails.
        """
        return self._request(
            "/feed",
            {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )

    def fetch_candidates(
        self,
        *,
        days: int = DEFAULT_FEED_WINDOW_DAYS,
        limit: int = DEFAULT_CANDIDATE_LIMIT,
        today: date | None = None,
    ) -> list[CandidateBody]:
        """Fetch the recent feed and return the top candidates.

        Objects from every day of the window are pooled, ordered by absolute
        magnitude (highest H first) and truncated to ``limit``.

        Args:
            days: Look-back window in days.
            limit: Maximum number of candidates returned.
            today: End of the window (defaults to the current date).

        Returns:
            List of parsed candidates.

        Raises:
            ProviderFetchFailure: If the request fails or the feed has no
                ``near_earth_objects`` mapping.
        """
        end_date = today or date.today()
        start_date = end_date - timedelta(days=days)
        payload = self.fetch_feed(start_date, end_date)

        by_date = payload.get("near_earth_objects")
        if not isinstance(by_date, dict):
            logger.error("Feed response has no near_earth_objects mapping")
            raise ProviderFetchFailure("Feed response has no near_earth_objects")

        records: list[dict] = []
        for day, entries in by_date.items():
            if entries is None:
                continue
            if not isinstance(entries, list):
                logger.error("Feed entry for %s is not a list: %r", day, type(entries).__name__)
                raise ProviderFetchFailure(f"Malformed feed entry for {day}")
            for record in entries:
                if not isinstance(record, dict):
                    logger.warning("Skipping non-object NEO record on %s: %r", day, record)
                    continue
                records.append(record)

        records.sort(key=_magnitude_key, reverse=True)

        candidates: list[CandidateBody] = []
        for record in records[:limit]:
            try:
                body = CandidateBody.from_neows(record)
            except InvalidOrbitalData as e:
                logger.warning("Skipping malformed NEO record %r: %s", record.get("id"), e)
                continue
            if not body.close_approaches:
                logger.warning("Skipping NEO %s: no close-approach data", body.id)
                continue
            candidates.append(body)

        logger.debug("Fetched %d candidates (%d in feed)", len(candidates), len(records))
        return candidates

    def lookup(self, asteroid_id: str) -> CandidateBody:
        """Fetch a single body by NeoWs id.

        Args:
            asteroid_id: NeoWs object id.

        Returns:
            The parsed body, with its full close-approach history.

        Raises:
            ProviderFetchFailure: If the request fails or the record is
                malformed.
        """
        payload = self._request(f"/neo/{asteroid_id}")
        try:
            return CandidateBody.from_neows(payload)
        except InvalidOrbitalData as e:
            raise ProviderFetchFailure(f"Malformed record for {asteroid_id}: {e}") from e
