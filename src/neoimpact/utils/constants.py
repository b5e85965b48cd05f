from __future__ import annotations

"""Physical constants, risk thresholds and feed defaults.

Distances in km, velocities in km/s, energies in joules unless otherwise noted.
"""

import os

# --- Earth parameters ---
EARTH_RADIUS_KM: float = 6371.0
"""Mean radius of Earth in km."""

# --- Distance bands (multiples of Earth radius) ---
NEAR_BAND_RADII: float = 2.0
"""Upper edge (exclusive) of the close-approach band."""

MID_BAND_RADII: float = 10.0
"""Upper edge (exclusive) of the moderate-approach band."""

COLLISION_RADII: float = 1.5
"""Miss distances below this many Earth radii are treated as an impact."""

# --- Probability shaping ---
HAZARD_MULTIPLIER: float = 2.0
"""Probability multiplier for potentially hazardous asteroids."""

MAX_PROBABILITY: float = 0.95
"""Hard cap on any reported collision probability."""

# --- Impact physics ---
ASTEROID_DENSITY_KG_M3: float = 2500.0
"""Assumed bulk density of a stony asteroid in kg/m³."""

CRATER_ENERGY_SCALE_J: float = 1e15
"""Reference energy for the crater scaling law in J."""

CRATER_EXPONENT: float = 0.25
"""Exponent of the crater scaling law."""

CRATER_SCALE_KM: float = 1000.0
"""Crater diameter at the reference energy in km."""

TSUNAMI_DIAMETER_THRESHOLD_KM: float = 100.0
"""Bodies wider than this (km) trigger a tsunami warning on impact."""

IMPACT_WINDOW_DAYS: float = 365.0
"""Synthetic time-to-impact is drawn uniformly within this window."""

# --- Severity thresholds ---
EXTINCTION_ENERGY_J: float = 1e18
"""Energies above this are classed as extinction level."""

REGIONAL_ENERGY_J: float = 1e15
"""Energies above this are classed as regional."""

# --- NeoWs feed ---
NEOWS_BASE_URL: str = "https://api.nasa.gov/neo/rest/v1"
"""NASA Near Earth Object Web Service base URL."""

DEFAULT_API_KEY: str = os.environ.get("NASA_API_KEY", "DEMO_KEY")
"""API key, overridable through the NASA_API_KEY environment variable."""

DEFAULT_FEED_WINDOW_DAYS: int = 7
"""Default look-back window for the feed in days."""

DEFAULT_CANDIDATE_LIMIT: int = 20
"""Maximum number of candidates kept from a feed response."""

DEFAULT_REQUEST_TIMEOUT_S: float = 10.0
"""HTTP timeout for feed requests in seconds."""
