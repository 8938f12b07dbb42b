"""
Reverse Geocoding Service.

Turns a map click into a human-readable place name using Nominatim
(OpenStreetMap). Falls back to the formatted coordinate pair when the
service is unreachable or returns nothing useful.
"""

import os
import logging
from typing import Optional

import requests

from backend.models.geo_context import LocationContext

logger = logging.getLogger(__name__)

NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
GEOCODE_TIMEOUT = float(os.getenv("GEOCODE_TIMEOUT", "5"))

# Nominatim usage policy requires an identifying User-Agent
_HEADERS = {"User-Agent": "RocketFeasibilityCalculator/1.0"}


def format_coordinates(lat: float, lng: float, precision: int = 4) -> str:
    return f"{lat:.{precision}f}, {lng:.{precision}f}"


def _unresolved(lat: float, lng: float) -> LocationContext:
    return LocationContext(
        lat=lat,
        lng=lng,
        display_name=format_coordinates(lat, lng),
        short_name="Your Location",
        resolution_mode="unresolved",
    )


def _text(address: dict, key: str) -> Optional[str]:
    value = address.get(key)
    return value if isinstance(value, str) and value else None


def reverse_geocode(
    lat: float,
    lng: float,
    session: Optional[requests.Session] = None,
) -> LocationContext:
    """
    Resolve a coordinate pair to a display name.

    Args:
        lat: Latitude
        lng: Longitude
        session: Optional requests session (a plain requests.get is used otherwise)

    Returns:
        LocationContext - resolution_mode is "unresolved" on any failure
    """
    http = session or requests
    try:
        response = http.get(
            f"{NOMINATIM_URL}/reverse",
            params={"format": "json", "lat": lat, "lon": lng},
            headers=_HEADERS,
            timeout=GEOCODE_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as e:
        logger.warning(f"Reverse geocoding failed for {lat},{lng}: {e}")
        return _unresolved(lat, lng)
    except ValueError as e:
        logger.warning(f"Reverse geocoding returned invalid JSON: {e}")
        return _unresolved(lat, lng)

    display_name = data.get("display_name") if isinstance(data, dict) else None
    if not display_name:
        logger.debug(f"No place found for coordinates: {lat}, {lng}")
        return _unresolved(lat, lng)

    address = data.get("address") or {}
    if not isinstance(display_name, str) or not isinstance(address, dict):
        logger.warning(f"Reverse geocoding returned a malformed place for {lat},{lng}")
        return _unresolved(lat, lng)

    country_code = _text(address, "country_code")
    country = _text(address, "country")

    return LocationContext(
        lat=lat,
        lng=lng,
        display_name=display_name,
        short_name=_text(address, "city") or country or "Your Location",
        country_code=country_code.upper() if country_code else None,
        country_name=country,
        resolution_mode="map-derived",
    )
