"""
Country Data Provider.

Resolves a coordinate pair to a CountryRecord using the REST Countries API.

Best-effort by contract: one attempt, bounded timeout, and every failure
(network, non-2xx, empty list, malformed payload) yields None. The
scoring engine treats a missing record as reduced confidence, never as an
error.
"""

import os
import logging
from typing import Optional

import requests

from data_models import Coordinates, CountryRecord

logger = logging.getLogger(__name__)

COUNTRY_API_URL = os.getenv("COUNTRY_API_URL", "https://restcountries.com/v3.1")
COUNTRY_LOOKUP_TIMEOUT = float(os.getenv("COUNTRY_LOOKUP_TIMEOUT", "5"))


class CountryDataProvider:
    """
    Looks up national metadata for a point on the map.

    No retries and no caching beyond the session's connection pool.
    """

    def __init__(
        self,
        base_url: str = COUNTRY_API_URL,
        timeout: float = COUNTRY_LOOKUP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "RocketFeasibilityCalculator/1.0"
        })

    def lookup(self, coords: Coordinates) -> Optional[CountryRecord]:
        """
        Fetch the country containing the given coordinates.

        Args:
            coords: Coordinates to resolve

        Returns:
            CountryRecord built from the first match, or None if unavailable
        """
        url = f"{self.base_url}/latlng/{coords.lat},{coords.lng}"

        try:
            response = self.session.get(url, timeout=self.timeout)
            if not response.ok:
                logger.warning(f"Country lookup returned HTTP {response.status_code} for {coords.lat},{coords.lng}")
                return None

            countries = response.json()
            if not isinstance(countries, list) or len(countries) == 0:
                logger.warning(f"Country lookup returned no match for {coords.lat},{coords.lng}")
                return None

            record = CountryRecord.from_api(countries[0])
            logger.debug(f"Resolved {coords.lat},{coords.lng} to {record.name or 'unnamed country'}")
            return record

        except requests.exceptions.RequestException as e:
            logger.warning(f"Network error during country lookup: {e}")
            return None
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Malformed country lookup payload: {e}")
            return None

    def close(self):
        self.session.close()
