"""
Analysis Service Module.

Aggregates the six feasibility categories into one report.
Used by both CLI (main.py) and API (api.py).
"""

import logging
from typing import Optional, Union

from data_models import (
    AnalysisReport, Coordinates, CountryRecord, ModelSubType, RocketType,
)
from feasibility_engine import build_report
from backend.services.country_lookup import CountryDataProvider

logger = logging.getLogger(__name__)


def parse_rocket_type(value: Union[str, RocketType]) -> RocketType:
    """Parse rocket type string (case-insensitive)."""
    if isinstance(value, RocketType):
        return value
    try:
        return RocketType(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown rocket type: {value}") from None


def parse_model_sub_type(value: Optional[Union[str, ModelSubType]]) -> Optional[ModelSubType]:
    """Parse model sub-type string. None and empty strings stay None."""
    if value is None or isinstance(value, ModelSubType):
        return value
    if not str(value).strip():
        return None
    try:
        return ModelSubType(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown model sub-type: {value}") from None


def _fetch_country(provider: CountryDataProvider, coords: Coordinates) -> Optional[CountryRecord]:
    # Any provider failure degrades to "no country data"
    try:
        return provider.lookup(coords)
    except Exception as e:
        logger.warning(f"Country provider failed, continuing without country data: {e}")
        return None


def run_analysis(
    location: str,
    coordinates: Coordinates,
    rocket_type: Union[str, RocketType],
    model_sub_type: Optional[Union[str, ModelSubType]] = None,
    provider: Optional[CountryDataProvider] = None,
) -> AnalysisReport:
    """
    Run a complete feasibility analysis for one location.

    Calls the country provider exactly once. A failed lookup never fails
    the analysis; the report is always complete.

    Args:
        location: Display name of the selected location (for logging)
        coordinates: Launch site coordinates
        rocket_type: RocketType or its string value
        model_sub_type: ModelSubType or its string value (model rockets only)
        provider: Country data provider (defaults to the REST Countries client)

    Returns:
        AnalysisReport with all six categories

    Raises:
        ValueError: If rocket_type or model_sub_type is not recognized
    """
    rocket = parse_rocket_type(rocket_type)
    sub_type = parse_model_sub_type(model_sub_type)

    logger.info(f"Analyzing location: {location} ({coordinates.lat}, {coordinates.lng}) for {rocket.value} rocket")

    owns_provider = provider is None
    provider = provider or CountryDataProvider()
    try:
        country = _fetch_country(provider, coordinates)
    finally:
        if owns_provider:
            provider.close()

    if country is None:
        logger.info("No country data available - scoring with reduced confidence")

    return build_report(coordinates, country, rocket, sub_type)
