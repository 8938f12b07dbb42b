"""
Location Feasibility Scoring Engine.

Classifies six independent feasibility categories for a launch site from
its coordinates, a best-effort country record and the rocket type.

CRITICAL PRINCIPLES:
- Pure and deterministic - no I/O, no side effects
- Total - every input combination yields a result
- A missing country record is a valid input, NOT an error
- Categories are independent - never averaged or merged

Country data is a COARSE PROXY (UN membership stands in for institutional
maturity). Results are indicative, not a regulatory determination.
"""

from typing import List, Optional

from data_models import (
    AnalysisReport, CategoryResult, Coordinates, CountryRecord,
    FeasibilityLevel, ModelSubType, RocketType,
)

# Latitude bands (absolute degrees)
EQUATORIAL_RESOURCE_BAND_DEG = 30.0
NEAR_EQUATORIAL_BAND_DEG = 5.0
POLAR_BAND_DEG = 60.0
TROPICAL_BAND_DEG = 23.5

# Population density thresholds (people per km²)
LOW_DENSITY_PER_KM2 = 50.0
HIGH_DENSITY_PER_KM2 = 200.0


def _is_un_member(country: Optional[CountryRecord]) -> bool:
    return country is not None and country.un_member


def _is_recognized_state(country: Optional[CountryRecord]) -> bool:
    return country is not None and country.un_member and country.independent


def analyze_resources(
    coords: Coordinates,
    country: Optional[CountryRecord],
    rocket_type: RocketType,
) -> CategoryResult:
    """
    Resources & availability.

    Industrial launches need a national aerospace base; hobby parts ship
    everywhere, so model rockets do not depend on location.

    Args:
        coords: Launch site coordinates
        country: Country record, or None if the lookup failed
        rocket_type: RocketType

    Returns:
        CategoryResult
    """
    details: List[str] = []

    if rocket_type == RocketType.INDUSTRIAL:
        if _is_un_member(country):
            level = FeasibilityLevel.HIGH
            details.append("Country has established aerospace infrastructure")
            details.append("Industrial suppliers and contractors available")
        else:
            level = FeasibilityLevel.LOW
            details.append("Limited aerospace industry presence")
            details.append("May require importing specialized components")
    else:
        level = FeasibilityLevel.HIGH
        details.append("Basic hobby rocket materials widely available online")
        details.append("Standard motors and parts can be shipped internationally")

    # Applies to both branches
    if abs(coords.lat) < EQUATORIAL_RESOURCE_BAND_DEG:
        details.append("Equatorial location advantageous for orbital launches")

    description = "Good resource accessibility" if level == FeasibilityLevel.HIGH else "Limited local resources"
    return CategoryResult(level=level, description=description, details=tuple(details))


def analyze_government(
    country: Optional[CountryRecord],
    rocket_type: RocketType,
) -> CategoryResult:
    """Government & legality. Sovereignty plus UN membership proxies a launch licensing framework."""
    if rocket_type == RocketType.INDUSTRIAL:
        if _is_recognized_state(country):
            level = FeasibilityLevel.MEDIUM
            details = (
                "Regulatory framework exists for space activities",
                "Launch licenses available through national space agency",
                "Environmental impact assessment required",
                "Airspace coordination with aviation authorities needed",
            )
        else:
            level = FeasibilityLevel.LOW
            details = (
                "Complex regulatory environment",
                "May require international permits",
            )
    else:
        level = FeasibilityLevel.HIGH
        details = (
            "Model rocket launches typically permitted with basic safety compliance",
            "Check local aviation authority for altitude restrictions",
            "Notify nearby airports if launching near controlled airspace",
        )

    description = "Permissive regulations" if level == FeasibilityLevel.HIGH else "Permits required"
    return CategoryResult(level=level, description=description, details=details)


def analyze_geography(
    coords: Coordinates,
    country: Optional[CountryRecord],
) -> CategoryResult:
    """
    Geographical status.

    Rules are applied in order and each one overwrites the level set
    before it: coastal access first, then population density. A dense
    coastal country therefore ends at MEDIUM, not HIGH.

    Args:
        coords: Launch site coordinates
        country: Country record, or None if the lookup failed

    Returns:
        CategoryResult
    """
    level = FeasibilityLevel.MEDIUM
    details: List[str] = []

    is_coastal = country is not None and country.landlocked is False
    density = country.population_density if country is not None else 0.0

    if is_coastal:
        details.append("Coastal location provides downrange safety zones")
        level = FeasibilityLevel.HIGH
    else:
        details.append("Landlocked location requires careful trajectory planning")

    if density < LOW_DENSITY_PER_KM2:
        details.append("Low population density reduces safety concerns")
        level = FeasibilityLevel.HIGH
    elif density > HIGH_DENSITY_PER_KM2:
        details.append("High population density requires careful site selection")
        level = FeasibilityLevel.MEDIUM

    # Informational only, level unchanged
    if abs(coords.lat) < NEAR_EQUATORIAL_BAND_DEG:
        details.append("Near-equatorial location optimal for orbital launches")
    elif abs(coords.lat) > POLAR_BAND_DEG:
        details.append("High latitude suitable for polar orbits")

    description = "Favorable geography" if level == FeasibilityLevel.HIGH else "Geographic constraints exist"
    return CategoryResult(level=level, description=description, details=tuple(details))


def analyze_geopolitics(country: Optional[CountryRecord]) -> CategoryResult:
    """Geopolitical status. Missing data is a soft risk, so this never returns LOW."""
    if _is_recognized_state(country):
        return CategoryResult(
            level=FeasibilityLevel.HIGH,
            description="Stable political environment",
            details=(
                "Stable governance structure",
                "Member of international space treaties",
                "Technology transfer agreements possible",
            ),
        )
    return CategoryResult(
        level=FeasibilityLevel.MEDIUM,
        description="Some geopolitical considerations",
        details=(
            "May face international cooperation challenges",
            "Technology export controls may apply",
        ),
    )


def analyze_timing(coords: Coordinates) -> CategoryResult:
    """
    Best time to launch.

    Always MEDIUM - timing informs planning but never gates feasibility.
    Only the latitude matters; the equator itself gets southern guidance.
    """
    if coords.lat > 0:
        details = [
            "Best launch windows: April-May and September-October",
            "Avoid winter months due to harsh weather",
            "Summer offers good visibility but may have storms",
        ]
    else:
        details = [
            "Best launch windows: October-November and March-April",
            "Avoid June-August winter storms",
            "Spring and autumn offer optimal conditions",
        ]

    if abs(coords.lat) < TROPICAL_BAND_DEG:
        details.append("Monitor monsoon and cyclone seasons")

    return CategoryResult(
        level=FeasibilityLevel.MEDIUM,
        description="Seasonal planning recommended",
        details=tuple(details),
    )


def analyze_practicality(
    rocket_type: RocketType,
    model_sub_type: Optional[ModelSubType],
    country: Optional[CountryRecord],
) -> CategoryResult:
    """
    Practicality: timeline, budget and team size.

    Args:
        rocket_type: RocketType
        model_sub_type: ModelSubType for model rockets (ignored for industrial).
            None falls back to the project figures.
        country: Country record, or None if the lookup failed

    Returns:
        CategoryResult
    """
    if rocket_type == RocketType.INDUSTRIAL:
        details = [
            "Estimated timeline: 18-36 months for first launch",
            "Budget: $5M-$50M depending on payload requirements",
            "Team: 30-50 engineers and technicians required",
            "Regulatory approval: 6-12 months",
        ]
        if _is_un_member(country):
            details.append("Access to international launch service providers")
        return CategoryResult(
            level=FeasibilityLevel.MEDIUM,
            description="Feasible with proper planning",
            details=tuple(details),
        )

    if model_sub_type == ModelSubType.HOBBY:
        timeline, budget, team = "1-2 weeks", "100-500", "Can be done solo"
    else:
        timeline, budget, team = "2-4 weeks", "500-2,000", "Team of 2-5 people recommended"

    return CategoryResult(
        level=FeasibilityLevel.HIGH,
        description="Highly practical",
        details=(
            f"Timeline: {timeline} to first launch",
            f"Budget: ${budget}",
            team,
            "Minimal regulatory requirements for low-power rockets",
        ),
    )


def build_report(
    coords: Coordinates,
    country: Optional[CountryRecord],
    rocket_type: RocketType,
    model_sub_type: Optional[ModelSubType] = None,
) -> AnalysisReport:
    """Run every category and assemble the complete report."""
    return AnalysisReport(
        resources=analyze_resources(coords, country, rocket_type),
        government=analyze_government(country, rocket_type),
        geography=analyze_geography(coords, country),
        geopolitics=analyze_geopolitics(country),
        timing=analyze_timing(coords),
        practicality=analyze_practicality(rocket_type, model_sub_type, country),
    )
