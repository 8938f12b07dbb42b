"""
Geographic Context Models.

Represents resolved geographic information from map coordinates.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal


class LocationContext(BaseModel):
    """Display information resolved from a map click."""
    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    display_name: str = Field(..., alias="displayName", description="Full place name shown in the UI")
    short_name: str = Field(..., alias="shortName", description="City, else country, else 'Your Location'")
    country_code: Optional[str] = Field(None, alias="countryCode", description="ISO 3166-1 alpha-2 country code (e.g., 'US')")
    country_name: Optional[str] = Field(None, alias="countryName", description="Full country name (e.g., 'United States')")
    resolution_mode: Literal["map-derived", "unresolved"] = Field(
        "unresolved",
        alias="resolutionMode",
        description="How the display name was determined"
    )
