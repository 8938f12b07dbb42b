"""
Request models for the feasibility API.

Wire names are camelCase (as sent by the web client); attributes are snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional, List


class CoordinatesModel(BaseModel):
    """Launch site coordinates in decimal degrees."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class AnalysisRequest(BaseModel):
    """Request model for the analyze-location endpoint."""
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    location: str = Field(..., min_length=1)
    coordinates: CoordinatesModel
    rocket_type: Literal["model", "industrial"] = Field(..., alias="rocketType")
    model_sub_type: Optional[Literal["hobby", "project"]] = Field(None, alias="modelSubType")


class WeatherRequest(BaseModel):
    """Request model for the analyze-weather endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    location_name: Optional[str] = Field(None, alias="locationName")


class ChatMessage(BaseModel):
    """One turn of the support conversation."""
    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Request model for the chat-support endpoint."""
    messages: List[ChatMessage]
