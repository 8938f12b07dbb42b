"""
Backend models package.
"""

from backend.models.request import AnalysisRequest, CoordinatesModel, WeatherRequest, ChatRequest, ChatMessage
from backend.models.response import AnalysisResponse, CategoryResultResponse, WeatherAnalysisResponse, ErrorResponse
from backend.models.geo_context import LocationContext

__all__ = [
    "AnalysisRequest",
    "CoordinatesModel",
    "WeatherRequest",
    "ChatRequest",
    "ChatMessage",
    "AnalysisResponse",
    "CategoryResultResponse",
    "WeatherAnalysisResponse",
    "ErrorResponse",
    "LocationContext",
]
