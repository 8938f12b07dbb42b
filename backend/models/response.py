"""
Response models for the feasibility API.
"""

from pydantic import BaseModel, Field
from typing import Literal, List


class CategoryResultResponse(BaseModel):
    """One feasibility category."""
    level: Literal["high", "medium", "low"]
    description: str
    details: List[str] = Field(..., min_length=1)


class AnalysisResponse(BaseModel):
    """Complete feasibility report - all six categories, always."""
    resources: CategoryResultResponse
    government: CategoryResultResponse
    geography: CategoryResultResponse
    geopolitics: CategoryResultResponse
    timing: CategoryResultResponse
    practicality: CategoryResultResponse


class WeatherAnalysisResponse(BaseModel):
    """Narrative weather analysis from the AI gateway."""
    analysis: str


class ErrorResponse(BaseModel):
    """Error payload returned with every non-2xx status."""
    error: str
