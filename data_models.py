"""
Data models for the rocket launch feasibility calculator.

This module defines the core data structures used throughout the system.
All models are request-scoped value objects: constructed when a request
arrives, never mutated, discarded once the response is serialized.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class FeasibilityLevel(Enum):
    """Coarse classification of one analysis category.

    There is deliberately no ordering between levels. Categories are
    reported side by side, never averaged.
    """
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RocketType(Enum):
    """Rocket classes supported by the calculator."""
    MODEL = "model"  # Hobby and small-scale projects
    INDUSTRIAL = "industrial"  # Commercial / professional launch systems


class ModelSubType(Enum):
    """Model rocket categories."""
    HOBBY = "hobby"  # Personal recreational launches
    PROJECT = "project"  # Educational or collaborative builds


# Fixed category keys, in report order
CATEGORY_KEYS: Tuple[str, ...] = (
    "resources",
    "government",
    "geography",
    "geopolitics",
    "timing",
    "practicality",
)

CATEGORY_TITLES: Dict[str, str] = {
    "resources": "Resources & Availability",
    "government": "Government & Legality",
    "geography": "Geographical Status",
    "geopolitics": "Geopolitical Status",
    "timing": "Best Time",
    "practicality": "Practicality",
}


@dataclass(frozen=True)
class Coordinates:
    """A point on the globe in decimal degrees."""
    lat: float  # [-90, 90]
    lng: float  # [-180, 180]

    def __post_init__(self):
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude {self.lat} outside [-90, 90]")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude {self.lng} outside [-180, 180]")


@dataclass(frozen=True)
class CountryRecord:
    """
    Snapshot of national metadata for the selected location.

    Used only as a coarse proxy for regulatory and industrial maturity.
    `landlocked` stays None when the source does not say; an unknown
    coastline is never treated as coastal.
    """
    un_member: bool = False
    independent: bool = False
    landlocked: Optional[bool] = None
    population: int = 0
    area: float = 0.0
    name: Optional[str] = None
    country_code: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "CountryRecord":
        """
        Build a record from one element of the country API response.

        Args:
            payload: Country object as returned by the REST Countries API

        Returns:
            CountryRecord

        Raises:
            ValueError: If the payload is not a mapping or carries
                non-numeric population/area values
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"Country payload must be an object, got {type(payload).__name__}")

        landlocked = payload.get("landlocked")
        names = payload.get("name")
        common_name = names.get("common") if isinstance(names, Mapping) else None

        try:
            population = int(payload.get("population") or 0)
            area = float(payload.get("area") or 0.0)
        except (TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"Malformed population/area in country payload: {e}") from e

        return cls(
            un_member=payload.get("unMember") is True,
            independent=payload.get("independent") is True,
            landlocked=landlocked if isinstance(landlocked, bool) else None,
            population=max(0, population),
            area=max(0.0, area),
            name=common_name,
            country_code=payload.get("cca2"),
        )

    @property
    def population_density(self) -> float:
        """People per km², 0 when the area is unknown."""
        return self.population / self.area if self.area > 0 else 0.0


@dataclass(frozen=True)
class CategoryResult:
    """Outcome of one feasibility category. `details` is never empty."""
    level: FeasibilityLevel
    description: str
    details: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.details:
            raise ValueError("CategoryResult.details must contain at least one entry")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "description": self.description,
            "details": list(self.details),
        }


@dataclass(frozen=True)
class AnalysisReport:
    """Complete feasibility report. All six categories are always present."""
    resources: CategoryResult
    government: CategoryResult
    geography: CategoryResult
    geopolitics: CategoryResult
    timing: CategoryResult
    practicality: CategoryResult

    def categories(self) -> Dict[str, CategoryResult]:
        return {key: getattr(self, key) for key in CATEGORY_KEYS}

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Wire form: {category: {level, description, details}}."""
        return {key: result.to_dict() for key, result in self.categories().items()}
