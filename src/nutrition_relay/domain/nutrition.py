"""Domain models for nutrition extraction."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypedDict

from pydantic import BaseModel, Field


class Sickness(StrEnum):
    """Condition tags used to tailor the analysis and key its output."""

    HIGH_BLOOD_PRESSURE = "high blood pressure"
    GOUT = "gout"
    DIABETES = "diabetes"
    HEART_DISEASE = "heart disease"
    OBESITY = "obesity"
    NONE = "none"


class RiskLevel(StrEnum):
    """Risk level the model assigns per condition."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class HighPurineIngredient(TypedDict):
    ingredient: str
    purineLevel: float  # noqa: N815


class NutritionFacts(TypedDict):
    """Nutrition facts as returned by the model's tool call.

    The shape is declared to the model but never validated locally.
    """

    sicknesses: list[str]
    kcal: float
    protein: float
    carbs: float
    fat: float
    sugar: float
    fiber: float
    sodium: float
    purines: float
    ingredients: list[str]
    highPurineIngredients: list[HighPurineIngredient]  # noqa: N815
    riskLevels: dict[str, str]  # noqa: N815
    recommendations: dict[str, list[str]]


# Facts when the model called the tool, otherwise the serialized raw response.
NutritionResult = NutritionFacts | str


@dataclass(frozen=True)
class NutritionExtraction:
    """A nutrition result tagged with whether the model called the tool.

    The tool arguments are returned as parsed, so ``result`` can be any JSON
    value when ``tool_called`` is true.
    """

    tool_called: bool
    result: NutritionResult | Any


class NutritionQuery(BaseModel):
    """Request payload for a nutrition analysis."""

    sicknesses: list[Sickness] = Field(min_length=1)
    image_url: str = Field(min_length=1)


class NutritionAnalysis(BaseModel):
    """API response wrapping either branch of a nutrition result."""

    tool_called: bool
    facts: Any = None
    raw_response: str | None = None

    @classmethod
    def from_extraction(cls, extraction: NutritionExtraction) -> "NutritionAnalysis":
        """Wrap an extraction, keeping the two shapes apart."""
        if extraction.tool_called:
            return cls(tool_called=True, facts=extraction.result)
        return cls(tool_called=False, raw_response=extraction.result)
