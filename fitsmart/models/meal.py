"""Meal, meal plan and photo analysis models."""

import math
import re
from typing import Any, Optional, List

from pydantic import Field, field_validator

from fitsmart.models.base import CamelModel


DEFAULT_FOOD_NAME = "Photographed meal"

_NUMBER = re.compile(r"-?\d+(?:[.,]\d+)?")


class MealPlanEntry(CamelModel):
    """One slot of the generated daily meal plan."""

    name: str
    time: str
    calories: int
    protein: int
    carbs: int
    fats: int
    foods: List[str] = []


class MealAnalysisRequest(CamelModel):
    """Photo submitted for calorie estimation."""

    image: str = Field(min_length=1)
    dietary_restrictions: List[str] = []


def _leading_number(value: Any) -> float:
    """Best-effort number for display-only fields; 0 when nothing usable."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _NUMBER.search(str(value))
        if not match:
            return 0.0
        number = float(match.group().replace(",", "."))
    return number if math.isfinite(number) else 0.0


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict):
        return str(value.get("name") or value.get("item") or "")
    return str(value).strip()


class BreakdownItem(CamelModel):
    """Per-item estimate returned by the vision model."""

    item: str = ""
    portion: str = ""
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0

    @field_validator("item", "portion", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("calories", "protein", "carbs", "fats", mode="before")
    @classmethod
    def _as_number(cls, value: Any) -> float:
        return _leading_number(value)


class MealAnalysisResult(CamelModel):
    """Validated nutrition estimate for a photographed meal."""

    food_name: str = DEFAULT_FOOD_NAME
    calories: int = Field(ge=0)
    protein: int = Field(ge=0)
    carbs: int = Field(ge=0)
    fats: int = Field(ge=0)
    ingredients: List[str] = []
    portion_size: str = ""
    breakdown: List[BreakdownItem] = []

    @field_validator("food_name", mode="before")
    @classmethod
    def _food_name(cls, value: Any) -> str:
        return _text(value) or DEFAULT_FOOD_NAME

    @field_validator("portion_size", mode="before")
    @classmethod
    def _portion_size(cls, value: Any) -> str:
        return _text(value)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _ingredients(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            value = value.split(",")
        elif not isinstance(value, (list, tuple)):
            return []
        return [name for name in (_text(v) for v in value) if name]

    @field_validator("breakdown", mode="before")
    @classmethod
    def _breakdown(cls, value: Any) -> List[Any]:
        if not isinstance(value, (list, tuple)):
            return []
        return [item for item in value if isinstance(item, dict)]



class MealLogCreate(CamelModel):
    """Data for logging a meal manually."""

    name: str = Field(min_length=1)
    calories: int = Field(ge=0)
    protein: int = Field(0, ge=0)
    carbs: int = Field(0, ge=0)
    fats: int = Field(0, ge=0)


class MealLogEntry(CamelModel):
    """Meal logged today."""

    id: int
    name: str
    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fats: int = 0
    time: str
    image_url: Optional[str] = None
    analyzed_by_ai: bool = Field(False, alias="analyzedByAI")
