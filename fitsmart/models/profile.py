"""User profile models."""

from pydantic import Field, field_validator
from typing import Optional, List, Literal

from fitsmart.models.base import CamelModel


Sex = Literal["male", "female"]
Goal = Literal["lose", "maintain", "gain"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "veryActive"]
WorkoutLocation = Literal["home", "gym", "both"]
DietaryRestriction = Literal[
    "lactose", "gluten", "vegetarian", "vegan", "nuts", "seafood", "eggs", "soy", "none"
]


class OnboardingAnswers(CamelModel):
    """Answers collected by the onboarding questionnaire."""

    name: str = ""
    age: int = Field(gt=0, le=120)
    weight: float = Field(gt=0, le=500)  # kg
    height: float = Field(gt=0, le=300)  # cm
    sex: Sex
    goal: Goal = "maintain"
    activity_level: Optional[ActivityLevel] = None
    workout_location: WorkoutLocation = "both"
    dietary_restrictions: List[DietaryRestriction] = []
    allergies: Optional[str] = None
    meals_per_day: int = Field(3, ge=3, le=6)

    @field_validator("dietary_restrictions")
    @classmethod
    def _dedupe(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class UserProfile(OnboardingAnswers):
    """Onboarding answers plus the targets derived from them."""

    bmr: int
    tdee: int
    target_calories: int
    water_goal: int  # 250ml cups
    bmi: float

    class Config:
        frozen = True
