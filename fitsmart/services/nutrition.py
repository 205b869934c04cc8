"""Nutrition calculations and formulas."""

import math
from types import MappingProxyType
from typing import Iterable, List, Optional

from fitsmart.models.profile import OnboardingAnswers, UserProfile


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


class NutritionCalculator:
    """Calculate BMR, TDEE, calorie target, water goal and BMI."""

    # Activity level multipliers
    ACTIVITY_MULTIPLIERS = MappingProxyType({
        "sedentary": 1.2,      # Little or no exercise
        "light": 1.375,         # Light exercise 1-3 days/week
        "moderate": 1.55,       # Moderate exercise 3-5 days/week
        "active": 1.725,        # Hard exercise 6-7 days/week
        "veryActive": 1.9,      # Very hard exercise, physical job
    })
    DEFAULT_MULTIPLIER = 1.2

    # Goal adjustments (kcal added to TDEE)
    GOAL_ADJUSTMENTS = MappingProxyType({
        "lose": -500,
        "maintain": 0,
        "gain": 300,
    })

    WATER_ML_PER_KG = 35
    CUP_ML = 250

    @staticmethod
    def _check_body(weight_kg: float, height_cm: float, age: Optional[int] = None) -> None:
        if weight_kg <= 0 or height_cm <= 0:
            raise ValueError("weight and height must be positive")
        if age is not None and age <= 0:
            raise ValueError("age must be positive")

    @classmethod
    def calculate_bmr(
        cls,
        weight_kg: float,
        height_cm: float,
        age: int,
        sex: str,
    ) -> float:
        """
        Calculate Basal Metabolic Rate using the revised Harris-Benedict equation.

        Returned unrounded; callers round at the point of exposure.
        """
        cls._check_body(weight_kg, height_cm, age)

        if sex == "male":
            return 88.362 + 13.397 * weight_kg + 4.799 * height_cm - 5.677 * age
        return 447.593 + 9.247 * weight_kg + 3.098 * height_cm - 4.330 * age

    @classmethod
    def calculate_tdee(cls, bmr: float, activity_level: Optional[str]) -> float:
        """Calculate Total Daily Energy Expenditure."""
        multiplier = cls.ACTIVITY_MULTIPLIERS.get(activity_level, cls.DEFAULT_MULTIPLIER)
        return bmr * multiplier

    @classmethod
    def calculate_target_calories(cls, tdee: float, goal: str) -> float:
        """Apply the goal deficit or surplus to TDEE."""
        return tdee + cls.GOAL_ADJUSTMENTS.get(goal, 0)

    @classmethod
    def calculate_water_goal(cls, weight_kg: float) -> int:
        """Daily water goal in 250ml cups (35ml per kg of body weight)."""
        if weight_kg <= 0:
            raise ValueError("weight must be positive")
        return round_half_up(weight_kg * cls.WATER_ML_PER_KG / cls.CUP_ML)

    @classmethod
    def calculate_bmi(cls, weight_kg: float, height_cm: float) -> float:
        """Body Mass Index to one decimal place."""
        cls._check_body(weight_kg, height_cm)
        height_m = height_cm / 100
        return round_half_up(weight_kg / height_m ** 2 * 10) / 10


def compute_profile(answers: OnboardingAnswers) -> UserProfile:
    """Derive nutrition targets from onboarding answers."""
    calc = NutritionCalculator
    bmr = calc.calculate_bmr(answers.weight, answers.height, answers.age, answers.sex)
    tdee = calc.calculate_tdee(bmr, answers.activity_level)
    target = calc.calculate_target_calories(tdee, answers.goal)

    return UserProfile(
        **answers.model_dump(),
        bmr=round_half_up(bmr),
        tdee=round_half_up(tdee),
        target_calories=round_half_up(target),
        water_goal=calc.calculate_water_goal(answers.weight),
        bmi=calc.calculate_bmi(answers.weight, answers.height),
    )


RESTRICTION_LABELS = MappingProxyType({
    "lactose": "Lactose-free",
    "gluten": "Gluten-free",
    "vegetarian": "Vegetarian",
    "vegan": "Vegan",
    "nuts": "Nut-free",
    "seafood": "Seafood-free",
    "eggs": "Egg-free",
    "soy": "Soy-free",
    "none": "No restrictions",
})

GOAL_LABELS = MappingProxyType({
    "lose": "Lose weight",
    "maintain": "Maintain weight",
    "gain": "Gain muscle",
})

ACTIVITY_LABELS = MappingProxyType({
    "sedentary": "Sedentary",
    "light": "Lightly active",
    "moderate": "Moderately active",
    "active": "Very active",
    "veryActive": "Extremely active",
})


def restriction_labels(restrictions: Iterable[str]) -> List[str]:
    """Human-readable labels; unknown tags are shown as given."""
    labels = [RESTRICTION_LABELS.get(r, r) for r in restrictions]
    return labels or ["No restrictions"]


def goal_label(goal: Optional[str]) -> str:
    return GOAL_LABELS.get(goal, GOAL_LABELS["maintain"])


def activity_label(level: Optional[str]) -> str:
    return ACTIVITY_LABELS.get(level, "Not set")
