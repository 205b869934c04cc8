"""Services module."""

from .nutrition import NutritionCalculator, compute_profile
from .meal_plan import generate_meal_plan
from .vision import MealVisionAnalyzer
from .tracker import DailyProgressTracker

__all__ = ["NutritionCalculator", "compute_profile", "generate_meal_plan", "MealVisionAnalyzer", "DailyProgressTracker"]
