"""Data models for FitSmart."""

from .profile import OnboardingAnswers, UserProfile
from .meal import (
    MealPlanEntry,
    MealAnalysisRequest,
    MealAnalysisResult,
    BreakdownItem,
    MealLogCreate,
    MealLogEntry,
)
from .tracking import (
    Exercise,
    Workout,
    CustomWorkoutCreate,
    WorkoutStatus,
    WaterHistoryEntry,
    HydrationStatus,
    HydrationReminder,
    DailyProgress,
)

__all__ = [
    "OnboardingAnswers",
    "UserProfile",
    "MealPlanEntry",
    "MealAnalysisRequest",
    "MealAnalysisResult",
    "BreakdownItem",
    "MealLogCreate",
    "MealLogEntry",
    "Exercise",
    "Workout",
    "CustomWorkoutCreate",
    "WorkoutStatus",
    "WaterHistoryEntry",
    "HydrationStatus",
    "HydrationReminder",
    "DailyProgress",
]
