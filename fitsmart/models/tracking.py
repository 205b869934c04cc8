"""Tracking models for workouts, water, and daily progress."""

from pydantic import Field
from typing import Optional, List, Tuple

from fitsmart.models.base import CamelModel


class Exercise(CamelModel):
    """Single exercise inside a workout routine."""

    name: str
    duration: str
    rest: str
    video: Optional[str] = None


class Workout(CamelModel):
    """Workout routine from the catalog."""

    id: str
    name: str
    duration: str
    calories: int
    level: str
    exercises: Tuple[Exercise, ...] = ()

    class Config:
        frozen = True


class CustomWorkoutCreate(CamelModel):
    """Workout done outside the catalog."""

    name: str = Field(min_length=1)
    duration: str = Field(min_length=1)
    calories: int = Field(gt=0)


class WorkoutStatus(CamelModel):
    """Workout counters for today."""

    completed: List[str] = []
    calories_burned: int = 0
    newly_completed: Optional[bool] = None


class WaterHistoryEntry(CamelModel):
    """One water intake event."""

    amount: int = 1  # 250ml cups
    time: str
    timestamp: int


class HydrationStatus(CamelModel):
    """Water intake for today against the goal."""

    intake: int
    goal: int
    remaining: int
    progress: float
    message: str
    history: List[WaterHistoryEntry] = []


class HydrationReminder(CamelModel):
    """Pending reminder written by the scheduler."""

    message: str
    remaining: int
    created_at: str


class DailyProgress(CamelModel):
    """Daily progress summary."""

    calories_consumed: int
    calories_target: int
    calories_burned: int
    calories_remaining: int
    calories_progress: float
    protein_consumed: int
    carbs_consumed: int
    fats_consumed: int
    water_intake: int
    water_goal: int
    water_progress: float
    workouts_completed: int
    meals_logged: int
    goal_label: str
    activity_label: str
    restriction_labels: List[str] = []
