"""Daily tracking of meals, workouts and water, and progress reporting."""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from fitsmart.models.meal import MealAnalysisResult, MealLogCreate, MealLogEntry
from fitsmart.models.profile import UserProfile
from fitsmart.models.tracking import DailyProgress, WaterHistoryEntry, Workout
from fitsmart.services.nutrition import activity_label, goal_label, restriction_labels
from fitsmart.services.workouts import get_workout, workouts_for
from fitsmart.store import kv
from fitsmart.store.kv import KeyValueStore


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def local_clock(timezone: str) -> Clock:
    """Clock reading the current time in the configured timezone."""
    tz = ZoneInfo(timezone)
    return lambda: datetime.now(tz)


def _time_label(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def _epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def percent(value: float, goal: float) -> float:
    """Share of goal reached, capped at 100 for display."""
    if not goal:
        return 0.0
    return round(min(value / goal * 100, 100.0), 1)


class WorkoutTracker:
    """Completed routines and calories burned today."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    @property
    def completed_ids(self) -> List[str]:
        return self.store.get(kv.COMPLETED_WORKOUTS, [])

    @property
    def calories_burned(self) -> int:
        return int(self.store.get(kv.CALORIES_BURNED, 0))

    def workouts_for(self, location: Optional[str]) -> Tuple[Workout, ...]:
        return workouts_for(location)

    def complete_workout(self, workout_id: str) -> bool:
        """
        Mark a catalog routine as done and add its calories.

        Completing the same routine twice is a no-op and returns False.
        Unknown ids raise KeyError.
        """
        workout = get_workout(workout_id)
        completed = self.completed_ids
        if workout.id in completed:
            return False

        completed.append(workout.id)
        self.store.set(kv.COMPLETED_WORKOUTS, completed)
        self.store.set(kv.CALORIES_BURNED, self.calories_burned + workout.calories)
        logger.info("Completed workout %s (+%s kcal)", workout.id, workout.calories)
        return True

    def log_custom_workout(self, name: str, duration: str, calories: int) -> int:
        """Add calories from a workout outside the catalog; returns the new total."""
        total = self.calories_burned + calories
        self.store.set(kv.CALORIES_BURNED, total)
        logger.info("Logged custom workout '%s' (%s, +%s kcal)", name, duration, calories)
        return total


class HydrationTracker:
    """Water intake counted in 250ml cups."""

    MESSAGES = (
        (0, "Let's start! Drink your first glass of water"),
        (25, "Great start! Keep it up"),
        (50, "You're on the right track!"),
        (75, "More than halfway there! You can do it!"),
        (100, "Almost there! Just a little more to reach your goal!"),
    )
    GOAL_REACHED = "Congratulations! Goal reached!"

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock = datetime.now,
        reminder_hours: Tuple[int, int] = (7, 22),
    ):
        self.store = store
        self.clock = clock
        self.reminder_hours = reminder_hours

    @property
    def intake(self) -> int:
        return int(self.store.get(kv.WATER_INTAKE, 0))

    @property
    def history(self) -> List[WaterHistoryEntry]:
        return [WaterHistoryEntry.model_validate(e) for e in self.store.get(kv.WATER_HISTORY, [])]

    def add_water(self, amount: int = 1) -> int:
        """Log cups of water; returns the new intake."""
        if amount <= 0:
            raise ValueError("amount must be positive")

        now = self.clock()
        history = self.store.get(kv.WATER_HISTORY, [])
        history.append(
            WaterHistoryEntry(amount=amount, time=_time_label(now), timestamp=_epoch_ms(now))
            .model_dump(by_alias=True)
        )
        intake = self.intake + amount
        self.store.set(kv.WATER_INTAKE, intake)
        self.store.set(kv.WATER_HISTORY, history)
        return intake

    def remove_water(self) -> int:
        """Undo one cup, never going below zero; returns the new intake."""
        intake = self.intake
        if intake <= 0:
            return 0

        history = self.store.get(kv.WATER_HISTORY, [])
        if history:
            # Take the cup off the latest entry; drop it once empty
            history[-1]["amount"] -= 1
            if history[-1]["amount"] <= 0:
                history.pop()
        self.store.set(kv.WATER_INTAKE, intake - 1)
        self.store.set(kv.WATER_HISTORY, history)
        return intake - 1

    def motivational_message(self, goal: int) -> str:
        progress = self.intake / goal * 100 if goal else 100
        if progress == 0:
            return self.MESSAGES[0][1]
        for upper, message in self.MESSAGES[1:]:
            if progress < upper:
                return message
        return self.GOAL_REACHED

    def needs_reminder(self, hour: int, goal: int) -> bool:
        """Remind during waking hours while below the goal."""
        start, end = self.reminder_hours
        return start <= hour <= end and self.intake < goal


class MealLog:
    """Meals logged today."""

    def __init__(self, store: KeyValueStore, clock: Clock = datetime.now):
        self.store = store
        self.clock = clock

    def entries(self) -> List[MealLogEntry]:
        return [MealLogEntry.model_validate(e) for e in self.store.get(kv.TODAY_MEALS, [])]

    def _next_id(self) -> int:
        # Timestamp ids; bump on collision within the same millisecond
        entry_id = _epoch_ms(self.clock())
        taken = {e.id for e in self.entries()}
        while entry_id in taken:
            entry_id += 1
        return entry_id

    def add(self, entry: MealLogEntry) -> MealLogEntry:
        meals = self.store.get(kv.TODAY_MEALS, [])
        meals.append(entry.model_dump(by_alias=True))
        self.store.set(kv.TODAY_MEALS, meals)
        return entry

    def add_manual(self, data: MealLogCreate) -> MealLogEntry:
        return self.add(MealLogEntry(
            id=self._next_id(),
            time=_time_label(self.clock()),
            **data.model_dump(),
        ))

    def entry_from_analysis(self, result: MealAnalysisResult, image: str) -> MealLogEntry:
        """Log entry for a photo analysed by the vision model."""
        return MealLogEntry(
            id=self._next_id(),
            name=result.food_name,
            calories=result.calories,
            protein=result.protein,
            carbs=result.carbs,
            fats=result.fats,
            time=_time_label(self.clock()),
            image_url=image,
            analyzed_by_ai=True,
        )

    def delete(self, entry_id: int) -> bool:
        meals = self.store.get(kv.TODAY_MEALS, [])
        kept = [m for m in meals if m.get("id") != entry_id]
        if len(kept) == len(meals):
            return False
        self.store.set(kv.TODAY_MEALS, kept)
        return True

    def totals(self) -> dict:
        entries = self.entries()
        return {
            "calories": sum(e.calories for e in entries),
            "protein": sum(e.protein for e in entries),
            "carbs": sum(e.carbs for e in entries),
            "fats": sum(e.fats for e in entries),
            "meals_logged": len(entries),
        }


class DailyProgressTracker:
    """Track progress towards the day's targets."""

    def __init__(self, store: KeyValueStore):
        self.meals = MealLog(store)
        self.workouts = WorkoutTracker(store)
        self.hydration = HydrationTracker(store)

    def get_daily_progress(self, profile: UserProfile) -> DailyProgress:
        totals = self.meals.totals()
        burned = self.workouts.calories_burned
        water = self.hydration.intake
        target = profile.target_calories

        return DailyProgress(
            calories_consumed=totals["calories"],
            calories_target=target,
            calories_burned=burned,
            calories_remaining=target - totals["calories"] + burned,
            calories_progress=percent(totals["calories"], target),
            protein_consumed=totals["protein"],
            carbs_consumed=totals["carbs"],
            fats_consumed=totals["fats"],
            water_intake=water,
            water_goal=profile.water_goal,
            water_progress=percent(water, profile.water_goal),
            workouts_completed=len(self.workouts.completed_ids),
            meals_logged=totals["meals_logged"],
            goal_label=goal_label(profile.goal),
            activity_label=activity_label(profile.activity_level),
            restriction_labels=restriction_labels(profile.dietary_restrictions),
        )
