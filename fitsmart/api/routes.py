"""API routes for onboarding, meal logging, workouts and hydration."""

from functools import lru_cache
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from fitsmart.config import get_settings
from fitsmart.models.meal import (
    MealAnalysisRequest,
    MealAnalysisResult,
    MealLogCreate,
    MealLogEntry,
    MealPlanEntry,
)
from fitsmart.models.profile import OnboardingAnswers, UserProfile, WorkoutLocation
from fitsmart.models.tracking import (
    CustomWorkoutCreate,
    DailyProgress,
    HydrationReminder,
    HydrationStatus,
    Workout,
    WorkoutStatus,
)
from fitsmart.services.meal_plan import generate_meal_plan
from fitsmart.services.nutrition import compute_profile
from fitsmart.services.tracker import (
    Clock,
    DailyProgressTracker,
    HydrationTracker,
    MealLog,
    WorkoutTracker,
    local_clock,
    percent,
)
from fitsmart.services.vision import MealVisionAnalyzer
from fitsmart.store import kv
from fitsmart.store.kv import InMemoryStore, KeyValueStore


router = APIRouter(prefix="/api/v1", tags=["Tracking"])
analyze_router = APIRouter(prefix="/api", tags=["Meal Analysis"])


@lru_cache()
def get_store() -> KeyValueStore:
    """Process-wide tracking store."""
    return InMemoryStore()


def get_analyzer() -> MealVisionAnalyzer:
    return MealVisionAnalyzer()


def get_clock() -> Clock:
    return local_clock(get_settings().timezone)


def get_profile(store: KeyValueStore = Depends(get_store)) -> UserProfile:
    data = store.get(kv.USER_PROFILE)
    if data is None:
        raise HTTPException(status_code=404, detail="Profile not found. Complete onboarding first")
    return UserProfile.model_validate(data)


def _hydration_tracker(store: KeyValueStore, clock: Clock) -> HydrationTracker:
    settings = get_settings()
    return HydrationTracker(
        store, clock=clock, reminder_hours=(settings.reminder_start_hour, settings.reminder_end_hour)
    )


def _hydration_status(tracker: HydrationTracker, goal: int) -> HydrationStatus:
    intake = tracker.intake
    return HydrationStatus(
        intake=intake,
        goal=goal,
        remaining=max(0, goal - intake),
        progress=percent(intake, goal),
        message=tracker.motivational_message(goal),
        history=tracker.history,
    )


@analyze_router.post("/analyze-food", response_model=MealAnalysisResult)
async def analyze_food(
    request: MealAnalysisRequest,
    analyzer: MealVisionAnalyzer = Depends(get_analyzer),
):
    """
    Estimate calories and macros of a meal photo.

    Failures are answered with HTTP 500 and a message asking the user to
    enter the meal manually.
    """
    return await analyzer.analyze(request.image, request.dietary_restrictions)


@router.post("/profile", response_model=UserProfile)
async def create_profile(answers: OnboardingAnswers, store: KeyValueStore = Depends(get_store)):
    """Compute targets from onboarding answers and keep the profile."""
    profile = compute_profile(answers)
    store.set(kv.USER_PROFILE, profile.model_dump())
    return profile


@router.get("/profile", response_model=UserProfile)
async def read_profile(profile: UserProfile = Depends(get_profile)):
    return profile


@router.get("/meal-plan", response_model=List[MealPlanEntry])
async def read_meal_plan(profile: UserProfile = Depends(get_profile)):
    """Meal plan template for the stored profile."""
    return generate_meal_plan(profile)


@router.get("/meals", response_model=List[MealLogEntry])
async def list_meals(store: KeyValueStore = Depends(get_store)):
    return MealLog(store).entries()


@router.post("/meals", response_model=MealLogEntry)
async def add_meal(
    data: MealLogCreate,
    store: KeyValueStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Log a meal entered by hand."""
    return MealLog(store, clock).add_manual(data)


@router.post("/meals/photo", response_model=MealLogEntry)
async def add_meal_from_photo(
    request: MealAnalysisRequest,
    store: KeyValueStore = Depends(get_store),
    analyzer: MealVisionAnalyzer = Depends(get_analyzer),
    clock: Clock = Depends(get_clock),
):
    """Analyze a meal photo and log it. Nothing is logged when analysis fails."""
    result = await analyzer.analyze(request.image, request.dietary_restrictions)
    log = MealLog(store, clock)
    return log.add(log.entry_from_analysis(result, request.image))


@router.delete("/meals/{meal_id}", status_code=204)
async def delete_meal(meal_id: int, store: KeyValueStore = Depends(get_store)):
    if not MealLog(store).delete(meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")


@router.get("/workouts", response_model=List[Workout])
async def list_workouts(
    location: Optional[WorkoutLocation] = Query(None),
    store: KeyValueStore = Depends(get_store),
):
    """Catalog routines for the given location, or the profile's one."""
    if location is None:
        profile = store.get(kv.USER_PROFILE)
        location = profile.get("workout_location") if profile else None
    return list(WorkoutTracker(store).workouts_for(location))


@router.get("/workouts/status", response_model=WorkoutStatus)
async def workout_status(store: KeyValueStore = Depends(get_store)):
    tracker = WorkoutTracker(store)
    return WorkoutStatus(completed=tracker.completed_ids, calories_burned=tracker.calories_burned)


@router.post("/workouts/custom", response_model=WorkoutStatus)
async def add_custom_workout(data: CustomWorkoutCreate, store: KeyValueStore = Depends(get_store)):
    tracker = WorkoutTracker(store)
    tracker.log_custom_workout(data.name, data.duration, data.calories)
    return WorkoutStatus(completed=tracker.completed_ids, calories_burned=tracker.calories_burned)


@router.post("/workouts/{workout_id}/complete", response_model=WorkoutStatus)
async def complete_workout(workout_id: str, store: KeyValueStore = Depends(get_store)):
    tracker = WorkoutTracker(store)
    try:
        newly_completed = tracker.complete_workout(workout_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Workout not found")
    return WorkoutStatus(
        completed=tracker.completed_ids,
        calories_burned=tracker.calories_burned,
        newly_completed=newly_completed,
    )


@router.get("/hydration", response_model=HydrationStatus)
async def hydration_status(
    profile: UserProfile = Depends(get_profile),
    store: KeyValueStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return _hydration_status(_hydration_tracker(store, clock), profile.water_goal)


@router.post("/hydration/add", response_model=HydrationStatus)
async def add_water(
    amount: int = Query(1, ge=1, le=20),
    profile: UserProfile = Depends(get_profile),
    store: KeyValueStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Log cups of water (250ml each)."""
    tracker = _hydration_tracker(store, clock)
    tracker.add_water(amount)
    store.delete(kv.HYDRATION_REMINDER)
    return _hydration_status(tracker, profile.water_goal)


@router.post("/hydration/remove", response_model=HydrationStatus)
async def remove_water(
    profile: UserProfile = Depends(get_profile),
    store: KeyValueStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    tracker = _hydration_tracker(store, clock)
    tracker.remove_water()
    return _hydration_status(tracker, profile.water_goal)


@router.get("/hydration/reminder", response_model=Optional[HydrationReminder])
async def read_reminder(store: KeyValueStore = Depends(get_store)):
    """Pending reminder from the scheduler, if any."""
    data = store.get(kv.HYDRATION_REMINDER)
    return HydrationReminder.model_validate(data) if data else None


@router.delete("/hydration/reminder", status_code=204)
async def dismiss_reminder(store: KeyValueStore = Depends(get_store)):
    store.delete(kv.HYDRATION_REMINDER)


@router.get("/dashboard", response_model=DailyProgress)
async def dashboard(
    profile: UserProfile = Depends(get_profile),
    store: KeyValueStore = Depends(get_store),
):
    """Today's progress against the profile targets."""
    return DailyProgressTracker(store).get_daily_progress(profile)
