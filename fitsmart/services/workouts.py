"""Workout routine catalog."""

from typing import Optional, Tuple

from fitsmart.models.tracking import Exercise, Workout


def _routine(id, name, duration, calories, level, exercises) -> Workout:
    return Workout(
        id=id,
        name=name,
        duration=duration,
        calories=calories,
        level=level,
        exercises=tuple(
            Exercise(name=n, duration=d, rest=r, video=f"https://www.youtube.com/embed/{v}")
            for n, d, r, v in exercises
        ),
    )


HOME_WORKOUTS: Tuple[Workout, ...] = (
    _routine("1", "Beginner HIIT", "20 min", 180, "Beginner", [
        ("Jumping Jacks", "30s", "15s", "c4DAnQ6DtF8"),
        ("Squats", "30s", "15s", "aclHkVaku9U"),
        ("Knee Push-ups", "30s", "15s", "jWxvty2KROs"),
        ("Mountain Climbers", "30s", "15s", "nmwgirgXLYM"),
        ("Plank", "30s", "30s", "ASdvN_XEl_c"),
    ]),
    _routine("2", "Bodyweight Strength", "30 min", 250, "Intermediate", [
        ("Bulgarian Split Squat", "45s", "20s", "2C-uSaDJZnI"),
        ("Diamond Push-ups", "45s", "20s", "J0DnG1_S92I"),
        ("Alternating Lunges", "45s", "20s", "QOVaHwm-Q6U"),
        ("Side Plank", "30s each", "20s", "K2VljzCC16g"),
        ("Burpees", "45s", "30s", "TU8QYVW0gDU"),
    ]),
    _routine("3", "Intense Cardio", "25 min", 300, "Advanced", [
        ("Burpees", "60s", "15s", "TU8QYVW0gDU"),
        ("High Knees", "60s", "15s", "8opcQdC-V-U"),
        ("Jump Squats", "60s", "15s", "CVaEhXotL7M"),
        ("Mountain Climbers", "60s", "15s", "nmwgirgXLYM"),
        ("Jumping Jacks", "60s", "30s", "c4DAnQ6DtF8"),
    ]),
)

GYM_WORKOUTS: Tuple[Workout, ...] = (
    _routine("4", "Chest and Triceps", "45 min", 350, "Intermediate", [
        ("Flat Bench Press", "4x12", "60s", "rT7DgCr-3pg"),
        ("Incline Bench Press", "4x10", "60s", "SrqOu55lrYU"),
        ("Dumbbell Fly", "3x12", "45s", "eozdVDA78K0"),
        ("Skull Crushers", "3x12", "45s", "d_KZxkY_0cM"),
        ("Rope Pushdown", "3x15", "45s", "2-LAMcpzODU"),
    ]),
    _routine("5", "Back and Biceps", "45 min", 350, "Intermediate", [
        ("Pull-ups", "4x8", "90s", "eGo4IYlbE5g"),
        ("Bent-over Row", "4x10", "60s", "FWJR5Ve8bnQ"),
        ("Lat Pulldown", "3x12", "45s", "CAwf7n6Luuc"),
        ("Barbell Curl", "3x12", "45s", "ykJmrZ5v0Oo"),
        ("Hammer Curl", "3x12", "45s", "zC3nLlEvin4"),
    ]),
    _routine("6", "Legs", "50 min", 400, "Advanced", [
        ("Back Squat", "4x10", "90s", "ultWZbUMPL8"),
        ("Leg Press", "4x12", "60s", "IZxyjW7MPJQ"),
        ("Leg Extension", "3x15", "45s", "YyvSfVjQeL0"),
        ("Lying Leg Curl", "3x15", "45s", "1Tq3QdYUuHs"),
        ("Standing Calf Raise", "4x20", "45s", "gwLzBJYoWlI"),
    ]),
)


def workouts_for(location: Optional[str]) -> Tuple[Workout, ...]:
    """Routines available at home, at the gym, or both."""
    if location == "home":
        return HOME_WORKOUTS
    if location == "gym":
        return GYM_WORKOUTS
    return HOME_WORKOUTS + GYM_WORKOUTS


def get_workout(workout_id: str) -> Workout:
    """Catalog routine by id; raises KeyError when unknown."""
    for workout in HOME_WORKOUTS + GYM_WORKOUTS:
        if workout.id == workout_id:
            return workout
    raise KeyError(workout_id)
