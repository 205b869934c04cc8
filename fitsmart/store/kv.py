"""Key-value store for the day's tracking counters."""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict


# Fixed keys shared by the trackers and the scheduler
USER_PROFILE = "userProfile"
CALORIES_BURNED = "totalCaloriesBurned"
COMPLETED_WORKOUTS = "completedExercises"
WATER_INTAKE = "waterIntake"
WATER_HISTORY = "waterHistory"
TODAY_MEALS = "todayMeals"
HYDRATION_REMINDER = "hydrationReminder"


class KeyValueStore(ABC):
    """Read and write plain JSON-like values by key, no transactions."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Current value for key, or default."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Replace the value for key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""
        pass


class InMemoryStore(KeyValueStore):
    """Process-local store. Values are copied in and out."""

    def __init__(self, initial: Dict[str, Any] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
