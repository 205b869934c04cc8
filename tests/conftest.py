"""Shared fixtures."""

import json
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from fitsmart.api.routes import get_analyzer, get_store
from fitsmart.config import Settings
from fitsmart.main import create_app
from fitsmart.models.profile import OnboardingAnswers
from fitsmart.services.vision import MealVisionAnalyzer
from fitsmart.store import InMemoryStore


SAMPLE_REPLY = {
    "foodName": "Rice, beans and grilled chicken",
    "calories": 515,
    "protein": 46,
    "carbs": 60,
    "fats": 9,
    "ingredients": ["White rice (150g)", "Grilled chicken (120g)"],
    "portionSize": "One full plate",
    "breakdown": [
        {"item": "White rice", "portion": "150g", "calories": 195, "protein": 4, "carbs": 43, "fats": 0.5},
    ],
}


def chat_completion(content: str) -> dict:
    """Minimal chat-completion response body."""
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, openai_api_key="test-key", openai_base_url="https://vision.test/v1")


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def answers() -> OnboardingAnswers:
    return OnboardingAnswers(
        name="Alex",
        age=25,
        weight=70,
        height=170,
        sex="male",
        goal="maintain",
        activity_level="moderate",
        workout_location="both",
        meals_per_day=4,
    )


@pytest.fixture
def make_analyzer(settings) -> Callable[..., MealVisionAnalyzer]:
    """Analyzer whose upstream calls are answered by handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> MealVisionAnalyzer:
        return MealVisionAnalyzer(settings, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def reply_with(make_analyzer) -> Callable[[str], MealVisionAnalyzer]:
    """Analyzer whose upstream answers every call with the given text."""

    def factory(content: str) -> MealVisionAnalyzer:
        return make_analyzer(lambda request: httpx.Response(200, json=chat_completion(content)))

    return factory


@pytest.fixture
def client(store, reply_with):
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_analyzer] = lambda: reply_with(json.dumps(SAMPLE_REPLY))
    with TestClient(app) as test_client:
        yield test_client
