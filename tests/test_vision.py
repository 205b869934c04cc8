"""Tests for the meal photo analyzer."""

import json

import httpx
import pytest

from fitsmart.config import Settings
from fitsmart.services.vision import (
    MealVisionAnalyzer,
    ParseError,
    UpstreamError,
    ValidationError,
    build_prompt,
    extract_json_object,
    normalize_analysis,
    strip_data_uri,
)

from conftest import SAMPLE_REPLY, chat_completion


class TestHelpers:
    """Prompt construction and reply parsing."""

    def test_strip_data_uri(self) -> None:
        assert strip_data_uri("data:image/png;base64,AAAA") == ("AAAA", "png")
        assert strip_data_uri("AAAA") == ("AAAA", "jpeg")

    def test_prompt_lists_restrictions_and_example(self) -> None:
        prompt = build_prompt(["vegan", "gluten"])

        assert "User dietary restrictions: vegan, gluten" in prompt
        assert "TOTAL: 515 calories, 46g protein, 60g carbs, 9g fat" in prompt
        assert '"portionSize"' in prompt
        assert "dietary restrictions" not in build_prompt([])

    def test_extract_ignores_prose_and_fences(self) -> None:
        reply = 'Sure! Here is the {estimate}:\n```json\n{"calories": 10, "note": "a } b"}\n```'

        assert extract_json_object(reply) == {"calories": 10, "note": "a } b"}

    def test_extract_after_unclosed_brace_in_prose(self) -> None:
        reply = 'Estimate {approx.:\n{"calories": 515, "protein": 46, "carbs": 60, "fats": 9}'

        assert extract_json_object(reply)["calories"] == 515

    def test_extract_first_object_of_many(self) -> None:
        assert extract_json_object('{"a": 1} and {"b": 2}') == {"a": 1}

    def test_extract_without_braces(self) -> None:
        with pytest.raises(ParseError):
            extract_json_object("I cannot identify any food in this image.")

    def test_normalize_rounds_and_coerces(self) -> None:
        result = normalize_analysis({"calories": "514.6", "protein": 45.5, "carbs": 60, "fats": 9.2})

        assert (result.calories, result.protein, result.carbs, result.fats) == (515, 46, 60, 9)

    def test_zero_is_a_valid_value(self) -> None:
        result = normalize_analysis({"calories": 0, "protein": 0, "carbs": 0, "fats": 0})

        assert result.calories == 0

    @pytest.mark.parametrize("value", [None, "lots", True, "nan", -1])
    def test_unusable_numbers(self, value) -> None:
        with pytest.raises(ValidationError):
            normalize_analysis({"calories": value, "protein": 1, "carbs": 1, "fats": 1})


class TestMealVisionAnalyzer:
    """Calls to the inference service."""

    @pytest.mark.asyncio
    async def test_exact_reply_passes_through(self, reply_with) -> None:
        analyzer = reply_with(
            '{"calories":515,"protein":46,"carbs":60,"fats":9,'
            '"foodName":"x","ingredients":[],"portionSize":"y","breakdown":[]}'
        )

        result = await analyzer.analyze("AAAA", [])

        assert result.calories == 515
        assert isinstance(result.calories, int)
        assert result.food_name == "x"
        assert result.portion_size == "y"

    @pytest.mark.asyncio
    async def test_request_shape(self, make_analyzer) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=chat_completion(json.dumps(SAMPLE_REPLY)))

        await make_analyzer(handler).analyze("data:image/png;base64,QUJD", ["lactose"])

        request = seen[0]
        body = json.loads(request.content)
        text, image = body["messages"][0]["content"]
        assert str(request.url) == "https://vision.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer test-key"
        assert body["model"] == "gpt-4o"
        assert body["n"] == 1
        assert body["max_tokens"] == 1000
        assert body["temperature"] == 0.3
        assert "lactose" in text["text"]
        assert image["image_url"]["url"] == "data:image/png;base64,QUJD"
        assert image["image_url"]["detail"] == "high"

    @pytest.mark.asyncio
    async def test_breakdown_passed_through(self, reply_with) -> None:
        result = await reply_with(json.dumps(SAMPLE_REPLY)).analyze("AAAA")

        assert result.breakdown[0].item == "White rice"
        assert result.breakdown[0].fats == 0.5
        assert result.ingredients == SAMPLE_REPLY["ingredients"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("extra, check", [
        ({"foodName": None}, lambda r: r.food_name == "Photographed meal"),
        ({"foodName": "  "}, lambda r: r.food_name == "Photographed meal"),
        ({"ingredients": "rice, beans, chicken"}, lambda r: r.ingredients == ["rice", "beans", "chicken"]),
        ({"ingredients": [{"name": "rice", "grams": 150}, 7]}, lambda r: r.ingredients == ["rice", "7"]),
        ({"ingredients": None}, lambda r: r.ingredients == []),
        ({"portionSize": 350}, lambda r: r.portion_size == "350"),
        ({"breakdown": [{"item": "Rice", "calories": "195 kcal"}]}, lambda r: r.breakdown[0].calories == 195),
        ({"breakdown": [{"item": "Rice", "calories": None, "fats": "n/a"}]}, lambda r: r.breakdown[0].calories == 0),
        ({"breakdown": ["rice", {"item": "Beans"}]}, lambda r: [b.item for b in r.breakdown] == ["Beans"]),
        ({"breakdown": "rice 150g"}, lambda r: r.breakdown == []),
        ({}, lambda r: r.ingredients == [] and r.breakdown == [] and r.portion_size == ""),
    ])
    async def test_loose_optional_fields_are_kept(self, reply_with, extra, check) -> None:
        reply = json.dumps({"calories": 515, "protein": 46, "carbs": 60, "fats": 9, **extra})

        result = await reply_with(reply).analyze("AAAA")

        assert (result.calories, result.protein, result.carbs, result.fats) == (515, 46, 60, 9)
        assert check(result)

    @pytest.mark.asyncio
    async def test_reply_without_json(self, reply_with) -> None:
        with pytest.raises(ParseError):
            await reply_with("Sorry, the picture is too dark.").analyze("AAAA")

    @pytest.mark.asyncio
    async def test_reply_missing_macros(self, reply_with) -> None:
        with pytest.raises(ValidationError):
            await reply_with('{"foodName":"x"}').analyze("AAAA")

    @pytest.mark.asyncio
    async def test_http_error_is_not_retried(self, make_analyzer) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

        with pytest.raises(UpstreamError) as exc_info:
            await make_analyzer(handler).analyze("AAAA")

        assert len(calls) == 1
        assert exc_info.value.status_code == 429
        assert exc_info.value.payload == {"error": {"message": "Rate limit reached"}}
        assert "Rate limit reached" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout_is_upstream_error(self, make_analyzer) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamError) as exc_info:
            await make_analyzer(handler).analyze("AAAA")

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_unexpected_body(self, make_analyzer) -> None:
        analyzer = make_analyzer(lambda request: httpx.Response(200, json={"choices": []}))

        with pytest.raises(UpstreamError):
            await analyzer.analyze("AAAA")

    @pytest.mark.asyncio
    async def test_missing_api_key(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        analyzer = MealVisionAnalyzer(
            Settings(_env_file=None, openai_api_key=""), transport=httpx.MockTransport(handler)
        )

        with pytest.raises(UpstreamError, match="OPENAI_API_KEY"):
            await analyzer.analyze("AAAA")
