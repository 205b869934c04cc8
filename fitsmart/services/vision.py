"""Photo-based calorie estimation through a multimodal chat-completion API."""

import json
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx
from pydantic import ValidationError as PydanticValidationError

from fitsmart.config import Settings, get_settings
from fitsmart.models.meal import MealAnalysisResult
from fitsmart.services.nutrition import round_half_up


logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("calories", "protein", "carbs", "fats")

_DATA_URI = re.compile(r"^data:image/([\w.+-]+);base64,", re.IGNORECASE)
_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")


class MealAnalysisError(Exception):
    """Base error for photo analysis failures."""


class UpstreamError(MealAnalysisError):
    """The inference service failed or answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class ParseError(MealAnalysisError):
    """No JSON object could be located in the model reply."""


class ValidationError(MealAnalysisError):
    """The parsed object lacks usable calorie or macro values."""


def strip_data_uri(image: str) -> Tuple[str, str]:
    """Split an optional data-URI prefix off a base64 image.

    Returns the bare base64 payload and the image subtype (jpeg by default).
    """
    image = image.strip()
    match = _DATA_URI.match(image)
    if not match:
        return image, "jpeg"
    return image[match.end():], match.group(1).lower()


def build_prompt(restrictions: Iterable[str]) -> str:
    """Instruction prompt sent alongside the meal photo."""
    restrictions = [r for r in restrictions if r]
    restrictions_str = (
        f"\nUser dietary restrictions: {', '.join(restrictions)}" if restrictions else ""
    )

    return f"""You are a nutritionist specialized in food analysis. Analyze this food image with MAXIMUM ACCURACY and provide DETAILED nutrition information.

CRITICAL INSTRUCTIONS:
1. Identify ALL food items visible on the plate
2. Estimate the portion size of each item (in grams or ml)
3. Compute TOTAL calories by adding up ALL identified items
4. Compute protein, carbs and fats for EACH item and add them up
5. Be PRECISE - use real nutrition tables as reference
6. If sauces, oils or seasonings are visible, INCLUDE them in the calories
7. Take the preparation method (fried, grilled, boiled) into account
{restrictions_str}

EXAMPLE OF A CORRECT ANALYSIS:
- White rice (150g) = 195 cal, 4g protein, 43g carbs, 0.5g fat
- Grilled chicken (120g) = 198 cal, 36g protein, 0g carbs, 4g fat
- Beans (100g) = 77 cal, 5g protein, 14g carbs, 0.5g fat
- Salad with olive oil (80g) = 45 cal, 1g protein, 3g carbs, 4g fat
TOTAL: 515 calories, 46g protein, 60g carbs, 9g fat

Reply ONLY with valid JSON in exactly this format:
{{
  "foodName": "descriptive name of the whole dish",
  "calories": total_integer,
  "protein": total_integer_grams,
  "carbs": total_integer_grams,
  "fats": total_integer_grams,
  "ingredients": ["item1 (portion)", "item2 (portion)", "item3 (portion)"],
  "portionSize": "detailed description of the estimated total portion",
  "breakdown": [
    {{
      "item": "food name",
      "portion": "estimated amount",
      "calories": number,
      "protein": number,
      "carbs": number,
      "fats": number
    }}
  ]
}}

IMPORTANT:
- Be GENEROUS with calorie estimates (better to overestimate than underestimate)
- Account for "hidden" ingredients such as cooking oil, butter and sugar
- If unsure about a portion, use standard average portions
- ALWAYS give realistic numbers based on real nutrition tables"""


def _scan_balanced(text: str, pos: int) -> Tuple[List[str], Optional[int]]:
    """Balanced spans from pos on, plus the offset of a brace left unclosed."""
    spans: List[str] = []
    in_str = False
    escaped = False
    depth = 0
    start: Optional[int] = None

    for i in range(pos, len(text)):
        ch = text[i]
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == "\"":
                in_str = False
            continue

        if ch == "\"":
            # Quotes only delimit strings inside an object; prose quotes are ignored
            in_str = depth > 0
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start is not None:
                spans.append(text[start:i + 1])
                start = None

    return spans, start if depth > 0 else None


def iter_json_objects(text: str) -> List[str]:
    """Balanced top-level {...} spans in text, skipping braces inside strings."""
    cleaned = _FENCE_END.sub("", _FENCE_START.sub("", text.strip()))

    spans: List[str] = []
    pos = 0
    while pos < len(cleaned):
        found, unclosed = _scan_balanced(cleaned, pos)
        spans.extend(found)
        if unclosed is None:
            break
        # A stray "{" never closed; rescan right after it
        pos = unclosed + 1
    return spans


def extract_json_object(text: str) -> Dict[str, Any]:
    """First balanced JSON object in the reply that parses to a dict."""
    for candidate in iter_json_objects(text):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed
    raise ParseError("Model reply does not contain a JSON object")


def _coerce_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def normalize_analysis(parsed: Dict[str, Any]) -> MealAnalysisResult:
    """Validate the required numbers and round them to integers."""
    data = dict(parsed)
    for field in REQUIRED_FIELDS:
        number = _coerce_number(data.get(field))
        if number is None:
            raise ValidationError(f"Missing or non-numeric '{field}' in model reply")
        if number < 0:
            raise ValidationError(f"Negative '{field}' in model reply")
        data[field] = round_half_up(number)

    try:
        return MealAnalysisResult.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Incomplete nutrition data in model reply: {e}") from e


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _reply_text(data: Dict[str, Any]) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise UpstreamError("Unexpected response shape from inference service") from e

    if isinstance(content, list):
        content = "".join(
            part.get("text", "") for part in content if isinstance(part, dict)
        )
    if not isinstance(content, str):
        raise UpstreamError("Unexpected response shape from inference service")
    return content


class MealVisionAnalyzer:
    """Estimate meal nutrition from a photo with a vision-language model."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = settings or get_settings()
        self.api_key = settings.openai_api_key
        self.base_url = settings.openai_base_url.rstrip("/")
        self.model = settings.vision_model
        self.max_tokens = settings.vision_max_tokens
        self.temperature = settings.vision_temperature
        self.image_detail = settings.vision_image_detail
        self.timeout = settings.vision_timeout
        self._transport = transport

    def build_payload(self, image_b64: str, image_type: str, restrictions: Iterable[str]) -> Dict[str, Any]:
        """Chat-completion request body for one photo."""
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": build_prompt(restrictions)},
                        {
                            "type": "image_url",
                            "image_url": {
                                "url": f"data:image/{image_type};base64,{image_b64}",
                                "detail": self.image_detail,
                            },
                        },
                    ],
                }
            ],
            "n": 1,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    async def _query(self, payload: Dict[str, Any]) -> str:
        """Single call to the chat-completion endpoint, no retries."""
        if not self.api_key:
            raise UpstreamError("OPENAI_API_KEY is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.TimeoutException as e:
            logger.warning("Inference service timed out after %ss", self.timeout)
            raise UpstreamError(f"Inference service timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.warning("Inference service unreachable: %s", e)
            raise UpstreamError(f"Inference service unreachable: {e}") from e

        if not response.is_success:
            error_body = _error_payload(response)
            logger.warning("Inference service returned %s: %s", response.status_code, error_body)
            raise UpstreamError(
                f"Inference service error: {response.status_code} {response.reason_phrase}"
                f" - {error_body if isinstance(error_body, str) else json.dumps(error_body)}",
                status_code=response.status_code,
                payload=error_body,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Inference service returned a non-JSON body") from e
        return _reply_text(data)

    async def analyze(self, image: str, restrictions: Iterable[str] = ()) -> MealAnalysisResult:
        """Estimate calories and macros of the meal in a base64 photo."""
        image_b64, image_type = strip_data_uri(image)
        restrictions = list(restrictions)
        reply = await self._query(self.build_payload(image_b64, image_type, restrictions))

        try:
            result = normalize_analysis(extract_json_object(reply))
        except (ParseError, ValidationError) as e:
            logger.warning("Could not use model reply (%s): %.200s", e, reply)
            raise

        logger.info("Analyzed meal '%s': %s kcal", result.food_name, result.calories)
        return result
