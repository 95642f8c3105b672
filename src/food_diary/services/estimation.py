"""AI nutrient estimation and meal suggestion service."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from food_diary.domain.estimates import (
    Estimate,
    EstimateResult,
    MealSuggestion,
    MealSuggestionList,
    NutrientEstimate,
    Unavailable,
)
from food_diary.domain.nutrition import MealType

MAX_SUGGESTIONS = 3

_NULLABLE_NUMBER = {"anyOf": [{"type": "number", "minimum": 0.0}, {"type": "null"}]}

ESTIMATE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "food_name": {"type": "string"},
        "quantity_description": {"type": "string"},
        "calories": {"type": "integer", "minimum": 0},
        "protein_g": {"type": "number", "minimum": 0.0},
        "carbs_g": {"type": "number", "minimum": 0.0},
        "fat_g": {"type": "number", "minimum": 0.0},
        "fiber_g": _NULLABLE_NUMBER,
        "sugar_g": _NULLABLE_NUMBER,
        "saturated_fat_g": _NULLABLE_NUMBER,
        "confidence_score": {"type": "number", "minimum": 0.0, "maximum": 1.0},
    },
    "required": [
        "food_name",
        "quantity_description",
        "calories",
        "protein_g",
        "carbs_g",
        "fat_g",
        "fiber_g",
        "sugar_g",
        "saturated_fat_g",
        "confidence_score",
    ],
    "additionalProperties": False,
}

SUGGESTIONS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "suggestions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "calories": {"type": "integer", "minimum": 0},
                    "protein": {"type": "number", "minimum": 0.0},
                    "carbs": {"type": "number", "minimum": 0.0},
                    "fat": {"type": "number", "minimum": 0.0},
                    "reason": {"type": "string"},
                },
                "required": [
                    "name",
                    "description",
                    "calories",
                    "protein",
                    "carbs",
                    "fat",
                    "reason",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["suggestions"],
    "additionalProperties": False,
}

_logger = logging.getLogger(__name__)


class EstimationClient(Protocol):
    """Interface for LLM structured-output calls."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return structured data matching the schema."""


@dataclass
class EstimationService:
    """Builds prompts, calls the client and validates its output.

    Every failure is absorbed here: callers get ``Unavailable`` or an empty
    suggestion list, never an exception.
    """

    client: EstimationClient
    model: str
    reasoning_effort: str | None
    store: bool
    language: str = "English"

    async def analyze_text(self, description: str) -> EstimateResult:
        """Estimate nutrients for a free-text food description."""
        if not description.strip():
            return Unavailable(reason="empty description")
        prompt = (
            "Analyze the following text describing food and estimate its "
            "nutritional values as accurately as possible.\n"
            f'Text: "{description.strip()}"\n'
            "Estimate the total amount mentioned in the text. If the text does "
            "not describe food, return a confidence_score close to 0. "
            f"Write food_name and quantity_description in {self.language}."
        )
        return await self._estimate(prompt, image_data_url=None, action="text")

    async def analyze_image(self, image_bytes: bytes) -> EstimateResult:
        """Estimate nutrients for the whole portion visible in a photo."""
        if not image_bytes:
            return Unavailable(reason="empty image")
        prompt = (
            "Identify the food in the image and estimate its nutritional values "
            "(calories, protein, carbs, fat, fiber, sugar, saturated fat) for the "
            "whole portion you can see. "
            f"Write food_name and quantity_description in {self.language}."
        )
        return await self._estimate(
            prompt, image_data_url=_to_data_url(image_bytes), action="image"
        )

    async def suggest_meals(
        self, remaining_calories: float, meal_type: MealType
    ) -> list[MealSuggestion]:
        """Suggest up to three meals that fit the remaining calories."""
        prompt = (
            f"I have {round(max(0.0, remaining_calories))} kcal left in my daily "
            f"budget. Suggest exactly {MAX_SUGGESTIONS} options for: "
            f"{meal_type.value}. The meals must be nutritionally balanced and fit "
            "within the budget; if the budget is very small, suggest something "
            "light. Keep each description under 10 words and give a short "
            f"reason why it is a good choice. Answer in {self.language}."
        )
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema_name="meal_suggestions",
                schema=SUGGESTIONS_SCHEMA,
            )
            parsed = MealSuggestionList.model_validate(raw)
        except ValidationError as exc:
            _logger.warning("Meal suggestions did not match schema: %s", exc)
            return []
        except Exception:
            _logger.exception("Meal suggestion request failed")
            return []
        return parsed.suggestions[:MAX_SUGGESTIONS]

    async def _estimate(
        self, prompt: str, *, image_data_url: str | None, action: str
    ) -> EstimateResult:
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema_name="nutrient_estimate",
                schema=ESTIMATE_SCHEMA,
                image_data_url=image_data_url,
            )
            estimate = NutrientEstimate.model_validate(raw)
        except ValidationError as exc:
            _logger.warning("Estimate (%s) did not match schema: %s", action, exc)
            return Unavailable(reason="malformed response")
        except Exception:
            _logger.exception("Estimate (%s) request failed", action)
            return Unavailable(reason="service failure")
        return Estimate(value=estimate)


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
