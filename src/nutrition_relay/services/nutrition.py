"""Nutrition extraction service using tool calling on a vision model."""

import base64
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from nutrition_relay.domain.nutrition import (
    NutritionExtraction,
    NutritionResult,
    RiskLevel,
    Sickness,
)

_logger = logging.getLogger(__name__)

NUTRITION_TOOL_NAME = "extract_nutrition_facts"

NUTRITION_TOOL: dict[str, object] = {
    "type": "function",
    "function": {
        "name": NUTRITION_TOOL_NAME,
        "description": (
            "Extracts structured nutritional information, ingredients, risk "
            "levels, and health recommendations for a given food item, "
            "tailored to multiple illnesses."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "sicknesses": {
                    "type": "array",
                    "items": {
                        "type": "string",
                        "enum": [sickness.value for sickness in Sickness],
                    },
                    "description": (
                        "An array of specific illnesses or conditions of the "
                        "user (e.g., gout, diabetes)."
                    ),
                },
                "kcal": {
                    "type": "number",
                    "description": "The total calories (kcal) in the food item.",
                },
                "protein": {
                    "type": "number",
                    "description": "The amount of protein (in grams) in the food item.",
                },
                "carbs": {
                    "type": "number",
                    "description": (
                        "The amount of carbohydrates (in grams) in the food item."
                    ),
                },
                "fat": {
                    "type": "number",
                    "description": "The amount of fat (in grams) in the food item.",
                },
                "sugar": {
                    "type": "number",
                    "description": "The amount of sugar (in grams) in the food item.",
                },
                "fiber": {
                    "type": "number",
                    "description": (
                        "The amount of dietary fiber (in grams) in the food item."
                    ),
                },
                "sodium": {
                    "type": "number",
                    "description": (
                        "The amount of sodium (in milligrams) in the food item."
                    ),
                },
                "purines": {
                    "type": "number",
                    "description": (
                        "The estimated purine content (in milligrams) in the "
                        "food item."
                    ),
                },
                "ingredients": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": (
                        "A list of key ingredients identified in the food item."
                    ),
                },
                "highPurineIngredients": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "ingredient": {
                                "type": "string",
                                "description": (
                                    "The name of the high-purine ingredient."
                                ),
                            },
                            "purineLevel": {
                                "type": "number",
                                "description": (
                                    "The estimated purine level of the "
                                    "ingredient (mg/100g)."
                                ),
                            },
                        },
                        "required": ["ingredient", "purineLevel"],
                    },
                    "description": (
                        "A list of ingredients with high purine levels and their "
                        "estimated purine content."
                    ),
                },
                "riskLevels": {
                    "type": "object",
                    "additionalProperties": {
                        "type": "string",
                        "enum": [level.value for level in RiskLevel],
                    },
                    "description": (
                        "An object mapping each illness to its respective risk level."
                    ),
                },
                "recommendations": {
                    "type": "object",
                    "additionalProperties": {
                        "type": "array",
                        "items": {"type": "string"},
                    },
                    "description": (
                        "An object mapping each illness to its respective "
                        "recommendations."
                    ),
                },
            },
            "required": [
                "sicknesses",
                "kcal",
                "protein",
                "carbs",
                "fat",
                "sugar",
                "fiber",
                "sodium",
                "purines",
                "ingredients",
                "highPurineIngredients",
                "riskLevels",
                "recommendations",
            ],
        },
    },
}


@dataclass(frozen=True)
class ToolCallOutcome:
    """First tool call of a completion, if any, plus the serialized response."""

    tool_name: str | None
    arguments: str | None
    raw_response: str


class ToolCallClient(Protocol):
    """Interface for a chat model that supports tool calling."""

    async def call_tool(
        self,
        *,
        model: str,
        max_tokens: int,
        prompt: str,
        image_url: str,
        tool: dict[str, object],
    ) -> ToolCallOutcome:
        """Send one user turn with an image and return the tool call outcome."""


@dataclass
class NutritionService:
    """Service that asks the model for structured nutrition facts."""

    client: ToolCallClient
    model: str
    max_tokens: int

    async def extract(
        self, sicknesses: Sequence[Sickness | str], image_url: str
    ) -> NutritionResult:
        """Extract nutrition facts for the food in ``image_url``.

        Returns the parsed tool arguments when the model calls
        ``extract_nutrition_facts``; otherwise the serialized raw response.
        Errors are logged and re-raised.
        """
        extraction = await self.analyze(sicknesses, image_url)
        return extraction.result

    async def extract_image(
        self, sicknesses: Sequence[Sickness | str], image_bytes: bytes
    ) -> NutritionResult:
        """Extract nutrition facts from raw image bytes."""
        return await self.extract(sicknesses, _to_data_url(image_bytes))

    async def analyze(
        self, sicknesses: Sequence[Sickness | str], image_url: str
    ) -> NutritionExtraction:
        """Like ``extract``, but tagged with whether the tool was called."""
        try:
            outcome = await self.client.call_tool(
                model=self.model,
                max_tokens=self.max_tokens,
                prompt=build_prompt(sicknesses),
                image_url=image_url,
                tool=NUTRITION_TOOL,
            )
            called = outcome.tool_name == NUTRITION_TOOL_NAME
            if called and outcome.arguments is not None:
                facts = json.loads(outcome.arguments)
                _logger.info("Nutrition facts extracted: %s", facts)
                return NutritionExtraction(tool_called=True, result=facts)

            _logger.info(
                "Model answered without a tool call: %s", outcome.raw_response
            )
            return NutritionExtraction(
                tool_called=False, result=outcome.raw_response
            )
        except Exception:
            _logger.exception("Nutrition extraction failed")
            raise

    async def analyze_image(
        self, sicknesses: Sequence[Sickness | str], image_bytes: bytes
    ) -> NutritionExtraction:
        """Like ``extract_image``, but tagged with whether the tool was called."""
        return await self.analyze(sicknesses, _to_data_url(image_bytes))


def build_prompt(sicknesses: Sequence[Sickness | str]) -> str:
    """Build the user instruction for the given conditions."""
    joined = ", ".join(str(sickness) for sickness in sicknesses)
    return f"Can you tell me the food nutrition of the image, tailored for {joined}?"


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
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
