"""Food safety analysis using LLMs."""

import base64
import logging
from dataclasses import dataclass

from can_i_have_this.domain.analysis import AnalysisResult
from can_i_have_this.domain.profile import UserProfile
from can_i_have_this.services.recommendations import aggregate_avoidances
from can_i_have_this.services.structured_output import StructuredOutputClient

logger = logging.getLogger(__name__)

ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "foodName": {"type": "string"},
        "canEat": {"type": "boolean"},
        "threatLevel": {
            "type": "string",
            "enum": ["LOW", "MEDIUM", "HIGH", "UNKNOWN"],
        },
        "shortSummary": {"type": "string"},
        "detailedReasoning": {"type": "string"},
        "riskyIngredients": {"type": "array", "items": {"type": "string"}},
        "nutrients": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "amount": {"type": "string"},
                    "riskImpact": {
                        "type": "integer",
                        "minimum": 0,
                        "maximum": 100,
                        "description": "Risk contribution from 0 to 100",
                    },
                    "reason": {"type": "string"},
                },
                "required": ["name", "amount", "riskImpact", "reason"],
                "additionalProperties": False,
            },
        },
    },
    "required": [
        "foodName",
        "canEat",
        "threatLevel",
        "shortSummary",
        "detailedReasoning",
        "riskyIngredients",
        "nutrients",
    ],
    "additionalProperties": False,
}

CONDITION_GUIDANCE = (
    "Even if a specific ingredient is not listed in the allergies, you MUST infer "
    "restrictions from the conditions.\n"
    '- If "IBS": assume sensitivity to high FODMAPs (onion, garlic, wheat, '
    "high fructose) unless told otherwise.\n"
    '- If "Celiac": strictly forbid gluten (wheat, barley, rye, triticale, malt).\n'
    '- If "GERD": flag common triggers like mint, caffeine, spicy foods, tomato, '
    "chocolate.\n"
    '- If "Lactose Intolerance": flag high lactose dairy.'
)

THREAT_GUIDANCE = (
    "Threat level:\n"
    "- LOW: safe to eat.\n"
    "- MEDIUM: proceed with caution (cross-contamination, mild trigger, or a "
    "small amount of a FODMAP).\n"
    "- HIGH: do not eat (contains an allergen, gluten for celiac, or a severe "
    "trigger)."
)


class AnalysisFailedError(RuntimeError):
    """Raised when a food could not be analyzed."""


@dataclass
class FoodAnalysisService:
    """Service that judges foods against a user's dietary profile."""

    client: StructuredOutputClient
    model: str
    image_model: str
    reasoning_effort: str | None
    store: bool

    async def analyze_text(self, profile: UserProfile, query: str) -> AnalysisResult:
        """Analyze a free-text food or dish description."""
        prompt = f'Analyze this food or dish for the user: "{query.strip()}".'
        return await self._analyze(
            profile,
            model=self.model,
            prompt=prompt,
            image_data_url=None,
            failure="Failed to analyze food. Please try again.",
        )

    async def analyze_image(
        self, profile: UserProfile, image: bytes | str
    ) -> AnalysisResult:
        """Analyze a photo of a food or a food label."""
        data_url = image if isinstance(image, str) else _to_data_url(image)
        prompt = (
            "Look at this image of food or a food label and analyze it "
            "against the user's restrictions."
        )
        return await self._analyze(
            profile,
            model=self.image_model,
            prompt=prompt,
            image_data_url=_ensure_data_url(data_url),
            failure="Failed to analyze image. Please ensure the image is clear.",
        )

    async def _analyze(
        self,
        profile: UserProfile,
        *,
        model: str,
        prompt: str,
        image_data_url: str | None,
        failure: str,
    ) -> AnalysisResult:
        try:
            raw = await self.client.generate(
                model=model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema=ANALYSIS_SCHEMA,
                schema_name="food_analysis",
                instructions=build_instructions(profile),
                image_data_url=image_data_url,
            )
            return AnalysisResult.model_validate(raw)
        except (RuntimeError, ValueError) as exc:
            logger.warning("Food analysis failed: %s", exc)
            raise AnalysisFailedError(failure) from exc
        except Exception as exc:
            logger.exception("Food analysis client error")
            raise AnalysisFailedError(failure) from exc


def build_instructions(profile: UserProfile) -> str:
    """Describe the user's restrictions for the analysis prompt."""
    avoidances = ", ".join(aggregate_avoidances(profile))
    return (
        "You are an expert clinical dietitian, allergist, and gastroenterologist.\n\n"
        "User profile:\n"
        f"- Conditions: {', '.join(profile.conditions) or 'None'}\n"
        f"- Explicit allergies: {', '.join(profile.allergies) or 'None'}\n"
        f"- Specific foods to avoid (user diary + inferred): {avoidances or 'None'}\n"
        f"- Health goals: {profile.goals or 'General Health'}\n\n"
        f"{CONDITION_GUIDANCE}\n\n"
        "Analyze food items or labels and determine if they are safe for this "
        "specific user.\n\n"
        f"{THREAT_GUIDANCE}"
    )


def _ensure_data_url(value: str) -> str:
    """Accept either a data URL or bare base64 image content."""
    if value.startswith("data:"):
        return value
    return f"data:image/jpeg;base64,{value}"


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
