"""Merge rules for AI-generated avoidance recommendations."""

import logging
from dataclasses import dataclass

from can_i_have_this.domain.profile import UserProfile, unique_items
from can_i_have_this.services.structured_output import StructuredOutputClient

logger = logging.getLogger(__name__)

RECOMMENDATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "avoidList": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["avoidList"],
    "additionalProperties": False,
}


def aggregate_avoidances(profile: UserProfile) -> list[str]:
    """Return allergies, generated and custom avoidances in that order.

    Entries are not deduplicated: views group them by provenance, and the
    same food may legitimately appear in more than one source list.
    """
    return [
        *profile.allergies,
        *profile.generated_avoidance_list,
        *profile.custom_avoidance_list,
    ]


def apply_recommendations(profile: UserProfile, new_list: list[str]) -> UserProfile:
    """Replace the generated avoidance list wholesale."""
    return profile.model_copy(
        update={"generated_avoidance_list": unique_items(new_list)}
    )


def remove_generated_item(profile: UserProfile, item: str) -> UserProfile:
    """Drop one AI-suggested item; a later regeneration may bring it back."""
    return profile.model_copy(
        update={
            "generated_avoidance_list": [
                existing
                for existing in profile.generated_avoidance_list
                if existing != item
            ]
        }
    )


@dataclass
class RecommendationService:
    """Service that asks the LLM which foods a profile should avoid."""

    client: StructuredOutputClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def generate(self, conditions: list[str], allergies: list[str]) -> list[str]:
        """Return foods and ingredients to avoid for the given profile data."""
        raw = await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=_recommendation_prompt(conditions, allergies),
            schema=RECOMMENDATION_SCHEMA,
            schema_name="dietary_recommendations",
        )
        avoid_list = raw.get("avoidList")
        if not isinstance(avoid_list, list):
            raise RuntimeError("Recommendation response is missing avoidList")
        return [str(item).strip() for item in avoid_list if str(item).strip()]

    async def regenerate(self, profile: UserProfile) -> UserProfile:
        """Refresh generated avoidances, keeping the old list on failure."""
        try:
            avoid_list = await self.generate(profile.conditions, profile.allergies)
        except Exception:
            logger.warning(
                "Recommendation generation failed for profile %s",
                profile.id,
                exc_info=True,
            )
            return profile
        logger.info(
            "Generated %d avoidance items for profile %s", len(avoid_list), profile.id
        )
        return apply_recommendations(profile, avoid_list)


def _recommendation_prompt(conditions: list[str], allergies: list[str]) -> str:
    return (
        f"The user has these medical conditions: {', '.join(conditions) or 'None'}.\n"
        f"The user has these allergies: {', '.join(allergies) or 'None'}.\n\n"
        "Generate a list of specific ingredients or food groups they should "
        "generally avoid to manage these conditions. "
        'For example, if IBS is listed, include "Onion", "Garlic", '
        '"High Fructose Corn Syrup". If Celiac, include "Wheat", "Barley", "Rye". '
        "Do not include general advice, just the names of ingredients or foods."
    )
