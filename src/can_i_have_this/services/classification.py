"""Safe/unsafe food classification rules."""

from enum import StrEnum

from can_i_have_this.domain.profile import UserProfile
from can_i_have_this.services.recommendations import remove_generated_item


class FoodList(StrEnum):
    """Food lists a user can edit item by item."""

    SAFE = "safe"
    UNSAFE = "unsafe"
    GENERATED = "generated"


class InvalidFoodNameError(ValueError):
    """Raised when a food name is empty once whitespace is stripped."""


def normalize_food_name(raw: str) -> str:
    """Trim a user-supplied food name and reject empty input."""
    value = raw.strip()
    if not value:
        raise InvalidFoodNameError("Food name must not be empty")
    return value


def classify(profile: UserProfile, food_name: str, is_safe: bool) -> UserProfile:
    """Mark a food as safe or unsafe, keeping the two lists disjoint."""
    if is_safe:
        target, opposite = profile.safe_food_list, profile.custom_avoidance_list
    else:
        target, opposite = profile.custom_avoidance_list, profile.safe_food_list

    updated_target = target if food_name in target else [*target, food_name]
    updated_opposite = [item for item in opposite if item != food_name]

    if is_safe:
        return profile.model_copy(
            update={
                "safe_food_list": updated_target,
                "custom_avoidance_list": updated_opposite,
            }
        )
    return profile.model_copy(
        update={
            "custom_avoidance_list": updated_target,
            "safe_food_list": updated_opposite,
        }
    )


def remove_food(
    profile: UserProfile, food_name: str, food_list: FoodList
) -> UserProfile:
    """Remove a single item from one of the editable food lists."""
    if food_list == FoodList.GENERATED:
        return remove_generated_item(profile, food_name)
    field = "safe_food_list" if food_list == FoodList.SAFE else "custom_avoidance_list"
    current: list[str] = getattr(profile, field)
    return profile.model_copy(
        update={field: [item for item in current if item != food_name]}
    )
