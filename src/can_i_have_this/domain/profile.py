"""Domain models for user profiles and journal entries."""

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

LEGACY_FEDERATED_AUTH = "GOOGLE"


class AuthType(StrEnum):
    """How the profile's identity was established."""

    GUEST = "GUEST"
    FEDERATED = "FEDERATED"


class Theme(StrEnum):
    """Display theme preference."""

    LIGHT = "light"
    DARK = "dark"


class JournalStatus(StrEnum):
    """Outcome recorded for a logged meal."""

    SAFE = "SAFE"
    UNSAFE = "UNSAFE"
    NEUTRAL = "NEUTRAL"


class _Record(BaseModel):
    """Base for persisted records: camelCase on disk, snake_case in code."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class JournalEntry(_Record):
    """A single eating event; immutable once created."""

    id: str
    timestamp: int
    food_name: str
    notes: str = ""
    status: JournalStatus = JournalStatus.NEUTRAL

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_default(cls, value: object) -> object:
        return "" if value is None else value


class UserProfile(_Record):
    """Root aggregate holding a user's dietary picture."""

    id: str
    auth_type: AuthType = AuthType.GUEST
    name: str = ""
    email: str | None = None
    avatar: str | None = None
    conditions: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    generated_avoidance_list: list[str] = Field(default_factory=list)
    custom_avoidance_list: list[str] = Field(default_factory=list)
    safe_food_list: list[str] = Field(default_factory=list)
    goals: str = ""
    is_onboarded: bool = False
    theme: Theme = Theme.LIGHT
    journal: list[JournalEntry] = Field(default_factory=list)

    @field_validator("auth_type", mode="before")
    @classmethod
    def _legacy_auth_type(cls, value: object) -> object:
        if value is None:
            return AuthType.GUEST
        if value == LEGACY_FEDERATED_AUTH:
            return AuthType.FEDERATED
        return value

    @field_validator(
        "conditions",
        "allergies",
        "generated_avoidance_list",
        "custom_avoidance_list",
        "safe_food_list",
        mode="before",
    )
    @classmethod
    def _unique_list(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, list | tuple):
            return unique_items(value)
        return value

    @field_validator("journal", mode="before")
    @classmethod
    def _journal_default(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("name", "goals", mode="before")
    @classmethod
    def _text_default(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("theme", mode="before")
    @classmethod
    def _theme_default(cls, value: object) -> object:
        return Theme.LIGHT if value is None else value

    def to_record(self) -> dict[str, object]:
        """Return the JSON-ready persisted form."""
        return self.model_dump(mode="json", by_alias=True)


def unique_items(items: Iterable[str]) -> list[str]:
    """Drop repeated entries, keeping the first occurrence of each."""
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result
