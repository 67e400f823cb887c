"""Models for AI food analysis results."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_RISK_IMPACT = 100


class ThreatLevel(StrEnum):
    """Three-level threat rating plus an explicit unknown."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    UNKNOWN = "UNKNOWN"


class _AnalysisModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class NutrientRisk(_AnalysisModel):
    """Contribution of a single nutrient to the overall risk."""

    name: str
    amount: str
    risk_impact: int = Field(ge=0, le=MAX_RISK_IMPACT)
    reason: str

    @field_validator("risk_impact", mode="before")
    @classmethod
    def _clamp_risk_impact(cls, value: object) -> object:
        if isinstance(value, bool) or not isinstance(value, int | float):
            return value
        return min(max(round(value), 0), MAX_RISK_IMPACT)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, value: object) -> object:
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value


class AnalysisResult(_AnalysisModel):
    """Structured judgement about whether the user can eat a food."""

    food_name: str
    can_eat: bool
    threat_level: ThreatLevel
    short_summary: str
    detailed_reasoning: str
    risky_ingredients: list[str] = Field(default_factory=list)
    nutrients: list[NutrientRisk] = Field(default_factory=list)
