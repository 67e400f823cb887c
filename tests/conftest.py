"""Shared test fixtures."""

from dataclasses import dataclass, field
from zoneinfo import ZoneInfo

import pytest

from can_i_have_this.config import Settings
from can_i_have_this.containers import AppContainer
from can_i_have_this.domain.profile import AuthType, UserProfile
from can_i_have_this.services.analysis import FoodAnalysisService
from can_i_have_this.services.coordinator import ViewCoordinator
from can_i_have_this.services.profiles import ProfileRepository, ProfileStore
from can_i_have_this.services.recommendations import RecommendationService
from can_i_have_this.services.structured_output import StructuredOutputClient

SESSION_KEY = "canIHaveThis_user"

ANALYSIS_PAYLOAD: dict[str, object] = {
    "foodName": "Pad Thai",
    "canEat": False,
    "threatLevel": "HIGH",
    "shortSummary": "Contains peanuts and garlic.",
    "detailedReasoning": "Peanuts are a listed allergy and garlic is high FODMAP.",
    "riskyIngredients": ["Peanuts", "Garlic"],
    "nutrients": [
        {
            "name": "Fructans",
            "amount": "High",
            "riskImpact": 80,
            "reason": "Garlic and onion are rich in fructans.",
        }
    ],
}


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    records: dict[str, dict[str, object]] = field(default_factory=dict)

    def get(self, key: str) -> dict[str, object] | None:
        return self.records.get(key)

    def put(self, key: str, payload: dict[str, object]) -> None:
        self.records[key] = payload

    def delete(self, key: str) -> None:
        self.records.pop(key, None)


@dataclass
class FailingProfileRepository(ProfileRepository):
    """Repository whose every operation raises."""

    def get(self, key: str) -> dict[str, object] | None:
        raise OSError("storage unavailable")

    def put(self, key: str, payload: dict[str, object]) -> None:
        raise OSError("storage unavailable")

    def delete(self, key: str) -> None:
        raise OSError("storage unavailable")


@dataclass
class FakeStructuredClient(StructuredOutputClient):
    """Fake LLM client returning payloads keyed by schema name."""

    payloads: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "dietary_recommendations": {"avoidList": ["Garlic", "Onion", "Wheat"]},
            "food_analysis": ANALYSIS_PAYLOAD,
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        instructions: str | None = None,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        self.calls.append(
            {
                "model": model,
                "prompt": prompt,
                "schema_name": schema_name,
                "instructions": instructions,
                "image_data_url": image_data_url,
            }
        )
        if self.error is not None:
            raise self.error
        return self.payloads[schema_name]


def make_profile(**overrides: object) -> UserProfile:
    """Build a small onboarded profile."""
    data: dict[str, object] = {
        "id": "guest-1",
        "auth_type": AuthType.GUEST,
        "name": "Ana",
        "conditions": ["IBS"],
        "allergies": ["Peanuts"],
        "is_onboarded": True,
    }
    data.update(overrides)
    return UserProfile(**data)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        profile_dir=tmp_path / "profiles",
        timezone="UTC",
    )


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def profile_store(profile_repository: InMemoryProfileRepository) -> ProfileStore:
    return ProfileStore(repository=profile_repository, session_key=SESSION_KEY)


@pytest.fixture
def llm_client() -> FakeStructuredClient:
    return FakeStructuredClient()


@pytest.fixture
def recommendation_service(llm_client: FakeStructuredClient) -> RecommendationService:
    return RecommendationService(
        client=llm_client, model="gpt-5.2", reasoning_effort=None, store=False
    )


@pytest.fixture
def analysis_service(llm_client: FakeStructuredClient) -> FoodAnalysisService:
    return FoodAnalysisService(
        client=llm_client,
        model="gpt-5.2",
        image_model="gpt-5.2-vision",
        reasoning_effort=None,
        store=False,
    )


@pytest.fixture
def coordinator(
    profile_store: ProfileStore,
    recommendation_service: RecommendationService,
    analysis_service: FoodAnalysisService,
) -> ViewCoordinator:
    return ViewCoordinator(
        store=profile_store,
        recommendation_service=recommendation_service,
        analysis_service=analysis_service,
        timezone=ZoneInfo("UTC"),
    )


@pytest.fixture
def container(
    settings: Settings,
    profile_store: ProfileStore,
    recommendation_service: RecommendationService,
    analysis_service: FoodAnalysisService,
    coordinator: ViewCoordinator,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        profile_store=profile_store,
        recommendation_service=recommendation_service,
        analysis_service=analysis_service,
        coordinator=coordinator,
        close_resources=close_resources,
    )
