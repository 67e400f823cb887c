"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from supabase import create_client

from can_i_have_this.adapters.json_file_profile_repository import (
    JsonFileProfileRepository,
)
from can_i_have_this.adapters.openai_structured_client import OpenAIStructuredClient
from can_i_have_this.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from can_i_have_this.config import Settings
from can_i_have_this.services.analysis import FoodAnalysisService
from can_i_have_this.services.coordinator import ViewCoordinator
from can_i_have_this.services.profiles import ProfileRepository, ProfileStore
from can_i_have_this.services.recommendations import RecommendationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_store: ProfileStore
    recommendation_service: RecommendationService
    analysis_service: FoodAnalysisService
    coordinator: ViewCoordinator
    close_resources: Callable[[], Awaitable[None]]


def build_profile_repository(settings: Settings) -> ProfileRepository:
    """Create the profile repository selected by settings."""
    if settings.profile_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "supabase_url and supabase_service_key are required "
                "for the supabase profile backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseProfileRepository(
            client=client, table=settings.supabase_profile_table
        )
    return JsonFileProfileRepository(root=settings.profile_dir)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    profile_store = ProfileStore(
        repository=build_profile_repository(resolved_settings),
        session_key=resolved_settings.session_key,
    )
    openai_client = OpenAIStructuredClient.create(resolved_settings.openai_api_key)
    recommendation_service = RecommendationService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    analysis_service = FoodAnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        image_model=resolved_settings.openai_image_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    coordinator = ViewCoordinator(
        store=profile_store,
        recommendation_service=recommendation_service,
        analysis_service=analysis_service,
        timezone=ZoneInfo(resolved_settings.timezone),
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_store=profile_store,
        recommendation_service=recommendation_service,
        analysis_service=analysis_service,
        coordinator=coordinator,
        close_resources=close_resources,
    )
