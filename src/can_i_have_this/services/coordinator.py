"""Screen sequencing around the active profile."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from zoneinfo import ZoneInfo

from can_i_have_this.domain.analysis import AnalysisResult
from can_i_have_this.domain.profile import (
    AuthType,
    JournalEntry,
    JournalStatus,
    Theme,
    UserProfile,
    unique_items,
)
from can_i_have_this.services import classification, journal
from can_i_have_this.services.analysis import AnalysisFailedError, FoodAnalysisService
from can_i_have_this.services.classification import FoodList
from can_i_have_this.services.profiles import ProfileStore
from can_i_have_this.services.recommendations import RecommendationService

logger = logging.getLogger(__name__)


class AppView(StrEnum):
    """Screens the coordinator moves between."""

    INTRO = "INTRO"
    ONBOARDING = "ONBOARDING"
    DASHBOARD = "DASHBOARD"
    SCANNING = "SCANNING"
    RESULT = "RESULT"
    LOADING = "LOADING"
    MY_DIET = "MY_DIET"
    JOURNAL = "JOURNAL"
    SETTINGS = "SETTINGS"


@dataclass(frozen=True)
class FederatedIdentity:
    """Identity claims from a completed federated sign-in."""

    sub: str
    name: str
    email: str | None = None


@dataclass(frozen=True)
class OnboardingDraft:
    """Answers collected by the onboarding screens."""

    name: str
    conditions: list[str]
    allergies: list[str]
    goals: str = ""


@dataclass
class ViewCoordinator:
    """Holds the only reference to the active profile and applies user actions.

    Every mutation goes through the engine functions and is persisted through
    the store before the coordinator exposes the new profile.
    """

    store: ProfileStore
    recommendation_service: RecommendationService
    analysis_service: FoodAnalysisService
    timezone: ZoneInfo
    view: AppView = AppView.INTRO
    profile: UserProfile | None = None
    analysis_result: AnalysisResult | None = None
    error_message: str | None = None
    loading_message: str | None = None
    pending_identity: FederatedIdentity | None = None

    def start(self) -> AppView:
        """Resume a saved session or show the intro screen."""
        self.profile = self.store.load()
        self.view = AppView.DASHBOARD if self.profile else AppView.INTRO
        return self.view

    def login_guest(self) -> AppView:
        """Start onboarding for a guest."""
        self.pending_identity = None
        self.view = AppView.ONBOARDING
        return self.view

    def login_federated(self, identity: FederatedIdentity) -> AppView:
        """Recover a federated user's profile or send them to onboarding."""
        recovered = self.store.recover(identity.email) if identity.email else None
        if recovered is not None:
            logger.info("Recovered profile %s for returning user", recovered.id)
            self.profile = recovered
            self.pending_identity = None
            self.view = AppView.DASHBOARD
            return self.view
        self.pending_identity = identity
        self.view = AppView.ONBOARDING
        return self.view

    async def complete_onboarding(self, draft: OnboardingDraft) -> UserProfile:
        """Create the profile, fetch recommendations and persist it."""
        identity = self.pending_identity
        now_ms = journal.to_timestamp_ms(datetime.now(tz=UTC))
        profile = UserProfile(
            id=identity.sub if identity else f"guest-{now_ms}",
            auth_type=AuthType.FEDERATED if identity else AuthType.GUEST,
            email=identity.email if identity else None,
            name=(identity.name if identity and identity.name else draft.name.strip()),
            conditions=_clean(draft.conditions),
            allergies=_clean(draft.allergies),
            goals=draft.goals.strip(),
            is_onboarded=True,
        )
        self.profile = profile
        self._show_loading("Personalizing your avoidance list...")
        profile = await self.recommendation_service.regenerate(profile)
        self._commit(profile)
        self.pending_identity = None
        self.loading_message = None
        self.view = AppView.DASHBOARD
        return profile

    async def update_medical_profile(
        self, conditions: list[str], allergies: list[str], goals: str
    ) -> UserProfile | None:
        """Replace medical details and regenerate avoidances."""
        if self.profile is None:
            return None
        updated = self.profile.model_copy(
            update={
                "conditions": _clean(conditions),
                "allergies": _clean(allergies),
                "goals": goals.strip(),
            }
        )
        updated = await self.recommendation_service.regenerate(updated)
        return self._commit(updated)

    async def search_text(self, query: str) -> AnalysisResult | None:
        """Analyze a typed food description."""
        if self.profile is None or not query.strip():
            return None
        self._show_loading("Consulting dietary database...")
        try:
            result = await self.analysis_service.analyze_text(self.profile, query)
        except AnalysisFailedError as exc:
            return self._analysis_failed(exc)
        return self._show_result(result)

    async def search_image(self, image: bytes | str) -> AnalysisResult | None:
        """Analyze a captured photo of a food or label."""
        if self.profile is None:
            return None
        self._show_loading("Analyzing ingredients and safety...")
        try:
            result = await self.analysis_service.analyze_image(self.profile, image)
        except AnalysisFailedError as exc:
            return self._analysis_failed(exc)
        return self._show_result(result)

    def classify_result(self, is_safe: bool) -> UserProfile | None:
        """Record the analyzed food as safe or unsafe."""
        if self.profile is None or self.analysis_result is None:
            return None
        food_name = self.analysis_result.food_name.strip()
        if not food_name:
            return self.profile
        return self._commit(
            classification.classify(self.profile, food_name, is_safe)
        )

    def add_food(self, food_name: str, is_safe: bool) -> UserProfile | None:
        """Quick-add a food to the safe or unsafe list."""
        if self.profile is None:
            return None
        name = classification.normalize_food_name(food_name)
        return self._commit(classification.classify(self.profile, name, is_safe))

    def remove_food(self, food_name: str, food_list: FoodList) -> UserProfile | None:
        """Remove an item from one of the editable food lists."""
        if self.profile is None:
            return None
        return self._commit(
            classification.remove_food(self.profile, food_name, food_list)
        )

    def log_meal(
        self,
        food_name: str,
        status: JournalStatus,
        notes: str = "",
        eaten_at: datetime | None = None,
    ) -> JournalEntry | None:
        """Append a journal entry, classifying the food when SAFE or UNSAFE."""
        if self.profile is None:
            return None
        if eaten_at is not None and eaten_at.tzinfo is None:
            # Wall-clock times are local to the journal timezone.
            eaten_at = eaten_at.replace(tzinfo=self.timezone)
        entry = journal.new_entry(food_name, status, notes=notes, eaten_at=eaten_at)
        self._commit(journal.append(self.profile, entry))
        return entry

    def entries_on_day(self, day: date) -> list[JournalEntry]:
        """Return the active profile's entries for a local day."""
        if self.profile is None:
            return []
        return journal.entries_on_day(self.profile.journal, day, self.timezone)

    def journal_index(self) -> journal.JournalDayIndex:
        """Index the active profile's journal for calendar rendering."""
        entries = self.profile.journal if self.profile else []
        return journal.JournalDayIndex.build(entries, self.timezone)

    def set_theme(self, theme: Theme) -> UserProfile | None:
        """Switch between light and dark display."""
        if self.profile is None:
            return None
        return self._commit(self.profile.model_copy(update={"theme": Theme(theme)}))

    def update_details(
        self, name: str | None = None, avatar: str | None = None
    ) -> UserProfile | None:
        """Change display attributes."""
        if self.profile is None:
            return None
        changes: dict[str, object] = {}
        if name is not None and name.strip():
            changes["name"] = name.strip()
        if avatar is not None:
            changes["avatar"] = avatar or None
        if not changes:
            return self.profile
        return self._commit(self.profile.model_copy(update=changes))

    def open(self, view: AppView) -> AppView:
        """Navigate to a screen that needs an active profile."""
        self.view = view if self.profile else AppView.INTRO
        return self.view

    def back_to_dashboard(self) -> AppView:
        """Dismiss results and errors."""
        self.analysis_result = None
        self.error_message = None
        self.view = AppView.DASHBOARD if self.profile else AppView.INTRO
        return self.view

    def logout(self) -> AppView:
        """Clear the active session; per-address copies stay recoverable."""
        self.store.clear()
        self.profile = None
        self.analysis_result = None
        self.pending_identity = None
        self.view = AppView.INTRO
        return self.view

    def _commit(self, profile: UserProfile) -> UserProfile:
        self.profile = profile
        self.store.save(profile)
        return profile

    def _show_loading(self, message: str) -> None:
        self.loading_message = message
        self.error_message = None
        self.view = AppView.LOADING

    def _show_result(self, result: AnalysisResult) -> AnalysisResult:
        self.analysis_result = result
        self.loading_message = None
        self.view = AppView.RESULT
        return result

    def _analysis_failed(self, exc: AnalysisFailedError) -> None:
        self.analysis_result = None
        self.loading_message = None
        self.error_message = str(exc)
        self.view = AppView.DASHBOARD


def _clean(items: list[str]) -> list[str]:
    return unique_items(item.strip() for item in items if item.strip())
