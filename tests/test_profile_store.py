"""Tests for the profile store."""

from can_i_have_this.domain.profile import AuthType
from can_i_have_this.services.profiles import ProfileStore
from tests.conftest import (
    SESSION_KEY,
    FailingProfileRepository,
    InMemoryProfileRepository,
    make_profile,
)

ADDRESS_KEY = f"{SESSION_KEY}_ana@example.com"


def _federated():
    return make_profile(
        id="sub-123", auth_type=AuthType.FEDERATED, email="ana@example.com"
    )


def test_save_and_load_round_trip(
    profile_store: ProfileStore, profile_repository: InMemoryProfileRepository
) -> None:
    profile = make_profile(safe_food_list=["Rice"])

    profile_store.save(profile)

    assert profile_store.load() == profile
    assert set(profile_repository.records) == {SESSION_KEY}


def test_load_returns_none_when_missing(profile_store: ProfileStore) -> None:
    assert profile_store.load() is None


def test_load_hydrates_partial_record(
    profile_store: ProfileStore, profile_repository: InMemoryProfileRepository
) -> None:
    profile_repository.records[SESSION_KEY] = {"id": "guest-9", "name": "Old"}

    profile = profile_store.load()

    assert profile is not None
    assert profile.safe_food_list == []
    assert profile.journal == []


def test_load_returns_none_on_schema_mismatch(
    profile_store: ProfileStore, profile_repository: InMemoryProfileRepository
) -> None:
    profile_repository.records[SESSION_KEY] = {"name": "no id", "journal": "bad"}

    assert profile_store.load() is None


def test_load_returns_none_on_non_object_record(
    profile_store: ProfileStore, profile_repository: InMemoryProfileRepository
) -> None:
    records: dict[str, object] = profile_repository.records  # type: ignore[assignment]
    records[SESSION_KEY] = ["not", "a", "profile"]

    assert profile_store.load() is None


def test_load_returns_none_when_storage_fails() -> None:
    store = ProfileStore(repository=FailingProfileRepository(), session_key=SESSION_KEY)

    assert store.load() is None


def test_save_failure_is_not_fatal() -> None:
    store = ProfileStore(repository=FailingProfileRepository(), session_key=SESSION_KEY)

    store.save(make_profile())
    store.clear()


def test_save_writes_address_copy_for_federated_profiles(
    profile_store: ProfileStore, profile_repository: InMemoryProfileRepository
) -> None:
    profile_store.save(_federated())

    assert set(profile_repository.records) == {SESSION_KEY, ADDRESS_KEY}
    assert profile_repository.records[ADDRESS_KEY]["id"] == "sub-123"


def test_save_skips_address_copy_without_email(
    profile_store: ProfileStore, profile_repository: InMemoryProfileRepository
) -> None:
    profile_store.save(make_profile(auth_type=AuthType.FEDERATED, email=None))

    assert set(profile_repository.records) == {SESSION_KEY}


def test_clear_keeps_address_copy(
    profile_store: ProfileStore, profile_repository: InMemoryProfileRepository
) -> None:
    profile_store.save(_federated())

    profile_store.clear()

    assert profile_store.load() is None
    assert ADDRESS_KEY in profile_repository.records


def test_recover_restores_active_session(profile_store: ProfileStore) -> None:
    profile = _federated()
    profile_store.save(profile)
    profile_store.clear()

    recovered = profile_store.recover("ana@example.com")

    assert recovered == profile
    assert profile_store.load() == profile


def test_recover_unknown_address(profile_store: ProfileStore) -> None:
    assert profile_store.recover("nobody@example.com") is None
