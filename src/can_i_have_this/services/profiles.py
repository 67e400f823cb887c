"""Profile persistence lifecycle."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from can_i_have_this.domain.profile import AuthType, UserProfile

logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Key/value persistence interface for profile records."""

    def get(self, key: str) -> dict[str, object] | None:
        """Return the stored record for a key, if present."""

    def put(self, key: str, payload: dict[str, object]) -> None:
        """Store a record under a key, replacing any previous one."""

    def delete(self, key: str) -> None:
        """Remove the record stored under a key."""


def hydrate(raw: dict[str, object]) -> UserProfile:
    """Build a complete profile from a stored or partial record.

    Missing or null list fields default to empty lists. A food present in both
    the safe and the avoidance list is kept only as an avoidance. Raises
    ``pydantic.ValidationError`` when the record cannot describe a profile.
    """
    profile = UserProfile.model_validate(raw)
    conflicts = set(profile.safe_food_list) & set(profile.custom_avoidance_list)
    if not conflicts:
        return profile
    return profile.model_copy(
        update={
            "safe_food_list": [
                item for item in profile.safe_food_list if item not in conflicts
            ]
        }
    )


@dataclass
class ProfileStore:
    """Loads, saves and clears the active profile."""

    repository: ProfileRepository
    session_key: str

    def address_key(self, email: str) -> str:
        """Return the key of the per-address copy for a federated identity."""
        return f"{self.session_key}_{email}"

    def load(self) -> UserProfile | None:
        """Return the active profile, or None when absent or unreadable."""
        return self._read(self.session_key)

    def save(self, profile: UserProfile) -> None:
        """Persist the active profile plus a per-address copy when federated."""
        record = profile.to_record()
        self._write(self.session_key, record)
        if profile.auth_type == AuthType.FEDERATED and profile.email:
            self._write(self.address_key(profile.email), record)

    def clear(self) -> None:
        """Drop the active profile; per-address copies are retained."""
        try:
            self.repository.delete(self.session_key)
        except Exception:
            logger.exception("Failed to clear profile %s", self.session_key)

    def recover(self, email: str) -> UserProfile | None:
        """Restore a federated profile by address and make it active."""
        profile = self._read(self.address_key(email))
        if profile is None:
            return None
        self._write(self.session_key, profile.to_record())
        return profile

    def _read(self, key: str) -> UserProfile | None:
        try:
            raw = self.repository.get(key)
        except Exception:
            logger.exception("Failed to read profile %s", key)
            return None
        if raw is None:
            return None
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed profile record %s", key)
            return None
        try:
            return hydrate(raw)
        except ValidationError:
            logger.warning("Ignoring profile record %s with invalid schema", key)
            return None

    def _write(self, key: str, record: dict[str, object]) -> None:
        try:
            self.repository.put(key, record)
        except Exception:
            logger.exception("Failed to persist profile %s", key)
