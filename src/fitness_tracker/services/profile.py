"""User profile service."""

from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.progress import UserProfile
from fitness_tracker.services.fetching import fetch_or_default, write_or_log

PROFILE_FIELDS = frozenset(
    {
        "name",
        "current_weight",
        "target_weight",
        "height",
        "start_date",
        "week_number",
    }
)


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile, if any."""

    def update_profile(self, user_id: UUID, updates: dict[str, object]) -> None:
        """Apply partial updates to the profile."""


def default_profile(today: date | None = None) -> UserProfile:
    """Return the profile shown before the user has saved one."""
    return UserProfile(
        name="User",
        current_weight=80,
        target_weight=75,
        height=175,
        start_date=today or date.today(),
        week_number=1,
    )


@dataclass
class ProfileService:
    """Service for reading and updating the user profile."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID | None) -> UserProfile | None:
        """Return the user's profile, or defaults when none is stored."""
        if user_id is None:
            return None
        profile = fetch_or_default(
            lambda: self.repository.get_profile(user_id),
            None,
            action="fetch profile",
        )
        return profile or default_profile()

    def update_profile(
        self, user_id: UUID | None, updates: dict[str, object]
    ) -> UserProfile | None:
        """Apply partial updates and return the merged profile."""
        if user_id is None:
            return None
        allowed = {k: v for k, v in updates.items() if k in PROFILE_FIELDS}
        saved = write_or_log(
            lambda: self.repository.update_profile(user_id, allowed),
            action="update profile",
        )
        if not saved:
            return None
        profile = self.get_profile(user_id) or default_profile()
        return replace(profile, **allowed)
