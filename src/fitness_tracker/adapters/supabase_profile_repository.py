"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.errors import RepositoryError
from fitness_tracker.domain.progress import UserProfile
from fitness_tracker.services.profile import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for user profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the stored profile, if any."""
        response = (
            self.client.table("user_profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserProfile(
            name=str(row.get("name", "")),
            current_weight=float(row.get("current_weight", 0)),
            target_weight=float(row.get("target_weight", 0)),
            height=float(row.get("height", 0)),
            start_date=date.fromisoformat(str(row["start_date"])),
            week_number=int(row.get("week_number", 1)),
        )

    def update_profile(self, user_id: UUID, updates: dict[str, object]) -> None:
        """Apply partial updates to the profile."""
        payload = {
            key: value.isoformat() if isinstance(value, date) else value
            for key, value in updates.items()
        }
        response = (
            self.client.table("user_profiles")
            .update(payload)
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RepositoryError("Failed to update profile")
