"""Supabase repository for week-scoped workout customizations."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.errors import RepositoryError
from fitness_tracker.domain.workouts import (
    CustomizationKey,
    SwappedExercise,
    WorkoutCustomization,
)
from fitness_tracker.services.customizations import CustomizationRepository

_TABLE = "user_workout_customizations"


@dataclass
class SupabaseCustomizationRepository(CustomizationRepository):
    """Supabase implementation for workout customizations."""

    client: Client

    def list_customizations(
        self, user_id: UUID, week_start: date
    ) -> list[WorkoutCustomization]:
        """Return a user's customizations for a week."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .eq("week_start", week_start.isoformat())
            .execute()
        )
        return [_parse_customization(row) for row in response.data or []]

    def get_customization(self, key: CustomizationKey) -> WorkoutCustomization | None:
        """Return the customization stored under a key, if any."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(key.user_id))
            .eq("day_of_week", key.day_of_week)
            .eq("week_start", key.week_start.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_customization(response.data[0])

    def upsert_customization(
        self, user_id: UUID, customization: WorkoutCustomization
    ) -> None:
        """Insert or replace a customization keyed by user, day and week."""
        response = (
            self.client.table(_TABLE)
            .upsert(
                {
                    "user_id": str(user_id),
                    "day_of_week": customization.day_of_week,
                    "week_start": customization.week_start.isoformat(),
                    "swapped_exercises": [
                        {
                            "originalId": swap.original_id,
                            "replacementId": swap.replacement_id,
                        }
                        for swap in customization.swapped_exercises
                    ],
                    "added_exercises": list(customization.added_exercises),
                    "cardio_customization": customization.cardio_customization,
                },
                on_conflict="user_id,day_of_week,week_start",
            )
            .execute()
        )
        if not response.data:
            raise RepositoryError("Failed to save workout customization")

    def delete_customization(self, key: CustomizationKey) -> None:
        """Delete the customization stored under a key."""
        self.client.table(_TABLE).delete().eq("user_id", str(key.user_id)).eq(
            "day_of_week", key.day_of_week
        ).eq("week_start", key.week_start.isoformat()).execute()


def _parse_customization(row: dict[str, object]) -> WorkoutCustomization:
    return WorkoutCustomization(
        day_of_week=int(row["day_of_week"]),
        week_start=date.fromisoformat(str(row["week_start"])),
        swapped_exercises=tuple(
            SwappedExercise(
                original_id=str(swap["originalId"]),
                replacement_id=str(swap["replacementId"]),
            )
            for swap in row.get("swapped_exercises") or []
        ),
        added_exercises=tuple(str(item) for item in row.get("added_exercises") or []),
        cardio_customization=row.get("cardio_customization"),
    )
