"""Supabase repository for per-user meal swaps."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from fitness_tracker.adapters.supabase_meal_repository import (
    dump_selections,
    parse_selections,
)
from fitness_tracker.domain.errors import RepositoryError
from fitness_tracker.domain.nutrition import FoodSelection, MealSlot
from fitness_tracker.services.meals import MealPreferenceRepository


@dataclass
class SupabaseMealPreferenceRepository(MealPreferenceRepository):
    """Supabase implementation for meal preferences."""

    client: Client

    def list_preferences(self, user_id: UUID) -> dict[MealSlot, list[FoodSelection]]:
        """Return stored selections per slot."""
        response = (
            self.client.table("user_meal_preferences")
            .select("slot, foods")
            .eq("user_id", str(user_id))
            .execute()
        )
        return {
            row["slot"]: list(parse_selections(row.get("foods")))
            for row in response.data or []
        }

    def upsert_preference(
        self, user_id: UUID, slot: MealSlot, selections: list[FoodSelection]
    ) -> None:
        """Insert or replace selections keyed by user and slot."""
        response = (
            self.client.table("user_meal_preferences")
            .upsert(
                {
                    "user_id": str(user_id),
                    "slot": slot,
                    "foods": dump_selections(selections),
                },
                on_conflict="user_id,slot",
            )
            .execute()
        )
        if not response.data:
            raise RepositoryError("Failed to save meal preference")

    def delete_preferences(self, user_id: UUID) -> None:
        """Remove every stored selection for a user."""
        self.client.table("user_meal_preferences").delete().eq(
            "user_id", str(user_id)
        ).execute()
