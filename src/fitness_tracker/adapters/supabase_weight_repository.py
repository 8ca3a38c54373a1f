"""Supabase repository for body weight entries."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.errors import RepositoryError
from fitness_tracker.domain.progress import WeightEntry
from fitness_tracker.services.progress import WeightRepository


@dataclass
class SupabaseWeightRepository(WeightRepository):
    """Supabase implementation for weight entries."""

    client: Client

    def list_weights(self, user_id: UUID) -> list[WeightEntry]:
        """Return a user's weight entries, oldest first."""
        response = (
            self.client.table("weight_entries")
            .select("date, weight")
            .eq("user_id", str(user_id))
            .order("date")
            .execute()
        )
        return [
            WeightEntry(
                date=date.fromisoformat(str(row["date"])),
                weight=float(row["weight"]),
            )
            for row in response.data or []
        ]

    def upsert_weight(self, user_id: UUID, entry: WeightEntry) -> None:
        """Insert or replace the entry for a date."""
        response = (
            self.client.table("weight_entries")
            .upsert(
                {
                    "user_id": str(user_id),
                    "date": entry.date.isoformat(),
                    "weight": entry.weight,
                },
                on_conflict="user_id,date",
            )
            .execute()
        )
        if not response.data:
            raise RepositoryError("Failed to save weight entry")
