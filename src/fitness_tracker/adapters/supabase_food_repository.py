"""Supabase repository for shared and custom foods."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.nutrition import Food
from fitness_tracker.services.foods import FoodRepository


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for foods."""

    client: Client

    def list_foods(self) -> list[Food]:
        """Return enabled shared foods ordered by name."""
        response = (
            self.client.table("foods")
            .select("*")
            .eq("is_enabled", True)
            .order("name")
            .execute()
        )
        return [parse_food(row) for row in response.data or []]

    def list_custom_foods(self, user_id: UUID) -> list[Food]:
        """Return a user's custom foods."""
        response = (
            self.client.table("custom_foods")
            .select("*")
            .eq("user_id", str(user_id))
            .order("name")
            .execute()
        )
        return [parse_food(row, source="custom_foods") for row in response.data or []]

    def list_category_assignments(self) -> list[tuple[str, str]]:
        """Return (food_id, category) pairs."""
        response = (
            self.client.table("food_category_assignments")
            .select("food_id, category")
            .execute()
        )
        return [
            (str(row["food_id"]), str(row["category"])) for row in response.data or []
        ]


def parse_food(row: dict[str, object], source: str = "foods") -> Food:
    """Parse a food row into a domain model."""
    piece_weight = row.get("piece_weight_grams")
    return Food(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        calories_per_100g=float(row.get("calories_per_100g", 0.0)),
        protein_per_100g=float(row.get("protein_per_100g", 0.0)),
        carbs_per_100g=float(row.get("carbs_per_100g", 0.0)),
        fat_per_100g=float(row.get("fat_per_100g", 0.0)),
        category=row.get("category") or "complete",
        piece_weight_grams=(
            float(piece_weight) if isinstance(piece_weight, int | float) else None
        ),
        piece_name=row.get("piece_name"),
        source=source,
    )
