"""Supabase repository for the base meal plan and meal options."""

from dataclasses import dataclass

from supabase import Client

from fitness_tracker.adapters.supabase_food_repository import parse_food
from fitness_tracker.domain.nutrition import (
    MEAL_SLOTS,
    FoodSelection,
    Meal,
    MealFood,
    MealOptionRecord,
    MealSlot,
    create_meal_food,
)
from fitness_tracker.services.meals import MealRepository

_MEAL_SELECT = "*, meal_foods(quantity, quantity_type, foods(*))"


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals."""

    client: Client

    def list_meals(self) -> list[Meal]:
        """Return base meals with their foods, ordered by slot."""
        response = self.client.table("meals").select(_MEAL_SELECT).execute()
        meals = [_parse_meal(row) for row in response.data or []]
        return sorted(meals, key=lambda meal: _slot_index(meal.slot))

    def list_meal_options(
        self, slot: MealSlot | None = None
    ) -> list[MealOptionRecord]:
        """Return stored meal options, optionally for one slot."""
        query = self.client.table("meal_options").select("*")
        if slot is not None:
            query = query.eq("slot", slot)
        response = query.order("name").execute()
        return [_parse_option(row) for row in response.data or []]


def parse_selections(raw: object) -> tuple[FoodSelection, ...]:
    """Parse a jsonb list of ``{foodId, quantity, quantityType}`` entries."""
    if not isinstance(raw, list):
        return ()
    selections: list[FoodSelection] = []
    for item in raw:
        if not isinstance(item, dict) or "foodId" not in item:
            continue
        selections.append(
            FoodSelection(
                food_id=str(item["foodId"]),
                quantity=float(item.get("quantity", 0)),
                quantity_type=item.get("quantityType") or "grams",
            )
        )
    return tuple(selections)


def dump_selections(selections: list[FoodSelection]) -> list[dict[str, object]]:
    """Serialize selections into the jsonb shape stored by the backend."""
    return [
        {
            "foodId": selection.food_id,
            "quantity": selection.quantity,
            "quantityType": selection.quantity_type,
        }
        for selection in selections
    ]


def _parse_meal(row: dict[str, object]) -> Meal:
    foods: list[MealFood] = []
    for entry in row.get("meal_foods") or []:
        food_row = entry.get("foods")
        if not food_row:
            continue
        foods.append(
            create_meal_food(
                parse_food(food_row),
                float(entry.get("quantity", 0)),
                entry.get("quantity_type") or "grams",
            )
        )
    return Meal(
        slot=row["slot"],
        label=str(row.get("label", "")),
        target_calories=int(row.get("target_calories", 0)),
        target_protein=int(row.get("target_protein", 0)),
        foods=tuple(foods),
        notes=row.get("notes"),
    )


def _parse_option(row: dict[str, object]) -> MealOptionRecord:
    return MealOptionRecord(
        id=str(row["id"]),
        slot=row["slot"],
        name=str(row.get("name", "")),
        selections=parse_selections(row.get("foods")),
    )


def _slot_index(slot: str) -> int:
    return MEAL_SLOTS.index(slot) if slot in MEAL_SLOTS else len(MEAL_SLOTS)
