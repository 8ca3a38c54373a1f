"""Meal plan service: base meals, options and per-user swaps."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.nutrition import (
    MEAL_SLOTS,
    DailyMealPlan,
    Food,
    FoodSelection,
    Meal,
    MealFood,
    MealOption,
    MealOptionRecord,
    MealSlot,
    calculate_total_macros,
    create_meal_food,
)
from fitness_tracker.services.fetching import fetch_or_default, write_or_log
from fitness_tracker.services.foods import FoodService

_logger = logging.getLogger(__name__)


class MealRepository(Protocol):
    """Persistence interface for the base meal plan."""

    def list_meals(self) -> list[Meal]:
        """Return base meals with their foods, ordered by slot."""

    def list_meal_options(
        self, slot: MealSlot | None = None
    ) -> list[MealOptionRecord]:
        """Return stored meal options, optionally for one slot."""


class MealPreferenceRepository(Protocol):
    """Persistence interface for a user's swapped foods."""

    def list_preferences(self, user_id: UUID) -> dict[MealSlot, list[FoodSelection]]:
        """Return stored selections per slot."""

    def upsert_preference(
        self, user_id: UUID, slot: MealSlot, selections: list[FoodSelection]
    ) -> None:
        """Insert or replace selections keyed by user and slot."""

    def delete_preferences(self, user_id: UUID) -> None:
        """Remove every stored selection for a user."""


@dataclass
class MealPlanService:
    """Service that combines base meals with user customizations."""

    meal_repository: MealRepository
    preference_repository: MealPreferenceRepository
    food_service: FoodService
    daily_target_calories: int = 1950
    daily_target_protein: int = 200

    def get_meals(self) -> list[Meal]:
        """Return the base meal plan."""
        return fetch_or_default(
            self.meal_repository.list_meals, [], action="fetch meals"
        )

    def get_meal_options(
        self, slot: MealSlot | None = None, user_id: UUID | None = None
    ) -> list[MealOption]:
        """Return meal options with their foods resolved."""
        records = fetch_or_default(
            lambda: self.meal_repository.list_meal_options(slot),
            [],
            action="fetch meal options",
        )
        if not records:
            return []
        foods = self.food_service.foods_by_id(user_id)
        return [
            MealOption(
                id=record.id,
                slot=record.slot,
                name=record.name,
                foods=tuple(_resolve_selections(list(record.selections), foods)),
            )
            for record in records
        ]

    def get_custom_meals(self, user_id: UUID | None) -> dict[MealSlot, list[MealFood]]:
        """Return a user's swapped foods for every slot, empty when unset."""
        custom: dict[MealSlot, list[MealFood]] = {slot: [] for slot in MEAL_SLOTS}
        if user_id is None:
            return custom
        stored = fetch_or_default(
            lambda: self.preference_repository.list_preferences(user_id),
            {},
            action="fetch meal preferences",
        )
        if not stored:
            return custom
        foods = self.food_service.foods_by_id(user_id)
        for slot, selections in stored.items():
            custom[slot] = _resolve_selections(selections, foods)
        return custom

    def update_meal_foods(
        self, user_id: UUID | None, slot: MealSlot, foods: list[MealFood]
    ) -> bool:
        """Replace the foods a user has chosen for a slot."""
        if user_id is None:
            return False
        selections = [FoodSelection.from_meal_food(food) for food in foods]
        return write_or_log(
            lambda: self.preference_repository.upsert_preference(
                user_id, slot, selections
            ),
            action="update meal preferences",
        )

    def add_food_to_meal(
        self, user_id: UUID | None, slot: MealSlot, food: MealFood
    ) -> bool:
        """Append a food to a user's slot."""
        if user_id is None:
            return False
        current = self.get_custom_meals(user_id)[slot]
        return self.update_meal_foods(user_id, slot, [*current, food])

    def remove_food_from_meal(
        self, user_id: UUID | None, slot: MealSlot, food_id: str
    ) -> bool:
        """Remove a food from a user's slot."""
        if user_id is None:
            return False
        current = self.get_custom_meals(user_id)[slot]
        remaining = [food for food in current if food.id != food_id]
        return self.update_meal_foods(user_id, slot, remaining)

    def reset_meal(self, user_id: UUID | None, slot: MealSlot) -> bool:
        """Clear a user's swaps for one slot."""
        return self.update_meal_foods(user_id, slot, [])

    def reset_all_meals(self, user_id: UUID | None) -> bool:
        """Clear every swap a user has made."""
        if user_id is None:
            return False
        return write_or_log(
            lambda: self.preference_repository.delete_preferences(user_id),
            action="reset meal preferences",
        )

    def get_daily_plan(self, user_id: UUID | None) -> DailyMealPlan:
        """Return the effective plan: user swaps where set, base foods elsewhere."""
        custom = self.get_custom_meals(user_id)
        meals = tuple(
            replace(meal, foods=tuple(custom[meal.slot])) if custom[meal.slot] else meal
            for meal in self.get_meals()
        )
        return DailyMealPlan(
            meals=meals,
            totals=calculate_total_macros(
                food for meal in meals for food in meal.foods
            ),
            target_calories=self.daily_target_calories,
            target_protein=self.daily_target_protein,
        )


def _resolve_selections(
    selections: list[FoodSelection], foods: dict[str, Food]
) -> list[MealFood]:
    resolved: list[MealFood] = []
    for selection in selections:
        food = foods.get(selection.food_id)
        if food is None:
            _logger.warning("Dropping selection for unknown food %s", selection.food_id)
            continue
        resolved.append(
            create_meal_food(food, selection.quantity, selection.quantity_type)
        )
    return resolved
