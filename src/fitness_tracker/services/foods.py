"""Services for the shared food bank and user custom foods."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.nutrition import Food
from fitness_tracker.services.fetching import fetch_or_default


class FoodRepository(Protocol):
    """Persistence interface for foods."""

    def list_foods(self) -> list[Food]:
        """Return enabled shared foods."""

    def list_custom_foods(self, user_id: UUID) -> list[Food]:
        """Return a user's custom foods."""

    def list_category_assignments(self) -> list[tuple[str, str]]:
        """Return (food_id, food bank category) pairs."""


@dataclass
class FoodService:
    """Application service for food lookups."""

    repository: FoodRepository

    def list_foods(self, user_id: UUID | None = None) -> list[Food]:
        """Return shared foods followed by the user's custom foods."""
        foods = fetch_or_default(self.repository.list_foods, [], action="fetch foods")
        if user_id is not None:
            foods = foods + fetch_or_default(
                lambda: self.repository.list_custom_foods(user_id),
                [],
                action="fetch custom foods",
            )
        return foods

    def get_food(self, food_id: str, user_id: UUID | None = None) -> Food | None:
        """Return a food by id."""
        return self.foods_by_id(user_id).get(food_id)

    def foods_by_id(self, user_id: UUID | None = None) -> dict[str, Food]:
        """Return all visible foods keyed by id."""
        return {food.id: food for food in self.list_foods(user_id)}

    def food_bank(self, user_id: UUID | None = None) -> dict[str, list[Food]]:
        """Group foods into swap categories, keeping assignment order.

        A food may belong to several categories. Assignments to unknown
        foods are skipped.
        """
        foods = self.foods_by_id(user_id)
        assignments = fetch_or_default(
            self.repository.list_category_assignments,
            [],
            action="fetch food category assignments",
        )
        bank: dict[str, list[Food]] = {}
        for food_id, category in assignments:
            food = foods.get(food_id)
            if food is None:
                continue
            bank.setdefault(category, []).append(food)
        return bank
