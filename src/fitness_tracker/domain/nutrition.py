"""Nutrition domain models and macro calculations.

Foods carry their macros normalized to a 100 gram reference. A meal entry
(``MealFood``) pins a quantity to a food and snapshots the resulting macros
once, at construction time. The snapshot cannot be supplied by hand, so a
``MealFood`` never disagrees with its own quantity.
"""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field, fields
from typing import Literal

from fitness_tracker.domain.errors import MissingPieceWeightError

QuantityType = Literal["grams", "pieces"]
FoodCategory = Literal["protein", "carb", "vegetable", "fat", "dairy", "complete"]
MealSlot = Literal["breakfast", "snack1", "lunch", "snack2", "dinner"]

MEAL_SLOTS: tuple[MealSlot, ...] = ("breakfast", "snack1", "lunch", "snack2", "dinner")
FALLBACK_PIECE_WEIGHT_GRAMS = 100.0

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculatedMacros:
    """Absolute macros for a quantity of food."""

    calories: int
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class Food:
    """A food with its macro profile per 100 grams."""

    id: str
    name: str
    calories_per_100g: float
    protein_per_100g: float
    carbs_per_100g: float
    fat_per_100g: float
    category: FoodCategory = "complete"
    piece_weight_grams: float | None = None
    piece_name: str | None = None
    source: str = "foods"


@dataclass(frozen=True, kw_only=True)
class MealFood(Food):
    """A food with a chosen quantity and the macros derived from it."""

    quantity: float
    quantity_type: QuantityType
    calories: int = field(init=False)
    protein: float = field(init=False)
    carbs: float = field(init=False)
    fat: float = field(init=False)

    def __post_init__(self) -> None:
        macros = calculate_macros(self, self.quantity, self.quantity_type)
        object.__setattr__(self, "calories", macros.calories)
        object.__setattr__(self, "protein", macros.protein)
        object.__setattr__(self, "carbs", macros.carbs)
        object.__setattr__(self, "fat", macros.fat)

    @property
    def macros(self) -> CalculatedMacros:
        """Return the cached macros as a value."""
        return CalculatedMacros(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
        )

    def base_food(self) -> Food:
        """Return the underlying food without quantity information."""
        return Food(**_food_fields(self))

    def with_quantity(
        self, quantity: float, quantity_type: QuantityType | None = None
    ) -> "MealFood":
        """Return a new entry for another quantity, with macros recomputed."""
        return create_meal_food(self, quantity, quantity_type or self.quantity_type)


@dataclass(frozen=True)
class Meal:
    """One of the five daily meals."""

    slot: MealSlot
    label: str
    target_calories: int
    target_protein: int
    foods: tuple[MealFood, ...] = ()
    notes: str | None = None

    @property
    def totals(self) -> CalculatedMacros:
        """Return summed macros for the meal."""
        return calculate_total_macros(self.foods)


@dataclass(frozen=True)
class MealOption:
    """A complete, pre-built option for a meal slot."""

    id: str
    slot: MealSlot
    name: str
    foods: tuple[MealFood, ...] = ()


@dataclass(frozen=True)
class FoodSelection:
    """Stored reference to a food and quantity; macros are derived on load."""

    food_id: str
    quantity: float
    quantity_type: QuantityType

    @classmethod
    def from_meal_food(cls, meal_food: MealFood) -> "FoodSelection":
        """Build a selection from a meal entry."""
        return cls(
            food_id=meal_food.id,
            quantity=meal_food.quantity,
            quantity_type=meal_food.quantity_type,
        )


@dataclass(frozen=True)
class MealOptionRecord:
    """A stored meal option before its foods are resolved."""

    id: str
    slot: MealSlot
    name: str
    selections: tuple[FoodSelection, ...] = ()


@dataclass(frozen=True)
class DailyMealPlan:
    """The effective meals for a day, with totals and targets."""

    meals: tuple[Meal, ...]
    totals: CalculatedMacros
    target_calories: int
    target_protein: int


def calculate_macros(
    food: Food,
    quantity: float,
    quantity_type: QuantityType,
    *,
    strict: bool = False,
) -> CalculatedMacros:
    """Scale a food's per-100g profile to the requested quantity.

    Pieces of a food without a piece weight are counted as 100 grams each,
    unless ``strict`` is set, in which case ``MissingPieceWeightError`` is
    raised. Calories are rounded to an integer, the other macros to one
    decimal place.
    """
    grams = quantity
    if quantity_type == "pieces":
        if not food.piece_weight_grams:
            if strict:
                raise MissingPieceWeightError(food.name)
            _logger.warning(
                "Food %r has no piece weight, defaulting to %sg per piece",
                food.name,
                FALLBACK_PIECE_WEIGHT_GRAMS,
            )
            grams = quantity * FALLBACK_PIECE_WEIGHT_GRAMS
        else:
            grams = quantity * food.piece_weight_grams

    multiplier = grams / 100
    return CalculatedMacros(
        calories=int(_round_half_up(food.calories_per_100g * multiplier)),
        protein=_round_half_up(food.protein_per_100g * multiplier * 10) / 10,
        carbs=_round_half_up(food.carbs_per_100g * multiplier * 10) / 10,
        fat=_round_half_up(food.fat_per_100g * multiplier * 10) / 10,
    )


def create_meal_food(
    food: Food,
    quantity: float,
    quantity_type: QuantityType,
    *,
    strict: bool = False,
) -> MealFood:
    """Build a meal entry for a food and quantity."""
    if strict:
        calculate_macros(food, quantity, quantity_type, strict=True)
    return MealFood(
        **_food_fields(food), quantity=quantity, quantity_type=quantity_type
    )


def format_quantity(
    quantity: float, quantity_type: QuantityType, piece_name: str | None = None
) -> str:
    """Format a quantity for display, e.g. ``150g``, ``1 egg`` or ``3 eggs``.

    Pluralization only appends ``s``; irregular plurals are not handled.
    """
    amount = _format_number(quantity)
    if quantity_type == "grams":
        return f"{amount}g"
    if piece_name:
        plural = piece_name if quantity == 1 else f"{piece_name}s"
        return f"{amount} {plural}"
    return f"{amount} piece{'' if quantity == 1 else 's'}"


def get_weight_in_grams(
    food: Food, quantity: float, quantity_type: QuantityType
) -> float:
    """Return the weight in grams for a quantity of food."""
    if quantity_type == "grams":
        return quantity
    if food.piece_weight_grams is None:
        return quantity * FALLBACK_PIECE_WEIGHT_GRAMS
    return quantity * food.piece_weight_grams


def can_measure_in_pieces(food: Food) -> bool:
    """Return True when the food has a usable per-piece weight."""
    return food.piece_weight_grams is not None and food.piece_weight_grams > 0


def get_default_quantity(food: Food) -> tuple[float, QuantityType]:
    """Return the quantity a new selection of this food starts with."""
    if can_measure_in_pieces(food):
        return 1, "pieces"
    return 100, "grams"


def calculate_total_macros(foods: Iterable[MealFood]) -> CalculatedMacros:
    """Sum the cached macros of meal entries."""
    calories = 0
    protein = carbs = fat = 0.0
    for food in foods:
        calories += food.calories
        protein = _round_half_up((protein + food.protein) * 10) / 10
        carbs = _round_half_up((carbs + food.carbs) * 10) / 10
        fat = _round_half_up((fat + food.fat) * 10) / 10
    return CalculatedMacros(calories=calories, protein=protein, carbs=carbs, fat=fat)


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _food_fields(food: Food) -> dict[str, object]:
    return {item.name: getattr(food, item.name) for item in fields(Food)}
