"""Pydantic models for API request bodies."""

from datetime import date

from pydantic import BaseModel, Field

from fitness_tracker.domain.nutrition import Food, FoodCategory, QuantityType
from fitness_tracker.domain.progress import CardioLog, ExerciseLog, SetLog, WorkoutLog
from fitness_tracker.domain.workouts import CardioType, DayType


class FoodPayload(BaseModel):
    """Food macro profile per 100 grams."""

    id: str
    name: str
    calories_per_100g: float = Field(ge=0, allow_inf_nan=False)
    protein_per_100g: float = Field(ge=0, allow_inf_nan=False)
    carbs_per_100g: float = Field(ge=0, allow_inf_nan=False)
    fat_per_100g: float = Field(ge=0, allow_inf_nan=False)
    category: FoodCategory = "complete"
    piece_weight_grams: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    piece_name: str | None = None

    def to_domain(self) -> Food:
        """Return the domain food."""
        return Food(**self.model_dump())


class MacrosRequest(BaseModel):
    """Request to scale a food to a quantity."""

    food: FoodPayload
    quantity: float = Field(ge=0, allow_inf_nan=False)
    quantity_type: QuantityType = "grams"
    strict: bool = False


class TotalsRequest(BaseModel):
    """Request to sum the macros of several foods."""

    items: list[MacrosRequest] = Field(default_factory=list)


class FoodSelectionPayload(BaseModel):
    """Reference to a stored food with a quantity."""

    food_id: str
    quantity: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    quantity_type: QuantityType | None = None


class MealFoodsRequest(BaseModel):
    """Replacement list of foods for a meal slot."""

    foods: list[FoodSelectionPayload] = Field(default_factory=list)


class SwapExerciseRequest(BaseModel):
    """Swap a template exercise for another."""

    original_id: str
    replacement_id: str
    week_start: date | None = None


class AddExerciseRequest(BaseModel):
    """Add an exercise to a day."""

    exercise_id: str
    week_start: date | None = None


class CardioRequest(BaseModel):
    """Pick a cardio type for a day; null clears the override."""

    cardio_type: CardioType | None = None
    week_start: date | None = None


class ExerciseDataRequest(BaseModel):
    """Per-user overrides for an exercise."""

    weight: float | None = Field(default=None, allow_inf_nan=False)
    sets: int | None = Field(default=None, ge=0)
    reps: str | None = None
    notes: str | None = None


class WeightRequest(BaseModel):
    """Body weight for a day."""

    date: date
    weight: float = Field(gt=0, allow_inf_nan=False)


class SetLogPayload(BaseModel):
    reps: int = Field(ge=0)
    weight: float = Field(ge=0, allow_inf_nan=False)
    completed: bool = False
    rpe: int | None = Field(default=None, ge=1, le=10)


class ExerciseLogPayload(BaseModel):
    exercise_id: str
    name: str
    sets: list[SetLogPayload] = Field(default_factory=list)
    notes: str | None = None

    def to_domain(self) -> ExerciseLog:
        """Return the domain exercise log."""
        return ExerciseLog(
            exercise_id=self.exercise_id,
            name=self.name,
            sets=tuple(SetLog(**item.model_dump()) for item in self.sets),
            notes=self.notes,
        )


class CardioLogPayload(BaseModel):
    type: CardioType
    duration_minutes: int = Field(ge=0)
    completed: bool = False
    notes: str | None = None

    def to_domain(self) -> CardioLog:
        """Return the domain cardio log."""
        return CardioLog(**self.model_dump())


class WorkoutLogRequest(BaseModel):
    """A new workout log."""

    id: str = ""
    date: date
    day_of_week: int = Field(ge=0, le=6)
    type: DayType
    exercises: list[ExerciseLogPayload] = Field(default_factory=list)
    cardio: CardioLogPayload | None = None
    notes: str | None = None
    completed: bool = False
    duration: int | None = Field(default=None, ge=0)
    rating: int | None = Field(default=None, ge=1, le=5)

    def to_domain(self) -> WorkoutLog:
        """Return the domain workout log."""
        return WorkoutLog(
            id=self.id,
            date=self.date,
            day_of_week=self.day_of_week,
            type=self.type,
            exercises=tuple(item.to_domain() for item in self.exercises),
            cardio=self.cardio.to_domain() if self.cardio else None,
            notes=self.notes,
            completed=self.completed,
            duration=self.duration,
            rating=self.rating,
        )


class WorkoutLogUpdateRequest(BaseModel):
    """Partial update of a workout log; only provided fields change."""

    exercises: list[ExerciseLogPayload] | None = None
    cardio: CardioLogPayload | None = None
    notes: str | None = None
    completed: bool | None = None
    duration: int | None = Field(default=None, ge=0)
    rating: int | None = Field(default=None, ge=1, le=5)

    def to_updates(self) -> dict[str, object]:
        """Return the provided fields as domain values."""
        updates = self.model_dump(exclude_unset=True)
        if self.exercises is not None:
            updates["exercises"] = tuple(item.to_domain() for item in self.exercises)
        if "cardio" in updates:
            updates["cardio"] = self.cardio.to_domain() if self.cardio else None
        return updates


class ProfileUpdateRequest(BaseModel):
    """Partial profile update."""

    name: str | None = None
    current_weight: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    target_weight: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    height: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    start_date: date | None = None
    week_number: int | None = Field(default=None, ge=1)

