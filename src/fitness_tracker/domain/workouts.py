"""Workout domain models and the week-scoped customization overlay.

The weekly templates are the base truth. A user's customizations for a
given (day, week) are merged on top of a template to produce the workout the
user actually sees; the template itself is never modified.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Literal, NamedTuple
from uuid import UUID

from fitness_tracker.domain.errors import UnresolvedExerciseError

ExerciseCategory = Literal["big", "medium", "small"]
MuscleGroup = Literal["push", "pull", "squat", "hinge", "isolation", "calves"]
DayType = Literal["upper", "lower", "cardio", "rest"]
CardioType = Literal["elliptical", "incline_walk", "stair_climber", "hiit"]

CARDIO_TYPES: tuple[CardioType, ...] = (
    "elliptical",
    "incline_walk",
    "stair_climber",
    "hiit",
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Exercise:
    """An exercise definition, optionally tagged by the overlay."""

    id: str
    name: str
    category: ExerciseCategory
    muscle_group: MuscleGroup
    sets: int
    reps: str
    rest_seconds: int
    form_cues: tuple[str, ...] = ()
    why: str = ""
    body_section: str | None = None
    starting_weight: float | None = None
    weight_unit: str = "kg"
    swapped_from: str | None = None
    is_added: bool = False


@dataclass(frozen=True)
class CardioTemplate:
    """Cardio block attached to a workout day."""

    type: CardioType
    duration_minutes: int
    intensity: str
    rpe: str
    notes: str | None = None


@dataclass(frozen=True)
class WorkoutTemplate:
    """The base workout for one day of the week (0 = Sunday)."""

    day_of_week: int
    day_name: str
    type: DayType
    exercises: tuple[Exercise, ...] = ()
    focus: str | None = None
    cardio: CardioTemplate | None = None
    warmup: tuple[str, ...] = ()


@dataclass(frozen=True)
class SwappedExercise:
    """A replacement of one template exercise by another."""

    original_id: str
    replacement_id: str


@dataclass(frozen=True)
class WorkoutCustomization:
    """A user's edits for one day of one week."""

    day_of_week: int
    week_start: date
    swapped_exercises: tuple[SwappedExercise, ...] = ()
    added_exercises: tuple[str, ...] = ()
    cardio_customization: CardioType | None = None

    def is_empty(self) -> bool:
        """Return True when the customization changes nothing."""
        return (
            not self.swapped_exercises
            and not self.added_exercises
            and self.cardio_customization is None
        )


class CustomizationKey(NamedTuple):
    """Natural key of a stored customization."""

    user_id: UUID
    day_of_week: int
    week_start: date


_DEFAULT_CARDIO: dict[CardioType, CardioTemplate] = {
    "elliptical": CardioTemplate(
        type="elliptical",
        duration_minutes=15,
        intensity="Moderate pace (can talk but slightly breathless)",
        rpe="6-7/10",
        notes="Use arms actively",
    ),
    "incline_walk": CardioTemplate(
        type="incline_walk",
        duration_minutes=15,
        intensity="5-6 km/h, 5-10% incline",
        rpe="5-6/10",
        notes="No handrails, stand tall",
    ),
    "stair_climber": CardioTemplate(
        type="stair_climber",
        duration_minutes=12,
        intensity="Moderate pace",
        rpe="7/10",
        notes="Only after upper body days, stand upright",
    ),
    "hiit": CardioTemplate(
        type="hiit",
        duration_minutes=25,
        intensity="30 sec on / 30 sec off x 20 rounds",
        rpe="8/10 during work, 4/10 during rest",
        notes="Or 45-60 min easy e-bike ride",
    ),
}


def default_cardio_template(cardio_type: CardioType) -> CardioTemplate:
    """Return the canonical cardio block for a cardio type."""
    return _DEFAULT_CARDIO[cardio_type]


def apply_customization(
    template: WorkoutTemplate,
    customization: WorkoutCustomization | None,
    all_exercises: Iterable[Exercise],
    *,
    strict: bool = False,
) -> WorkoutTemplate:
    """Merge a customization onto a template and return the effective workout.

    Swapped exercises keep the position of the exercise they replace and
    additions are appended in stored order. Unknown exercise ids are ignored
    unless ``strict`` is set.
    """
    if customization is None:
        return template

    by_id = {exercise.id: exercise for exercise in all_exercises}
    # The first stored swap for an exercise wins.
    swaps: dict[str, str] = {}
    for swap in customization.swapped_exercises:
        swaps.setdefault(swap.original_id, swap.replacement_id)

    exercises: list[Exercise] = []
    for exercise in template.exercises:
        replacement_id = swaps.get(exercise.id)
        if replacement_id is None:
            exercises.append(exercise)
            continue
        replacement = _resolve(by_id, replacement_id, strict=strict)
        if replacement is None:
            exercises.append(exercise)
            continue
        exercises.append(replace(replacement, swapped_from=exercise.id))

    for exercise_id in customization.added_exercises:
        added = _resolve(by_id, exercise_id, strict=strict)
        if added is not None:
            exercises.append(replace(added, is_added=True))

    cardio = template.cardio
    if customization.cardio_customization and cardio is not None:
        cardio = default_cardio_template(customization.cardio_customization)

    return replace(template, exercises=tuple(exercises), cardio=cardio)


def _resolve(
    by_id: Mapping[str, Exercise], exercise_id: str, *, strict: bool
) -> Exercise | None:
    exercise = by_id.get(exercise_id)
    if exercise is None:
        if strict:
            raise UnresolvedExerciseError(exercise_id)
        _logger.warning("Ignoring customization for unknown exercise %s", exercise_id)
    return exercise


@dataclass(frozen=True)
class WeekCustomizations:
    """All of a user's customizations for one week, by day of week."""

    week_start: date
    days: Mapping[int, WorkoutCustomization] = field(default_factory=dict)
    strict: bool = False

    def get_day_customization(self, day_of_week: int) -> WorkoutCustomization | None:
        """Return the customization for a day, if any."""
        return self.days.get(day_of_week)

    def get_customized_workout(
        self, template: WorkoutTemplate, all_exercises: Iterable[Exercise]
    ) -> WorkoutTemplate:
        """Return the template with this week's edits for its day applied."""
        return apply_customization(
            template,
            self.days.get(template.day_of_week),
            all_exercises,
            strict=self.strict,
        )

    def has_customizations(self, day_of_week: int) -> bool:
        """Return True when the day has any swap, addition or cardio override."""
        customization = self.days.get(day_of_week)
        return customization is not None and not customization.is_empty()


def get_week_start(day: date) -> date:
    """Return the Sunday that starts the week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def is_week_editable(week_start: date, today: date) -> bool:
    """Return True for the current week and the one after it."""
    current = get_week_start(today)
    return get_week_start(week_start) in {current, current + timedelta(days=7)}
