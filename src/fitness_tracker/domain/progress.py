"""Domain models for workout logs, body weight and the user profile."""

from dataclasses import dataclass
from datetime import date

from fitness_tracker.domain.workouts import CardioType, DayType


@dataclass(frozen=True)
class SetLog:
    """One performed set."""

    reps: int
    weight: float
    completed: bool
    rpe: int | None = None


@dataclass(frozen=True)
class ExerciseLog:
    """Performance for one exercise in a session."""

    exercise_id: str
    name: str
    sets: tuple[SetLog, ...] = ()
    notes: str | None = None


@dataclass(frozen=True)
class CardioLog:
    """Performed cardio block."""

    type: CardioType
    duration_minutes: int
    completed: bool
    notes: str | None = None


@dataclass(frozen=True)
class WorkoutLog:
    """A logged workout session."""

    id: str
    date: date
    day_of_week: int
    type: DayType
    exercises: tuple[ExerciseLog, ...] = ()
    cardio: CardioLog | None = None
    notes: str | None = None
    completed: bool = False
    duration: int | None = None
    rating: int | None = None


@dataclass(frozen=True)
class WeightEntry:
    """Body weight on a given day, in kg."""

    date: date
    weight: float


@dataclass(frozen=True)
class UserProfile:
    """Body metrics and program progress."""

    name: str
    current_weight: float
    target_weight: float
    height: float
    start_date: date
    week_number: int


@dataclass(frozen=True)
class UserExerciseData:
    """Per-user overrides for an exercise."""

    exercise_id: str
    weight: float | None = None
    sets: int | None = None
    reps: str | None = None
    notes: str | None = None
