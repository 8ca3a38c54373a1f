"""Exercise catalogue and per-user exercise overrides."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.progress import UserExerciseData
from fitness_tracker.domain.workouts import Exercise
from fitness_tracker.services.fetching import fetch_or_default, write_or_log

_UPPER_MUSCLES = {"push", "pull", "isolation"}
_LOWER_MUSCLES = {"squat", "hinge", "calves"}
_LOWER_NAME_HINTS = ("squat", "deadlift", "lunge", "leg", "calf", "hip", "step")


class ExerciseRepository(Protocol):
    """Persistence interface for exercises."""

    def list_exercises(self) -> list[Exercise]:
        """Return every exercise ordered by name."""

    def list_user_exercise_data(self, user_id: UUID) -> list[UserExerciseData]:
        """Return a user's exercise overrides."""

    def upsert_user_exercise_data(
        self, user_id: UUID, data: UserExerciseData
    ) -> None:
        """Insert or replace an override keyed by user and exercise."""

    def delete_user_exercise_data(self, user_id: UUID, exercise_id: str) -> None:
        """Remove a user's override for an exercise."""


@dataclass
class ExerciseService:
    """Application service for the exercise catalogue."""

    repository: ExerciseRepository

    def list_exercises(self) -> list[Exercise]:
        """Return all exercises, or an empty list if they can't be loaded."""
        return fetch_or_default(
            self.repository.list_exercises, [], action="fetch exercises"
        )

    def get_exercise(self, exercise_id: str) -> Exercise | None:
        """Return an exercise by id."""
        for exercise in self.list_exercises():
            if exercise.id == exercise_id:
                return exercise
        return None

    def filter_exercises(
        self, category: str | None = None, muscle_group: str | None = None
    ) -> list[Exercise]:
        """Filter exercises by category and muscle group."""
        return [
            exercise
            for exercise in self.list_exercises()
            if (category is None or exercise.category == category)
            and (muscle_group is None or exercise.muscle_group == muscle_group)
        ]

    def upper_body_exercises(self) -> list[Exercise]:
        """Return exercises suitable for an upper body day."""
        return [
            exercise
            for exercise in self.list_exercises()
            if exercise.muscle_group in _UPPER_MUSCLES
        ]

    def lower_body_exercises(self) -> list[Exercise]:
        """Return exercises suitable for a lower body day."""
        return [
            exercise
            for exercise in self.list_exercises()
            if exercise.muscle_group in _LOWER_MUSCLES
            or any(hint in exercise.name.lower() for hint in _LOWER_NAME_HINTS)
        ]

    def get_user_exercise_data(
        self, user_id: UUID | None
    ) -> dict[str, UserExerciseData]:
        """Return a user's overrides keyed by exercise id."""
        if user_id is None:
            return {}
        rows = fetch_or_default(
            lambda: self.repository.list_user_exercise_data(user_id),
            [],
            action="fetch user exercise data",
        )
        return {row.exercise_id: row for row in rows}

    def update_user_exercise_data(
        self, user_id: UUID | None, data: UserExerciseData
    ) -> bool:
        """Store a user's override for an exercise."""
        if user_id is None:
            return False
        return write_or_log(
            lambda: self.repository.upsert_user_exercise_data(user_id, data),
            action="update exercise data",
        )

    def clear_user_exercise_data(
        self, user_id: UUID | None, exercise_id: str
    ) -> bool:
        """Remove a user's override for an exercise."""
        if user_id is None:
            return False
        return write_or_log(
            lambda: self.repository.delete_user_exercise_data(user_id, exercise_id),
            action="clear exercise data",
        )
