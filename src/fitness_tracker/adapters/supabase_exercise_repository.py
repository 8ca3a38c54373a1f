"""Supabase repository for exercises and per-user exercise data."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.progress import UserExerciseData
from fitness_tracker.domain.workouts import Exercise
from fitness_tracker.services.exercises import ExerciseRepository


@dataclass
class SupabaseExerciseRepository(ExerciseRepository):
    """Supabase implementation for exercises."""

    client: Client

    def list_exercises(self) -> list[Exercise]:
        """Return every exercise ordered by name."""
        response = self.client.table("exercises").select("*").order("name").execute()
        return [parse_exercise(row) for row in response.data or []]

    def list_user_exercise_data(self, user_id: UUID) -> list[UserExerciseData]:
        """Return a user's exercise overrides."""
        response = (
            self.client.table("user_exercise_data")
            .select("*")
            .eq("user_id", str(user_id))
            .execute()
        )
        return [
            UserExerciseData(
                exercise_id=str(row["exercise_id"]),
                weight=_optional_float(row.get("weight")),
                sets=row.get("sets"),
                reps=row.get("reps"),
                notes=row.get("notes"),
            )
            for row in response.data or []
        ]

    def upsert_user_exercise_data(
        self, user_id: UUID, data: UserExerciseData
    ) -> None:
        """Insert or replace an override keyed by user and exercise."""
        self.client.table("user_exercise_data").upsert(
            {
                "user_id": str(user_id),
                "exercise_id": data.exercise_id,
                "weight": data.weight,
                "sets": data.sets,
                "reps": data.reps,
                "notes": data.notes,
            },
            on_conflict="user_id,exercise_id",
        ).execute()

    def delete_user_exercise_data(self, user_id: UUID, exercise_id: str) -> None:
        """Remove a user's override for an exercise."""
        self.client.table("user_exercise_data").delete().eq(
            "user_id", str(user_id)
        ).eq("exercise_id", exercise_id).execute()


def parse_exercise(row: dict[str, object]) -> Exercise:
    """Parse an exercise row into a domain model."""
    return Exercise(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        category=row.get("category", "small"),
        muscle_group=row.get("muscle_group", "isolation"),
        sets=int(row.get("sets", 0)),
        reps=str(row.get("reps", "")),
        rest_seconds=int(row.get("rest_seconds", 0)),
        form_cues=tuple(row.get("form_cues") or ()),
        why=str(row.get("why") or ""),
        body_section=row.get("body_section"),
        starting_weight=_optional_float(row.get("starting_weight")),
        weight_unit=str(row.get("weight_unit") or "kg"),
    )


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str) and value:
        return float(value)
    return None
