"""Supabase repository for workout logs."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from fitness_tracker.domain.errors import RepositoryError
from fitness_tracker.domain.progress import CardioLog, ExerciseLog, SetLog, WorkoutLog
from fitness_tracker.services.progress import WorkoutLogRepository


@dataclass
class SupabaseWorkoutLogRepository(WorkoutLogRepository):
    """Supabase implementation for workout logs."""

    client: Client

    def list_logs(self, user_id: UUID) -> list[WorkoutLog]:
        """Return a user's logs, newest first."""
        response = (
            self.client.table("workout_logs")
            .select("*")
            .eq("user_id", str(user_id))
            .order("date", desc=True)
            .execute()
        )
        return [_parse_log(row) for row in response.data or []]

    def create_log(self, user_id: UUID, log: WorkoutLog) -> None:
        """Insert a workout log."""
        payload: dict[str, object] = {
            "user_id": str(user_id),
            "date": log.date.isoformat(),
            "day_of_week": log.day_of_week,
            "type": log.type,
            "exercises": dump_exercise_logs(log.exercises),
            "cardio": dump_cardio_log(log.cardio),
            "notes": log.notes,
            "completed": log.completed,
            "duration": log.duration,
            "rating": log.rating,
        }
        if log.id:
            payload["id"] = log.id
        response = self.client.table("workout_logs").insert(payload).execute()
        if not response.data:
            raise RepositoryError("Failed to create workout log")

    def update_log(
        self, user_id: UUID, log_id: str, updates: dict[str, object]
    ) -> None:
        """Apply partial updates to a log."""
        payload = dict(updates)
        if "exercises" in payload:
            payload["exercises"] = dump_exercise_logs(payload["exercises"])
        if "cardio" in payload:
            payload["cardio"] = dump_cardio_log(payload["cardio"])
        response = (
            self.client.table("workout_logs")
            .update(payload)
            .eq("id", log_id)
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RepositoryError("Failed to update workout log")

    def delete_log(self, user_id: UUID, log_id: str) -> None:
        """Delete a log."""
        self.client.table("workout_logs").delete().eq("id", log_id).eq(
            "user_id", str(user_id)
        ).execute()


def dump_exercise_logs(exercises: Iterable[ExerciseLog]) -> list[dict[str, object]]:
    """Serialize exercise logs into the stored jsonb shape."""
    return [
        {
            "exerciseId": exercise.exercise_id,
            "name": exercise.name,
            "sets": [
                {
                    "reps": item.reps,
                    "weight": item.weight,
                    "completed": item.completed,
                    "rpe": item.rpe,
                }
                for item in exercise.sets
            ],
            "notes": exercise.notes,
        }
        for exercise in exercises
    ]


def dump_cardio_log(cardio: CardioLog | None) -> dict[str, object] | None:
    """Serialize a cardio log into the stored jsonb shape."""
    if cardio is None:
        return None
    return {
        "type": cardio.type,
        "durationMinutes": cardio.duration_minutes,
        "completed": cardio.completed,
        "notes": cardio.notes,
    }


def _parse_log(row: dict[str, object]) -> WorkoutLog:
    return WorkoutLog(
        id=str(row["id"]),
        date=date.fromisoformat(str(row["date"])),
        day_of_week=int(row.get("day_of_week", 0)),
        type=row.get("type", "rest"),
        exercises=tuple(
            _parse_exercise_log(item) for item in row.get("exercises") or []
        ),
        cardio=_parse_cardio_log(row.get("cardio")),
        notes=row.get("notes"),
        completed=bool(row.get("completed", False)),
        duration=row.get("duration"),
        rating=row.get("rating"),
    )


def _parse_exercise_log(item: dict[str, object]) -> ExerciseLog:
    return ExerciseLog(
        exercise_id=str(item.get("exerciseId", "")),
        name=str(item.get("name", "")),
        sets=tuple(
            SetLog(
                reps=int(entry.get("reps", 0)),
                weight=float(entry.get("weight", 0)),
                completed=bool(entry.get("completed", False)),
                rpe=entry.get("rpe"),
            )
            for entry in item.get("sets") or []
        ),
        notes=item.get("notes"),
    )


def _parse_cardio_log(raw: object) -> CardioLog | None:
    if not isinstance(raw, dict) or not raw.get("type"):
        return None
    return CardioLog(
        type=raw["type"],
        duration_minutes=int(raw.get("durationMinutes", 0)),
        completed=bool(raw.get("completed", False)),
        notes=raw.get("notes"),
    )
