"""Supabase repository for the weekly workout templates."""

from dataclasses import dataclass

from supabase import Client

from fitness_tracker.adapters.supabase_exercise_repository import parse_exercise
from fitness_tracker.domain.workouts import CardioTemplate, WorkoutTemplate
from fitness_tracker.services.workouts import WorkoutTemplateRepository

_TEMPLATE_SELECT = (
    "*, workout_template_exercises(exercise_id, order_index, exercises(*))"
)


@dataclass
class SupabaseWorkoutTemplateRepository(WorkoutTemplateRepository):
    """Supabase implementation for workout templates."""

    client: Client

    def list_templates(self) -> list[WorkoutTemplate]:
        """Return templates with ordered exercises, by day of week."""
        response = (
            self.client.table("workout_templates")
            .select(_TEMPLATE_SELECT)
            .order("day_of_week")
            .execute()
        )
        return [_parse_template(row) for row in response.data or []]


def _parse_template(row: dict[str, object]) -> WorkoutTemplate:
    links = sorted(
        row.get("workout_template_exercises") or [],
        key=lambda link: int(link.get("order_index", 0)),
    )
    return WorkoutTemplate(
        day_of_week=int(row["day_of_week"]),
        day_name=str(row.get("day_name", "")),
        type=row.get("type", "rest"),
        exercises=tuple(
            parse_exercise(link["exercises"]) for link in links if link.get("exercises")
        ),
        focus=row.get("focus"),
        cardio=_parse_cardio(row),
        warmup=tuple(row.get("warmup") or ()),
    )


def _parse_cardio(row: dict[str, object]) -> CardioTemplate | None:
    cardio_type = row.get("cardio_type")
    if not cardio_type:
        return None
    return CardioTemplate(
        type=cardio_type,
        duration_minutes=int(row.get("cardio_duration_minutes") or 0),
        intensity=str(row.get("cardio_intensity") or ""),
        rpe=str(row.get("cardio_rpe") or ""),
        notes=row.get("cardio_notes"),
    )
