"""Weekly workout template service."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol

from fitness_tracker.domain.workouts import WorkoutTemplate
from fitness_tracker.services.fetching import fetch_or_default


class WorkoutTemplateRepository(Protocol):
    """Persistence interface for workout templates."""

    def list_templates(self) -> list[WorkoutTemplate]:
        """Return templates with ordered exercises, by day of week."""


@dataclass
class WorkoutService:
    """Service for reading the weekly schedule."""

    repository: WorkoutTemplateRepository

    def list_templates(self) -> list[WorkoutTemplate]:
        """Return the weekly templates."""
        return fetch_or_default(
            self.repository.list_templates, [], action="fetch workout templates"
        )

    def get_workout_by_day(self, day_of_week: int) -> WorkoutTemplate | None:
        """Return the template for a day (0 = Sunday)."""
        for template in self.list_templates():
            if template.day_of_week == day_of_week:
                return template
        return None

    def get_todays_workout(self, today: date | None = None) -> WorkoutTemplate | None:
        """Return today's template, falling back to the last one in the week."""
        templates = self.list_templates()
        day_of_week = day_of_week_for(today or date.today())
        for template in templates:
            if template.day_of_week == day_of_week:
                return template
        return templates[6] if len(templates) > 6 else None

    def get_training_days(self) -> list[WorkoutTemplate]:
        """Return templates that are not rest days."""
        return [t for t in self.list_templates() if t.type != "rest"]


def day_of_week_for(day: date) -> int:
    """Return the day index with Sunday as 0."""
    return (day.weekday() + 1) % 7
