"""Week-scoped workout customizations.

Edits are stored per (user, day of week, week start) and overwrite the
stored row wholesale; concurrent writers race and the last write wins.
Only the current and following week may be edited.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.errors import WeekLockedError
from fitness_tracker.domain.workouts import (
    CardioType,
    CustomizationKey,
    SwappedExercise,
    WeekCustomizations,
    WorkoutCustomization,
    get_week_start,
    is_week_editable,
)
from fitness_tracker.services.fetching import fetch_or_default, write_or_log

_logger = logging.getLogger(__name__)


class CustomizationRepository(Protocol):
    """Persistence interface for workout customizations."""

    def list_customizations(
        self, user_id: UUID, week_start: date
    ) -> list[WorkoutCustomization]:
        """Return a user's customizations for a week."""

    def get_customization(self, key: CustomizationKey) -> WorkoutCustomization | None:
        """Return the customization stored under a key, if any."""

    def upsert_customization(
        self, user_id: UUID, customization: WorkoutCustomization
    ) -> None:
        """Insert or replace a customization keyed by user, day and week."""

    def delete_customization(self, key: CustomizationKey) -> None:
        """Delete the customization stored under a key."""


@dataclass
class CustomizationService:
    """Application service for swapping, adding and resetting exercises."""

    repository: CustomizationRepository
    strict: bool = False
    clock: Callable[[], date] = date.today

    def current_week_start(self) -> date:
        """Return the start of the current week."""
        return get_week_start(self.clock())

    def is_editable(self, week_start: date) -> bool:
        """Return True when customizations for the week may change."""
        return is_week_editable(week_start, self.clock())

    def load_week(
        self, user_id: UUID | None, week_start: date | None = None
    ) -> WeekCustomizations:
        """Load every customization a user has for a week."""
        week = self._week(week_start)
        if user_id is None:
            return WeekCustomizations(week_start=week, strict=self.strict)
        rows = fetch_or_default(
            lambda: self.repository.list_customizations(user_id, week),
            [],
            action="fetch workout customizations",
        )
        return WeekCustomizations(
            week_start=week,
            days={row.day_of_week: row for row in rows},
            strict=self.strict,
        )

    def swap_exercise(  # noqa: PLR0913
        self,
        user_id: UUID | None,
        day_of_week: int,
        original_id: str,
        replacement_id: str,
        week_start: date | None = None,
    ) -> WorkoutCustomization | None:
        """Replace a template exercise, superseding any earlier swap of it."""
        if user_id is None:
            return None
        current = self._load_for_edit(user_id, day_of_week, week_start)
        swaps = tuple(
            swap
            for swap in current.swapped_exercises
            if swap.original_id != original_id
        )
        updated = replace(
            current,
            swapped_exercises=(*swaps, SwappedExercise(original_id, replacement_id)),
        )
        return self._save(user_id, updated, action="swap exercise")

    def add_exercise(
        self,
        user_id: UUID | None,
        day_of_week: int,
        exercise_id: str,
        week_start: date | None = None,
    ) -> WorkoutCustomization | None:
        """Append an exercise to a day; adding the same exercise twice is a no-op."""
        if user_id is None:
            return None
        current = self._load_for_edit(user_id, day_of_week, week_start)
        if exercise_id in current.added_exercises:
            return current
        updated = replace(
            current, added_exercises=(*current.added_exercises, exercise_id)
        )
        return self._save(user_id, updated, action="add exercise")

    def remove_added_exercise(
        self,
        user_id: UUID | None,
        day_of_week: int,
        exercise_id: str,
        week_start: date | None = None,
    ) -> WorkoutCustomization | None:
        """Remove a previously added exercise."""
        if user_id is None:
            return None
        week = self._week(week_start)
        self._ensure_editable(week)
        current = self._fetch(CustomizationKey(user_id, day_of_week, week))
        if current is None:
            return None
        updated = replace(
            current,
            added_exercises=tuple(
                added for added in current.added_exercises if added != exercise_id
            ),
        )
        return self._save(user_id, updated, action="remove added exercise")

    def set_cardio(
        self,
        user_id: UUID | None,
        day_of_week: int,
        cardio_type: CardioType | None,
        week_start: date | None = None,
    ) -> WorkoutCustomization | None:
        """Pick a cardio type for a day, or clear the override with None."""
        if user_id is None:
            return None
        current = self._load_for_edit(user_id, day_of_week, week_start)
        updated = replace(current, cardio_customization=cardio_type)
        return self._save(user_id, updated, action="set cardio")

    def reset_day(
        self, user_id: UUID | None, day_of_week: int, week_start: date | None = None
    ) -> bool:
        """Delete all of a day's customizations for the week."""
        if user_id is None:
            return False
        week = self._week(week_start)
        self._ensure_editable(week)
        key = CustomizationKey(user_id, day_of_week, week)
        return write_or_log(
            lambda: self.repository.delete_customization(key),
            action="reset day customizations",
        )

    def _week(self, week_start: date | None) -> date:
        if week_start is None:
            return self.current_week_start()
        return get_week_start(week_start)

    def _ensure_editable(self, week_start: date) -> None:
        if not self.is_editable(week_start):
            raise WeekLockedError(f"Week starting {week_start} is read-only")

    def _fetch(self, key: CustomizationKey) -> WorkoutCustomization | None:
        return fetch_or_default(
            lambda: self.repository.get_customization(key),
            None,
            action="fetch workout customization",
        )

    def _load_for_edit(
        self, user_id: UUID, day_of_week: int, week_start: date | None
    ) -> WorkoutCustomization:
        week = self._week(week_start)
        self._ensure_editable(week)
        existing = self._fetch(CustomizationKey(user_id, day_of_week, week))
        if existing is None:
            return WorkoutCustomization(day_of_week=day_of_week, week_start=week)
        return existing

    def _save(
        self, user_id: UUID, customization: WorkoutCustomization, *, action: str
    ) -> WorkoutCustomization | None:
        saved = write_or_log(
            lambda: self.repository.upsert_customization(user_id, customization),
            action=action,
        )
        if not saved:
            return None
        _logger.info(
            "Saved customization: day=%s week=%s",
            customization.day_of_week,
            customization.week_start,
        )
        return customization
