"""Progress tracking: workout logs and body weight."""

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from fitness_tracker.domain.progress import WeightEntry, WorkoutLog
from fitness_tracker.services.fetching import fetch_or_default, write_or_log

LOG_UPDATE_FIELDS = frozenset(
    {"exercises", "cardio", "notes", "completed", "duration", "rating"}
)
# Fields a log always carries; a null update for them is ignored.
REQUIRED_LOG_FIELDS = frozenset({"exercises", "completed"})


class WorkoutLogRepository(Protocol):
    """Persistence interface for workout logs."""

    def list_logs(self, user_id: UUID) -> list[WorkoutLog]:
        """Return a user's logs, newest first."""

    def create_log(self, user_id: UUID, log: WorkoutLog) -> None:
        """Insert a workout log."""

    def update_log(
        self, user_id: UUID, log_id: str, updates: dict[str, object]
    ) -> None:
        """Apply partial updates to a log."""

    def delete_log(self, user_id: UUID, log_id: str) -> None:
        """Delete a log."""


class WeightRepository(Protocol):
    """Persistence interface for weight entries."""

    def list_weights(self, user_id: UUID) -> list[WeightEntry]:
        """Return a user's weight entries, oldest first."""

    def upsert_weight(self, user_id: UUID, entry: WeightEntry) -> None:
        """Insert or replace the entry for a date."""


@dataclass
class ProgressService:
    """Service for workout logs and weight history."""

    log_repository: WorkoutLogRepository
    weight_repository: WeightRepository

    def list_logs(self, user_id: UUID | None) -> list[WorkoutLog]:
        """Return a user's workout logs, newest first."""
        if user_id is None:
            return []
        return fetch_or_default(
            lambda: self.log_repository.list_logs(user_id),
            [],
            action="fetch workout logs",
        )

    def add_log(self, user_id: UUID | None, log: WorkoutLog) -> bool:
        """Store a new workout log."""
        if user_id is None:
            return False
        return write_or_log(
            lambda: self.log_repository.create_log(user_id, log),
            action="add workout log",
        )

    def update_log(
        self, user_id: UUID | None, log_id: str, updates: dict[str, object]
    ) -> WorkoutLog | None:
        """Apply partial updates to a log and return the updated log."""
        if user_id is None:
            return None
        allowed = {
            key: value
            for key, value in updates.items()
            if key in LOG_UPDATE_FIELDS
            and not (value is None and key in REQUIRED_LOG_FIELDS)
        }
        current = self.get_log(user_id, log_id)
        if current is None:
            return None
        if not allowed:
            return current
        saved = write_or_log(
            lambda: self.log_repository.update_log(user_id, log_id, allowed),
            action="update workout log",
        )
        if not saved:
            return None
        return replace(current, **allowed)

    def delete_log(self, user_id: UUID | None, log_id: str) -> bool:
        """Delete a workout log."""
        if user_id is None:
            return False
        return write_or_log(
            lambda: self.log_repository.delete_log(user_id, log_id),
            action="delete workout log",
        )

    def get_log(self, user_id: UUID | None, log_id: str) -> WorkoutLog | None:
        """Return a log by id, if any."""
        return next((log for log in self.list_logs(user_id) if log.id == log_id), None)

    def get_log_by_date(self, user_id: UUID | None, day: date) -> WorkoutLog | None:
        """Return the log for a date, if any."""
        return next((log for log in self.list_logs(user_id) if log.date == day), None)

    def get_today_log(
        self, user_id: UUID | None, today: date | None = None
    ) -> WorkoutLog | None:
        """Return today's log, if any."""
        return self.get_log_by_date(user_id, today or date.today())

    def get_logs_by_date_range(
        self, user_id: UUID | None, start: date, end: date
    ) -> list[WorkoutLog]:
        """Return logs between two dates, inclusive."""
        return [log for log in self.list_logs(user_id) if start <= log.date <= end]

    def completed_days(self, user_id: UUID | None, week_start: date) -> set[int]:
        """Return the days of week with a completed log in the week."""
        week_end = week_start + timedelta(days=7)
        return {
            log.day_of_week
            for log in self.list_logs(user_id)
            if week_start <= log.date < week_end and log.completed
        }

    def list_weights(self, user_id: UUID | None) -> list[WeightEntry]:
        """Return weight history, oldest first."""
        if user_id is None:
            return []
        entries = fetch_or_default(
            lambda: self.weight_repository.list_weights(user_id),
            [],
            action="fetch weight entries",
        )
        return sorted(entries, key=lambda entry: entry.date)

    def add_weight(self, user_id: UUID | None, entry: WeightEntry) -> bool:
        """Record weight for a date, replacing any entry on that date."""
        if user_id is None:
            return False
        return write_or_log(
            lambda: self.weight_repository.upsert_weight(user_id, entry),
            action="add weight entry",
        )

    def get_latest_weight(self, user_id: UUID | None) -> WeightEntry | None:
        """Return the most recent weight entry."""
        entries = self.list_weights(user_id)
        return entries[-1] if entries else None
