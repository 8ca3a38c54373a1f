"""Domain errors."""


class FitnessTrackerError(Exception):
    """Base class for application errors."""


class RepositoryError(FitnessTrackerError):
    """Raised when the backend does not return the expected rows."""


class MissingPieceWeightError(FitnessTrackerError):
    """Raised in strict mode when a food has no per-piece weight."""

    def __init__(self, food_name: str) -> None:
        super().__init__(f"Food {food_name!r} has no piece weight defined")
        self.food_name = food_name


class UnresolvedExerciseError(FitnessTrackerError):
    """Raised in strict mode when a customization names an unknown exercise."""

    def __init__(self, exercise_id: str) -> None:
        super().__init__(f"Unknown exercise id {exercise_id!r}")
        self.exercise_id = exercise_id


class WeekLockedError(FitnessTrackerError):
    """Raised when editing customizations outside the editable window."""
