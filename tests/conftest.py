"""Shared test fixtures."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import date
from uuid import UUID, uuid4

import pytest

from fitness_tracker.config import Settings
from fitness_tracker.containers import AppContainer
from fitness_tracker.domain.nutrition import (
    Food,
    FoodSelection,
    Meal,
    MealOptionRecord,
    MealSlot,
    create_meal_food,
)
from fitness_tracker.domain.progress import (
    UserExerciseData,
    UserProfile,
    WeightEntry,
    WorkoutLog,
)
from fitness_tracker.domain.workouts import (
    CardioTemplate,
    CustomizationKey,
    Exercise,
    WorkoutCustomization,
    WorkoutTemplate,
)
from fitness_tracker.services.customizations import (
    CustomizationRepository,
    CustomizationService,
)
from fitness_tracker.services.exercises import ExerciseRepository, ExerciseService
from fitness_tracker.services.foods import FoodRepository, FoodService
from fitness_tracker.services.meals import (
    MealPlanService,
    MealPreferenceRepository,
    MealRepository,
)
from fitness_tracker.services.profile import ProfileRepository, ProfileService
from fitness_tracker.services.progress import (
    ProgressService,
    WeightRepository,
    WorkoutLogRepository,
)
from fitness_tracker.services.workouts import WorkoutService, WorkoutTemplateRepository

TODAY = date(2026, 10, 19)
WEEK_START = date(2026, 10, 18)

EGG = Food(
    id="egg",
    name="Egg",
    calories_per_100g=155,
    protein_per_100g=13,
    carbs_per_100g=1.1,
    fat_per_100g=11,
    category="protein",
    piece_weight_grams=50,
    piece_name="egg",
)
CHICKEN = Food(
    id="chicken",
    name="Chicken breast",
    calories_per_100g=165,
    protein_per_100g=31,
    carbs_per_100g=0,
    fat_per_100g=3.6,
    category="protein",
)
RICE = Food(
    id="rice",
    name="Basmati rice",
    calories_per_100g=130,
    protein_per_100g=2.7,
    carbs_per_100g=28,
    fat_per_100g=0.3,
    category="carb",
)
OATS = Food(
    id="oats",
    name="Oats",
    calories_per_100g=389,
    protein_per_100g=16.9,
    carbs_per_100g=66.3,
    fat_per_100g=6.9,
    category="carb",
)


def make_exercise(exercise_id: str, muscle_group: str = "push", **kwargs) -> Exercise:
    """Build an exercise with sensible defaults."""
    return Exercise(
        id=exercise_id,
        name=kwargs.pop("name", exercise_id.replace("-", " ").title()),
        category=kwargs.pop("category", "big"),
        muscle_group=muscle_group,
        sets=kwargs.pop("sets", 3),
        reps=kwargs.pop("reps", "8-10"),
        rest_seconds=kwargs.pop("rest_seconds", 90),
        **kwargs,
    )


BENCH = make_exercise("bench-press")
ROW = make_exercise("cable-row", "pull")
CURL = make_exercise("bicep-curl", "isolation", category="small")
DUMBBELL_PRESS = make_exercise("dumbbell-press")
SQUAT = make_exercise("goblet-squat", "squat")
LEG_CURL = make_exercise("lying-leg-curl", "isolation", name="Lying Leg Curl")
EXERCISES = [BENCH, ROW, CURL, DUMBBELL_PRESS, SQUAT, LEG_CURL]

UPPER_DAY = WorkoutTemplate(
    day_of_week=1,
    day_name="Monday",
    type="upper",
    exercises=(BENCH, ROW, CURL),
    focus="Upper body strength",
    cardio=CardioTemplate(
        type="incline_walk",
        duration_minutes=15,
        intensity="5-6 km/h, 5-10% incline",
        rpe="5-6/10",
    ),
    warmup=("5 min bike",),
)
LOWER_DAY = WorkoutTemplate(
    day_of_week=2,
    day_name="Tuesday",
    type="lower",
    exercises=(SQUAT, LEG_CURL),
)


def week_templates() -> list[WorkoutTemplate]:
    """Return a seven-day schedule with rest days filling the gaps."""
    names = [
        "Sunday",
        "Monday",
        "Tuesday",
        "Wednesday",
        "Thursday",
        "Friday",
        "Saturday",
    ]
    templates = {
        day: WorkoutTemplate(day_of_week=day, day_name=name, type="rest")
        for day, name in enumerate(names)
    }
    templates[1] = UPPER_DAY
    templates[2] = LOWER_DAY
    return [templates[day] for day in range(7)]


@dataclass
class InMemoryExerciseRepository(ExerciseRepository):
    """In-memory exercise repository for tests."""

    exercises: list[Exercise] = field(default_factory=lambda: list(EXERCISES))
    data: dict[tuple[UUID, str], UserExerciseData] = field(default_factory=dict)

    def list_exercises(self) -> list[Exercise]:
        return sorted(self.exercises, key=lambda exercise: exercise.name)

    def list_user_exercise_data(self, user_id: UUID) -> list[UserExerciseData]:
        return [value for key, value in self.data.items() if key[0] == user_id]

    def upsert_user_exercise_data(
        self, user_id: UUID, data: UserExerciseData
    ) -> None:
        self.data[(user_id, data.exercise_id)] = data

    def delete_user_exercise_data(self, user_id: UUID, exercise_id: str) -> None:
        self.data.pop((user_id, exercise_id), None)


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food repository for tests."""

    foods: list[Food] = field(default_factory=lambda: [EGG, CHICKEN, RICE, OATS])
    custom_foods: dict[UUID, list[Food]] = field(default_factory=dict)
    assignments: list[tuple[str, str]] = field(
        default_factory=lambda: [
            ("chicken", "protein"),
            ("egg", "protein"),
            ("rice", "carbs"),
            ("oats", "carbs"),
            ("egg", "breakfast"),
        ]
    )

    def list_foods(self) -> list[Food]:
        return list(self.foods)

    def list_custom_foods(self, user_id: UUID) -> list[Food]:
        return list(self.custom_foods.get(user_id, []))

    def list_category_assignments(self) -> list[tuple[str, str]]:
        return list(self.assignments)


def base_meals() -> list[Meal]:
    """Return a small base plan with two populated slots."""
    return [
        Meal(
            slot="breakfast",
            label="Breakfast",
            target_calories=450,
            target_protein=40,
            foods=(
                create_meal_food(EGG, 3, "pieces"),
                create_meal_food(OATS, 50, "grams"),
            ),
        ),
        Meal(
            slot="lunch",
            label="Lunch",
            target_calories=550,
            target_protein=55,
            foods=(
                create_meal_food(CHICKEN, 150, "grams"),
                create_meal_food(RICE, 150, "grams"),
            ),
        ),
    ]


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: list[Meal] = field(default_factory=base_meals)
    options: list[MealOptionRecord] = field(default_factory=list)

    def list_meals(self) -> list[Meal]:
        return list(self.meals)

    def list_meal_options(
        self, slot: MealSlot | None = None
    ) -> list[MealOptionRecord]:
        return [option for option in self.options if slot in (None, option.slot)]


@dataclass
class InMemoryMealPreferenceRepository(MealPreferenceRepository):
    """In-memory meal preference repository for tests."""

    preferences: dict[UUID, dict[MealSlot, list[FoodSelection]]] = field(
        default_factory=dict
    )

    def list_preferences(self, user_id: UUID) -> dict[MealSlot, list[FoodSelection]]:
        return dict(self.preferences.get(user_id, {}))

    def upsert_preference(
        self, user_id: UUID, slot: MealSlot, selections: list[FoodSelection]
    ) -> None:
        self.preferences.setdefault(user_id, {})[slot] = list(selections)

    def delete_preferences(self, user_id: UUID) -> None:
        self.preferences.pop(user_id, None)


@dataclass
class InMemoryWorkoutTemplateRepository(WorkoutTemplateRepository):
    """In-memory template repository for tests."""

    templates: list[WorkoutTemplate] = field(default_factory=week_templates)

    def list_templates(self) -> list[WorkoutTemplate]:
        return list(self.templates)


@dataclass
class InMemoryCustomizationRepository(CustomizationRepository):
    """In-memory customization repository keyed by the natural key."""

    rows: dict[CustomizationKey, WorkoutCustomization] = field(default_factory=dict)

    def list_customizations(
        self, user_id: UUID, week_start: date
    ) -> list[WorkoutCustomization]:
        return [
            row
            for key, row in self.rows.items()
            if key.user_id == user_id and key.week_start == week_start
        ]

    def get_customization(self, key: CustomizationKey) -> WorkoutCustomization | None:
        return self.rows.get(key)

    def upsert_customization(
        self, user_id: UUID, customization: WorkoutCustomization
    ) -> None:
        key = CustomizationKey(
            user_id, customization.day_of_week, customization.week_start
        )
        self.rows[key] = customization

    def delete_customization(self, key: CustomizationKey) -> None:
        self.rows.pop(key, None)


@dataclass
class InMemoryWorkoutLogRepository(WorkoutLogRepository):
    """In-memory workout log repository for tests."""

    logs: dict[UUID, list[WorkoutLog]] = field(default_factory=dict)

    def list_logs(self, user_id: UUID) -> list[WorkoutLog]:
        return sorted(
            self.logs.get(user_id, []), key=lambda log: log.date, reverse=True
        )

    def create_log(self, user_id: UUID, log: WorkoutLog) -> None:
        stored = log if log.id else replace(log, id=str(uuid4()))
        self.logs.setdefault(user_id, []).append(stored)

    def update_log(
        self, user_id: UUID, log_id: str, updates: dict[str, object]
    ) -> None:
        self.logs[user_id] = [
            replace(log, **updates) if log.id == log_id else log
            for log in self.logs.get(user_id, [])
        ]

    def delete_log(self, user_id: UUID, log_id: str) -> None:
        self.logs[user_id] = [
            log for log in self.logs.get(user_id, []) if log.id != log_id
        ]


@dataclass
class InMemoryWeightRepository(WeightRepository):
    """In-memory weight repository keyed by user and date."""

    entries: dict[tuple[UUID, date], WeightEntry] = field(default_factory=dict)

    def list_weights(self, user_id: UUID) -> list[WeightEntry]:
        return [entry for key, entry in self.entries.items() if key[0] == user_id]

    def upsert_weight(self, user_id: UUID, entry: WeightEntry) -> None:
        self.entries[(user_id, entry.date)] = entry


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)

    def update_profile(self, user_id: UUID, updates: dict[str, object]) -> None:
        current = self.profiles.get(user_id)
        if current is None:
            raise RuntimeError("Profile not found")
        self.profiles[user_id] = replace(current, **updates)


class FailingRepository:
    """Repository stand-in whose every call raises."""

    def __getattr__(self, name: str):  # type: ignore[no-untyped-def]
        def fail(*_args, **_kwargs):  # type: ignore[no-untyped-def]
            raise RuntimeError(f"backend unavailable: {name}")

        return fail


@pytest.fixture(autouse=True)
def _reset_app_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("fitness_tracker")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def food_service() -> FoodService:
    return FoodService(InMemoryFoodRepository())


@pytest.fixture
def meal_plan_service(food_service: FoodService) -> MealPlanService:
    return MealPlanService(
        meal_repository=InMemoryMealRepository(),
        preference_repository=InMemoryMealPreferenceRepository(),
        food_service=food_service,
    )


@pytest.fixture
def customization_service() -> CustomizationService:
    return CustomizationService(
        InMemoryCustomizationRepository(), clock=lambda: TODAY
    )


@pytest.fixture
def progress_service() -> ProgressService:
    return ProgressService(
        log_repository=InMemoryWorkoutLogRepository(),
        weight_repository=InMemoryWeightRepository(),
    )


@pytest.fixture
def container(
    settings: Settings,
    food_service: FoodService,
    meal_plan_service: MealPlanService,
    customization_service: CustomizationService,
    progress_service: ProgressService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        exercise_service=ExerciseService(InMemoryExerciseRepository()),
        food_service=food_service,
        meal_plan_service=meal_plan_service,
        workout_service=WorkoutService(InMemoryWorkoutTemplateRepository()),
        customization_service=customization_service,
        progress_service=progress_service,
        profile_service=ProfileService(InMemoryProfileRepository()),
        close_resources=close_resources,
    )
