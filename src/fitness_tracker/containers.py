"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from fitness_tracker.adapters.supabase_customization_repository import (
    SupabaseCustomizationRepository,
)
from fitness_tracker.adapters.supabase_exercise_repository import (
    SupabaseExerciseRepository,
)
from fitness_tracker.adapters.supabase_food_repository import SupabaseFoodRepository
from fitness_tracker.adapters.supabase_meal_preference_repository import (
    SupabaseMealPreferenceRepository,
)
from fitness_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from fitness_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from fitness_tracker.adapters.supabase_weight_repository import (
    SupabaseWeightRepository,
)
from fitness_tracker.adapters.supabase_workout_log_repository import (
    SupabaseWorkoutLogRepository,
)
from fitness_tracker.adapters.supabase_workout_template_repository import (
    SupabaseWorkoutTemplateRepository,
)
from fitness_tracker.config import Settings
from fitness_tracker.services.customizations import CustomizationService
from fitness_tracker.services.exercises import ExerciseService
from fitness_tracker.services.foods import FoodService
from fitness_tracker.services.meals import MealPlanService
from fitness_tracker.services.profile import ProfileService
from fitness_tracker.services.progress import ProgressService
from fitness_tracker.services.workouts import WorkoutService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    exercise_service: ExerciseService
    food_service: FoodService
    meal_plan_service: MealPlanService
    workout_service: WorkoutService
    customization_service: CustomizationService
    progress_service: ProgressService
    profile_service: ProfileService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_service = FoodService(SupabaseFoodRepository(supabase_client))
    meal_plan_service = MealPlanService(
        meal_repository=SupabaseMealRepository(supabase_client),
        preference_repository=SupabaseMealPreferenceRepository(supabase_client),
        food_service=food_service,
        daily_target_calories=resolved_settings.daily_target_calories,
        daily_target_protein=resolved_settings.daily_target_protein,
    )
    customization_service = CustomizationService(
        SupabaseCustomizationRepository(supabase_client),
        strict=resolved_settings.strict_customizations,
    )
    progress_service = ProgressService(
        log_repository=SupabaseWorkoutLogRepository(supabase_client),
        weight_repository=SupabaseWeightRepository(supabase_client),
    )

    async def close_resources() -> None:
        supabase_client.postgrest.session.close()

    return AppContainer(
        settings=resolved_settings,
        exercise_service=ExerciseService(SupabaseExerciseRepository(supabase_client)),
        food_service=food_service,
        meal_plan_service=meal_plan_service,
        workout_service=WorkoutService(
            SupabaseWorkoutTemplateRepository(supabase_client)
        ),
        customization_service=customization_service,
        progress_service=progress_service,
        profile_service=ProfileService(SupabaseProfileRepository(supabase_client)),
        close_resources=close_resources,
    )
