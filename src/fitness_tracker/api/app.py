"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date
from typing import Annotated, Literal
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Path, Request, status
from fastapi.responses import JSONResponse

from fitness_tracker.api.schemas import (
    AddExerciseRequest,
    CardioRequest,
    ExerciseDataRequest,
    FoodSelectionPayload,
    MacrosRequest,
    MealFoodsRequest,
    ProfileUpdateRequest,
    SwapExerciseRequest,
    TotalsRequest,
    WeightRequest,
    WorkoutLogRequest,
    WorkoutLogUpdateRequest,
)
from fitness_tracker.app_logging import configure_logging
from fitness_tracker.config import parse_user_id
from fitness_tracker.containers import AppContainer
from fitness_tracker.domain.errors import (
    MissingPieceWeightError,
    UnresolvedExerciseError,
    WeekLockedError,
)
from fitness_tracker.domain.nutrition import (
    Food,
    MealFood,
    MealSlot,
    calculate_macros,
    calculate_total_macros,
    create_meal_food,
    format_quantity,
    get_default_quantity,
    get_weight_in_grams,
)
from fitness_tracker.domain.progress import UserExerciseData, WeightEntry
from fitness_tracker.domain.workouts import (
    Exercise,
    WeekCustomizations,
    WorkoutCustomization,
    WorkoutTemplate,
)

DayOfWeek = Annotated[int, Path(ge=0, le=6)]


def get_user_id(x_user_id: str | None = Header(default=None)) -> UUID | None:
    """Return the caller's user id from the session header, if present."""
    return parse_user_id(x_user_id)


def require_user_id(user_id: UUID | None = Depends(get_user_id)) -> UUID:
    """Ensure the request carries a valid user id."""
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user_id


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting in %s environment", container.settings.environment)
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(WeekLockedError)
    async def week_locked(_request: Request, exc: WeekLockedError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)}
        )

    @app.exception_handler(UnresolvedExerciseError)
    @app.exception_handler(MissingPieceWeightError)
    async def unprocessable(_request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutrition/macros")
    async def nutrition_macros(payload: MacrosRequest) -> dict[str, object]:
        """Scale a food's macros to a quantity."""
        food = payload.food.to_domain()
        macros = calculate_macros(
            food, payload.quantity, payload.quantity_type, strict=payload.strict
        )
        return {
            "macros": asdict(macros),
            "grams": get_weight_in_grams(
                food, payload.quantity, payload.quantity_type
            ),
            "label": format_quantity(
                payload.quantity, payload.quantity_type, food.piece_name
            ),
        }

    @app.post("/nutrition/totals")
    async def nutrition_totals(payload: TotalsRequest) -> dict[str, object]:
        """Sum the macros of several foods."""
        foods = [
            create_meal_food(
                item.food.to_domain(),
                item.quantity,
                item.quantity_type,
                strict=item.strict,
            )
            for item in payload.items
        ]
        return {"totals": asdict(calculate_total_macros(foods))}

    @app.get("/foods")
    async def list_foods(
        request: Request, user_id: UUID | None = Depends(get_user_id)
    ) -> dict[str, object]:
        """Return shared foods and the caller's custom foods."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.food_service.list_foods(user_id)
        return {"foods": [asdict(food) for food in foods]}

    @app.get("/foods/bank")
    async def food_bank(
        request: Request, user_id: UUID | None = Depends(get_user_id)
    ) -> dict[str, object]:
        """Return foods grouped by swap category."""
        state_container: AppContainer = request.app.state.container
        bank = state_container.food_service.food_bank(user_id)
        return {
            "bank": {
                category: [asdict(food) for food in foods]
                for category, foods in bank.items()
            }
        }

    @app.get("/meals/plan")
    async def meal_plan(
        request: Request, user_id: UUID | None = Depends(get_user_id)
    ) -> dict[str, object]:
        """Return the effective meal plan with daily totals."""
        state_container: AppContainer = request.app.state.container
        return asdict(state_container.meal_plan_service.get_daily_plan(user_id))

    @app.get("/meals/options")
    async def meal_options(
        request: Request,
        slot: MealSlot | None = None,
        user_id: UUID | None = Depends(get_user_id),
    ) -> dict[str, object]:
        """Return complete meal options, optionally for one slot."""
        state_container: AppContainer = request.app.state.container
        options = state_container.meal_plan_service.get_meal_options(slot, user_id)
        return {"options": [asdict(option) for option in options]}

    @app.put("/meals/{slot}/foods")
    async def replace_meal_foods(
        slot: MealSlot,
        payload: MealFoodsRequest,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, str]:
        """Replace the caller's foods for a slot."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.food_service.foods_by_id(user_id)
        meal_foods = [_to_meal_food(item, foods) for item in payload.foods]
        _ensure_saved(
            state_container.meal_plan_service.update_meal_foods(
                user_id, slot, meal_foods
            )
        )
        return {"status": "ok"}

    @app.post("/meals/{slot}/foods")
    async def add_meal_food(
        slot: MealSlot,
        payload: FoodSelectionPayload,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, str]:
        """Append a food to the caller's slot."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.food_service.foods_by_id(user_id)
        _ensure_saved(
            state_container.meal_plan_service.add_food_to_meal(
                user_id, slot, _to_meal_food(payload, foods)
            )
        )
        return {"status": "ok"}

    @app.delete("/meals/{slot}/foods/{food_id}")
    async def remove_meal_food(
        slot: MealSlot,
        food_id: str,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, str]:
        """Remove a food from the caller's slot."""
        state_container: AppContainer = request.app.state.container
        _ensure_saved(
            state_container.meal_plan_service.remove_food_from_meal(
                user_id, slot, food_id
            )
        )
        return {"status": "ok"}

    @app.delete("/meals/{slot}/foods")
    async def reset_meal(
        slot: MealSlot, request: Request, user_id: UUID = Depends(require_user_id)
    ) -> dict[str, str]:
        """Restore the base foods for a slot."""
        state_container: AppContainer = request.app.state.container
        _ensure_saved(state_container.meal_plan_service.reset_meal(user_id, slot))
        return {"status": "ok"}

    @app.delete("/meals")
    async def reset_all_meals(
        request: Request, user_id: UUID = Depends(require_user_id)
    ) -> dict[str, str]:
        """Restore the base plan for every slot."""
        state_container: AppContainer = request.app.state.container
        _ensure_saved(state_container.meal_plan_service.reset_all_meals(user_id))
        return {"status": "ok"}

    @app.get("/exercises")
    async def list_exercises(
        request: Request,
        category: str | None = None,
        muscle_group: str | None = None,
        section: Literal["upper", "lower"] | None = None,
    ) -> dict[str, object]:
        """Return exercises, filtered by category, muscle group or body section."""
        service = request.app.state.container.exercise_service
        if section == "upper":
            exercises = service.upper_body_exercises()
        elif section == "lower":
            exercises = service.lower_body_exercises()
        else:
            exercises = service.filter_exercises(category, muscle_group)
        return {"exercises": [asdict(exercise) for exercise in exercises]}

    @app.get("/exercises/data")
    async def exercise_data(
        request: Request, user_id: UUID = Depends(require_user_id)
    ) -> dict[str, object]:
        """Return the caller's per-exercise overrides."""
        service = request.app.state.container.exercise_service
        data = service.get_user_exercise_data(user_id)
        return {"data": {key: asdict(value) for key, value in data.items()}}

    @app.put("/exercises/{exercise_id}/data")
    async def update_exercise_data(
        exercise_id: str,
        payload: ExerciseDataRequest,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, str]:
        """Store the caller's override for an exercise."""
        service = request.app.state.container.exercise_service
        data = UserExerciseData(exercise_id=exercise_id, **payload.model_dump())
        _ensure_saved(service.update_user_exercise_data(user_id, data))
        return {"status": "ok"}

    @app.delete("/exercises/{exercise_id}/data")
    async def clear_exercise_data(
        exercise_id: str, request: Request, user_id: UUID = Depends(require_user_id)
    ) -> dict[str, str]:
        """Remove the caller's override for an exercise."""
        service = request.app.state.container.exercise_service
        _ensure_saved(service.clear_user_exercise_data(user_id, exercise_id))
        return {"status": "ok"}

    @app.get("/workouts")
    async def weekly_schedule(
        request: Request,
        week_start: date | None = None,
        user_id: UUID | None = Depends(get_user_id),
    ) -> dict[str, object]:
        """Return the week's workouts with the caller's edits applied."""
        state_container: AppContainer = request.app.state.container
        week = state_container.customization_service.load_week(user_id, week_start)
        exercises = state_container.exercise_service.list_exercises()
        workouts = [
            _workout_view(week, template, exercises)
            for template in state_container.workout_service.list_templates()
        ]
        return {
            "week_start": week.week_start,
            "editable": state_container.customization_service.is_editable(
                week.week_start
            ),
            "completed_days": sorted(
                state_container.progress_service.completed_days(
                    user_id, week.week_start
                )
            ),
            "workouts": workouts,
        }

    @app.get("/workouts/{day}")
    async def workout_for_day(
        day: DayOfWeek,
        request: Request,
        week_start: date | None = None,
        user_id: UUID | None = Depends(get_user_id),
    ) -> dict[str, object]:
        """Return one day's workout with the caller's edits applied."""
        state_container: AppContainer = request.app.state.container
        template = state_container.workout_service.get_workout_by_day(day)
        if template is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        week = state_container.customization_service.load_week(user_id, week_start)
        exercises = state_container.exercise_service.list_exercises()
        return {
            "week_start": week.week_start,
            "editable": state_container.customization_service.is_editable(
                week.week_start
            ),
            **_workout_view(week, template, exercises),
        }

    @app.post("/workouts/{day}/swap")
    async def swap_exercise(
        day: DayOfWeek,
        payload: SwapExerciseRequest,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, object]:
        """Swap a template exercise for the given week."""
        service = request.app.state.container.customization_service
        customization = service.swap_exercise(
            user_id,
            day,
            payload.original_id,
            payload.replacement_id,
            payload.week_start,
        )
        return _customization_response(customization)

    @app.post("/workouts/{day}/exercises")
    async def add_exercise(
        day: DayOfWeek,
        payload: AddExerciseRequest,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, object]:
        """Add an exercise to a day for the given week."""
        service = request.app.state.container.customization_service
        customization = service.add_exercise(
            user_id, day, payload.exercise_id, payload.week_start
        )
        return _customization_response(customization)

    @app.delete("/workouts/{day}/exercises/{exercise_id}")
    async def remove_added_exercise(
        day: DayOfWeek,
        exercise_id: str,
        request: Request,
        week_start: date | None = None,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, object]:
        """Remove an exercise that was added to a day."""
        service = request.app.state.container.customization_service
        customization = service.remove_added_exercise(
            user_id, day, exercise_id, week_start
        )
        if customization is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"customization": asdict(customization)}

    @app.post("/workouts/{day}/cardio")
    async def set_cardio(
        day: DayOfWeek,
        payload: CardioRequest,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, object]:
        """Pick the cardio type for a day, or clear the override."""
        service = request.app.state.container.customization_service
        customization = service.set_cardio(
            user_id, day, payload.cardio_type, payload.week_start
        )
        return _customization_response(customization)

    @app.delete("/workouts/{day}/customizations")
    async def reset_day(
        day: DayOfWeek,
        request: Request,
        week_start: date | None = None,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, str]:
        """Drop every edit for a day in the given week."""
        service = request.app.state.container.customization_service
        _ensure_saved(service.reset_day(user_id, day, week_start))
        return {"status": "ok"}

    @app.get("/weights")
    async def list_weights(
        request: Request, user_id: UUID = Depends(require_user_id)
    ) -> dict[str, object]:
        """Return the caller's weight history and latest entry."""
        service = request.app.state.container.progress_service
        weights = service.list_weights(user_id)
        return {
            "weights": [asdict(entry) for entry in weights],
            "latest": asdict(weights[-1]) if weights else None,
        }

    @app.post("/weights")
    async def add_weight(
        payload: WeightRequest,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, str]:
        """Record body weight for a day."""
        service = request.app.state.container.progress_service
        entry = WeightEntry(date=payload.date, weight=payload.weight)
        _ensure_saved(service.add_weight(user_id, entry))
        return {"status": "ok"}

    @app.get("/logs")
    async def list_logs(
        request: Request,
        start: date | None = None,
        end: date | None = None,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, object]:
        """Return the caller's workout logs, optionally within a date range."""
        service = request.app.state.container.progress_service
        if start is not None or end is not None:
            logs = service.get_logs_by_date_range(
                user_id, start or date.min, end or date.max
            )
        else:
            logs = service.list_logs(user_id)
        return {"logs": [asdict(log) for log in logs]}

    @app.post("/logs", status_code=status.HTTP_201_CREATED)
    async def add_log(
        payload: WorkoutLogRequest,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, str]:
        """Store a workout log."""
        service = request.app.state.container.progress_service
        _ensure_saved(service.add_log(user_id, payload.to_domain()))
        return {"status": "ok"}

    @app.patch("/logs/{log_id}")
    async def update_log(
        log_id: str,
        payload: WorkoutLogUpdateRequest,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, object]:
        """Apply partial updates to a workout log."""
        service = request.app.state.container.progress_service
        if service.get_log(user_id, log_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        log = service.update_log(user_id, log_id, payload.to_updates())
        _ensure_saved(log is not None)
        return {"log": asdict(log)}

    @app.delete("/logs/{log_id}")
    async def delete_log(
        log_id: str, request: Request, user_id: UUID = Depends(require_user_id)
    ) -> dict[str, str]:
        """Delete a workout log."""
        service = request.app.state.container.progress_service
        _ensure_saved(service.delete_log(user_id, log_id))
        return {"status": "ok"}

    @app.get("/profile")
    async def get_profile(
        request: Request, user_id: UUID = Depends(require_user_id)
    ) -> dict[str, object]:
        """Return the caller's profile, or defaults when none is stored."""
        service = request.app.state.container.profile_service
        return {"profile": asdict(service.get_profile(user_id))}

    @app.patch("/profile")
    async def update_profile(
        payload: ProfileUpdateRequest,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, object]:
        """Apply partial updates to the caller's profile."""
        service = request.app.state.container.profile_service
        profile = service.update_profile(
            user_id, payload.model_dump(exclude_unset=True)
        )
        _ensure_saved(profile is not None)
        return {"profile": asdict(profile)}

    return app


def _to_meal_food(payload: FoodSelectionPayload, foods: dict[str, Food]) -> MealFood:
    food = foods.get(payload.food_id)
    if food is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown food {payload.food_id}",
        )
    default_quantity, default_type = get_default_quantity(food)
    quantity_type = payload.quantity_type or default_type
    if payload.quantity is not None:
        quantity = payload.quantity
    elif quantity_type == default_type:
        quantity = default_quantity
    else:
        quantity = 100 if quantity_type == "grams" else 1
    return create_meal_food(food, quantity, quantity_type)


def _workout_view(
    week: WeekCustomizations, template: WorkoutTemplate, exercises: list[Exercise]
) -> dict[str, object]:
    return {
        "workout": asdict(week.get_customized_workout(template, exercises)),
        "has_customizations": week.has_customizations(template.day_of_week),
    }


def _customization_response(
    customization: WorkoutCustomization | None,
) -> dict[str, object]:
    _ensure_saved(customization is not None)
    return {"customization": asdict(customization)}


def _ensure_saved(saved: bool) -> None:
    if not saved:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to save changes"
        )
