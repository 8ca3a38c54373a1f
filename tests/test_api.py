"""Tests for the HTTP API."""

import json
from datetime import date
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from fitness_tracker.api.app import create_app
from fitness_tracker.containers import AppContainer
from fitness_tracker.domain.progress import UserProfile
from tests.conftest import BENCH, DUMBBELL_PRESS, SQUAT

EGG_PAYLOAD = {
    "id": "egg",
    "name": "Egg",
    "calories_per_100g": 165,
    "protein_per_100g": 31,
    "carbs_per_100g": 0,
    "fat_per_100g": 3.6,
    "piece_weight_grams": 50,
    "piece_name": "egg",
}


def headers(user_id: UUID) -> dict[str, str]:
    return {"X-User-Id": str(user_id)}


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_lifespan_closes_resources(container: AppContainer) -> None:
    closed: list[bool] = []

    async def close_resources() -> None:
        closed.append(True)

    container.close_resources = close_resources

    with TestClient(create_app(container)) as client:
        assert client.get("/health").status_code == 200

    assert closed == [True]


def test_macros_for_two_eggs(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/nutrition/macros",
        json={"food": EGG_PAYLOAD, "quantity": 2, "quantity_type": "pieces"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["macros"] == {"calories": 165, "protein": 31.0, "carbs": 0, "fat": 3.6}
    assert data["grams"] == 100
    assert data["label"] == "2 eggs"


def test_strict_macros_without_piece_weight(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    food = {**EGG_PAYLOAD, "piece_weight_grams": None}

    response = client.post(
        "/nutrition/macros",
        json={"food": food, "quantity": 2, "quantity_type": "pieces", "strict": True},
    )

    assert response.status_code == 422


def test_nutrition_totals(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    item = {"food": EGG_PAYLOAD, "quantity": 1, "quantity_type": "pieces"}

    response = client.post("/nutrition/totals", json={"items": [item, item]})

    assert response.status_code == 200
    assert response.json()["totals"]["calories"] == 166


def test_food_bank(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/foods/bank")

    assert response.status_code == 200
    bank = response.json()["bank"]
    assert [food["id"] for food in bank["breakfast"]] == ["egg"]


def test_anonymous_meal_plan_uses_base_meals(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/meals/plan")

    assert response.status_code == 200
    data = response.json()
    assert [meal["slot"] for meal in data["meals"]] == ["breakfast", "lunch"]
    assert data["target_calories"] == 1950


def test_replace_meal_foods(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))

    response = client.put(
        "/meals/lunch/foods",
        json={"foods": [{"food_id": "chicken", "quantity": 200}]},
        headers=headers(user_id),
    )
    plan = client.get("/meals/plan", headers=headers(user_id)).json()

    assert response.status_code == 200
    lunch = next(meal for meal in plan["meals"] if meal["slot"] == "lunch")
    assert [food["id"] for food in lunch["foods"]] == ["chicken"]
    assert lunch["foods"][0]["quantity_type"] == "grams"
    assert lunch["foods"][0]["calories"] == 330


def test_add_food_uses_default_quantity(
    container: AppContainer, user_id: UUID
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/meals/snack1/foods", json={"food_id": "egg"}, headers=headers(user_id)
    )

    assert response.status_code == 200
    snack = container.meal_plan_service.get_custom_meals(user_id)["snack1"]
    assert snack[-1].id == "egg"
    assert snack[-1].quantity == 1
    assert snack[-1].quantity_type == "pieces"


def test_unknown_food_is_not_found(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/meals/lunch/foods", json={"food_id": "ghost"}, headers=headers(user_id)
    )

    assert response.status_code == 404


def test_reset_meal(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))
    client.put(
        "/meals/lunch/foods",
        json={"foods": [{"food_id": "rice", "quantity": 250}]},
        headers=headers(user_id),
    )

    response = client.delete("/meals/lunch/foods", headers=headers(user_id))

    assert response.status_code == 200
    assert container.meal_plan_service.get_custom_meals(user_id)["lunch"] == []


def test_meal_writes_require_user(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.put("/meals/lunch/foods", json={"foods": []})
    malformed = client.delete("/meals", headers={"X-User-Id": "not-a-uuid"})

    assert response.status_code == 401
    assert malformed.status_code == 401


def test_exercise_sections(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    lower = client.get("/exercises", params={"section": "lower"}).json()

    ids = {exercise["id"] for exercise in lower["exercises"]}
    assert SQUAT.id in ids
    assert BENCH.id not in ids


def test_exercise_data(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))

    client.put(
        f"/exercises/{BENCH.id}/data",
        json={"weight": 62.5, "sets": 4},
        headers=headers(user_id),
    )
    data = client.get("/exercises/data", headers=headers(user_id)).json()["data"]

    assert data[BENCH.id]["weight"] == 62.5
    assert data[BENCH.id]["sets"] == 4


def test_weekly_schedule(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))

    data = client.get("/workouts", headers=headers(user_id)).json()

    assert data["week_start"] == "2026-10-18"
    assert data["editable"] is True
    assert data["completed_days"] == []
    assert len(data["workouts"]) == 7


def test_swap_exercise_then_read_day(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/workouts/1/swap",
        json={"original_id": BENCH.id, "replacement_id": DUMBBELL_PRESS.id},
        headers=headers(user_id),
    )
    day = client.get("/workouts/1", headers=headers(user_id)).json()

    assert response.status_code == 200
    assert response.json()["customization"]["swapped_exercises"] == [
        {"original_id": BENCH.id, "replacement_id": DUMBBELL_PRESS.id}
    ]
    assert day["has_customizations"] is True
    first = day["workout"]["exercises"][0]
    assert first["id"] == DUMBBELL_PRESS.id
    assert first["swapped_from"] == BENCH.id


def test_past_week_is_locked(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/workouts/1/exercises",
        json={"exercise_id": SQUAT.id, "week_start": "2026-10-11"},
        headers=headers(user_id),
    )

    assert response.status_code == 403


def test_remove_added_exercise_without_customization(
    container: AppContainer, user_id: UUID
) -> None:
    client = TestClient(create_app(container))

    response = client.delete(
        f"/workouts/1/exercises/{SQUAT.id}", headers=headers(user_id)
    )

    assert response.status_code == 404


def test_cardio_override_and_reset(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))

    cardio = client.post(
        "/workouts/1/cardio", json={"cardio_type": "hiit"}, headers=headers(user_id)
    )
    reset = client.delete("/workouts/1/customizations", headers=headers(user_id))
    day = client.get("/workouts/1", headers=headers(user_id)).json()

    assert cardio.json()["customization"]["cardio_customization"] == "hiit"
    assert reset.status_code == 200
    assert day["has_customizations"] is False


def test_day_out_of_range(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    assert client.get("/workouts/7").status_code == 422


def test_workout_logs(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))
    log = {
        "id": "log-1",
        "date": "2026-10-19",
        "day_of_week": 1,
        "type": "upper",
        "exercises": [
            {
                "exercise_id": BENCH.id,
                "name": BENCH.name,
                "sets": [{"reps": 8, "weight": 60, "completed": True}],
            }
        ],
        "completed": True,
    }

    created = client.post("/logs", json=log, headers=headers(user_id))
    updated = client.patch(
        "/logs/log-1", json={"rating": 4}, headers=headers(user_id)
    )
    listed = client.get(
        "/logs",
        params={"start": "2026-10-18", "end": "2026-10-24"},
        headers=headers(user_id),
    ).json()
    schedule = client.get("/workouts", headers=headers(user_id)).json()

    assert created.status_code == 201
    assert updated.json()["log"]["rating"] == 4
    assert updated.json()["log"]["exercises"][0]["sets"][0]["weight"] == 60
    assert [item["id"] for item in listed["logs"]] == ["log-1"]
    assert schedule["completed_days"] == [1]

    assert client.delete("/logs/log-1", headers=headers(user_id)).status_code == 200
    assert client.get("/logs", headers=headers(user_id)).json()["logs"] == []


def test_update_unknown_log(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))

    response = client.patch(
        "/logs/missing", json={"notes": "x"}, headers=headers(user_id)
    )

    assert response.status_code == 404


def test_weights(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))

    client.post(
        "/weights", json={"date": "2026-10-12", "weight": 83}, headers=headers(user_id)
    )
    client.post(
        "/weights",
        json={"date": "2026-10-19", "weight": 82.4},
        headers=headers(user_id),
    )
    data = client.get("/weights", headers=headers(user_id)).json()

    assert [entry["date"] for entry in data["weights"]] == [
        "2026-10-12",
        "2026-10-19",
    ]
    assert data["latest"] == {"date": "2026-10-19", "weight": 82.4}


def test_profile_defaults_and_update(container: AppContainer, user_id: UUID) -> None:
    client = TestClient(create_app(container))

    default = client.get("/profile", headers=headers(user_id)).json()["profile"]
    failed = client.patch("/profile", json={"name": "Sam"}, headers=headers(user_id))

    repository = container.profile_service.repository
    repository.profiles[user_id] = UserProfile(
        name="Sam",
        current_weight=90,
        target_weight=80,
        height=180,
        start_date=date(2026, 9, 1),
        week_number=7,
    )
    updated = client.patch(
        "/profile", json={"current_weight": 88.5}, headers=headers(user_id)
    )

    assert default["name"] == "User"
    assert failed.status_code == 502
    assert updated.json()["profile"]["current_weight"] == 88.5
    assert updated.json()["profile"]["name"] == "Sam"


def test_past_week_ignores_later_completed_logs(
    container: AppContainer, user_id: UUID
) -> None:
    client = TestClient(create_app(container))
    client.post(
        "/logs",
        json={
            "date": "2026-10-19",
            "day_of_week": 1,
            "type": "upper",
            "completed": True,
        },
        headers=headers(user_id),
    )

    past = client.get(
        "/workouts", params={"week_start": "2026-10-04"}, headers=headers(user_id)
    ).json()

    assert past["editable"] is False
    assert past["completed_days"] == []


def test_null_exercises_do_not_clear_log(
    container: AppContainer, user_id: UUID
) -> None:
    client = TestClient(create_app(container))
    client.post(
        "/logs",
        json={
            "id": "log-1",
            "date": "2026-10-19",
            "day_of_week": 1,
            "type": "upper",
            "exercises": [{"exercise_id": BENCH.id, "name": BENCH.name}],
        },
        headers=headers(user_id),
    )

    response = client.patch(
        "/logs/log-1",
        json={"exercises": None, "completed": None},
        headers=headers(user_id),
    )

    assert response.status_code == 200
    log = response.json()["log"]
    assert [item["exercise_id"] for item in log["exercises"]] == [BENCH.id]
    assert log["completed"] is False


def test_failed_log_update_is_bad_gateway(
    container: AppContainer, user_id: UUID, monkeypatch: pytest.MonkeyPatch
) -> None:
    client = TestClient(create_app(container))
    client.post(
        "/logs",
        json={"id": "log-1", "date": "2026-10-19", "day_of_week": 1, "type": "upper"},
        headers=headers(user_id),
    )

    def fail(*_args: object) -> None:
        raise RuntimeError("backend unavailable")

    monkeypatch.setattr(container.progress_service.log_repository, "update_log", fail)
    response = client.patch(
        "/logs/log-1", json={"rating": 5}, headers=headers(user_id)
    )

    assert response.status_code == 502


def test_infinite_quantity_is_rejected(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    body = json.dumps({"food": EGG_PAYLOAD, "quantity_type": "grams"})
    body = body[:-1] + ', "quantity": 1e309}'

    response = client.post(
        "/nutrition/macros",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
