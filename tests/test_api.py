"""Tests for the HTTP API."""

from uuid import uuid4

from fastapi.testclient import TestClient

from fitpal.api.app import create_app
from fitpal.containers import AppContainer
from fitpal.services.chat import GREETING_REPLY
from tests.conftest import FakeTelegramClient

PROFILE_BODY = {
    "name": "Alex",
    "age": 30,
    "weight": 70,
    "height": 175,
    "gender": "male",
    "activity_level": "moderately active",
    "goal": "maintenance",
    "allergies": ["peanuts"],
}


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_lifespan_syncs_commands_and_closes(
    container: AppContainer, telegram_client: FakeTelegramClient
) -> None:
    with TestClient(create_app(container)) as client:
        client.get("/health")

    assert telegram_client.commands is not None
    assert telegram_client.commands[0]["command"] == "start"
    assert telegram_client.menu_button == {"type": "commands"}
    assert telegram_client.closed


def test_chat_greeting(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 200
    assert response.json() == {
        "intent": "greeting",
        "reply": GREETING_REPLY,
        "notices": [],
    }


def test_chat_rejects_empty_message(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/chat", json={"message": ""})

    assert response.status_code == 422


def test_chat_rejects_invalid_user_header(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/chat", json={"message": "Hello"}, headers={"X-User-Id": "not-a-uuid"}
    )

    assert response.status_code == 422


def test_profile_onboarding_then_edit(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    headers = {"X-User-Id": str(uuid4())}

    assert client.get("/profile", headers=headers).json()["profile"] is None

    created = client.put("/profile", json=PROFILE_BODY, headers=headers)
    assert created.status_code == 200
    profile = created.json()["profile"]
    assert profile["onboarding_complete"] is True
    assert profile["daily_calories"] == 2556
    assert profile["daily_macros"] == {"protein": 192, "carbs": 256, "fat": 85}
    assert profile["allergies"] == ["peanuts"]

    edited = client.put(
        "/profile", json={**PROFILE_BODY, "goal": "weight loss"}, headers=headers
    )
    assert edited.json()["profile"]["daily_calories"] == 2056

    fetched = client.get("/profile", headers=headers).json()
    assert fetched["profile"]["goal"] == "weight loss"
    assert fetched["notices"] == []


def test_profile_rejects_unknown_goal(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.put("/profile", json={**PROFILE_BODY, "goal": "bulk"})

    assert response.status_code == 422


def test_chat_logs_food_for_onboarded_user(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    headers = {"X-User-Id": str(uuid4())}
    client.put("/profile", json=PROFILE_BODY, headers=headers)

    response = client.post(
        "/chat", json={"message": "I had a banana"}, headers=headers
    )
    dashboard = client.get("/dashboard", headers=headers).json()

    assert response.json()["intent"] == "log_food"
    assert "105 calories" in response.json()["reply"]
    assert dashboard["calories"] == 105
    assert dashboard["calorie_target"] == 2556
    assert dashboard["day"] == "2024-03-15"
    assert dashboard["streak"] == 0


def test_dashboard_lists_workouts(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    client.put("/profile", json=PROFILE_BODY)
    client.post("/chat", json={"message": "I did cycling for 45 minutes, hard"})

    dashboard = client.get("/dashboard").json()

    assert dashboard["workouts"] == [
        {
            "type": "Cycling",
            "duration": 45,
            "intensity": "high",
            "calories_burned": 450,
            "notes": None,
        }
    ]
    assert dashboard["calories_burned"] == 450
    assert dashboard["streak"] == 1
