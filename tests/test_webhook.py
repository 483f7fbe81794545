"""Tests for Telegram webhook handling."""

import logging
from dataclasses import replace

import httpx
from fastapi.testclient import TestClient

from fitpal.api.app import create_app
from fitpal.containers import AppContainer
from fitpal.services.chat import HELP_REPLY, ONBOARDING_REPLY
from fitpal.services.commands import telegram_identity
from fitpal.services.profiles import ProfileService
from tests.conftest import FakeTelegramClient, make_profile


def _update(text: str, user_id: int = 123, chat_id: int = 99) -> dict[str, object]:
    return {
        "update_id": 1,
        "message": {
            "message_id": 10,
            "date": 1700000000,
            "chat": {"id": chat_id, "type": "private"},
            "from": {"id": user_id, "is_bot": False, "first_name": "Test"},
            "text": text,
        },
    }


def test_telegram_identity_is_stable() -> None:
    assert telegram_identity(123) == telegram_identity(123)
    assert telegram_identity(123) != telegram_identity(124)


def test_webhook_start_sends_fitpal_id(
    container: AppContainer, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    response = client.post("/telegram/webhook", json=_update("/start"))

    assert response.status_code == 200
    chat_id, text = telegram_client.messages[0]
    assert chat_id == 99
    assert "Welcome to FitPal!" in text
    assert str(telegram_identity(123)) in text


def test_webhook_start_welcomes_back_onboarded_user(
    container: AppContainer,
    telegram_client: FakeTelegramClient,
    profile_service: ProfileService,
) -> None:
    profile_service.complete_onboarding(telegram_identity(123), make_profile())
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_update("/start@FitPalBot"))

    assert telegram_client.messages[0][1].startswith("Welcome back, Alex!")


def test_webhook_text_goes_through_chat(
    container: AppContainer,
    telegram_client: FakeTelegramClient,
    profile_service: ProfileService,
) -> None:
    profile_service.complete_onboarding(telegram_identity(123), make_profile())
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_update("I ran for 30 minutes, easy pace"))
    client.post("/telegram/webhook", json=_update("/today"))
    client.post("/telegram/webhook", json=_update("/streak"))

    logged, today, streak = (text for _, text in telegram_client.messages)
    assert "You burned approximately 240 calories!" in logged
    assert "Running low, 30 min, 240 kcal" in today
    assert "Calories: 0 / 2556 (0%)" in today
    assert streak == "You worked out today. Come back tomorrow to build a streak!"


def test_webhook_text_without_profile_asks_for_onboarding(
    container: AppContainer, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_update("I had a banana"))

    assert telegram_client.messages == [(99, ONBOARDING_REPLY)]


def test_webhook_help_and_unknown_command(
    container: AppContainer, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_update("/help"))
    client.post("/telegram/webhook", json=_update("/unknown"))

    assert [text for _, text in telegram_client.messages] == [HELP_REPLY, HELP_REPLY]


def test_webhook_rejects_unlisted_users(
    container: AppContainer, telegram_client: FakeTelegramClient
) -> None:
    container.settings = container.settings.model_copy(
        update={"telegram_allowed_user_ids": "555"}
    )
    client = TestClient(create_app(container))

    client.post("/telegram/webhook", json=_update("/start", user_id=123))

    assert telegram_client.messages == [(99, "This bot is private.")]


def test_webhook_ignores_updates_without_text(
    container: AppContainer, telegram_client: FakeTelegramClient
) -> None:
    client = TestClient(create_app(container))

    response = client.post("/telegram/webhook", json={"update_id": 5})

    assert response.status_code == 200
    assert telegram_client.messages == []


def test_webhook_without_bot_token_is_a_no_op(container: AppContainer) -> None:
    client = TestClient(
        create_app(replace(container, telegram_client=None, command_handler=None))
    )

    response = client.post("/telegram/webhook", json=_update("/start"))

    assert response.status_code == 200


def test_webhook_send_failure_is_logged(
    container: AppContainer, telegram_client: FakeTelegramClient, caplog
) -> None:
    async def failing_send(chat_id: int, text: str) -> None:
        raise httpx.ConnectError("telegram down")

    telegram_client.send_message = failing_send  # type: ignore[method-assign]
    client = TestClient(create_app(container))
    logging.getLogger("fitpal").propagate = True

    response = client.post("/telegram/webhook", json=_update("/help"))

    assert response.status_code == 200
    assert "Failed to send Telegram reply" in caplog.text
