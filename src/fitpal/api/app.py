"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from uuid import UUID

import httpx
from fastapi import FastAPI, Header, Request

from fitpal.api.models import (
    ChatRequest,
    ChatResponse,
    DashboardResponse,
    ProfileModel,
    ProfilePayload,
    ProfileResponse,
)
from fitpal.api.telegram_models import TelegramUpdate
from fitpal.app_logging import configure_logging
from fitpal.config import parse_allowed_user_ids
from fitpal.containers import AppContainer
from fitpal.domain.profile import UserProfile
from fitpal.services.chat import storage_notices
from fitpal.telegram_commands import CHAT_MENU_BUTTON, parse_command, telegram_commands


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    allowed_user_ids = parse_allowed_user_ids(
        container.settings.telegram_allowed_user_ids
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        telegram_client = app.state.container.telegram_client
        if telegram_client is not None:
            try:
                await telegram_client.set_my_commands(telegram_commands())
                await telegram_client.set_chat_menu_button(CHAT_MENU_BUTTON)
            except Exception:
                logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/chat")
    async def chat(
        body: ChatRequest,
        request: Request,
        x_user_id: UUID | None = Header(default=None),
    ) -> ChatResponse:
        """Classify a chat message and return the assistant's reply."""
        state_container: AppContainer = request.app.state.container
        reply = state_container.chat_service.respond(x_user_id, body.message)
        return ChatResponse(
            intent=reply.intent.value, reply=reply.text, notices=reply.notices
        )

    @app.get("/profile")
    async def get_profile(
        request: Request, x_user_id: UUID | None = Header(default=None)
    ) -> ProfileResponse:
        """Return the stored profile, if any."""
        state_container: AppContainer = request.app.state.container
        outcome = state_container.profile_service.get_profile(x_user_id)
        return ProfileResponse(
            profile=ProfileModel.from_domain(outcome.value) if outcome.value else None,
            notices=storage_notices([outcome]),
        )

    @app.put("/profile")
    async def put_profile(
        body: ProfilePayload,
        request: Request,
        x_user_id: UUID | None = Header(default=None),
    ) -> ProfileResponse:
        """Complete onboarding or update an onboarded profile."""
        state_container: AppContainer = request.app.state.container
        profile_service = state_container.profile_service
        existing = profile_service.get_profile(x_user_id)
        changes = body.to_changes()
        if existing.value is not None and existing.value.onboarding_complete:
            saved = profile_service.update_profile(x_user_id, existing.value, **changes)
        else:
            saved = profile_service.complete_onboarding(
                x_user_id, replace(UserProfile(), **changes)
            )
        logger.info(
            "Profile saved to %s storage",
            saved.tier.value,
            extra={"user_id": str(x_user_id)},
        )
        return ProfileResponse(
            profile=ProfileModel.from_domain(saved.value),
            notices=storage_notices([existing], [saved]),
        )

    @app.get("/dashboard")
    async def dashboard(
        request: Request, x_user_id: UUID | None = Header(default=None)
    ) -> DashboardResponse:
        """Return today's progress against the profile's targets."""
        state_container: AppContainer = request.app.state.container
        profile = state_container.profile_service.get_profile(x_user_id)
        progress = state_container.dashboard_service.get_daily_progress(
            x_user_id, profile.value
        )
        return DashboardResponse.from_domain(
            progress.value, storage_notices([profile, progress])
        )

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        message = update.message
        if message is None or not message.text:
            return {"status": "ok"}
        handler = state_container.command_handler
        if handler is None:
            logger.warning("Telegram update received but no bot token is configured")
            return {"status": "ok"}
        telegram_user_id = message.from_user.id
        try:
            if not _is_user_allowed(telegram_user_id, allowed_user_ids):
                await handler.telegram_client.send_message(
                    chat_id=message.chat.id,
                    text="This bot is private.",
                )
                return {"status": "ok"}
            command = parse_command(message.text)
            if command is not None:
                await handler.handle_command(
                    command, telegram_user_id=telegram_user_id, chat_id=message.chat.id
                )
            else:
                await handler.handle_text(
                    telegram_user_id=telegram_user_id,
                    chat_id=message.chat.id,
                    text=message.text,
                )
        except httpx.HTTPError:
            logger.exception(
                "Failed to send Telegram reply",
                extra={"telegram_user_id": telegram_user_id},
            )
        return {"status": "ok"}

    return app


def _is_user_allowed(user_id: int, allowed: set[int] | None) -> bool:
    """Return true when the user is allowed to interact with the bot."""
    return allowed is None or user_id in allowed
