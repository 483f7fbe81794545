"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from fitpal.adapters.json_file_store import JsonFileKeyValueStore
from fitpal.adapters.local_log_backend import LocalLogBackend
from fitpal.adapters.supabase_log_backend import SupabaseLogBackend
from fitpal.adapters.telegram_client import HttpxTelegramClient, TelegramClient
from fitpal.config import Settings
from fitpal.services.chat import ChatService
from fitpal.services.commands import TelegramCommandHandler
from fitpal.services.dashboard import DashboardService
from fitpal.services.logs import DailyLogService
from fitpal.services.profiles import ProfileService
from fitpal.services.storage import LogBackend, TwoTierLogRepository

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    repository: TwoTierLogRepository
    profile_service: ProfileService
    log_service: DailyLogService
    chat_service: ChatService
    dashboard_service: DashboardService
    telegram_client: TelegramClient | None
    command_handler: TelegramCommandHandler | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Without Supabase credentials the app runs in local-only mode, and
    without a bot token the Telegram surface is disabled.
    """
    resolved_settings = settings or Settings()
    remote: LogBackend | None = None
    if resolved_settings.remote_storage_enabled:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        remote = SupabaseLogBackend(supabase_client)
    else:
        _logger.info("Supabase is not configured, using local storage only")
    local = LocalLogBackend(
        JsonFileKeyValueStore(Path(resolved_settings.local_store_path))
    )
    repository = TwoTierLogRepository(local=local, remote=remote)
    profile_service = ProfileService(repository)
    log_service = DailyLogService(repository)
    chat_service = ChatService(
        profile_service=profile_service, log_service=log_service
    )
    dashboard_service = DashboardService(log_service)

    telegram_client: HttpxTelegramClient | None = None
    command_handler: TelegramCommandHandler | None = None
    if resolved_settings.telegram_bot_token:
        telegram_client = HttpxTelegramClient.create(
            resolved_settings.telegram_bot_token
        )
        command_handler = TelegramCommandHandler(
            profile_service=profile_service,
            dashboard_service=dashboard_service,
            chat_service=chat_service,
            telegram_client=telegram_client,
        )

    async def close_resources() -> None:
        if telegram_client is not None:
            await telegram_client.close()

    return AppContainer(
        settings=resolved_settings,
        repository=repository,
        profile_service=profile_service,
        log_service=log_service,
        chat_service=chat_service,
        dashboard_service=dashboard_service,
        telegram_client=telegram_client,
        command_handler=command_handler,
        close_resources=close_resources,
    )
