"""Shared test fixtures."""

import logging
import random
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID, uuid4

import pytest

from fitpal.adapters.local_log_backend import LocalLogBackend
from fitpal.adapters.telegram_client import TelegramClient
from fitpal.config import Settings
from fitpal.containers import AppContainer
from fitpal.domain.nutrition import NutritionLog
from fitpal.domain.profile import ActivityLevel, FitnessGoal, Gender, UserProfile
from fitpal.domain.workouts import WorkoutLog
from fitpal.services.chat import ChatService
from fitpal.services.commands import TelegramCommandHandler
from fitpal.services.dashboard import DashboardService
from fitpal.services.key_value import InMemoryKeyValueStore
from fitpal.services.logs import DailyLogService
from fitpal.services.nutrition import apply_targets
from fitpal.services.profiles import ProfileService
from fitpal.services.storage import LogBackend, TwoTierLogRepository

TODAY = date(2024, 3, 15)


@dataclass
class InMemoryLogBackend(LogBackend):
    """Dict-backed log backend standing in for the remote tier."""

    profiles: dict[UUID | None, UserProfile] = field(default_factory=dict)
    nutrition_logs: dict[tuple[UUID | None, date], NutritionLog] = field(
        default_factory=dict
    )
    workout_logs: dict[tuple[UUID | None, date], WorkoutLog] = field(
        default_factory=dict
    )

    def get_profile(self, user_id: UUID | None) -> UserProfile | None:
        return self.profiles.get(user_id)

    def save_profile(self, user_id: UUID | None, profile: UserProfile) -> None:
        self.profiles[user_id] = profile

    def get_nutrition_log(
        self, user_id: UUID | None, day: date
    ) -> NutritionLog | None:
        return self.nutrition_logs.get((user_id, day))

    def save_nutrition_log(self, user_id: UUID | None, log: NutritionLog) -> None:
        self.nutrition_logs[(user_id, log.date)] = log

    def list_nutrition_logs(self, user_id: UUID | None) -> list[NutritionLog]:
        return [
            log
            for (owner, _day), log in self.nutrition_logs.items()
            if owner == user_id
        ]

    def get_workout_log(self, user_id: UUID | None, day: date) -> WorkoutLog | None:
        return self.workout_logs.get((user_id, day))

    def save_workout_log(self, user_id: UUID | None, log: WorkoutLog) -> None:
        self.workout_logs[(user_id, log.date)] = log

    def list_workout_logs(self, user_id: UUID | None) -> list[WorkoutLog]:
        return [
            log for (owner, _day), log in self.workout_logs.items() if owner == user_id
        ]


@dataclass
class FailingLogBackend(LogBackend):
    """Backend whose every call fails, simulating an unreachable remote."""

    calls: list[str] = field(default_factory=list)

    def _fail(self, action: str) -> None:
        self.calls.append(action)
        raise ConnectionError("remote unavailable")

    def get_profile(self, user_id: UUID | None) -> UserProfile | None:
        self._fail("get_profile")

    def save_profile(self, user_id: UUID | None, profile: UserProfile) -> None:
        self._fail("save_profile")

    def get_nutrition_log(
        self, user_id: UUID | None, day: date
    ) -> NutritionLog | None:
        self._fail("get_nutrition_log")

    def save_nutrition_log(self, user_id: UUID | None, log: NutritionLog) -> None:
        self._fail("save_nutrition_log")

    def list_nutrition_logs(self, user_id: UUID | None) -> list[NutritionLog]:
        self._fail("list_nutrition_logs")

    def get_workout_log(self, user_id: UUID | None, day: date) -> WorkoutLog | None:
        self._fail("get_workout_log")

    def save_workout_log(self, user_id: UUID | None, log: WorkoutLog) -> None:
        self._fail("save_workout_log")

    def list_workout_logs(self, user_id: UUID | None) -> list[WorkoutLog]:
        self._fail("list_workout_logs")


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    menu_button: dict[str, object] | None = None
    closed: bool = False

    async def send_message(self, chat_id: int, text: str) -> None:
        self.messages.append((chat_id, text))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        self.menu_button = menu_button

    async def close(self) -> None:
        self.closed = True


def make_profile(**overrides: object) -> UserProfile:
    """Return an onboarded 30-year-old male profile with targets applied."""
    values: dict[str, object] = {
        "name": "Alex",
        "age": 30,
        "weight_kg": 70,
        "height_cm": 175,
        "gender": Gender.MALE,
        "activity_level": ActivityLevel.MODERATELY_ACTIVE,
        "goal": FitnessGoal.MAINTENANCE,
        "onboarding_complete": True,
    }
    values.update(overrides)
    return apply_targets(UserProfile(**values))


def build_test_container(
    settings: Settings,
    repository: TwoTierLogRepository,
    telegram_client: FakeTelegramClient,
) -> AppContainer:
    profile_service = ProfileService(repository)
    log_service = DailyLogService(repository, today=lambda: TODAY)
    chat_service = ChatService(
        profile_service=profile_service,
        log_service=log_service,
        rng=random.Random(7),
    )
    dashboard_service = DashboardService(log_service)
    command_handler = TelegramCommandHandler(
        profile_service=profile_service,
        dashboard_service=dashboard_service,
        chat_service=chat_service,
        telegram_client=telegram_client,
    )

    async def close_resources() -> None:
        await telegram_client.close()

    return AppContainer(
        settings=settings,
        repository=repository,
        profile_service=profile_service,
        log_service=log_service,
        chat_service=chat_service,
        dashboard_service=dashboard_service,
        telegram_client=telegram_client,
        command_handler=command_handler,
        close_resources=close_resources,
    )


@pytest.fixture(autouse=True)
def propagate_app_logs() -> None:
    logging.getLogger("fitpal").propagate = True


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        telegram_bot_token="test-token",
        local_store_path=str(tmp_path / "store.json"),
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def local_backend() -> LocalLogBackend:
    return LocalLogBackend(InMemoryKeyValueStore())


@pytest.fixture
def repository(local_backend: LocalLogBackend) -> TwoTierLogRepository:
    return TwoTierLogRepository(local=local_backend)


@pytest.fixture
def profile_service(repository: TwoTierLogRepository) -> ProfileService:
    return ProfileService(repository)


@pytest.fixture
def log_service(repository: TwoTierLogRepository) -> DailyLogService:
    return DailyLogService(repository, today=lambda: TODAY)


@pytest.fixture
def chat_service(
    profile_service: ProfileService, log_service: DailyLogService
) -> ChatService:
    return ChatService(
        profile_service=profile_service,
        log_service=log_service,
        rng=random.Random(7),
    )


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def container(
    settings: Settings,
    repository: TwoTierLogRepository,
    telegram_client: FakeTelegramClient,
) -> AppContainer:
    return build_test_container(settings, repository, telegram_client)
