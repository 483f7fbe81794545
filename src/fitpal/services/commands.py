"""Command handlers for Telegram updates."""

from dataclasses import dataclass
from uuid import NAMESPACE_URL, UUID, uuid5

from fitpal.adapters.telegram_client import TelegramClient
from fitpal.domain.dashboard import DailyProgress
from fitpal.services.chat import HELP_REPLY, REMOTE_READ_NOTICE, ChatService
from fitpal.services.dashboard import DashboardService
from fitpal.services.profiles import ProfileService
from fitpal.telegram_commands import BotCommand


def telegram_identity(telegram_user_id: int) -> UUID:
    """Return the stable FitPal user id for a Telegram user."""
    return uuid5(NAMESPACE_URL, f"telegram:{telegram_user_id}")


@dataclass
class TelegramCommandHandler:
    """Answers bot commands and free-text chat messages."""

    profile_service: ProfileService
    dashboard_service: DashboardService
    chat_service: ChatService
    telegram_client: TelegramClient

    async def handle_command(
        self, command: BotCommand, telegram_user_id: int, chat_id: int
    ) -> None:
        """Reply to a bot command."""
        user_id = telegram_identity(telegram_user_id)
        if command == BotCommand.START:
            text = self._start_text(user_id)
        elif command == BotCommand.TODAY:
            text = self._today_text(user_id)
        elif command == BotCommand.STREAK:
            text = self._streak_text(user_id)
        else:
            text = HELP_REPLY
        await self.telegram_client.send_message(chat_id=chat_id, text=text)

    async def handle_text(self, telegram_user_id: int, chat_id: int, text: str) -> None:
        """Run a free-text message through the chat assistant."""
        reply = self.chat_service.respond(telegram_identity(telegram_user_id), text)
        await self.telegram_client.send_message(
            chat_id=chat_id, text=_with_notices(reply.text, reply.notices)
        )

    def _start_text(self, user_id: UUID) -> str:
        outcome = self.profile_service.get_profile(user_id)
        profile = outcome.value
        if profile is not None and profile.onboarding_complete:
            name = f", {profile.name}" if profile.name else ""
            text = f"Welcome back{name}! Tell me what you ate or how you trained today."
        else:
            text = (
                "Welcome to FitPal! I'm your fitness and nutrition assistant.\n\n"
                f"Your FitPal id is {user_id}. Set up your profile with it so I can "
                "work out your daily targets, then tell me what you ate or how "
                "you trained."
            )
        return _with_notices(text, _degraded_notice(outcome.degraded))

    def _today_text(self, user_id: UUID) -> str:
        profile = self.profile_service.get_profile(user_id)
        progress = self.dashboard_service.get_daily_progress(user_id, profile.value)
        degraded = profile.degraded or progress.degraded
        return _with_notices(
            format_daily_progress(progress.value), _degraded_notice(degraded)
        )

    def _streak_text(self, user_id: UUID) -> str:
        profile = self.profile_service.get_profile(user_id)
        progress = self.dashboard_service.get_daily_progress(user_id, profile.value)
        streak = progress.value.streak
        if streak == 0:
            text = "No workout logged today yet. Log one to start a streak!"
        elif streak == 1:
            text = "You worked out today. Come back tomorrow to build a streak!"
        else:
            text = f"You're on a {streak}-day workout streak! Keep it up!"
        return _with_notices(text, _degraded_notice(progress.degraded))


def format_daily_progress(progress: DailyProgress) -> str:
    """Render today's progress as a chat message."""
    macros = progress.macros
    targets = progress.macro_targets
    lines = [
        f"Today ({progress.day.isoformat()})",
        f"Calories: {progress.calories:.0f} / {progress.calorie_target} "
        f"({progress.calorie_percent:.0f}%)",
        f"Protein: {macros.protein:.0f}g / {targets.protein:.0f}g",
        f"Carbs: {macros.carbs:.0f}g / {targets.carbs:.0f}g",
        f"Fat: {macros.fat:.0f}g / {targets.fat:.0f}g",
        "",
    ]
    if progress.workouts:
        lines.append("Workouts:")
        for workout in progress.workouts:
            intensity = f" {workout.intensity.value}" if workout.intensity else ""
            lines.append(
                f"• {workout.type}{intensity}, {workout.duration} min, "
                f"{workout.calories_burned or 0} kcal"
            )
        lines.append(f"Burned: {progress.calories_burned} kcal")
    else:
        lines.append("No workouts logged yet.")
    lines.append(f"Streak: {progress.streak} day(s)")
    return "\n".join(lines)


def _degraded_notice(degraded: bool) -> list[str]:
    if not degraded:
        return []
    return [REMOTE_READ_NOTICE]


def _with_notices(text: str, notices: list[str]) -> str:
    if not notices:
        return text
    return "\n\n".join([text, *notices])
