"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Welcome and your FitPal id")
    TODAY = TelegramCommand("today", "Today's calories, macros and workouts")
    STREAK = TelegramCommand("streak", "Current workout streak")
    HELP = TelegramCommand("help", "What you can ask me")


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def parse_command(text: str) -> BotCommand | None:
    """Return the bot command a message starts with, if any.

    Accepts the ``/command@BotName`` form Telegram uses in group chats.
    """
    parts = text.split(maxsplit=1)
    if not parts or not parts[0].startswith("/"):
        return None
    name = parts[0][1:].split("@", maxsplit=1)[0].lower()
    return next((entry for entry in BotCommand if entry.value.command == name), None)


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
