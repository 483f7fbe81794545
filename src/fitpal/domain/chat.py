"""Chat domain models."""

from dataclasses import dataclass, field
from enum import Enum


class Intent(str, Enum):
    """Classified purpose of a chat message."""

    GREETING = "greeting"
    NUTRITION_QUERY = "nutrition_query"
    LOG_WORKOUT = "log_workout"
    SUGGEST_MEAL = "suggest_meal"
    SUGGEST_WORKOUT = "suggest_workout"
    LOG_FOOD = "log_food"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ChatReply:
    """Assistant reply to a single chat message."""

    intent: Intent
    text: str
    notices: list[str] = field(default_factory=list)
