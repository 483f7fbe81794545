"""Rule-based chat assistant.

Messages are classified by an ordered list of keyword predicates; the first
predicate that matches decides the intent, even when later ones would also
match. Each intent has a handler that extracts parameters, calls the
calculators and the log service, and formats a plain-text reply.
"""

import logging
import random
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar
from uuid import UUID

from fitpal.domain.chat import ChatReply, Intent
from fitpal.domain.nutrition import Food, MacroNutrients, NutritionLog
from fitpal.domain.profile import FitnessGoal, UserProfile
from fitpal.domain.storage import StoreOutcome
from fitpal.domain.workouts import Intensity, Workout
from fitpal.services.fitness import (
    EXERCISES,
    estimate_calories_burned,
    suggest_workout,
)
from fitpal.services.logs import DailyLogService
from fitpal.services.nutrition import (
    FOOD_CATALOG,
    generate_meal_suggestion,
    simple_food_name,
    summarize_meal,
)
from fitpal.services.profiles import ProfileService

T = TypeVar("T")

_logger = logging.getLogger(__name__)

_GREETING_PATTERN = re.compile(r"\b(hello|hi|hey)\b")
_NUTRITION_WORDS = ("calorie", "calories", "macro", "macros")
_WORKOUT_LOG_PHRASES = (
    "i did",
    "i completed",
    "i finished",
    "i went",
    "i ran",
    "i walked",
)
_MEAL_WORDS = ("meal", "breakfast", "lunch", "dinner", "snack", "eat")
_WORKOUT_WORDS = ("workout", "exercise", "training")
_FOOD_LOG_WORDS = ("ate", "had", "consumed")

_LOG_DURATION_PATTERN = re.compile(r"(\d+)\s*(min|minute|minutes|hour|hours)")
_SUGGEST_DURATION_PATTERN = re.compile(r"(\d+)\s*(min|minute|minutes)")
_CALORIE_LIMIT_PATTERN = re.compile(r"(\d+)\s*(calories|kcal|cal)\b")

_LOW_INTENSITY_WORDS = ("easy", "light", "slow")
_HIGH_INTENSITY_WORDS = ("hard", "intense", "fast")

# Checked in order after the catalog names; the first phrase found wins.
_EXERCISE_SYNONYMS = (
    ("ran", "Running"),
    ("jogged", "Running"),
    ("run", "Running"),
    ("jog", "Running"),
    ("running", "Running"),
    ("jogging", "Running"),
    ("walked", "Walking"),
    ("walking", "Walking"),
    ("walk", "Walking"),
    ("biked", "Cycling"),
    ("cycling", "Cycling"),
    ("bike", "Cycling"),
    ("biking", "Cycling"),
    ("cycle", "Cycling"),
    ("swam", "Swimming"),
    ("swimming", "Swimming"),
    ("swim", "Swimming"),
    ("yoga", "Yoga"),
    ("pilates", "Pilates"),
    ("weight training", "Weight Training"),
    ("weights", "Weight Training"),
    ("lifted", "Weight Training"),
    ("lifting", "Weight Training"),
    ("strength training", "Weight Training"),
    ("hiit", "HIIT"),
    ("high intensity", "HIIT"),
    ("interval training", "HIIT"),
)

DEFAULT_SUGGESTED_MINUTES = 30

GREETING_REPLY = (
    "Hello! How can I help you today with your fitness and nutrition goals?"
)
HELP_REPLY = (
    "I'm here to help with your fitness and nutrition goals. You can ask me to:\n"
    "- Suggest meals or workouts\n"
    "- Log your food and exercise\n"
    "- Track your progress\n"
    "- Answer questions about nutrition\n"
    "\n"
    "What would you like to do?"
)
ONBOARDING_REPLY = (
    "Let's set up your profile first so I can work out your daily targets."
)
REMOTE_WRITE_NOTICE = (
    "Couldn't reach cloud storage. Your entry was saved on this device only."
)
REMOTE_READ_NOTICE = (
    "Couldn't reach cloud storage. Showing data saved on this device."
)


def _contains_any(message: str, words: tuple[str, ...]) -> bool:
    return any(word in message for word in words)


def is_greeting(message: str) -> bool:
    """Return True when the message greets the assistant."""
    return _GREETING_PATTERN.search(message) is not None


def is_nutrition_query(message: str) -> bool:
    """Return True when the message asks about calories or macros."""
    return _contains_any(message, _NUTRITION_WORDS)


def is_workout_log(message: str) -> bool:
    """Return True when the message reports a finished workout."""
    return _contains_any(message, _WORKOUT_LOG_PHRASES)


def is_meal_suggestion(message: str) -> bool:
    """Return True when the message asks for a meal idea."""
    return "suggest" in message and _contains_any(message, _MEAL_WORDS)


def is_workout_suggestion(message: str) -> bool:
    """Return True when the message asks for a workout idea."""
    return "suggest" in message and _contains_any(message, _WORKOUT_WORDS)


def is_food_log(message: str) -> bool:
    """Return True when the message reports food eaten."""
    return _contains_any(message, _FOOD_LOG_WORDS) or (
        "log" in message and "food" in message
    )


INTENT_RULES: tuple[tuple[Intent, Callable[[str], bool]], ...] = (
    (Intent.GREETING, is_greeting),
    (Intent.NUTRITION_QUERY, is_nutrition_query),
    (Intent.LOG_WORKOUT, is_workout_log),
    (Intent.SUGGEST_MEAL, is_meal_suggestion),
    (Intent.SUGGEST_WORKOUT, is_workout_suggestion),
    (Intent.LOG_FOOD, is_food_log),
)


def classify(message: str) -> Intent:
    """Return the first intent whose predicate matches the message."""
    normalized = message.lower()
    for intent, matches in INTENT_RULES:
        if matches(normalized):
            return intent
    return Intent.FALLBACK


def extract_exercise_type(message: str) -> str | None:
    """Return the canonical exercise name mentioned in the message."""
    for exercise in EXERCISES.values():
        if exercise.name.lower() in message:
            return exercise.name
    for phrase, exercise_type in _EXERCISE_SYNONYMS:
        if phrase in message:
            return exercise_type
    return None


def extract_duration(message: str, allow_hours: bool = True) -> int | None:
    """Return the duration in minutes, converting hours when allowed."""
    pattern = _LOG_DURATION_PATTERN if allow_hours else _SUGGEST_DURATION_PATTERN
    match = pattern.search(message)
    if match is None:
        return None
    minutes = int(match.group(1))
    if match.group(2).startswith("hour"):
        minutes *= 60
    return minutes


def extract_intensity(message: str) -> Intensity:
    """Return the intensity implied by the message, moderate by default."""
    if _contains_any(message, _LOW_INTENSITY_WORDS):
        return Intensity.LOW
    if _contains_any(message, _HIGH_INTENSITY_WORDS):
        return Intensity.HIGH
    return Intensity.MODERATE


def extract_meal_type(message: str) -> str:
    """Return breakfast, lunch or dinner if mentioned, else snack."""
    for meal_type in ("breakfast", "lunch", "dinner"):
        if meal_type in message:
            return meal_type
    return "snack"


def extract_calorie_limit(message: str) -> int | None:
    """Return N from an 'under N calories' style constraint."""
    if "under" not in message and "less than" not in message:
        return None
    match = _CALORIE_LIMIT_PATTERN.search(message)
    if match is None:
        return None
    return int(match.group(1))


def match_foods(message: str) -> list[Food]:
    """Return every catalog food named in the message."""
    return [
        food
        for food in FOOD_CATALOG
        if food.name.lower() in message or simple_food_name(food) in message
    ]


@dataclass
class ChatService:
    """Routes chat messages to intent handlers."""

    profile_service: ProfileService
    log_service: DailyLogService
    rng: random.Random | None = None

    def respond(self, user_id: UUID | None, message: str) -> ChatReply:
        """Classify a message, run its handler and return the reply."""
        intent = classify(message)
        _logger.info("Chat message classified as %s", intent.value)
        if intent == Intent.GREETING:
            return ChatReply(intent=intent, text=GREETING_REPLY)
        if intent == Intent.FALLBACK:
            return ChatReply(intent=intent, text=HELP_REPLY)

        profile_outcome = self.profile_service.get_profile(user_id)
        profile = profile_outcome.value
        if profile is None or not profile.onboarding_complete:
            return ChatReply(
                intent=intent,
                text=ONBOARDING_REPLY,
                notices=storage_notices([profile_outcome]),
            )

        turn = _Turn(user_id=user_id, message=message.lower(), profile=profile)
        turn.read(profile_outcome)
        handler = self._handlers()[intent]
        text = handler(turn)
        return ChatReply(intent=intent, text=text, notices=turn.notices())

    def _handlers(self) -> dict[Intent, Callable[["_Turn"], str]]:
        return {
            Intent.NUTRITION_QUERY: self._handle_nutrition_query,
            Intent.LOG_WORKOUT: self._handle_workout_log,
            Intent.SUGGEST_MEAL: self._handle_meal_suggestion,
            Intent.SUGGEST_WORKOUT: self._handle_workout_suggestion,
            Intent.LOG_FOOD: self._handle_food_log,
        }

    def _handle_nutrition_query(self, turn: "_Turn") -> str:
        profile = turn.profile
        targets = profile.daily_macros or MacroNutrients()
        asks_amount = "how many" in turn.message or "how much" in turn.message
        nutrient = next(
            (
                word
                for word in ("calorie", "protein", "carb", "fat")
                if word in turn.message
            ),
            None,
        )
        if not asks_amount or nutrient is None:
            return (
                "Based on your profile, your daily targets are:\n"
                f"{_format_targets(profile)}\n\n"
                "These targets are calculated based on your age, weight, height, "
                "activity level, and fitness goal."
            )

        log = turn.read(self.log_service.get_nutrition_log(turn.user_id))
        if log is None:
            return (
                "You haven't logged any food today yet. Your daily targets are:\n"
                f"{_format_targets(profile)}"
            )
        if nutrient == "calorie":
            return (
                f"So far today you've consumed {_amount(log.total_calories)} "
                f"calories out of your {profile.daily_calories or 0} calorie goal. "
                f"{_remaining_calories(log, profile)}"
            )
        consumed = log.total_macros
        if nutrient == "protein":
            current, goal, label = consumed.protein, targets.protein, "protein"
        elif nutrient == "carb":
            current, goal, label = consumed.carbs, targets.carbs, "carbs"
        else:
            current, goal, label = consumed.fat, targets.fat, "fat"
        return (
            f"So far today you've consumed {_amount(current)}g of {label} "
            f"out of your {_amount(goal)}g goal."
        )

    def _handle_workout_log(self, turn: "_Turn") -> str:
        exercise_type = extract_exercise_type(turn.message)
        if exercise_type is None:
            return (
                "I couldn't identify the type of workout you did. "
                "Can you tell me what type of exercise it was?"
            )
        duration = extract_duration(turn.message)
        if duration is None:
            return f"How long did you do {exercise_type} for?"

        intensity = extract_intensity(turn.message)
        workout = Workout(type=exercise_type, duration=duration, intensity=intensity)
        calories = estimate_calories_burned(workout, turn.profile)
        workout = Workout(
            type=exercise_type,
            duration=duration,
            intensity=intensity,
            calories_burned=calories,
        )
        turn.write(self.log_service.append_workout(turn.user_id, workout))
        streak = turn.read(self.log_service.compute_streak(turn.user_id))

        text = (
            f"Great job! I've logged your {intensity.value} intensity "
            f"{exercise_type} workout for {duration} minutes.\n\n"
            f"You burned approximately {calories} calories! 💪"
        )
        if streak > 1:
            text += (
                f"\n\nAmazing! You're on a {streak}-day workout streak! Keep it up!"
            )
        return text

    def _handle_meal_suggestion(self, turn: "_Turn") -> str:
        meal_type = extract_meal_type(turn.message)
        meal = generate_meal_suggestion(meal_type, turn.profile, rng=self.rng)
        if meal is None:
            return (
                f"I don't have a {meal_type} suggestion that fits your allergies "
                "and dislikes at the moment. Let me know if you'd like other options!"
            )
        limit = extract_calorie_limit(turn.message)
        if limit is not None and limit < meal.total_calories:
            return (
                f"I don't have a {meal_type} suggestion under {limit} calories "
                "at the moment. Let me know if you'd like other options!"
            )

        total = _amount(meal.total_calories)
        lines = [f"Here's a suggested {meal_type} ({total} calories):", ""]
        for food in meal.foods:
            lines.append(
                f"• {food.name}: {_amount(food.calories)} calories "
                f"(P: {_amount(food.macros.protein)}g, "
                f"C: {_amount(food.macros.carbs)}g, "
                f"F: {_amount(food.macros.fat)}g)"
            )
        totals = meal.total_macros
        lines.append("")
        lines.append(
            f"Total macros: Protein: {_amount(totals.protein)}g, "
            f"Carbs: {_amount(totals.carbs)}g, Fat: {_amount(totals.fat)}g"
        )
        return "\n".join(lines)

    def _handle_workout_suggestion(self, turn: "_Turn") -> str:
        minutes = extract_duration(turn.message, allow_hours=False)
        intensity = extract_intensity(turn.message)
        workout = suggest_workout(
            minutes if minutes is not None else DEFAULT_SUGGESTED_MINUTES,
            intensity,
            turn.profile.goal or FitnessGoal.MAINTENANCE,
            rng=self.rng,
        )
        calories = estimate_calories_burned(workout, turn.profile)
        return (
            f"Here's a {intensity.value} intensity {workout.type} workout for "
            f"{workout.duration} minutes:\n\n"
            f"This will burn approximately {calories} calories based on your "
            "profile.\n\n"
            f"Benefits: {workout.notes}"
        )

    def _handle_food_log(self, turn: "_Turn") -> str:
        foods = match_foods(turn.message)
        if not foods:
            return (
                "I couldn't identify the specific foods you ate. "
                "Can you tell me what you had, one item at a time?"
            )
        meal = summarize_meal(foods, name="Logged Meal")
        log = turn.write(self.log_service.append_meal(turn.user_id, meal))

        total = _amount(meal.total_calories)
        lines = [f"I've logged your meal ({total} calories) with:", ""]
        for food in foods:
            lines.append(f"• {food.name}: {_amount(food.calories)} calories")
        lines.append("")
        lines.append(
            f"You've consumed {_amount(log.total_calories)} out of "
            f"{turn.profile.daily_calories or 0} calories today. "
            f"{_remaining_calories(log, turn.profile)}"
        )
        return "\n".join(lines)


@dataclass
class _Turn:
    user_id: UUID | None
    message: str
    profile: UserProfile
    reads: list[StoreOutcome] = field(default_factory=list)
    writes: list[StoreOutcome] = field(default_factory=list)

    def read(self, outcome: StoreOutcome[T]) -> T:
        self.reads.append(outcome)
        return outcome.value

    def write(self, outcome: StoreOutcome[T]) -> T:
        self.writes.append(outcome)
        return outcome.value

    def notices(self) -> list[str]:
        return storage_notices(self.reads, self.writes)


def storage_notices(
    reads: list[StoreOutcome], writes: list[StoreOutcome] | None = None
) -> list[str]:
    """Return the user-facing notices for degraded reads and writes."""
    notices: list[str] = []
    if any(outcome.degraded for outcome in writes or []):
        notices.append(REMOTE_WRITE_NOTICE)
    if any(outcome.degraded for outcome in reads):
        notices.append(REMOTE_READ_NOTICE)
    return notices


def _remaining_calories(log: NutritionLog, profile: UserProfile) -> str:
    remaining = (profile.daily_calories or 0) - log.total_calories
    if remaining > 0:
        return f"You have {_amount(remaining)} calories remaining."
    return "You've reached your calorie goal for today."


def _format_targets(profile: UserProfile) -> str:
    macros = profile.daily_macros or MacroNutrients()
    return (
        f"- Calories: {profile.daily_calories or 0} calories\n"
        f"- Protein: {_amount(macros.protein)}g\n"
        f"- Carbs: {_amount(macros.carbs)}g\n"
        f"- Fat: {_amount(macros.fat)}g"
    )


def _amount(value: float) -> str:
    return f"{round(value, 1):g}"
