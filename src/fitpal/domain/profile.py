"""User profile domain models."""

from dataclasses import dataclass, field
from enum import Enum

from fitpal.domain.nutrition import MacroNutrients


class ActivityLevel(str, Enum):
    """Self-reported daily activity level."""

    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly active"
    MODERATELY_ACTIVE = "moderately active"
    VERY_ACTIVE = "very active"
    EXTREMELY_ACTIVE = "extremely active"


class FitnessGoal(str, Enum):
    """Body composition goal."""

    WEIGHT_LOSS = "weight loss"
    MAINTENANCE = "maintenance"
    MUSCLE_GAIN = "muscle gain"


class Gender(str, Enum):
    """Gender used by the BMR formula."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


@dataclass(frozen=True)
class UserProfile:
    """Physical attributes, preferences and derived daily targets."""

    name: str | None = None
    age: int | None = None
    weight_kg: float | None = None
    height_cm: float | None = None
    gender: Gender | None = None
    activity_level: ActivityLevel | None = None
    goal: FitnessGoal | None = None
    dietary_preferences: tuple[str, ...] = field(default_factory=tuple)
    allergies: tuple[str, ...] = field(default_factory=tuple)
    dislikes: tuple[str, ...] = field(default_factory=tuple)
    daily_calories: int | None = None
    daily_macros: MacroNutrients | None = None
    onboarding_complete: bool = False
