"""Dashboard view models."""

from dataclasses import dataclass
from datetime import date

from fitpal.domain.nutrition import MacroNutrients
from fitpal.domain.workouts import Workout


@dataclass(frozen=True)
class DailyProgress:
    """Today's intake and activity against the profile's targets."""

    day: date
    calories: float
    calorie_target: int
    calorie_percent: float
    macros: MacroNutrients
    macro_targets: MacroNutrients
    macro_percent: MacroNutrients
    workouts: tuple[Workout, ...]
    calories_burned: int
    streak: int
    streak_progress: float
