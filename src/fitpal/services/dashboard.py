"""Daily progress dashboard."""

from dataclasses import dataclass
from uuid import UUID

from fitpal.domain.dashboard import DailyProgress
from fitpal.domain.nutrition import MacroNutrients
from fitpal.domain.profile import UserProfile
from fitpal.domain.storage import StoreOutcome
from fitpal.services.logs import DailyLogService
from fitpal.services.storage import combine_outcomes

DEFAULT_CALORIE_TARGET = 2000
DEFAULT_MACRO_TARGETS = MacroNutrients(protein=100, carbs=200, fat=70)
STREAK_GOAL_DAYS = 7


@dataclass
class DashboardService:
    """Builds today's progress summary."""

    log_service: DailyLogService

    def get_daily_progress(
        self, user_id: UUID | None, profile: UserProfile | None
    ) -> StoreOutcome[DailyProgress]:
        """Return today's calories, macros, workouts and streak."""
        nutrition = self.log_service.get_nutrition_log(user_id)
        workouts = self.log_service.get_workout_log(user_id)
        streak = self.log_service.compute_streak(user_id)

        calorie_target = DEFAULT_CALORIE_TARGET
        macro_targets = DEFAULT_MACRO_TARGETS
        if profile is not None and profile.daily_calories:
            calorie_target = profile.daily_calories
        if profile is not None and profile.daily_macros:
            macro_targets = profile.daily_macros

        calories = nutrition.value.total_calories if nutrition.value else 0
        macros = nutrition.value.total_macros if nutrition.value else MacroNutrients()
        todays_workouts = workouts.value.workouts if workouts.value else ()
        progress = DailyProgress(
            day=self.log_service.today(),
            calories=calories,
            calorie_target=calorie_target,
            calorie_percent=_percent(calories, calorie_target),
            macros=macros,
            macro_targets=macro_targets,
            macro_percent=MacroNutrients(
                protein=_percent(macros.protein, macro_targets.protein),
                carbs=_percent(macros.carbs, macro_targets.carbs),
                fat=_percent(macros.fat, macro_targets.fat),
            ),
            workouts=todays_workouts,
            calories_burned=sum(w.calories_burned or 0 for w in todays_workouts),
            streak=streak.value,
            streak_progress=min(1.0, streak.value / STREAK_GOAL_DAYS),
        )
        return combine_outcomes(progress, [nutrition, workouts, streak])


def _percent(current: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return min(100.0, current / target * 100)
