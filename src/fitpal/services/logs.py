"""Daily nutrition and workout logging."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from fitpal.domain.nutrition import Meal, NutritionLog
from fitpal.domain.storage import StoreOutcome
from fitpal.domain.workouts import Workout, WorkoutLog
from fitpal.services.storage import TwoTierLogRepository, combine_outcomes


def utc_today() -> date:
    """Return the current UTC calendar date."""
    return datetime.now(tz=UTC).date()


@dataclass
class DailyLogService:
    """Service that appends to and aggregates per-day logs."""

    repository: TwoTierLogRepository
    today: Callable[[], date] = utc_today

    def get_nutrition_log(
        self, user_id: UUID | None, day: date | None = None
    ) -> StoreOutcome[NutritionLog | None]:
        """Return the nutrition log for a date (today by default)."""
        return self.repository.get_nutrition_log(user_id, day or self.today())

    def get_workout_log(
        self, user_id: UUID | None, day: date | None = None
    ) -> StoreOutcome[WorkoutLog | None]:
        """Return the workout log for a date (today by default)."""
        return self.repository.get_workout_log(user_id, day or self.today())

    def append_meal(
        self, user_id: UUID | None, meal: Meal
    ) -> StoreOutcome[NutritionLog]:
        """Append a meal to today's log and persist the whole log."""
        current = self.get_nutrition_log(user_id)
        log = current.value or NutritionLog(date=self.today())
        updated = log.with_meal(meal)
        saved = self.repository.save_nutrition_log(user_id, updated)
        return combine_outcomes(updated, [current, saved])

    def append_workout(
        self, user_id: UUID | None, workout: Workout
    ) -> StoreOutcome[WorkoutLog]:
        """Append a workout to today's log and persist the whole log."""
        current = self.get_workout_log(user_id)
        log = current.value or WorkoutLog(date=self.today())
        updated = log.with_workout(workout)
        saved = self.repository.save_workout_log(user_id, updated)
        return combine_outcomes(updated, [current, saved])

    def compute_streak(self, user_id: UUID | None) -> StoreOutcome[int]:
        """Return the number of consecutive workout days ending today."""
        logs = self.repository.list_workout_logs(user_id)
        days = [log.date for log in logs.value if log.workouts]
        return combine_outcomes(compute_streak(days, self.today()), [logs])

    def list_nutrition_logs(
        self, user_id: UUID | None
    ) -> StoreOutcome[list[NutritionLog]]:
        """Return every nutrition log, newest first."""
        logs = self.repository.list_nutrition_logs(user_id)
        ordered = sorted(logs.value, key=lambda log: log.date, reverse=True)
        return combine_outcomes(ordered, [logs])

    def list_workout_logs(self, user_id: UUID | None) -> StoreOutcome[list[WorkoutLog]]:
        """Return every workout log, newest first."""
        logs = self.repository.list_workout_logs(user_id)
        ordered = sorted(logs.value, key=lambda log: log.date, reverse=True)
        return combine_outcomes(ordered, [logs])


def compute_streak(days: list[date], today: date) -> int:
    """Count consecutive days ending today.

    Returns 0 when ``today`` is not among ``days``; otherwise walks back
    from today and stops at the first gap.
    """
    ordered = sorted(set(days), reverse=True)
    if not ordered or ordered[0] != today:
        return 0
    streak = 1
    for newer, older in zip(ordered, ordered[1:], strict=False):
        if (newer - older).days != 1:
            break
        streak += 1
    return streak
