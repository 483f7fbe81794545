"""Two-tier storage with remote-first reads and local fallback."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from typing import Protocol, TypeVar
from uuid import UUID

from fitpal.domain.nutrition import NutritionLog
from fitpal.domain.profile import UserProfile
from fitpal.domain.storage import StorageTier, StoreOutcome
from fitpal.domain.workouts import WorkoutLog

T = TypeVar("T")

_logger = logging.getLogger(__name__)


class LogBackend(Protocol):
    """Persistence interface for profiles and daily logs."""

    def get_profile(self, user_id: UUID | None) -> UserProfile | None:
        """Return the stored profile, if present."""

    def save_profile(self, user_id: UUID | None, profile: UserProfile) -> None:
        """Overwrite the stored profile."""

    def get_nutrition_log(
        self, user_id: UUID | None, day: date
    ) -> NutritionLog | None:
        """Return the nutrition log for a date, if present."""

    def save_nutrition_log(self, user_id: UUID | None, log: NutritionLog) -> None:
        """Overwrite the nutrition log for its date."""

    def list_nutrition_logs(self, user_id: UUID | None) -> list[NutritionLog]:
        """Return all nutrition logs."""

    def get_workout_log(self, user_id: UUID | None, day: date) -> WorkoutLog | None:
        """Return the workout log for a date, if present."""

    def save_workout_log(self, user_id: UUID | None, log: WorkoutLog) -> None:
        """Overwrite the workout log for its date."""

    def list_workout_logs(self, user_id: UUID | None) -> list[WorkoutLog]:
        """Return all workout logs."""


@dataclass
class TwoTierLogRepository:
    """Routes storage calls to the remote tier with a local fallback.

    The remote tier is used only when it is configured and the caller has a
    user identity. Writes go to the remote tier and are always mirrored
    locally; a failing local write is logged and reported as
    ``local_error``. Reads prefer the remote tier; a remote value refreshes the
    local copy, and a remote miss is returned as-is without consulting the
    local tier.
    """

    local: LogBackend
    remote: LogBackend | None = None

    def get_profile(self, user_id: UUID | None) -> StoreOutcome[UserProfile | None]:
        """Read the profile."""
        return self._read(
            user_id,
            "get_profile",
            lambda backend: backend.get_profile(user_id),
            lambda profile: self.local.save_profile(user_id, profile),
        )

    def save_profile(
        self, user_id: UUID | None, profile: UserProfile
    ) -> StoreOutcome[None]:
        """Write the profile."""
        return self._write(
            user_id,
            "save_profile",
            lambda backend: backend.save_profile(user_id, profile),
        )

    def get_nutrition_log(
        self, user_id: UUID | None, day: date
    ) -> StoreOutcome[NutritionLog | None]:
        """Read the nutrition log for a date."""
        return self._read(
            user_id,
            "get_nutrition_log",
            lambda backend: backend.get_nutrition_log(user_id, day),
            lambda log: self.local.save_nutrition_log(user_id, log),
        )

    def save_nutrition_log(
        self, user_id: UUID | None, log: NutritionLog
    ) -> StoreOutcome[None]:
        """Write the nutrition log for its date."""
        return self._write(
            user_id,
            "save_nutrition_log",
            lambda backend: backend.save_nutrition_log(user_id, log),
        )

    def list_nutrition_logs(
        self, user_id: UUID | None
    ) -> StoreOutcome[list[NutritionLog]]:
        """Read all nutrition logs."""
        return self._read(
            user_id,
            "list_nutrition_logs",
            lambda backend: backend.list_nutrition_logs(user_id),
            lambda logs: _each(logs, self.local.save_nutrition_log, user_id),
        )

    def get_workout_log(
        self, user_id: UUID | None, day: date
    ) -> StoreOutcome[WorkoutLog | None]:
        """Read the workout log for a date."""
        return self._read(
            user_id,
            "get_workout_log",
            lambda backend: backend.get_workout_log(user_id, day),
            lambda log: self.local.save_workout_log(user_id, log),
        )

    def save_workout_log(
        self, user_id: UUID | None, log: WorkoutLog
    ) -> StoreOutcome[None]:
        """Write the workout log for its date."""
        return self._write(
            user_id,
            "save_workout_log",
            lambda backend: backend.save_workout_log(user_id, log),
        )

    def list_workout_logs(self, user_id: UUID | None) -> StoreOutcome[list[WorkoutLog]]:
        """Read all workout logs."""
        return self._read(
            user_id,
            "list_workout_logs",
            lambda backend: backend.list_workout_logs(user_id),
            lambda logs: _each(logs, self.local.save_workout_log, user_id),
        )

    def _uses_remote(self, user_id: UUID | None) -> bool:
        return self.remote is not None and user_id is not None

    def _read(
        self,
        user_id: UUID | None,
        action: str,
        fetch: Callable[[LogBackend], T],
        refresh: Callable[[T], None],
    ) -> StoreOutcome[T]:
        if not self._uses_remote(user_id):
            return StoreOutcome(value=fetch(self.local), tier=StorageTier.LOCAL)
        try:
            value = fetch(self.remote)
        except Exception as exc:
            _logger.warning(
                "Remote %s failed, reading local store: %s",
                action,
                exc,
                extra={"user_id": str(user_id)},
            )
            return StoreOutcome(
                value=fetch(self.local),
                tier=StorageTier.LOCAL,
                error=_describe(exc),
            )
        local_error = None
        if value:
            local_error = self._mirror(user_id, action, lambda: refresh(value))
        return StoreOutcome(
            value=value, tier=StorageTier.REMOTE, local_error=local_error
        )

    def _write(
        self,
        user_id: UUID | None,
        action: str,
        store: Callable[[LogBackend], None],
    ) -> StoreOutcome[None]:
        error: str | None = None
        tier = StorageTier.LOCAL
        if self._uses_remote(user_id):
            try:
                store(self.remote)
                tier = StorageTier.REMOTE
            except Exception as exc:
                _logger.exception(
                    "Remote %s failed, saved to local store only",
                    action,
                    extra={"user_id": str(user_id)},
                )
                error = _describe(exc)
        local_error = self._mirror(user_id, action, lambda: store(self.local))
        return StoreOutcome(
            value=None, tier=tier, error=error, local_error=local_error
        )

    def _mirror(
        self, user_id: UUID | None, action: str, write: Callable[[], None]
    ) -> str | None:
        try:
            write()
        except OSError as exc:
            _logger.exception(
                "Local store write after %s failed",
                action,
                extra={"user_id": str(user_id)},
            )
            return _describe(exc)
        return None


def combine_outcomes(value: T, outcomes: Iterable[StoreOutcome]) -> StoreOutcome[T]:
    """Merge several outcomes into one carrying ``value``.

    The result is remote only if every call was served remotely, and keeps
    the first error seen for each tier.
    """
    outcomes = list(outcomes)
    tier = StorageTier.REMOTE
    if not outcomes or any(o.tier == StorageTier.LOCAL for o in outcomes):
        tier = StorageTier.LOCAL
    error = next((o.error for o in outcomes if o.error), None)
    local_error = next((o.local_error for o in outcomes if o.local_error), None)
    return StoreOutcome(
        value=value, tier=tier, error=error, local_error=local_error
    )


def _each(
    logs: list[T],
    save: Callable[[UUID | None, T], None],
    user_id: UUID | None,
) -> None:
    for log in logs:
        save(user_id, log)


def _describe(exc: Exception) -> str:
    return f"{type(exc).__name__}: {exc}".strip().rstrip(":")
