"""Local tier backed by a key-value store."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import TypeVar
from uuid import UUID

from fitpal.adapters.log_records import (
    Record,
    nutrition_log_from_record,
    nutrition_log_to_record,
    profile_from_record,
    profile_to_record,
    workout_log_from_record,
    workout_log_to_record,
)
from fitpal.domain.nutrition import NutritionLog
from fitpal.domain.profile import UserProfile
from fitpal.domain.workouts import WorkoutLog
from fitpal.services.key_value import KeyValueStore
from fitpal.services.storage import LogBackend

PROFILE_KEY = "fitpal-user-profile"
NUTRITION_LOG_KEY = "fitpal-nutrition-log"
WORKOUT_LOG_KEY = "fitpal-workout-log"

L = TypeVar("L", NutritionLog, WorkoutLog)

_logger = logging.getLogger(__name__)


def storage_key(base: str, user_id: UUID | None) -> str:
    """Return the key for a record, scoped to the user when one is given."""
    if user_id is None:
        return base
    return f"{base}:{user_id}"


@dataclass
class LocalLogBackend(LogBackend):
    """Stores the profile and per-day log arrays as JSON values.

    Each log array holds at most one entry per date. Saving a log replaces
    the entry for its date. Malformed values are logged and read as absent;
    a malformed entry in a log array is skipped without hiding the others.
    """

    store: KeyValueStore

    def get_profile(self, user_id: UUID | None) -> UserProfile | None:
        """Return the stored profile."""
        key = storage_key(PROFILE_KEY, user_id)
        record = self._load(key)
        if not isinstance(record, dict):
            return None
        try:
            return profile_from_record(record)
        except (KeyError, TypeError, ValueError):
            _logger.exception("Malformed profile in local store: %s", key)
            return None

    def save_profile(self, user_id: UUID | None, profile: UserProfile) -> None:
        """Overwrite the stored profile."""
        key = storage_key(PROFILE_KEY, user_id)
        self.store.set(key, json.dumps(profile_to_record(profile)))

    def get_nutrition_log(
        self, user_id: UUID | None, day: date
    ) -> NutritionLog | None:
        """Return the nutrition log for a date."""
        return _find(self.list_nutrition_logs(user_id), day)

    def save_nutrition_log(self, user_id: UUID | None, log: NutritionLog) -> None:
        """Replace the nutrition log for its date."""
        self._save_log(
            storage_key(NUTRITION_LOG_KEY, user_id), log, nutrition_log_to_record
        )

    def list_nutrition_logs(self, user_id: UUID | None) -> list[NutritionLog]:
        """Return every stored nutrition log."""
        return self._load_logs(
            storage_key(NUTRITION_LOG_KEY, user_id), nutrition_log_from_record
        )

    def get_workout_log(self, user_id: UUID | None, day: date) -> WorkoutLog | None:
        """Return the workout log for a date."""
        return _find(self.list_workout_logs(user_id), day)

    def save_workout_log(self, user_id: UUID | None, log: WorkoutLog) -> None:
        """Replace the workout log for its date."""
        self._save_log(
            storage_key(WORKOUT_LOG_KEY, user_id), log, workout_log_to_record
        )

    def list_workout_logs(self, user_id: UUID | None) -> list[WorkoutLog]:
        """Return every stored workout log."""
        return self._load_logs(
            storage_key(WORKOUT_LOG_KEY, user_id), workout_log_from_record
        )

    def _load(self, key: str) -> object | None:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            _logger.exception("Malformed JSON in local store: %s", key)
            return None

    def _load_records(self, key: str) -> list[Record]:
        records = self._load(key)
        if records is None:
            return []
        if not isinstance(records, list):
            _logger.warning("Expected a JSON array in local store: %s", key)
            return []
        return records

    def _load_logs(self, key: str, parse: Callable[[Record], L]) -> list[L]:
        logs = []
        for index, record in enumerate(self._load_records(key)):
            try:
                logs.append(parse(record))
            except (AttributeError, KeyError, TypeError, ValueError):
                _logger.exception("Malformed log in local store: %s[%d]", key, index)
        return logs

    def _save_log(self, key: str, log: L, dump: Callable[[L], Record]) -> None:
        day = log.date.isoformat()
        records = [
            record
            for record in self._load_records(key)
            if not (isinstance(record, dict) and record.get("date") == day)
        ]
        records.append(dump(log))
        self.store.set(key, json.dumps(records))


def _find(logs: list[L], day: date) -> L | None:
    return next((log for log in logs if log.date == day), None)
