"""Workout domain models."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Intensity(str, Enum):
    """Workout intensity levels."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


@dataclass(frozen=True)
class ExerciseInfo:
    """Catalog entry describing an exercise."""

    name: str
    calories_per_minute: dict[Intensity, float]
    benefits: tuple[str, ...]


@dataclass(frozen=True)
class Workout:
    """A single workout session."""

    type: str
    duration: int
    intensity: Intensity | None = Intensity.MODERATE
    calories_burned: int | None = None
    notes: str | None = None


@dataclass(frozen=True)
class WorkoutLog:
    """All workouts logged on one calendar day."""

    date: date
    workouts: tuple[Workout, ...] = field(default_factory=tuple)

    @property
    def total_calories_burned(self) -> int:
        return sum(workout.calories_burned or 0 for workout in self.workouts)

    def with_workout(self, workout: Workout) -> "WorkoutLog":
        """Return a copy of the log with the workout appended."""
        return WorkoutLog(date=self.date, workouts=(*self.workouts, workout))
