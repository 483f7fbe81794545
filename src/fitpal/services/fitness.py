"""Workout calorie estimates and suggestions."""

import random

from fitpal.domain.profile import FitnessGoal, UserProfile
from fitpal.domain.workouts import ExerciseInfo, Intensity, Workout
from fitpal.services.nutrition import parse_goal, round_half_up

REFERENCE_WEIGHT_KG = 70

EXERCISES: dict[str, ExerciseInfo] = {
    "walking": ExerciseInfo(
        name="Walking",
        calories_per_minute={
            Intensity.LOW: 3,
            Intensity.MODERATE: 4,
            Intensity.HIGH: 5,
        },
        benefits=(
            "Improves cardiovascular health",
            "Low impact",
            "Burns fat",
            "Reduces stress",
        ),
    ),
    "running": ExerciseInfo(
        name="Running",
        calories_per_minute={
            Intensity.LOW: 8,
            Intensity.MODERATE: 10,
            Intensity.HIGH: 12,
        },
        benefits=(
            "Builds endurance",
            "Burns calories efficiently",
            "Strengthens legs",
            "Improves cardiovascular health",
        ),
    ),
    "cycling": ExerciseInfo(
        name="Cycling",
        calories_per_minute={
            Intensity.LOW: 5,
            Intensity.MODERATE: 7,
            Intensity.HIGH: 10,
        },
        benefits=(
            "Low impact",
            "Builds leg strength",
            "Improves cardiovascular health",
            "Can be done indoors or outdoors",
        ),
    ),
    "swimming": ExerciseInfo(
        name="Swimming",
        calories_per_minute={
            Intensity.LOW: 6,
            Intensity.MODERATE: 8,
            Intensity.HIGH: 10,
        },
        benefits=(
            "Full body workout",
            "No impact on joints",
            "Builds endurance",
            "Improves flexibility",
        ),
    ),
    "yoga": ExerciseInfo(
        name="Yoga",
        calories_per_minute={
            Intensity.LOW: 3,
            Intensity.MODERATE: 4,
            Intensity.HIGH: 6,
        },
        benefits=(
            "Improves flexibility",
            "Reduces stress",
            "Builds strength",
            "Enhances mind-body connection",
        ),
    ),
    "weight_training": ExerciseInfo(
        name="Weight Training",
        calories_per_minute={
            Intensity.LOW: 4,
            Intensity.MODERATE: 6,
            Intensity.HIGH: 8,
        },
        benefits=(
            "Builds muscle",
            "Increases metabolism",
            "Improves bone density",
            "Enhances functional strength",
        ),
    ),
    "hiit": ExerciseInfo(
        name="HIIT",
        calories_per_minute={
            Intensity.LOW: 8,
            Intensity.MODERATE: 12,
            Intensity.HIGH: 15,
        },
        benefits=(
            "Efficient calorie burn",
            "Improves metabolic rate",
            "Quick workout option",
            "Burns fat",
        ),
    ),
    "pilates": ExerciseInfo(
        name="Pilates",
        calories_per_minute={
            Intensity.LOW: 3,
            Intensity.MODERATE: 5,
            Intensity.HIGH: 7,
        },
        benefits=(
            "Improves core strength",
            "Enhances posture",
            "Increases flexibility",
            "Low impact",
        ),
    ),
}

_GENERIC_CALORIES_PER_MINUTE = {
    Intensity.LOW: 5,
    Intensity.MODERATE: 7.5,
    Intensity.HIGH: 10,
}

_GOAL_POOLS = {
    FitnessGoal.WEIGHT_LOSS: ("hiit", "running", "swimming"),
    FitnessGoal.MUSCLE_GAIN: ("weight_training", "hiit", "pilates"),
    FitnessGoal.MAINTENANCE: ("walking", "cycling", "yoga", "swimming"),
}

_SHORT_WORKOUT_MINUTES = 20
_SHORT_WORKOUT_POOL = ("hiit", "weight_training")
_LONG_WORKOUT_MINUTES = 40
_STEADY_CARDIO_POOL = ("walking", "cycling", "swimming")


def find_exercise(name: str) -> ExerciseInfo | None:
    """Return the catalog entry whose name matches, ignoring case."""
    lowered = name.lower()
    for exercise in EXERCISES.values():
        if exercise.name.lower() == lowered:
            return exercise
    return None


def estimate_calories_burned(workout: Workout, profile: UserProfile) -> int:
    """Estimate calories burned, scaled by body weight for catalog exercises."""
    exercise = find_exercise(workout.type)
    if exercise is None:
        rate = _GENERIC_CALORIES_PER_MINUTE[
            Intensity(workout.intensity or Intensity.HIGH)
        ]
        return max(0, round_half_up(workout.duration * rate))

    intensity = Intensity(workout.intensity or Intensity.MODERATE)
    weight_factor = 1.0
    if profile.weight_kg:
        weight_factor = profile.weight_kg / REFERENCE_WEIGHT_KG
    per_minute = exercise.calories_per_minute[intensity]
    calories = workout.duration * per_minute * weight_factor
    return max(0, round_half_up(calories))


def suggest_workout(
    minutes: int,
    intensity: Intensity,
    goal: FitnessGoal | str | None,
    rng: random.Random | None = None,
) -> Workout:
    """Suggest a workout for the time available, intensity and goal.

    The pick among eligible exercises is random; pass a seeded ``rng`` for
    reproducible results.
    """
    pool = _GOAL_POOLS.get(parse_goal(goal), tuple(EXERCISES))
    if minutes < _SHORT_WORKOUT_MINUTES:
        pool = _restrict(pool, _SHORT_WORKOUT_POOL)
    if minutes > _LONG_WORKOUT_MINUTES and intensity == Intensity.LOW:
        pool = _restrict(pool, _STEADY_CARDIO_POOL)

    key = (rng or random.Random()).choice(pool)
    exercise = EXERCISES[key]
    return Workout(
        type=exercise.name,
        duration=minutes,
        intensity=Intensity(intensity),
        notes=". ".join(exercise.benefits),
    )


def _restrict(pool: tuple[str, ...], allowed: tuple[str, ...]) -> tuple[str, ...]:
    restricted = tuple(key for key in pool if key in allowed)
    return restricted or allowed
