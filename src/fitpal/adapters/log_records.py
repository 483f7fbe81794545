"""Plain-dict records for profiles and daily logs."""

from datetime import date
from enum import Enum
from typing import Any, TypeVar

from fitpal.domain.nutrition import Food, MacroNutrients, Meal, NutritionLog
from fitpal.domain.profile import ActivityLevel, FitnessGoal, Gender, UserProfile
from fitpal.domain.workouts import Intensity, Workout, WorkoutLog

E = TypeVar("E", bound=Enum)

Record = dict[str, Any]


def profile_to_record(profile: UserProfile) -> Record:
    """Serialize a profile."""
    return {
        "name": profile.name,
        "age": profile.age,
        "weight": profile.weight_kg,
        "height": profile.height_cm,
        "gender": _enum_value(profile.gender),
        "activity_level": _enum_value(profile.activity_level),
        "goal": _enum_value(profile.goal),
        "dietary_preferences": list(profile.dietary_preferences),
        "allergies": list(profile.allergies),
        "dislikes": list(profile.dislikes),
        "daily_calories": profile.daily_calories,
        "daily_macros": (
            macros_to_record(profile.daily_macros) if profile.daily_macros else None
        ),
        "onboarding_complete": profile.onboarding_complete,
    }


def profile_from_record(record: Record) -> UserProfile:
    """Deserialize a profile; raises ``ValueError`` on invalid data."""
    macros = record.get("daily_macros")
    return UserProfile(
        name=record.get("name"),
        age=_optional_int(record.get("age")),
        weight_kg=_optional_float(record.get("weight")),
        height_cm=_optional_float(record.get("height")),
        gender=_parse_enum(Gender, record.get("gender")),
        activity_level=_parse_enum(ActivityLevel, record.get("activity_level")),
        goal=_parse_enum(FitnessGoal, record.get("goal")),
        dietary_preferences=tuple(record.get("dietary_preferences") or ()),
        allergies=tuple(record.get("allergies") or ()),
        dislikes=tuple(record.get("dislikes") or ()),
        daily_calories=_optional_int(record.get("daily_calories")),
        daily_macros=macros_from_record(macros) if macros else None,
        onboarding_complete=bool(record.get("onboarding_complete", False)),
    )


def macros_to_record(macros: MacroNutrients) -> Record:
    return {"protein": macros.protein, "carbs": macros.carbs, "fat": macros.fat}


def macros_from_record(record: Record) -> MacroNutrients:
    return MacroNutrients(
        protein=float(record.get("protein") or 0),
        carbs=float(record.get("carbs") or 0),
        fat=float(record.get("fat") or 0),
    )


def nutrition_log_to_record(log: NutritionLog) -> Record:
    """Serialize a nutrition log with its computed totals."""
    return {
        "date": log.date.isoformat(),
        "meals": [
            {
                "name": meal.name,
                "time": meal.time,
                "foods": [
                    {
                        "name": food.name,
                        "serving_size": food.serving_size,
                        "calories": food.calories,
                        "macros": macros_to_record(food.macros),
                    }
                    for food in meal.foods
                ],
                "total_calories": meal.total_calories,
                "total_macros": macros_to_record(meal.total_macros),
            }
            for meal in log.meals
        ],
        "total_calories": log.total_calories,
        "total_macros": macros_to_record(log.total_macros),
    }


def nutrition_log_from_record(record: Record) -> NutritionLog:
    """Deserialize a nutrition log; stored totals are recomputed."""
    meals = tuple(
        Meal(
            name=str(meal["name"]),
            time=str(meal.get("time") or ""),
            foods=tuple(
                Food(
                    name=str(food["name"]),
                    serving_size=str(food.get("serving_size") or ""),
                    calories=float(food.get("calories") or 0),
                    macros=macros_from_record(food.get("macros") or {}),
                )
                for food in meal.get("foods") or []
            ),
        )
        for meal in record.get("meals") or []
    )
    return NutritionLog(date=date.fromisoformat(record["date"]), meals=meals)


def workout_log_to_record(log: WorkoutLog) -> Record:
    """Serialize a workout log."""
    return {
        "date": log.date.isoformat(),
        "workouts": [workout_to_record(workout) for workout in log.workouts],
    }


def workout_log_from_record(record: Record) -> WorkoutLog:
    """Deserialize a workout log."""
    return WorkoutLog(
        date=date.fromisoformat(record["date"]),
        workouts=tuple(
            workout_from_record(workout) for workout in record.get("workouts") or []
        ),
    )


def workout_to_record(workout: Workout) -> Record:
    return {
        "type": workout.type,
        "duration": workout.duration,
        "intensity": _enum_value(workout.intensity),
        "calories_burned": workout.calories_burned,
        "notes": workout.notes,
    }


def workout_from_record(record: Record) -> Workout:
    return Workout(
        type=str(record["type"]),
        duration=int(record["duration"]),
        intensity=_parse_enum(Intensity, record.get("intensity")),
        calories_burned=_optional_int(record.get("calories_burned")),
        notes=record.get("notes"),
    )


def _enum_value(value: Enum | None) -> str | None:
    return value.value if value is not None else None


def _parse_enum(enum_cls: type[E], value: object) -> E | None:
    if value is None or value == "":
        return None
    return enum_cls(value)


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
