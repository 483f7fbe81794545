"""Supabase repository for profiles and daily logs."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Any
from uuid import UUID

from supabase import Client

from fitpal.domain.nutrition import Food, MacroNutrients, Meal, NutritionLog
from fitpal.domain.profile import ActivityLevel, FitnessGoal, Gender, UserProfile
from fitpal.domain.workouts import Intensity, Workout, WorkoutLog
from fitpal.services.storage import LogBackend

Row = dict[str, Any]

_PROFILE_COLUMNS = (
    "id, name, age, weight, height, gender, activity_level, goal, "
    "dietary_preferences, allergies, dislikes, daily_calories, daily_protein, "
    "daily_carbs, daily_fat, onboarding_complete"
)


@dataclass
class SupabaseLogBackend(LogBackend):
    """Supabase implementation for profiles, nutrition logs and workout logs.

    Log headers are upserted by ``(user_id, date)``. Child rows (meals and
    foods, or workouts) are deleted and re-inserted on every save.
    """

    client: Client

    def get_profile(self, user_id: UUID | None) -> UserProfile | None:
        """Return the profile row for a user."""
        response = (
            self.client.table("user_profiles")
            .select(_PROFILE_COLUMNS)
            .eq("id", str(_require(user_id)))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def save_profile(self, user_id: UUID | None, profile: UserProfile) -> None:
        """Upsert the profile row."""
        macros = profile.daily_macros
        self.client.table("user_profiles").upsert(
            {
                "id": str(_require(user_id)),
                "name": profile.name,
                "age": profile.age,
                "weight": profile.weight_kg,
                "height": profile.height_cm,
                "gender": profile.gender.value if profile.gender else None,
                "activity_level": (
                    profile.activity_level.value if profile.activity_level else None
                ),
                "goal": profile.goal.value if profile.goal else None,
                "dietary_preferences": list(profile.dietary_preferences),
                "allergies": list(profile.allergies),
                "dislikes": list(profile.dislikes),
                "daily_calories": profile.daily_calories,
                "daily_protein": macros.protein if macros else None,
                "daily_carbs": macros.carbs if macros else None,
                "daily_fat": macros.fat if macros else None,
                "onboarding_complete": profile.onboarding_complete,
            },
            on_conflict="id",
        ).execute()

    def get_nutrition_log(
        self, user_id: UUID | None, day: date
    ) -> NutritionLog | None:
        """Return the nutrition log with its meals and foods for a date."""
        response = (
            self.client.table("nutrition_logs")
            .select("id, date")
            .eq("user_id", str(_require(user_id)))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self._load_nutrition_logs(response.data)[0]

    def save_nutrition_log(self, user_id: UUID | None, log: NutritionLog) -> None:
        """Upsert the log header and replace its meals and foods."""
        totals = log.total_macros
        response = (
            self.client.table("nutrition_logs")
            .upsert(
                {
                    "user_id": str(_require(user_id)),
                    "date": log.date.isoformat(),
                    "total_calories": log.total_calories,
                    "total_protein": totals.protein,
                    "total_carbs": totals.carbs,
                    "total_fat": totals.fat,
                },
                on_conflict="user_id,date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to upsert nutrition log")
        log_id = response.data[0]["id"]

        existing = (
            self.client.table("meals")
            .select("id")
            .eq("nutrition_log_id", log_id)
            .execute()
        )
        meal_ids = [row["id"] for row in existing.data or []]
        if meal_ids:
            self.client.table("foods").delete().in_("meal_id", meal_ids).execute()
            self.client.table("meals").delete().eq("nutrition_log_id", log_id).execute()

        for meal in log.meals:
            meal_totals = meal.total_macros
            inserted = (
                self.client.table("meals")
                .insert(
                    {
                        "nutrition_log_id": log_id,
                        "name": meal.name,
                        "time": meal.time,
                        "total_calories": meal.total_calories,
                        "total_protein": meal_totals.protein,
                        "total_carbs": meal_totals.carbs,
                        "total_fat": meal_totals.fat,
                    }
                )
                .execute()
            )
            if not inserted.data:
                raise RuntimeError("Failed to insert meal")
            meal_id = inserted.data[0]["id"]
            payload = [
                {
                    "meal_id": meal_id,
                    "name": food.name,
                    "serving_size": food.serving_size,
                    "calories": food.calories,
                    "protein": food.macros.protein,
                    "carbs": food.macros.carbs,
                    "fat": food.macros.fat,
                }
                for food in meal.foods
            ]
            if payload:
                self.client.table("foods").insert(payload).execute()

    def list_nutrition_logs(self, user_id: UUID | None) -> list[NutritionLog]:
        """Return every nutrition log for a user, newest first."""
        response = (
            self.client.table("nutrition_logs")
            .select("id, date")
            .eq("user_id", str(_require(user_id)))
            .order("date", desc=True)
            .execute()
        )
        return self._load_nutrition_logs(response.data or [])

    def get_workout_log(self, user_id: UUID | None, day: date) -> WorkoutLog | None:
        """Return the workout log with its workouts for a date."""
        response = (
            self.client.table("workout_logs")
            .select("id, date")
            .eq("user_id", str(_require(user_id)))
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self._load_workout_logs(response.data)[0]

    def save_workout_log(self, user_id: UUID | None, log: WorkoutLog) -> None:
        """Upsert the log header and replace its workouts."""
        response = (
            self.client.table("workout_logs")
            .upsert(
                {"user_id": str(_require(user_id)), "date": log.date.isoformat()},
                on_conflict="user_id,date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to upsert workout log")
        log_id = response.data[0]["id"]

        self.client.table("workouts").delete().eq("workout_log_id", log_id).execute()
        payload = [
            {
                "workout_log_id": log_id,
                "type": workout.type,
                "duration": workout.duration,
                "intensity": workout.intensity.value if workout.intensity else None,
                "calories_burned": workout.calories_burned,
                "notes": workout.notes,
            }
            for workout in log.workouts
        ]
        if payload:
            self.client.table("workouts").insert(payload).execute()

    def list_workout_logs(self, user_id: UUID | None) -> list[WorkoutLog]:
        """Return every workout log for a user, newest first."""
        response = (
            self.client.table("workout_logs")
            .select("id, date")
            .eq("user_id", str(_require(user_id)))
            .order("date", desc=True)
            .execute()
        )
        return self._load_workout_logs(response.data or [])

    def _load_nutrition_logs(self, headers: list[Row]) -> list[NutritionLog]:
        if not headers:
            return []
        meal_rows = (
            self.client.table("meals")
            .select("id, nutrition_log_id, name, time")
            .in_("nutrition_log_id", [row["id"] for row in headers])
            .order("created_at", desc=False)
            .execute()
        ).data or []
        foods_by_meal: dict[str, list[Food]] = defaultdict(list)
        if meal_rows:
            food_rows = (
                self.client.table("foods")
                .select("meal_id, name, serving_size, calories, protein, carbs, fat")
                .in_("meal_id", [row["id"] for row in meal_rows])
                .order("created_at", desc=False)
                .execute()
            ).data or []
            for row in food_rows:
                foods_by_meal[row["meal_id"]].append(_parse_food(row))
        meals_by_log: dict[str, list[Meal]] = defaultdict(list)
        for row in meal_rows:
            meals_by_log[row["nutrition_log_id"]].append(
                Meal(
                    name=str(row.get("name", "")),
                    time=str(row.get("time") or ""),
                    foods=tuple(foods_by_meal[row["id"]]),
                )
            )
        return [
            NutritionLog(
                date=date.fromisoformat(row["date"]),
                meals=tuple(meals_by_log[row["id"]]),
            )
            for row in headers
        ]

    def _load_workout_logs(self, headers: list[Row]) -> list[WorkoutLog]:
        if not headers:
            return []
        workout_rows = (
            self.client.table("workouts")
            .select("workout_log_id, type, duration, intensity, calories_burned, notes")
            .in_("workout_log_id", [row["id"] for row in headers])
            .order("created_at", desc=False)
            .execute()
        ).data or []
        workouts_by_log: dict[str, list[Workout]] = defaultdict(list)
        for row in workout_rows:
            workouts_by_log[row["workout_log_id"]].append(_parse_workout(row))
        return [
            WorkoutLog(
                date=date.fromisoformat(row["date"]),
                workouts=tuple(workouts_by_log[row["id"]]),
            )
            for row in headers
        ]


def _require(user_id: UUID | None) -> UUID:
    if user_id is None:
        raise ValueError("Remote storage requires a user id")
    return user_id


def _parse_profile(row: Row) -> UserProfile:
    macros = None
    if row.get("daily_protein") is not None:
        macros = MacroNutrients(
            protein=float(row.get("daily_protein") or 0),
            carbs=float(row.get("daily_carbs") or 0),
            fat=float(row.get("daily_fat") or 0),
        )
    return UserProfile(
        name=row.get("name"),
        age=row.get("age"),
        weight_kg=_optional_float(row.get("weight")),
        height_cm=_optional_float(row.get("height")),
        gender=Gender(row["gender"]) if row.get("gender") else None,
        activity_level=(
            ActivityLevel(row["activity_level"]) if row.get("activity_level") else None
        ),
        goal=FitnessGoal(row["goal"]) if row.get("goal") else None,
        dietary_preferences=tuple(row.get("dietary_preferences") or ()),
        allergies=tuple(row.get("allergies") or ()),
        dislikes=tuple(row.get("dislikes") or ()),
        daily_calories=row.get("daily_calories"),
        daily_macros=macros,
        onboarding_complete=bool(row.get("onboarding_complete", False)),
    )


def _parse_food(row: Row) -> Food:
    return Food(
        name=str(row.get("name", "")),
        serving_size=str(row.get("serving_size", "")),
        calories=float(row.get("calories", 0.0)),
        macros=MacroNutrients(
            protein=float(row.get("protein", 0.0)),
            carbs=float(row.get("carbs", 0.0)),
            fat=float(row.get("fat", 0.0)),
        ),
    )


def _parse_workout(row: Row) -> Workout:
    return Workout(
        type=str(row.get("type", "")),
        duration=int(row.get("duration", 0)),
        intensity=Intensity(row["intensity"]) if row.get("intensity") else None,
        calories_burned=row.get("calories_burned"),
        notes=row.get("notes"),
    )


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)
