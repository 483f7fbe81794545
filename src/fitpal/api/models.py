"""Pydantic request and response models for the HTTP API."""

from datetime import date

from pydantic import BaseModel, Field

from fitpal.domain.dashboard import DailyProgress
from fitpal.domain.nutrition import MacroNutrients
from fitpal.domain.profile import ActivityLevel, FitnessGoal, Gender, UserProfile
from fitpal.domain.workouts import Intensity, Workout


class ChatRequest(BaseModel):
    """Chat message sent by the user."""

    message: str = Field(min_length=1)


class ChatResponse(BaseModel):
    """Assistant reply with its classified intent."""

    intent: str
    reply: str
    notices: list[str] = Field(default_factory=list)


class MacroModel(BaseModel):
    """Macronutrient amounts in grams."""

    protein: float
    carbs: float
    fat: float

    @classmethod
    def from_domain(cls, macros: MacroNutrients) -> "MacroModel":
        return cls(protein=macros.protein, carbs=macros.carbs, fat=macros.fat)


class ProfilePayload(BaseModel):
    """Profile attributes accepted from the client.

    Daily targets are always derived and cannot be submitted.
    """

    name: str | None = None
    age: int | None = Field(default=None, gt=0)
    weight: float | None = Field(default=None, gt=0)
    height: float | None = Field(default=None, gt=0)
    gender: Gender | None = None
    activity_level: ActivityLevel | None = None
    goal: FitnessGoal | None = None
    dietary_preferences: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    dislikes: list[str] = Field(default_factory=list)

    def to_changes(self) -> dict[str, object]:
        """Return the fields as ``UserProfile`` attribute changes."""
        return {
            "name": self.name,
            "age": self.age,
            "weight_kg": self.weight,
            "height_cm": self.height,
            "gender": self.gender,
            "activity_level": self.activity_level,
            "goal": self.goal,
            "dietary_preferences": tuple(self.dietary_preferences),
            "allergies": tuple(self.allergies),
            "dislikes": tuple(self.dislikes),
        }


class ProfileModel(ProfilePayload):
    """Stored profile including derived targets."""

    daily_calories: int | None = None
    daily_macros: MacroModel | None = None
    onboarding_complete: bool = False

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "ProfileModel":
        return cls(
            name=profile.name,
            age=profile.age,
            weight=profile.weight_kg,
            height=profile.height_cm,
            gender=profile.gender,
            activity_level=profile.activity_level,
            goal=profile.goal,
            dietary_preferences=list(profile.dietary_preferences),
            allergies=list(profile.allergies),
            dislikes=list(profile.dislikes),
            daily_calories=profile.daily_calories,
            daily_macros=(
                MacroModel.from_domain(profile.daily_macros)
                if profile.daily_macros
                else None
            ),
            onboarding_complete=profile.onboarding_complete,
        )


class ProfileResponse(BaseModel):
    """Profile read or write result."""

    profile: ProfileModel | None
    notices: list[str] = Field(default_factory=list)


class WorkoutModel(BaseModel):
    """Workout entry in the dashboard."""

    type: str
    duration: int
    intensity: Intensity | None = None
    calories_burned: int | None = None
    notes: str | None = None

    @classmethod
    def from_domain(cls, workout: Workout) -> "WorkoutModel":
        return cls(
            type=workout.type,
            duration=workout.duration,
            intensity=workout.intensity,
            calories_burned=workout.calories_burned,
            notes=workout.notes,
        )


class DashboardResponse(BaseModel):
    """Today's progress against the daily targets."""

    day: date
    calories: float
    calorie_target: int
    calorie_percent: float
    macros: MacroModel
    macro_targets: MacroModel
    macro_percent: MacroModel
    workouts: list[WorkoutModel]
    calories_burned: int
    streak: int
    streak_progress: float
    notices: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(
        cls, progress: DailyProgress, notices: list[str]
    ) -> "DashboardResponse":
        return cls(
            day=progress.day,
            calories=progress.calories,
            calorie_target=progress.calorie_target,
            calorie_percent=progress.calorie_percent,
            macros=MacroModel.from_domain(progress.macros),
            macro_targets=MacroModel.from_domain(progress.macro_targets),
            macro_percent=MacroModel.from_domain(progress.macro_percent),
            workouts=[WorkoutModel.from_domain(w) for w in progress.workouts],
            calories_burned=progress.calories_burned,
            streak=progress.streak,
            streak_progress=progress.streak_progress,
            notices=notices,
        )
