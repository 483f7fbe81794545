"""Calorie, macro and meal calculations."""

import math
import random
from dataclasses import replace
from datetime import UTC, datetime

from fitpal.domain.nutrition import Food, MacroNutrients, Meal
from fitpal.domain.profile import ActivityLevel, FitnessGoal, Gender, UserProfile

_ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTREMELY_ACTIVE: 1.9,
}

_GOAL_ADJUSTMENTS = {
    FitnessGoal.WEIGHT_LOSS: -500,
    FitnessGoal.MAINTENANCE: 0,
    FitnessGoal.MUSCLE_GAIN: 300,
}

# (protein, fat, carbs) share of total calories
_MACRO_SPLITS = {
    FitnessGoal.WEIGHT_LOSS: (0.40, 0.30, 0.30),
    FitnessGoal.MAINTENANCE: (0.30, 0.30, 0.40),
    FitnessGoal.MUSCLE_GAIN: (0.35, 0.25, 0.40),
}

_CALORIES_PER_GRAM_PROTEIN = 4
_CALORIES_PER_GRAM_CARBS = 4
_CALORIES_PER_GRAM_FAT = 9

FOOD_CATALOG: tuple[Food, ...] = (
    Food("Chicken Breast (100g)", "100g", 165, MacroNutrients(31, 0, 3.6)),
    Food("Salmon (100g)", "100g", 208, MacroNutrients(20, 0, 13)),
    Food("Brown Rice (cooked, 100g)", "100g", 112, MacroNutrients(2.6, 23, 0.9)),
    Food("Broccoli (100g)", "100g", 34, MacroNutrients(2.8, 7, 0.4)),
    Food("Egg (1 large)", "1 large", 72, MacroNutrients(6.3, 0.4, 5)),
    Food("Greek Yogurt (100g)", "100g", 59, MacroNutrients(10, 3.6, 0.4)),
    Food("Banana (medium)", "1 medium", 105, MacroNutrients(1.3, 27, 0.4)),
    Food("Almonds (28g)", "28g", 164, MacroNutrients(6, 6, 14)),
    Food("Avocado (half)", "1/2 fruit", 161, MacroNutrients(2, 8.5, 15)),
    Food("Sweet Potato (medium)", "1 medium", 112, MacroNutrients(2, 26, 0.1)),
)

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")

# Candidate food combinations per meal type, as indexes into FOOD_CATALOG.
_MEAL_TEMPLATES: dict[str, tuple[tuple[int, ...], ...]] = {
    "breakfast": ((4, 5, 6), (5, 6, 7)),
    "lunch": ((0, 2, 3), (1, 9, 3)),
    "dinner": ((1, 2, 8), (0, 9, 3)),
    "snack": ((7, 6), (5, 6)),
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded up."""
    return math.floor(value + 0.5)


def compute_bmr(profile: UserProfile) -> float:
    """Return basal metabolic rate (Mifflin-St Jeor), or 0 if inputs are missing."""
    if not (
        profile.weight_kg and profile.height_cm and profile.age and profile.gender
    ):
        return 0
    base = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    if profile.gender == Gender.MALE:
        return base + 5
    return base - 161


def compute_tdee(profile: UserProfile) -> float:
    """Return total daily energy expenditure for the profile's activity level."""
    bmr = compute_bmr(profile)
    if not profile.activity_level:
        return bmr
    multiplier = _ACTIVITY_MULTIPLIERS[ActivityLevel(profile.activity_level)]
    return round_half_up(bmr * multiplier)


def compute_daily_calorie_target(profile: UserProfile) -> int:
    """Return the daily calorie target adjusted for the profile's goal."""
    tdee = compute_tdee(profile)
    goal = parse_goal(profile.goal)
    if goal is None:
        return round_half_up(tdee)
    return round_half_up(tdee + _GOAL_ADJUSTMENTS[goal])


def compute_macro_targets(
    total_calories: float, goal: FitnessGoal | str | None
) -> MacroNutrients:
    """Split calories into protein, carbs and fat grams for a goal."""
    protein_share, fat_share, carb_share = _MACRO_SPLITS.get(
        parse_goal(goal), _MACRO_SPLITS[FitnessGoal.MAINTENANCE]
    )
    return MacroNutrients(
        protein=round_half_up(
            total_calories * protein_share / _CALORIES_PER_GRAM_PROTEIN
        ),
        carbs=round_half_up(total_calories * carb_share / _CALORIES_PER_GRAM_CARBS),
        fat=round_half_up(total_calories * fat_share / _CALORIES_PER_GRAM_FAT),
    )


def apply_targets(profile: UserProfile) -> UserProfile:
    """Return a copy of the profile with daily targets recomputed."""
    calories = compute_daily_calorie_target(profile)
    macros = compute_macro_targets(calories, profile.goal or FitnessGoal.MAINTENANCE)
    return replace(profile, daily_calories=calories, daily_macros=macros)


def summarize_meal(
    foods: list[Food] | tuple[Food, ...],
    name: str = "Custom Meal",
    time: str | None = None,
) -> Meal:
    """Build a meal from foods; totals are summed from the foods."""
    return Meal(
        name=name,
        time=time or datetime.now(tz=UTC).isoformat(),
        foods=tuple(foods),
    )


def generate_meal_suggestion(
    meal_type: str,
    profile: UserProfile,
    rng: random.Random | None = None,
) -> Meal | None:
    """Suggest a meal for the meal type, avoiding allergies and dislikes.

    When several templates are eligible the pick is random; pass a seeded
    ``rng`` for reproducible results. Returns None if nothing fits.
    """
    templates = _MEAL_TEMPLATES.get(meal_type, _MEAL_TEMPLATES["snack"])
    avoided = [
        term.strip().lower()
        for term in (*profile.allergies, *profile.dislikes)
        if term.strip()
    ]
    candidates = [
        [FOOD_CATALOG[index] for index in template]
        for template in templates
        if not any(_mentions(FOOD_CATALOG[index], avoided) for index in template)
    ]
    if not candidates:
        return None
    if len(candidates) == 1:
        foods = candidates[0]
    else:
        foods = (rng or random.Random()).choice(candidates)
    return summarize_meal(foods, name=meal_type.capitalize())


def simple_food_name(food: Food) -> str:
    """Return the lower-cased food name without its parenthetical suffix."""
    return food.name.lower().split("(")[0].strip()


def _mentions(food: Food, terms: list[str]) -> bool:
    name = food.name.lower()
    return any(term in name for term in terms)


def parse_goal(goal: FitnessGoal | str | None) -> FitnessGoal | None:
    """Return the goal as an enum member, or None if unknown."""
    if goal is None:
        return None
    try:
        return FitnessGoal(goal)
    except ValueError:
        return None
