"""Tests for calorie, macro and meal calculations."""

import random

import pytest

from fitpal.domain.nutrition import MacroNutrients
from fitpal.domain.profile import ActivityLevel, FitnessGoal, Gender, UserProfile
from fitpal.services.nutrition import (
    FOOD_CATALOG,
    apply_targets,
    compute_bmr,
    compute_daily_calorie_target,
    compute_macro_targets,
    compute_tdee,
    generate_meal_suggestion,
    round_half_up,
    summarize_meal,
)


def _profile(**overrides: object) -> UserProfile:
    values: dict[str, object] = {
        "age": 30,
        "weight_kg": 70,
        "height_cm": 175,
        "gender": Gender.MALE,
        "activity_level": ActivityLevel.MODERATELY_ACTIVE,
        "goal": FitnessGoal.MAINTENANCE,
    }
    values.update(overrides)
    return UserProfile(**values)


def test_round_half_up_rounds_halves_away_from_zero() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_bmr_for_male_profile() -> None:
    assert compute_bmr(_profile()) == pytest.approx(1648.75)


def test_bmr_for_female_profile() -> None:
    assert compute_bmr(_profile(gender=Gender.FEMALE)) == pytest.approx(1482.75)


def test_bmr_is_zero_when_inputs_missing() -> None:
    assert compute_bmr(_profile(weight_kg=None)) == 0
    assert compute_bmr(_profile(age=None)) == 0
    assert compute_bmr(_profile(gender=None)) == 0


def test_tdee_applies_activity_multiplier() -> None:
    assert compute_tdee(_profile()) == 2556
    lightly_active = _profile(activity_level=ActivityLevel.LIGHTLY_ACTIVE)
    assert compute_tdee(lightly_active) == 2267


def test_tdee_without_activity_level_is_bmr() -> None:
    assert compute_tdee(_profile(activity_level=None)) == pytest.approx(1648.75)


def test_calorie_target_follows_goal() -> None:
    tdee = compute_tdee(_profile())

    assert compute_daily_calorie_target(_profile()) == tdee
    weight_loss = _profile(goal=FitnessGoal.WEIGHT_LOSS)
    assert compute_daily_calorie_target(weight_loss) == tdee - 500
    muscle_gain = _profile(goal=FitnessGoal.MUSCLE_GAIN)
    assert compute_daily_calorie_target(muscle_gain) == tdee + 300


def test_macro_targets_for_maintenance() -> None:
    macros = compute_macro_targets(2000, FitnessGoal.MAINTENANCE)

    assert macros == MacroNutrients(protein=150, carbs=200, fat=67)


def test_macro_targets_for_weight_loss_and_muscle_gain() -> None:
    assert compute_macro_targets(2000, FitnessGoal.WEIGHT_LOSS) == MacroNutrients(
        protein=200, carbs=150, fat=67
    )
    assert compute_macro_targets(2000, FitnessGoal.MUSCLE_GAIN) == MacroNutrients(
        protein=175, carbs=200, fat=56
    )


def test_macro_targets_accept_goal_strings() -> None:
    assert compute_macro_targets(2000, "weight loss") == compute_macro_targets(
        2000, FitnessGoal.WEIGHT_LOSS
    )
    assert compute_macro_targets(2000, "unknown") == compute_macro_targets(
        2000, FitnessGoal.MAINTENANCE
    )


def test_apply_targets_sets_calories_and_macros() -> None:
    profile = apply_targets(_profile())

    assert profile.daily_calories == 2556
    assert profile.daily_macros == MacroNutrients(protein=192, carbs=256, fat=85)


def test_summarize_meal_sums_foods() -> None:
    chicken, _, rice, broccoli = FOOD_CATALOG[:4]

    meal = summarize_meal([chicken, rice, broccoli], name="Lunch", time="12:00")

    assert meal.total_calories == 311
    assert meal.total_macros.protein == pytest.approx(36.4)
    assert meal.total_macros.carbs == pytest.approx(30)
    assert meal.total_macros.fat == pytest.approx(4.9)
    assert meal.time == "12:00"


def test_meal_suggestion_is_reproducible_with_seeded_rng() -> None:
    profile = _profile()

    first = generate_meal_suggestion("lunch", profile, rng=random.Random(3))
    second = generate_meal_suggestion("lunch", profile, rng=random.Random(3))

    assert first is not None
    assert second is not None
    assert [food.name for food in first.foods] == [food.name for food in second.foods]
    assert first.name == "Lunch"


def test_meal_suggestion_avoids_allergies() -> None:
    profile = _profile(allergies=("salmon",))

    for seed in range(10):
        meal = generate_meal_suggestion("dinner", profile, rng=random.Random(seed))
        assert meal is not None
        assert all("salmon" not in food.name.lower() for food in meal.foods)


def test_meal_suggestion_avoids_dislikes_case_insensitively() -> None:
    profile = _profile(dislikes=("Almonds",))

    meal = generate_meal_suggestion("snack", profile, rng=random.Random(0))

    assert meal is not None
    assert [food.name for food in meal.foods] == [
        "Greek Yogurt (100g)",
        "Banana (medium)",
    ]


def test_meal_suggestion_returns_none_when_nothing_fits() -> None:
    profile = _profile(allergies=("banana",))

    assert generate_meal_suggestion("snack", profile) is None


def test_unknown_meal_type_uses_snack_templates() -> None:
    meal = generate_meal_suggestion("brunch", _profile(), rng=random.Random(1))

    assert meal is not None
    assert meal.foods[-1].name == "Banana (medium)"
