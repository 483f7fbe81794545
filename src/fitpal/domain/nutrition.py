"""Nutrition domain models."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class MacroNutrients:
    """Macronutrient amounts in grams."""

    protein: float = 0
    carbs: float = 0
    fat: float = 0

    def __add__(self, other: "MacroNutrients") -> "MacroNutrients":
        return MacroNutrients(
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )


@dataclass(frozen=True)
class Food:
    """A single food item with its nutrition per serving."""

    name: str
    serving_size: str
    calories: float
    macros: MacroNutrients


@dataclass(frozen=True)
class Meal:
    """A named, timestamped group of foods."""

    name: str
    time: str
    foods: tuple[Food, ...] = ()

    @property
    def total_calories(self) -> float:
        return sum((food.calories for food in self.foods), 0)

    @property
    def total_macros(self) -> MacroNutrients:
        return sum((food.macros for food in self.foods), MacroNutrients())


@dataclass(frozen=True)
class NutritionLog:
    """All meals logged on one calendar day."""

    date: date
    meals: tuple[Meal, ...] = field(default_factory=tuple)

    @property
    def total_calories(self) -> float:
        return sum((meal.total_calories for meal in self.meals), 0)

    @property
    def total_macros(self) -> MacroNutrients:
        return sum((meal.total_macros for meal in self.meals), MacroNutrients())

    def with_meal(self, meal: Meal) -> "NutritionLog":
        """Return a copy of the log with the meal appended."""
        return NutritionLog(date=self.date, meals=(*self.meals, meal))
