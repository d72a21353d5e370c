"""Domain models for foods and logged meals."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

DEFAULT_SERVING_SIZE = "1 serving"


class MealSlot(str, Enum):
    """Meal bucket an entry is logged under."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


@dataclass(frozen=True)
class FoodDraft:
    """Food values before they are committed to the catalog."""

    name: str
    calories: float
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0
    serving_size: str = DEFAULT_SERVING_SIZE


@dataclass(frozen=True)
class Food:
    """A user-owned catalog food, nutrients per serving."""

    id: str
    owner_id: str
    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    serving_size: str
    date_added: datetime


@dataclass(frozen=True)
class MealEntry:
    """A logged consumption of a food snapshot."""

    id: str
    owner_id: str
    food_id: str
    food_name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    quantity: float
    meal_slot: MealSlot
    date_consumed: datetime

    @property
    def total_calories(self) -> float:
        return self.calories * self.quantity

    @property
    def total_protein_g(self) -> float:
        return self.protein_g * self.quantity

    @property
    def total_carbs_g(self) -> float:
        return self.carbs_g * self.quantity

    @property
    def total_fat_g(self) -> float:
        return self.fat_g * self.quantity


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros."""

    day: date
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
