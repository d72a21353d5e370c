"""Parsing of raw form input into validated values."""

import math
import re
from dataclasses import dataclass

from byte_buddy.domain.errors import ValidationError
from byte_buddy.domain.foods import DEFAULT_SERVING_SIZE, FoodDraft

_EMAIL_PATTERN = re.compile(r"[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}")
MIN_PASSWORD_LENGTH = 6

MAX_CALORIE_GOAL = 10000
MAX_PROTEIN_GOAL = 1000
MAX_CARB_GOAL = 1000
MAX_SUGAR_GOAL = 500
MAX_FAT_GOAL = 500
MAX_WEIGHT = 1000


@dataclass(frozen=True)
class GoalsInput:
    """Validated goal form values."""

    calorie: float
    protein: float
    carb: float
    sugar: float
    fat: float
    weight: float | None


def parse_food_form(  # noqa: PLR0913
    name: str,
    calories: str,
    protein: str = "",
    carbs: str = "",
    fat: str = "",
    serving_size: str = "",
    *,
    editing: bool = False,
) -> FoodDraft:
    """Validate a food form.

    New foods need calories above zero; edits may set calories to zero.
    Blank or unparseable macros count as zero; negative macros are rejected.
    """
    trimmed = name.strip()
    if not trimmed:
        raise ValidationError("Please enter a food name")
    calories_value = _to_float(calories)
    if calories_value is None or calories_value < 0:
        raise ValidationError("Please enter a valid calorie amount")
    if not editing and calories_value == 0:
        raise ValidationError("Please enter a valid calorie amount")
    return FoodDraft(
        name=trimmed,
        calories=calories_value,
        protein_g=_macro(protein, "protein"),
        carbs_g=_macro(carbs, "carbs"),
        fat_g=_macro(fat, "fat"),
        serving_size=serving_size or DEFAULT_SERVING_SIZE,
    )


def parse_quantity(raw: str) -> float:
    """Validate a serving multiplier."""
    value = _to_float(raw)
    if value is None or value <= 0:
        raise ValidationError("Please enter a valid quantity")
    return value


def parse_goals_form(  # noqa: PLR0913
    calorie: str,
    protein: str,
    carb: str,
    sugar: str,
    fat: str,
    weight: str = "",
) -> GoalsInput:
    """Validate the goals form against the allowed ranges."""
    calorie_value = _to_float(calorie)
    if calorie_value is None or not 0 < calorie_value <= MAX_CALORIE_GOAL:
        raise ValidationError("Calories: 1-10,000")
    protein_value = _in_range(protein, MAX_PROTEIN_GOAL, "Protein: 0-1000g")
    carb_value = _in_range(carb, MAX_CARB_GOAL, "Carbs: 0-1000g")
    sugar_value = _in_range(sugar, MAX_SUGAR_GOAL, "Sugar: 0-500g")
    fat_value = _in_range(fat, MAX_FAT_GOAL, "Fat: 0-500g")
    weight_value: float | None = None
    if weight.strip():
        weight_value = _to_float(weight)
        if weight_value is None or not 0 < weight_value <= MAX_WEIGHT:
            raise ValidationError("Weight: 0-1000lb")
    return GoalsInput(
        calorie=calorie_value,
        protein=protein_value,
        carb=carb_value,
        sugar=sugar_value,
        fat=fat_value,
        weight=weight_value,
    )


def validate_credentials(
    email: str, password: str, confirm_password: str | None = None
) -> None:
    """Check sign-in or sign-up credentials before calling the provider."""
    if not email or not password:
        raise ValidationError("Please fill in all fields")
    if not _EMAIL_PATTERN.fullmatch(email):
        raise ValidationError("Please enter a valid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 6 characters")
    if confirm_password is not None and password != confirm_password:
        raise ValidationError("Passwords do not match")


def _macro(raw: str, label: str) -> float:
    value = _to_float(raw)
    if value is None:
        return 0.0
    if value < 0:
        raise ValidationError(f"Please enter a valid {label} amount")
    return value


def _in_range(raw: str, upper: float, message: str) -> float:
    value = _to_float(raw)
    if value is None or not 0 <= value <= upper:
        raise ValidationError(message)
    return value


def _to_float(raw: str) -> float | None:
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value
