"""Request and response models for the HTTP API."""

from datetime import date, datetime, time

from pydantic import BaseModel, Field

from byte_buddy.domain.foods import DailyTotals, Food, MealEntry, MealSlot
from byte_buddy.domain.goals import GoalProfile, format_time


class CredentialsRequest(BaseModel):
    """Email and password form."""

    email: str = ""
    password: str = ""
    confirm_password: str | None = None


class FoodFormRequest(BaseModel):
    """Raw food form fields, validated by the service layer."""

    name: str = ""
    calories: str = ""
    protein: str = ""
    carbs: str = ""
    fat: str = ""
    serving_size: str = ""


class MealEntryRequest(BaseModel):
    """Log a catalog food or a lookup result."""

    food_id: str | None = None
    lookup_index: int | None = Field(default=None, ge=0)
    quantity: str = "1.0"
    meal_slot: MealSlot = MealSlot.BREAKFAST
    date_consumed: datetime | None = None


class GoalsRequest(BaseModel):
    """Raw goal form fields."""

    calorie: str = ""
    protein: str = ""
    carb: str = ""
    sugar: str = ""
    fat: str = ""
    weight: str = ""


class ReminderRequest(BaseModel):
    """Reminder toggle, time of day and message."""

    enabled: bool
    time: time
    message: str


class FoodResponse(BaseModel):
    id: str
    name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    serving_size: str
    date_added: datetime

    @classmethod
    def from_food(cls, food: Food) -> "FoodResponse":
        return cls(
            id=food.id,
            name=food.name,
            calories=food.calories,
            protein_g=food.protein_g,
            carbs_g=food.carbs_g,
            fat_g=food.fat_g,
            serving_size=food.serving_size,
            date_added=food.date_added,
        )


class MealEntryResponse(BaseModel):
    id: str
    food_id: str
    food_name: str
    quantity: float
    meal_slot: MealSlot
    date_consumed: datetime
    total_calories: float
    total_protein_g: float
    total_carbs_g: float
    total_fat_g: float

    @classmethod
    def from_entry(cls, entry: MealEntry) -> "MealEntryResponse":
        return cls(
            id=entry.id,
            food_id=entry.food_id,
            food_name=entry.food_name,
            quantity=entry.quantity,
            meal_slot=entry.meal_slot,
            date_consumed=entry.date_consumed,
            total_calories=entry.total_calories,
            total_protein_g=entry.total_protein_g,
            total_carbs_g=entry.total_carbs_g,
            total_fat_g=entry.total_fat_g,
        )


class TotalsResponse(BaseModel):
    day: date
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    calorie_goal: float
    calories_remaining: float
    progress: float

    @classmethod
    def from_totals(
        cls, totals: DailyTotals, goal: float, remaining: float, progress: float
    ) -> "TotalsResponse":
        return cls(
            day=totals.day,
            calories=totals.calories,
            protein_g=totals.protein_g,
            carbs_g=totals.carbs_g,
            fat_g=totals.fat_g,
            calorie_goal=goal,
            calories_remaining=remaining,
            progress=progress,
        )


class ProfileResponse(BaseModel):
    daily_calorie_goal: float
    daily_protein_goal: float
    daily_carb_goal: float
    daily_sugar_goal: float
    daily_fat_goal: float
    weight: float | None
    reminder_enabled: bool
    reminder_time: str
    reminder_message: str

    @classmethod
    def from_profile(cls, profile: GoalProfile) -> "ProfileResponse":
        return cls(
            daily_calorie_goal=profile.daily_calorie_goal,
            daily_protein_goal=profile.daily_protein_goal,
            daily_carb_goal=profile.daily_carb_goal,
            daily_sugar_goal=profile.daily_sugar_goal,
            daily_fat_goal=profile.daily_fat_goal,
            weight=profile.weight,
            reminder_enabled=profile.reminder.enabled,
            reminder_time=format_time(profile.reminder.time_of_day),
            reminder_message=profile.reminder.message,
        )


class ReminderResponse(BaseModel):
    saved: bool
    scheduled: bool
    message: str | None = None
