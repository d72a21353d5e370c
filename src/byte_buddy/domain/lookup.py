"""Models for external nutrition lookup results."""

from pydantic import BaseModel, Field

from byte_buddy.domain.foods import FoodDraft


class LookupFood(BaseModel):
    """Single food record returned by Nutritionix."""

    food_name: str
    serving_qty: float
    serving_unit: str
    nf_calories: float = Field(ge=0.0)
    nf_protein: float = Field(ge=0.0)
    nf_total_carbohydrate: float = Field(ge=0.0)
    nf_total_fat: float = Field(ge=0.0)

    def to_draft(self) -> FoodDraft:
        """Convert into a catalog draft; id and timestamp come on commit."""
        return FoodDraft(
            name=self.food_name,
            calories=self.nf_calories,
            protein_g=self.nf_protein,
            carbs_g=self.nf_total_carbohydrate,
            fat_g=self.nf_total_fat,
            serving_size=f"{self.serving_qty:g} {self.serving_unit}",
        )


class LookupResponse(BaseModel):
    """Structured response of the natural-nutrients endpoint."""

    foods: list[LookupFood]
