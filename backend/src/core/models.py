"""Core Data Models - Pydantic models for type safety.

All models are immutable value objects with no behavior beyond validation.
"""

from datetime import datetime
from datetime import date as DateType
from pydantic import BaseModel, ConfigDict, Field


class Goal(BaseModel):
    """The user's daily calorie and macro targets."""

    model_config = ConfigDict(frozen=True)

    calories: int = Field(ge=0, strict=True, description="Daily calorie target")
    protein: int = Field(ge=0, strict=True, description="Daily protein target in grams")
    carbs: int = Field(ge=0, strict=True, description="Daily carbohydrate target in grams")
    fat: int = Field(ge=0, strict=True, description="Daily fat target in grams")


DEFAULT_GOAL = Goal(calories=2200, protein=140, carbs=220, fat=70)


class Meal(BaseModel):
    """A single logged meal."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1, description="Display name of the meal")
    eaten_at: datetime = Field(description="When the meal was eaten")
    calories: int = Field(ge=0, strict=True, description="Total calories")
    protein: int = Field(ge=0, strict=True, description="Protein in grams")
    carbs: int = Field(ge=0, strict=True, description="Carbohydrates in grams")
    fat: int = Field(ge=0, strict=True, description="Fat in grams")


class MacroTotals(BaseModel):
    """Summed calories and macros across a set of meals."""

    model_config = ConfigDict(frozen=True)

    calories: int = Field(default=0, ge=0)
    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fat: int = Field(default=0, ge=0)

    def __add__(self, other: "MacroTotals") -> "MacroTotals":
        if not isinstance(other, MacroTotals):
            return NotImplemented
        return MacroTotals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )


class MacroRemaining(BaseModel):
    """Goal minus total for each field. Negative if over goal."""

    calories: int
    protein: int
    carbs: int
    fat: int


class MacroProgress(BaseModel):
    """Progress of one nutrient against its goal, as shown in a ring or bar."""

    value: int = Field(ge=0)
    goal: int = Field(ge=0)
    ratio: float = Field(ge=0, le=1, description="Clamped fraction of the goal reached")
    percent: int = Field(ge=0, le=100, description="Ratio as a whole percentage")
    percentage_text: str = Field(description="Unclamped percentage label, '0%' without a goal")


class DailySummary(BaseModel):
    """Everything the Today screen shows for one calendar day."""

    day: DateType
    meals: list[Meal] = Field(default_factory=list)
    goal: Goal
    totals: MacroTotals
    remaining: MacroRemaining
    calories: MacroProgress
    protein: MacroProgress
    carbs: MacroProgress
    fat: MacroProgress


class StoreSnapshot(BaseModel):
    """Goal and meal log handed to or from an external persistence layer."""

    goal: Goal
    meals: list[Meal] = Field(default_factory=list)
