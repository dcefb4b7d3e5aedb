"""Meal plan, recipe and ingredient Pydantic models."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MealType(str, Enum):
    """Meal slot a scheduled recipe belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class MealPlan(BaseModel):
    """A user's planning horizon."""

    id: str
    user_id: str
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MealPlanItem(BaseModel):
    """One scheduled meal within a plan."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    meal_plan_id: Optional[str] = None
    recipe_id: str
    meal_date: Optional[date] = Field(default=None, alias="date")
    meal_type: Optional[MealType] = None
    servings: Optional[float] = None  # None = recipe's base servings


class RecipeIngredientLink(BaseModel):
    """Recipe -> ingredient join row with the recipe-relative amount."""

    recipe_id: str
    ingredient_id: str
    quantity: float
    unit: str
    preparation: Optional[str] = None
    is_optional: bool = False


class IngredientInfo(BaseModel):
    """Ingredient catalog entry."""

    id: str
    name: str
    category: Optional[str] = None
    units: list[str] = Field(default_factory=list)
    alternative_names: list[str] = Field(default_factory=list)
