"""Shopping list Pydantic models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialized with camelCase keys, accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Generation
# ============================================================================


class ConsolidatedItem(BaseModel):
    """One (ingredient, unit) line after scaling and aggregation."""

    ingredient_id: str
    name: str
    category: Optional[str] = None
    quantity: float
    unit: str


class GenerateShoppingListRequest(CamelModel):
    """Request to build a shopping list from a meal plan."""

    meal_plan_id: Optional[str] = None
    name: Optional[str] = None


class PlanShoppingListRequest(CamelModel):
    """Request body for the plan-scoped generation route."""

    name: Optional[str] = None


class GeneratedShoppingList(CamelModel):
    """Summary returned after generation; items are fetched separately."""

    id: str
    name: str
    meal_plan_id: str
    item_count: int
    created_at: datetime
    message: str = "Shopping list created successfully"


# ============================================================================
# Persistent Shopping List Models
# ============================================================================


class MealPlanRef(BaseModel):
    id: str
    name: Optional[str] = None


class ShoppingListRecord(BaseModel):
    """A saved shopping list with item counts."""

    id: str
    user_id: str
    name: str
    meal_plan: Optional[MealPlanRef] = None
    item_count: int = 0
    checked_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ItemIngredient(BaseModel):
    id: str
    name: str = "Unknown Ingredient"
    category: Optional[str] = None
    units: list[str] = Field(default_factory=list)


class ShoppingListItemRecord(BaseModel):
    """A single item in a saved shopping list."""

    id: str
    shopping_list_id: str
    ingredient: ItemIngredient
    quantity: float
    unit: str
    display_quantity: str = ""
    is_checked: bool = False
    notes: Optional[str] = None
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ShoppingListWithItems(BaseModel):
    """A shopping list with its items, sorted and grouped for display."""

    model_config = ConfigDict(populate_by_name=True)

    shopping_list: ShoppingListRecord = Field(alias="list")
    items: list[ShoppingListItemRecord]
    by_category: dict[str, list[ShoppingListItemRecord]] = Field(default_factory=dict)


class CreateShoppingListRequest(CamelModel):
    """Start an empty list, optionally tied to one of the user's meal plans."""

    name: Optional[str] = None
    meal_plan_id: Optional[str] = None


class CreatedShoppingList(CamelModel):
    id: str
    name: str
    meal_plan_id: Optional[str] = None
    items: list[ShoppingListItemRecord] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class RenameShoppingListRequest(BaseModel):
    name: Optional[str] = None


class AddItemRequest(BaseModel):
    """Manually add an item to a list."""

    name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    notes: Optional[str] = None
    ingredient_id: Optional[str] = None


class UpdateItemRequest(CamelModel):
    """Partial update of a list item. Unset fields are left alone."""

    quantity: Optional[float] = None
    unit: Optional[str] = None
    notes: Optional[str] = None
    is_checked: Optional[bool] = None
