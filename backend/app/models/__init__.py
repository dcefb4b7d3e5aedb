"""Pydantic models for the meal planner API."""

from .planning import (
    IngredientInfo,
    MealPlan,
    MealPlanItem,
    MealType,
    RecipeIngredientLink,
)
from .shopping import (
    ConsolidatedItem,
    GenerateShoppingListRequest,
    GeneratedShoppingList,
    ShoppingListItemRecord,
    ShoppingListRecord,
    ShoppingListWithItems,
)

__all__ = [
    # Planning
    "IngredientInfo",
    "MealPlan",
    "MealPlanItem",
    "MealType",
    "RecipeIngredientLink",
    # Shopping
    "ConsolidatedItem",
    "GenerateShoppingListRequest",
    "GeneratedShoppingList",
    "ShoppingListItemRecord",
    "ShoppingListRecord",
    "ShoppingListWithItems",
]
