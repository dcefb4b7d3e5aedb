"""
Shopping list generation service.

Turns a meal plan's scheduled meals into a consolidated shopping list:
servings are totalled per recipe, each recipe's ingredient links are scaled
once against that total, and identical (ingredient, unit) pairs are summed
across the whole plan.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional

from app.errors import (
    EmptyPlanError,
    InvalidInputError,
    NoIngredientsError,
    NotFoundError,
    PersistenceError,
)
from app.models.planning import IngredientInfo, MealPlanItem, RecipeIngredientLink
from app.models.shopping import ConsolidatedItem, GeneratedShoppingList
from app.services.ingredients import DEFAULT_CATEGORY, get_ingredients
from app.services.meal_plans import (
    get_ingredient_links,
    get_meal_items,
    get_meal_plan,
    get_recipe_base_servings,
    touch_meal_plan,
)
from app.services.shopping_lists import create_shopping_list, create_shopping_list_items
from app.services.supabase import is_valid_id

logger = logging.getLogger(__name__)


# ============================================================================
# Consolidation
# ============================================================================


def normalize_base_servings(servings: Optional[float]) -> float:
    """Stored serving counts of zero, negative or unset scale as 1."""
    if servings is None or servings <= 0:
        return 1.0
    return float(servings)


def build_target_servings(
    meal_items: list[MealPlanItem],
    base_servings: dict[str, Optional[float]],
) -> dict[str, float]:
    """Total requested servings per recipe across the whole plan.

    A meal without servings counts as one batch of the recipe's base servings.
    Meals whose recipe no longer exists are dropped.
    """
    targets: dict[str, float] = defaultdict(float)
    dropped = 0

    for item in meal_items:
        if item.recipe_id not in base_servings:
            dropped += 1
            continue

        if item.servings is None:
            targets[item.recipe_id] += normalize_base_servings(base_servings[item.recipe_id])
        else:
            targets[item.recipe_id] += item.servings

    if dropped:
        logger.warning(f"Skipped {dropped} meal(s) whose recipe could not be found")

    return dict(targets)


def consolidate_ingredients(
    meal_items: list[MealPlanItem],
    base_servings: dict[str, Optional[float]],
    links: list[RecipeIngredientLink],
    ingredients: dict[str, IngredientInfo],
) -> list[ConsolidatedItem]:
    """Scale and merge ingredient links into one line per (ingredient, unit).

    Quantities are exact sums of `link.quantity * target / base`; nothing is
    rounded. Optional links never contribute.
    """
    targets = build_target_servings(meal_items, base_servings)

    consolidated: dict[tuple[str, str], ConsolidatedItem] = {}
    missing_ingredients: set[str] = set()

    for link in links:
        if link.is_optional:
            continue

        target = targets.get(link.recipe_id)
        if not target:
            continue

        ingredient = ingredients.get(link.ingredient_id)
        if ingredient is None:
            missing_ingredients.add(link.ingredient_id)
            continue

        scaling_factor = target / normalize_base_servings(base_servings[link.recipe_id])
        scaled_quantity = link.quantity * scaling_factor

        key = (link.ingredient_id, link.unit)
        if key in consolidated:
            consolidated[key].quantity += scaled_quantity
        else:
            consolidated[key] = ConsolidatedItem(
                ingredient_id=link.ingredient_id,
                name=ingredient.name,
                category=ingredient.category,
                quantity=scaled_quantity,
                unit=link.unit,
            )

    if missing_ingredients:
        logger.warning(f"Skipped links to {len(missing_ingredients)} unknown ingredient(s)")

    return sorted(
        consolidated.values(),
        key=lambda item: ((item.category or DEFAULT_CATEGORY).lower(), item.name.lower(), item.unit),
    )


# ============================================================================
# Main Generation
# ============================================================================


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


async def generate_shopping_list(
    meal_plan_id: Optional[str],
    user_id: str,
    name: Optional[str],
) -> GeneratedShoppingList:
    """Generate and save a shopping list for a meal plan.

    Process:
    1. Validate the name and plan id, check plan ownership
    2. Load meal items and total servings per recipe
    3. Load ingredient links, base servings and ingredient catalog entries
    4. Scale and consolidate by (ingredient, unit)
    5. Persist the list and its items, touch the plan

    Nothing is written until step 5.

    Raises:
        InvalidInputError: Missing name or malformed plan id
        NotFoundError: Plan missing or owned by someone else
        EmptyPlanError: Plan has no meals
        NoIngredientsError: No non-optional ingredient resolves
        PersistenceError: Saving the computed list failed
    """
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Shopping list name is required")
    if not is_valid_id(meal_plan_id):
        raise InvalidInputError("Invalid meal plan ID format")

    plan = await get_meal_plan(meal_plan_id, user_id)
    if not plan:
        raise NotFoundError("Meal plan not found")

    meal_items = await get_meal_items(meal_plan_id)
    if not meal_items:
        raise EmptyPlanError("Meal plan has no meals")

    recipe_ids = _unique([item.recipe_id for item in meal_items])
    links = await get_ingredient_links(recipe_ids)
    if not links:
        raise NoIngredientsError("No ingredients found for recipes in this meal plan")

    base_servings = await get_recipe_base_servings(recipe_ids)
    ingredient_ids = _unique([link.ingredient_id for link in links if not link.is_optional])
    ingredients = await get_ingredients(ingredient_ids)

    logger.info(
        f"Generating shopping list for plan {meal_plan_id}: "
        f"{len(meal_items)} meals, {len(recipe_ids)} recipes, {len(links)} links"
    )

    items = consolidate_ingredients(meal_items, base_servings, links, ingredients)
    if not items:
        raise NoIngredientsError("No ingredients found for recipes in this meal plan")

    try:
        list_row = await create_shopping_list(name, user_id, meal_plan_id)
        list_id = list_row["id"]
        await create_shopping_list_items(list_id, items)
        await touch_meal_plan(meal_plan_id)
    except Exception as e:
        logger.error(f"Failed to save shopping list for plan {meal_plan_id}: {e}")
        raise PersistenceError("Failed to generate shopping list", str(e)) from e

    created_at = list_row.get("created_at") or datetime.now(timezone.utc)

    return GeneratedShoppingList(
        id=list_id,
        name=name,
        meal_plan_id=meal_plan_id,
        item_count=len(items),
        created_at=created_at,
    )
