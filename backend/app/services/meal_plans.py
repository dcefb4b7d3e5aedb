"""
Meal plan and recipe read service.

Loads the source data shopping list generation works from:
- Meal plans (ownership checked against the caller)
- Scheduled meal items
- Recipe base servings and ingredient links
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from app.models.planning import MealPlan, MealPlanItem, RecipeIngredientLink
from app.services.supabase import get_supabase_client, batched, TABLES

logger = logging.getLogger(__name__)


async def get_meal_plan(plan_id: str, user_id: str) -> Optional[MealPlan]:
    """Get a meal plan owned by the user, or None."""
    client = get_supabase_client()
    result = (
        client.table(TABLES["meal_plans"])
        .select("*")
        .eq("id", plan_id)
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )
    rows = result.data or []
    return MealPlan.model_validate(rows[0]) if rows else None


async def get_meal_plan_names(plan_ids: list[str]) -> dict[str, str]:
    """Map meal plan id -> name for the given ids."""
    if not plan_ids:
        return {}

    client = get_supabase_client()
    names: dict[str, str] = {}
    for batch in batched(plan_ids):
        result = client.table(TABLES["meal_plans"]).select("id, name").in_("id", batch).execute()
        for row in result.data or []:
            names[row["id"]] = row.get("name")
    return names


async def get_meal_items(plan_id: str) -> list[MealPlanItem]:
    """Get all scheduled meals for a plan, in calendar order."""
    client = get_supabase_client()
    result = (
        client.table(TABLES["meal_plan_items"])
        .select("id, meal_plan_id, recipe_id, date, meal_type, servings")
        .eq("meal_plan_id", plan_id)
        .order("date")
        .execute()
    )
    return [MealPlanItem.model_validate(row) for row in result.data or []]


async def get_recipe_base_servings(recipe_ids: list[str]) -> dict[str, Optional[float]]:
    """Map recipe id -> stored serving count.

    Recipes that no longer exist are absent from the result.
    """
    if not recipe_ids:
        return {}

    client = get_supabase_client()
    servings: dict[str, Optional[float]] = {}
    for batch in batched(recipe_ids):
        result = client.table(TABLES["recipes"]).select("id, servings").in_("id", batch).execute()
        for row in result.data or []:
            value = row.get("servings")
            servings[row["id"]] = float(value) if value is not None else None
    return servings


async def get_ingredient_links(recipe_ids: list[str]) -> list[RecipeIngredientLink]:
    """Get every ingredient link for the given recipes."""
    if not recipe_ids:
        return []

    client = get_supabase_client()
    links: list[RecipeIngredientLink] = []
    for batch in batched(recipe_ids):
        result = (
            client.table(TABLES["recipe_ingredients"])
            .select("recipe_id, ingredient_id, quantity, unit, preparation, is_optional")
            .in_("recipe_id", batch)
            .execute()
        )
        for row in result.data or []:
            quantity = row.get("quantity")
            if quantity is None:
                logger.warning(
                    f"Recipe {row['recipe_id']} has no quantity for ingredient "
                    f"{row['ingredient_id']}; counting it as 0"
                )
                quantity = 0
            links.append(RecipeIngredientLink(
                recipe_id=row["recipe_id"],
                ingredient_id=row["ingredient_id"],
                quantity=float(quantity),
                unit=row.get("unit") or "",
                preparation=row.get("preparation"),
                is_optional=bool(row.get("is_optional", False)),
            ))
    return links


async def touch_meal_plan(plan_id: str) -> None:
    """Bump a plan's updated_at."""
    client = get_supabase_client()
    client.table(TABLES["meal_plans"]).update({
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }).eq("id", plan_id).execute()
    logger.debug(f"Touched meal plan {plan_id}")
