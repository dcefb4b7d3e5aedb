"""Ingredient catalog service."""

import logging
from datetime import datetime, timezone
from typing import Optional

from app.models.planning import IngredientInfo
from app.services.supabase import get_supabase_client, batched, TABLES

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Other"


def _to_ingredient(row: dict) -> IngredientInfo:
    return IngredientInfo(
        id=row["id"],
        name=row.get("name") or "Unknown Ingredient",
        category=row.get("category"),
        units=row.get("units") or [],
        alternative_names=row.get("alternative_names") or [],
    )


async def get_ingredients(ingredient_ids: list[str]) -> dict[str, IngredientInfo]:
    """Map ingredient id -> catalog entry. Unknown ids are absent."""
    if not ingredient_ids:
        return {}

    client = get_supabase_client()
    ingredients: dict[str, IngredientInfo] = {}
    for batch in batched(ingredient_ids):
        result = (
            client.table(TABLES["ingredients"])
            .select("id, name, category, units, alternative_names")
            .in_("id", batch)
            .execute()
        )
        for row in result.data or []:
            ingredients[row["id"]] = _to_ingredient(row)
    return ingredients


async def get_ingredient(ingredient_id: str) -> Optional[IngredientInfo]:
    found = await get_ingredients([ingredient_id])
    return found.get(ingredient_id)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def find_ingredient_by_name(name: str) -> Optional[IngredientInfo]:
    """Case-insensitive exact name match."""
    client = get_supabase_client()
    result = (
        client.table(TABLES["ingredients"])
        .select("id, name, category, units, alternative_names")
        .ilike("name", _escape_like(name.strip()))
        .limit(1)
        .execute()
    )
    rows = result.data or []
    return _to_ingredient(rows[0]) if rows else None


async def create_ingredient(name: str, unit: str) -> IngredientInfo:
    """Add a new catalog entry for a manually entered item."""
    client = get_supabase_client()
    now = datetime.now(timezone.utc).isoformat()
    result = client.table(TABLES["ingredients"]).insert({
        "name": name.strip(),
        "category": DEFAULT_CATEGORY,
        "units": [unit],
        "alternative_names": [],
        "created_at": now,
        "updated_at": now,
    }).execute()
    if not result.data:
        raise ValueError("Failed to create ingredient")

    ingredient = _to_ingredient(result.data[0])
    logger.info(f"Created ingredient {ingredient.id} ({ingredient.name})")
    return ingredient


async def find_or_create_ingredient(name: str, unit: str) -> IngredientInfo:
    """Resolve a free-text item name to a catalog entry, creating it if needed."""
    existing = await find_ingredient_by_name(name)
    if existing:
        return existing
    return await create_ingredient(name, unit)
