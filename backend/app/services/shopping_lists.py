"""
Shopping lists persistence service.

Provides CRUD operations for generated and manually edited shopping lists.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional

from app.errors import InvalidInputError, NotFoundError
from app.models.shopping import (
    AddItemRequest,
    ConsolidatedItem,
    CreatedShoppingList,
    ItemIngredient,
    MealPlanRef,
    ShoppingListItemRecord,
    ShoppingListRecord,
    ShoppingListWithItems,
    UpdateItemRequest,
)
from app.services.formatting import format_quantity
from app.services.ingredients import (
    DEFAULT_CATEGORY,
    find_or_create_ingredient,
    get_ingredient,
    get_ingredients,
)
from app.services.meal_plans import get_meal_plan, get_meal_plan_names
from app.services.supabase import get_supabase_client, batched, is_valid_id, TABLES

logger = logging.getLogger(__name__)

NON_NULLABLE_ITEM_FIELDS = ("quantity", "unit", "is_checked")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require_id(value: str, label: str) -> None:
    if not is_valid_id(value):
        raise InvalidInputError(f"Invalid {label} format")


# ============================================================================
# Writes used by generation
# ============================================================================


async def create_shopping_list(
    name: str,
    user_id: str,
    meal_plan_id: Optional[str] = None,
) -> dict:
    """Insert a shopping list row and return it."""
    client = get_supabase_client()
    now = _now()

    result = client.table(TABLES["shopping_lists"]).insert({
        "name": name,
        "user_id": user_id,
        "meal_plan_id": meal_plan_id,
        "created_at": now,
        "updated_at": now,
    }).execute()
    if not result.data:
        raise ValueError("Failed to create shopping list")

    row = result.data[0]
    logger.info(f"Created shopping list {row['id']} for user {user_id}")
    return row


async def create_shopping_list_items(list_id: str, items: list[ConsolidatedItem]) -> int:
    """Insert consolidated items, unchecked and without notes.

    Returns the number of rows written.
    """
    if not items:
        return 0

    client = get_supabase_client()
    now = _now()
    items_data = [
        {
            "shopping_list_id": list_id,
            "ingredient_id": item.ingredient_id,
            "quantity": item.quantity,
            "unit": item.unit,
            "is_checked": False,
            "notes": None,
            "sort_order": idx,
            "created_at": now,
            "updated_at": now,
        }
        for idx, item in enumerate(items)
    ]

    for batch in batched(items_data):
        client.table(TABLES["shopping_list_items"]).insert(batch).execute()

    logger.info(f"Inserted {len(items_data)} items into shopping list {list_id}")
    return len(items_data)


async def touch_shopping_list(list_id: str) -> None:
    client = get_supabase_client()
    client.table(TABLES["shopping_lists"]).update({"updated_at": _now()}).eq("id", list_id).execute()


# ============================================================================
# Reads
# ============================================================================


async def _get_owned_list(list_id: str, user_id: str) -> dict:
    """Load a list row, raising NotFoundError unless the user owns it."""
    _require_id(list_id, "shopping list ID")

    client = get_supabase_client()
    result = (
        client.table(TABLES["shopping_lists"])
        .select("*")
        .eq("id", list_id)
        .eq("user_id", user_id)
        .limit(1)
        .execute()
    )
    rows = result.data or []
    if not rows:
        raise NotFoundError("Shopping list not found")
    return rows[0]


def _to_record(row: dict, meal_plan_names: dict[str, str], items: list[dict]) -> ShoppingListRecord:
    plan_id = row.get("meal_plan_id")
    meal_plan = None
    if plan_id and plan_id in meal_plan_names:
        meal_plan = MealPlanRef(id=plan_id, name=meal_plan_names[plan_id])

    return ShoppingListRecord(
        id=row["id"],
        user_id=row["user_id"],
        name=row.get("name", "Shopping List"),
        meal_plan=meal_plan,
        item_count=len(items),
        checked_count=sum(1 for item in items if item.get("is_checked")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def get_shopping_lists(user_id: str, limit: int = 50) -> list[ShoppingListRecord]:
    """Get the user's shopping lists, newest first, with item counts."""
    client = get_supabase_client()

    result = (
        client.table(TABLES["shopping_lists"])
        .select("*")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    rows = result.data or []
    if not rows:
        return []

    list_ids = [row["id"] for row in rows]
    items_by_list: dict[str, list[dict]] = defaultdict(list)
    for batch in batched(list_ids):
        items_result = (
            client.table(TABLES["shopping_list_items"])
            .select("id, shopping_list_id, is_checked")
            .in_("shopping_list_id", batch)
            .execute()
        )
        for item in items_result.data or []:
            items_by_list[item["shopping_list_id"]].append(item)

    plan_ids = list({row["meal_plan_id"] for row in rows if row.get("meal_plan_id")})
    plan_names = await get_meal_plan_names(plan_ids)

    return [_to_record(row, plan_names, items_by_list[row["id"]]) for row in rows]


def _sort_key(item: ShoppingListItemRecord) -> tuple:
    """Unchecked first, then category, then ingredient name."""
    return (
        item.is_checked,
        (item.ingredient.category or DEFAULT_CATEGORY).lower(),
        item.ingredient.name.lower(),
    )


async def get_shopping_list(list_id: str, user_id: str) -> ShoppingListWithItems:
    """Get a list with its items, each joined to its ingredient.

    Raises:
        InvalidInputError: If the id is malformed
        NotFoundError: If the list is missing or owned by someone else
    """
    row = await _get_owned_list(list_id, user_id)
    client = get_supabase_client()

    items_result = (
        client.table(TABLES["shopping_list_items"])
        .select("*")
        .eq("shopping_list_id", list_id)
        .order("sort_order")
        .execute()
    )
    item_rows = items_result.data or []

    ingredient_ids = list({r["ingredient_id"] for r in item_rows if r.get("ingredient_id")})
    ingredients = await get_ingredients(ingredient_ids)

    items = []
    for item_row in item_rows:
        ingredient_id = item_row.get("ingredient_id") or ""
        info = ingredients.get(ingredient_id)
        if info:
            ingredient = ItemIngredient(
                id=info.id, name=info.name, category=info.category, units=info.units,
            )
        else:
            ingredient = ItemIngredient(id=ingredient_id)

        quantity = float(item_row.get("quantity") or 0)
        unit = item_row.get("unit") or ""
        items.append(ShoppingListItemRecord(
            id=item_row["id"],
            shopping_list_id=item_row["shopping_list_id"],
            ingredient=ingredient,
            quantity=quantity,
            unit=unit,
            display_quantity=format_quantity(quantity, unit),
            is_checked=bool(item_row.get("is_checked", False)),
            notes=item_row.get("notes"),
            sort_order=item_row.get("sort_order") or 0,
            created_at=item_row.get("created_at"),
            updated_at=item_row.get("updated_at"),
        ))

    items.sort(key=_sort_key)

    by_category: dict[str, list[ShoppingListItemRecord]] = defaultdict(list)
    for item in items:
        by_category[item.ingredient.category or DEFAULT_CATEGORY].append(item)

    plan_names = {}
    if row.get("meal_plan_id"):
        plan_names = await get_meal_plan_names([row["meal_plan_id"]])

    return ShoppingListWithItems(
        shopping_list=_to_record(row, plan_names, item_rows),
        items=items,
        by_category=dict(by_category),
    )


# ============================================================================
# List mutations
# ============================================================================


async def create_manual_list(
    name: Optional[str],
    user_id: str,
    meal_plan_id: Optional[str] = None,
) -> CreatedShoppingList:
    """Start an empty shopping list.

    Raises:
        InvalidInputError: Missing name or malformed plan id
        NotFoundError: Plan given but missing or owned by someone else
    """
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Name is required")

    if meal_plan_id:
        _require_id(meal_plan_id, "meal plan ID")
        if not await get_meal_plan(meal_plan_id, user_id):
            raise NotFoundError("Meal plan not found")

    row = await create_shopping_list(name, user_id, meal_plan_id or None)
    return CreatedShoppingList(
        id=row["id"],
        name=name,
        meal_plan_id=row.get("meal_plan_id"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


async def rename_shopping_list(list_id: str, user_id: str, name: Optional[str]) -> dict:
    """Rename a list."""
    name = (name or "").strip()
    if not name:
        raise InvalidInputError("Name is required")

    await _get_owned_list(list_id, user_id)

    client = get_supabase_client()
    now = _now()
    client.table(TABLES["shopping_lists"]).update({
        "name": name,
        "updated_at": now,
    }).eq("id", list_id).execute()
    logger.info(f"Renamed shopping list {list_id}")

    return {"id": list_id, "name": name, "updated_at": now}


async def delete_shopping_list(list_id: str, user_id: str) -> bool:
    """Delete a list and all its items."""
    await _get_owned_list(list_id, user_id)

    client = get_supabase_client()
    client.table(TABLES["shopping_list_items"]).delete().eq("shopping_list_id", list_id).execute()
    client.table(TABLES["shopping_lists"]).delete().eq("id", list_id).execute()
    logger.info(f"Deleted shopping list {list_id}")

    return True


# ============================================================================
# Item mutations
# ============================================================================


async def add_item(list_id: str, user_id: str, request: AddItemRequest) -> ShoppingListItemRecord:
    """Add a manual item to a list.

    The item is tied to `request.ingredient_id` when given, otherwise to the
    catalog entry matching its name (created if none exists).
    """
    details = []
    if not request.name or not request.name.strip():
        details.append({"path": ["name"], "message": "Item name is required"})
    if request.quantity is None:
        details.append({"path": ["quantity"], "message": "Quantity is required"})
    if not request.unit:
        details.append({"path": ["unit"], "message": "Unit is required"})
    if details:
        raise InvalidInputError("Missing required fields", details=details)

    await _get_owned_list(list_id, user_id)

    if request.ingredient_id and is_valid_id(request.ingredient_id):
        ingredient = await get_ingredient(request.ingredient_id)
        if ingredient is None:
            raise NotFoundError("Ingredient not found")
    else:
        ingredient = await find_or_create_ingredient(request.name, request.unit)

    client = get_supabase_client()
    now = _now()
    result = client.table(TABLES["shopping_list_items"]).insert({
        "shopping_list_id": list_id,
        "ingredient_id": ingredient.id,
        "quantity": float(request.quantity),
        "unit": request.unit,
        "is_checked": False,
        "notes": request.notes or None,
        "created_at": now,
        "updated_at": now,
    }).execute()
    if not result.data:
        raise ValueError("Failed to add item to shopping list")

    await touch_shopping_list(list_id)

    row = result.data[0]
    logger.info(f"Added item {row['id']} ({ingredient.name}) to shopping list {list_id}")
    return ShoppingListItemRecord(
        id=row["id"],
        shopping_list_id=list_id,
        ingredient=ItemIngredient(
            id=ingredient.id,
            name=ingredient.name,
            category=ingredient.category,
            units=ingredient.units,
        ),
        quantity=float(request.quantity),
        unit=request.unit,
        display_quantity=format_quantity(float(request.quantity), request.unit),
        is_checked=False,
        notes=request.notes or None,
        sort_order=row.get("sort_order") or 0,
        created_at=row.get("created_at") or now,
        updated_at=row.get("updated_at") or now,
    )


async def _get_list_item(list_id: str, item_id: str) -> dict:
    _require_id(item_id, "item ID")

    client = get_supabase_client()
    result = (
        client.table(TABLES["shopping_list_items"])
        .select("id")
        .eq("id", item_id)
        .eq("shopping_list_id", list_id)
        .limit(1)
        .execute()
    )
    rows = result.data or []
    if not rows:
        raise NotFoundError("Item not found in shopping list")
    return rows[0]


async def update_item(
    list_id: str,
    item_id: str,
    user_id: str,
    request: UpdateItemRequest,
) -> dict:
    """Apply a partial update to a list item.

    Only `notes` may be cleared with null. Returns the fields that were written.
    """
    update_data = request.model_dump(exclude_unset=True)
    if not update_data:
        raise InvalidInputError("No fields to update")

    details = [
        {"path": [field], "message": f"{field} cannot be null"}
        for field in NON_NULLABLE_ITEM_FIELDS
        if field in update_data and update_data[field] is None
    ]
    if details:
        raise InvalidInputError("Invalid item update", details=details)

    await _get_owned_list(list_id, user_id)
    await _get_list_item(list_id, item_id)

    update_data["updated_at"] = _now()

    client = get_supabase_client()
    client.table(TABLES["shopping_list_items"]).update(update_data).eq("id", item_id).execute()
    await touch_shopping_list(list_id)
    logger.info(f"Updated item {item_id} in shopping list {list_id}")

    return {"id": item_id, **update_data}


async def delete_item(list_id: str, item_id: str, user_id: str) -> bool:
    """Remove an item from a list."""
    await _get_owned_list(list_id, user_id)
    await _get_list_item(list_id, item_id)

    client = get_supabase_client()
    client.table(TABLES["shopping_list_items"]).delete().eq("id", item_id).eq(
        "shopping_list_id", list_id
    ).execute()
    await touch_shopping_list(list_id)
    logger.info(f"Deleted item {item_id} from shopping list {list_id}")

    return True
