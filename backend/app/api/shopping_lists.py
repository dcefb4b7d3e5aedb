"""
Shopping list API endpoints.

Provides shopping list generation from meal plans and list management.
"""

import logging

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_user_id
from app.errors import ShoppingListError, UnexpectedError
from app.models.shopping import (
    AddItemRequest,
    CreateShoppingListRequest,
    CreatedShoppingList,
    GenerateShoppingListRequest,
    GeneratedShoppingList,
    RenameShoppingListRequest,
    ShoppingListItemRecord,
    ShoppingListRecord,
    ShoppingListWithItems,
    UpdateItemRequest,
)
from app.services.shopping import generate_shopping_list
from app.services.shopping_lists import (
    add_item,
    create_manual_list,
    delete_item,
    delete_shopping_list,
    get_shopping_list,
    get_shopping_lists,
    rename_shopping_list,
    update_item,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/shopping-lists", tags=["shopping-lists"])


def _unexpected(message: str, e: Exception) -> UnexpectedError:
    logger.exception(message)
    return UnexpectedError(message, str(e))


@router.post("/generate", response_model=GeneratedShoppingList)
async def generate_list(
    request: GenerateShoppingListRequest,
    user_id: str = Depends(get_current_user_id),
) -> GeneratedShoppingList:
    """Generate a shopping list from a meal plan.

    Scales each recipe to the servings planned for it and merges
    identical ingredient + unit pairs. Returns the item count only;
    fetch the list to see its items.
    """
    try:
        return await generate_shopping_list(request.meal_plan_id, user_id, request.name)
    except ShoppingListError:
        raise
    except Exception as e:
        raise _unexpected("Failed to generate shopping list", e)


@router.post("", response_model=CreatedShoppingList)
async def create_list(
    request: CreateShoppingListRequest,
    user_id: str = Depends(get_current_user_id),
) -> CreatedShoppingList:
    """Create an empty shopping list, optionally linked to a meal plan."""
    try:
        return await create_manual_list(request.name, user_id, request.meal_plan_id)
    except ShoppingListError:
        raise
    except Exception as e:
        raise _unexpected("Failed to create shopping list", e)


@router.get("", response_model=list[ShoppingListRecord])
async def get_lists(
    user_id: str = Depends(get_current_user_id),
    limit: int = Query(50, ge=1, le=200, description="Maximum lists to return"),
) -> list[ShoppingListRecord]:
    """Get the user's shopping lists, newest first."""
    try:
        return await get_shopping_lists(user_id, limit)
    except ShoppingListError:
        raise
    except Exception as e:
        raise _unexpected("Failed to fetch shopping lists", e)


@router.get("/{list_id}", response_model=ShoppingListWithItems)
async def get_list(
    list_id: str,
    user_id: str = Depends(get_current_user_id),
) -> ShoppingListWithItems:
    """Get a shopping list with all its items."""
    try:
        return await get_shopping_list(list_id, user_id)
    except ShoppingListError:
        raise
    except Exception as e:
        raise _unexpected("Failed to fetch shopping list", e)


@router.patch("/{list_id}", response_model=dict)
async def rename_list(
    list_id: str,
    request: RenameShoppingListRequest,
    user_id: str = Depends(get_current_user_id),
) -> dict:
    """Rename a shopping list."""
    try:
        result = await rename_shopping_list(list_id, user_id, request.name)
        return {**result, "message": "Shopping list updated successfully"}
    except ShoppingListError:
        raise
    except Exception as e:
        raise _unexpected("Failed to update shopping list", e)


@router.delete("/{list_id}", response_model=dict)
async def delete_list(
    list_id: str,
    user_id: str = Depends(get_current_user_id),
) -> dict:
    """Delete a shopping list and its items."""
    try:
        await delete_shopping_list(list_id, user_id)
        return {"message": "Shopping list deleted successfully"}
    except ShoppingListError:
        raise
    except Exception as e:
        raise _unexpected("Failed to delete shopping list", e)


# ============================================================================
# Items
# ============================================================================


@router.post("/{list_id}/items", response_model=ShoppingListItemRecord)
async def add_list_item(
    list_id: str,
    request: AddItemRequest,
    user_id: str = Depends(get_current_user_id),
) -> ShoppingListItemRecord:
    """Add an item to a shopping list."""
    try:
        return await add_item(list_id, user_id, request)
    except ShoppingListError:
        raise
    except Exception as e:
        raise _unexpected("Failed to add item to shopping list", e)


@router.patch("/{list_id}/items/{item_id}", response_model=dict)
async def update_list_item(
    list_id: str,
    item_id: str,
    request: UpdateItemRequest,
    user_id: str = Depends(get_current_user_id),
) -> dict:
    """Update an item's quantity, unit, notes or checked state."""
    try:
        result = await update_item(list_id, item_id, user_id, request)
        return {**result, "message": "Item updated successfully"}
    except ShoppingListError:
        raise
    except Exception as e:
        raise _unexpected("Failed to update shopping list item", e)


@router.delete("/{list_id}/items/{item_id}", response_model=dict)
async def delete_list_item(
    list_id: str,
    item_id: str,
    user_id: str = Depends(get_current_user_id),
) -> dict:
    """Remove an item from a shopping list."""
    try:
        await delete_item(list_id, item_id, user_id)
        return {"message": "Item removed successfully"}
    except ShoppingListError:
        raise
    except Exception as e:
        raise _unexpected("Failed to remove shopping list item", e)
