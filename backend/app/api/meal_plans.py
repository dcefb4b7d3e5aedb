"""
Meal plan API endpoints.

Plan-scoped shopping list generation.
"""

import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user_id
from app.errors import ShoppingListError, UnexpectedError
from app.models.shopping import GeneratedShoppingList, PlanShoppingListRequest
from app.services.shopping import generate_shopping_list

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/meal-plans", tags=["meal-plans"])


@router.post("/{meal_plan_id}/shopping-list", response_model=GeneratedShoppingList)
async def generate_plan_shopping_list(
    meal_plan_id: str,
    request: PlanShoppingListRequest,
    user_id: str = Depends(get_current_user_id),
) -> GeneratedShoppingList:
    """Generate a shopping list from this meal plan."""
    try:
        return await generate_shopping_list(meal_plan_id, user_id, request.name)
    except ShoppingListError:
        raise
    except Exception as e:
        logger.exception("Failed to generate shopping list")
        raise UnexpectedError("Failed to generate shopping list", str(e))
