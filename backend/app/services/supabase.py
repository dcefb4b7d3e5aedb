"""Supabase client service."""

import logging
import uuid
from functools import lru_cache
from typing import Iterator

from supabase import create_client, Client

from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


@lru_cache
def get_supabase_client() -> Client:
    """Get Supabase client with service role key (admin access)."""
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )


# Table names
TABLES = {
    "meal_plans": "meal_plans",
    "meal_plan_items": "meal_plan_items",
    "recipes": "recipes",
    "recipe_ingredients": "recipe_ingredients",
    "ingredients": "ingredients",
    "shopping_lists": "shopping_lists",
    "shopping_list_items": "shopping_list_items",
}


def batched(values: list, size: int | None = None) -> Iterator[list]:
    """Yield successive chunks of `values` for `in_` filters and bulk inserts."""
    size = size or settings.batch_size
    for i in range(0, len(values), size):
        yield values[i:i + size]


def is_valid_id(value: str | None) -> bool:
    """Check that a row id is a well-formed UUID."""
    if not value:
        return False
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
