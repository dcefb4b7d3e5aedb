#!/usr/bin/env python3
"""
Seed a demo meal plan for a user.

Creates two recipes sharing flour (one with an optional splash of wine),
schedules them in a new plan, and prints the plan id to generate a
shopping list from.

Usage:
    python backend/scripts/seed_demo_plan.py <user_id>
"""

import os
import sys
from datetime import date, timedelta
from pathlib import Path

from dotenv import load_dotenv
from supabase import create_client

load_dotenv()
load_dotenv(Path(__file__).parent.parent.parent / ".env")

SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
    print("Error: Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY")
    sys.exit(1)

client = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)

INGREDIENTS = [
    {"name": "Flour", "category": "Pantry", "units": ["g", "kg", "cup"]},
    {"name": "Wine", "category": "Beverages", "units": ["ml", "l"]},
]

# (name, base servings, [(ingredient, quantity, unit, optional)])
RECIPES = [
    ("Country Loaf", 4, [("Flour", 200, "g", False)]),
    ("Crepes", 2, [("Flour", 50, "g", False), ("Wine", 100, "ml", True)]),
]

# (recipe, day offset, meal type, servings)
MEALS = [
    ("Country Loaf", 0, "breakfast", 8),
    ("Crepes", 1, "dinner", 2),
]


def get_or_create_ingredient(values: dict) -> str:
    result = client.table("ingredients").select("id").ilike("name", values["name"]).limit(1).execute()
    if result.data:
        return result.data[0]["id"]
    result = client.table("ingredients").insert(values).execute()
    return result.data[0]["id"]


def main():
    if len(sys.argv) < 2:
        print("Usage: python backend/scripts/seed_demo_plan.py <user_id>")
        sys.exit(1)
    user_id = sys.argv[1]

    ingredient_ids = {values["name"]: get_or_create_ingredient(values) for values in INGREDIENTS}
    print(f"  ✓ Ingredients: {', '.join(ingredient_ids)}")

    recipe_ids = {}
    for name, servings, links in RECIPES:
        result = client.table("recipes").insert({"name": name, "servings": servings}).execute()
        recipe_id = result.data[0]["id"]
        recipe_ids[name] = recipe_id
        client.table("recipe_ingredients").insert([
            {
                "recipe_id": recipe_id,
                "ingredient_id": ingredient_ids[ingredient],
                "quantity": quantity,
                "unit": unit,
                "is_optional": optional,
            }
            for ingredient, quantity, unit, optional in links
        ]).execute()
        print(f"  ✓ Recipe: {name} ({servings} servings, {len(links)} ingredients)")

    start = date.today()
    plan = client.table("meal_plans").insert({
        "user_id": user_id,
        "name": "Demo week",
        "start_date": str(start),
        "end_date": str(start + timedelta(days=6)),
    }).execute().data[0]

    client.table("meal_plan_items").insert([
        {
            "meal_plan_id": plan["id"],
            "recipe_id": recipe_ids[recipe],
            "date": str(start + timedelta(days=offset)),
            "meal_type": meal_type,
            "servings": servings,
        }
        for recipe, offset, meal_type, servings in MEALS
    ]).execute()

    print(f"\nDone! Meal plan {plan['id']} with {len(MEALS)} meals.")
    print("Expected shopping list: Flour 450 g (wine is optional and left out).")


if __name__ == "__main__":
    main()
