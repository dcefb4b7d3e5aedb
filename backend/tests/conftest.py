"""
Pytest configuration and shared fixtures.

Fixtures defined here are available to all tests.
"""

import os
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add backend to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment
os.environ["TESTING"] = "true"
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.pop("API_KEY", None)


# =============================================================================
# In-memory Supabase stand-in
# =============================================================================


class FakeResult:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Supports the subset of the PostgREST query builder the services use."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.orders = []
        self.row_limit = None

    def select(self, *args, **kwargs):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def ilike(self, column, pattern):
        target = pattern.replace("\\%", "%").replace("\\_", "_").replace("\\\\", "\\").lower()
        self.filters.append(lambda row: (row.get(column) or "").lower() == target)
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def execute(self):
        if (self.op, self.table) in self.db.fail_on:
            raise RuntimeError(f"{self.op} on {self.table} failed")

        self.db.calls.append((self.op, self.table))
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            now = datetime.now(timezone.utc).isoformat()
            inserted = []
            for values in payload:
                row = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **values}
                rows.append(row)
                inserted.append(dict(row))
            return FakeResult(inserted)

        matched = [row for row in rows if all(f(row) for f in self.filters)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResult([dict(row) for row in matched])

        if self.op == "delete":
            matched_ids = {id(row) for row in matched}
            self.db.tables[self.table] = [row for row in rows if id(row) not in matched_ids]
            return FakeResult([dict(row) for row in matched])

        for column, desc in reversed(self.orders):
            matched.sort(
                key=lambda row: (row.get(column) is None, row.get(column) or 0),
                reverse=desc,
            )
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        return FakeResult([dict(row) for row in matched])


class FakeSupabase:
    """In-memory tables keyed by name."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[tuple[str, str]] = set()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def add(self, table: str, **values) -> dict:
        row = {"id": str(uuid.uuid4()), **values}
        self.tables.setdefault(table, []).append(row)
        return row

    def writes(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] != "select"]


@pytest.fixture
def fake_db(monkeypatch):
    """Route every service's Supabase client to one in-memory database."""
    db = FakeSupabase()
    for module in (
        "app.services.supabase",
        "app.services.meal_plans",
        "app.services.ingredients",
        "app.services.shopping_lists",
    ):
        monkeypatch.setattr(f"{module}.get_supabase_client", lambda: db)
    return db


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app():
    """FastAPI test application."""
    from app.main import app
    return app


@pytest.fixture
def client(app):
    """Sync test client for API tests."""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def test_user_id():
    """Test user ID for database operations."""
    return "test-user-00000000-0000-0000-0000-000000000000"


@pytest.fixture
def other_user_id():
    return "other-user-11111111-1111-1111-1111-111111111111"


@pytest.fixture
def nonexistent_uuid():
    return "00000000-0000-0000-0000-000000000000"


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def seed(fake_db, test_user_id):
    """Helpers for building plans, recipes and ingredients in the fake db."""

    class Seeder:
        def ingredient(self, name, category="Pantry", units=None):
            return fake_db.add(
                "ingredients",
                name=name,
                category=category,
                units=units or [],
                alternative_names=[],
            )["id"]

        def recipe(self, name, servings, links=()):
            """links: (ingredient_id, quantity, unit, is_optional) tuples."""
            recipe_id = fake_db.add("recipes", name=name, servings=servings)["id"]
            for ingredient_id, quantity, unit, optional in links:
                fake_db.add(
                    "recipe_ingredients",
                    recipe_id=recipe_id,
                    ingredient_id=ingredient_id,
                    quantity=quantity,
                    unit=unit,
                    preparation=None,
                    is_optional=optional,
                )
            return recipe_id

        def plan(self, meals=(), user_id=test_user_id, name="Week 1"):
            """meals: (recipe_id, servings) tuples."""
            plan = fake_db.add(
                "meal_plans",
                user_id=user_id,
                name=name,
                start_date="2024-03-04",
                end_date="2024-03-10",
                created_at="2024-03-01T00:00:00+00:00",
                updated_at="2024-03-01T00:00:00+00:00",
            )
            for day, (recipe_id, servings) in enumerate(meals):
                fake_db.add(
                    "meal_plan_items",
                    meal_plan_id=plan["id"],
                    recipe_id=recipe_id,
                    date=f"2024-03-{4 + day:02d}",
                    meal_type="dinner",
                    servings=servings,
                )
            return plan["id"]

    return Seeder()


@pytest.fixture
def flour_and_wine_plan(seed):
    """Loaf (4 servings, 200 g flour) x8 and crepes (2 servings, 50 g flour, optional wine) x2."""
    flour = seed.ingredient("Flour", category="Pantry", units=["g"])
    wine = seed.ingredient("Wine", category="Beverages", units=["ml"])
    loaf = seed.recipe("Country Loaf", 4, [(flour, 200, "g", False)])
    crepes = seed.recipe("Crepes", 2, [(flour, 50, "g", False), (wine, 100, "ml", True)])
    plan_id = seed.plan([(loaf, 8), (crepes, 2)])
    return {"plan_id": plan_id, "flour": flour, "wine": wine}
