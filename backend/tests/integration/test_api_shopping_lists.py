"""
Integration tests for shopping list endpoints.

Exercises the routes end to end through the FastAPI test client against
the in-memory database.
"""

import pytest

from app import main as main_module


@pytest.fixture
def params(test_user_id):
    return {"user_id": test_user_id}


def generate(client, params, plan_id, name="Weekly shop"):
    return client.post(
        "/api/shopping-lists/generate",
        params=params,
        json={"mealPlanId": plan_id, "name": name},
    )


class TestGenerateEndpoint:
    """Tests for POST /api/shopping-lists/generate."""

    @pytest.mark.integration
    def test_generate_returns_camel_case_summary(self, client, params, flour_and_wine_plan):
        response = generate(client, params, flour_and_wine_plan["plan_id"])

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Weekly shop"
        assert data["mealPlanId"] == flour_and_wine_plan["plan_id"]
        assert data["itemCount"] == 1
        assert data["message"] == "Shopping list created successfully"
        assert "createdAt" in data
        assert "items" not in data

    @pytest.mark.integration
    def test_plan_scoped_route(self, client, params, flour_and_wine_plan, fake_db):
        plan_id = flour_and_wine_plan["plan_id"]

        response = client.post(
            f"/api/meal-plans/{plan_id}/shopping-list",
            params=params,
            json={"name": "From plan"},
        )

        assert response.status_code == 200
        assert response.json()["itemCount"] == 1
        assert fake_db.tables["shopping_lists"][0]["meal_plan_id"] == plan_id

    @pytest.mark.integration
    def test_missing_name(self, client, params, flour_and_wine_plan):
        response = generate(client, params, flour_and_wine_plan["plan_id"], name="")

        assert response.status_code == 400
        assert response.json() == {"error": "Shopping list name is required"}

    @pytest.mark.integration
    def test_missing_plan_id(self, client, params, fake_db):
        response = client.post("/api/shopping-lists/generate", params=params, json={"name": "List"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid meal plan ID format"}

    @pytest.mark.integration
    def test_unknown_plan(self, client, params, fake_db, nonexistent_uuid):
        response = generate(client, params, nonexistent_uuid)

        assert response.status_code == 404
        assert response.json() == {"error": "Meal plan not found"}

    @pytest.mark.integration
    def test_empty_plan(self, client, params, seed):
        response = generate(client, params, seed.plan([]))

        assert response.status_code == 400
        assert response.json() == {"error": "Meal plan has no meals"}

    @pytest.mark.integration
    def test_persistence_failure(self, client, params, flour_and_wine_plan, fake_db):
        fake_db.fail_on.add(("insert", "shopping_lists"))

        response = generate(client, params, flour_and_wine_plan["plan_id"])

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to generate shopping list"
        assert "message" in body

    @pytest.mark.integration
    def test_user_id_required(self, client, flour_and_wine_plan):
        response = client.post(
            "/api/shopping-lists/generate",
            json={"mealPlanId": flour_and_wine_plan["plan_id"], "name": "List"},
        )
        assert response.status_code == 422


class TestListEndpoints:
    """Tests for reading and editing saved lists."""

    @pytest.fixture
    def list_id(self, client, params, flour_and_wine_plan):
        return generate(client, params, flour_and_wine_plan["plan_id"]).json()["id"]

    @pytest.mark.integration
    def test_list_lists(self, client, params, list_id):
        response = client.get("/api/shopping-lists", params=params)

        assert response.status_code == 200
        data = response.json()
        assert [row["id"] for row in data] == [list_id]
        assert data[0]["item_count"] == 1
        assert data[0]["meal_plan"]["name"] == "Week 1"

    @pytest.mark.integration
    def test_get_list_with_items(self, client, params, list_id):
        response = client.get(f"/api/shopping-lists/{list_id}", params=params)

        assert response.status_code == 200
        data = response.json()
        assert data["list"]["id"] == list_id
        assert len(data["items"]) == 1
        item = data["items"][0]
        assert item["ingredient"]["name"] == "Flour"
        assert item["quantity"] == 450
        assert item["display_quantity"] == "450 g"
        assert list(data["by_category"]) == ["Pantry"]

    @pytest.mark.integration
    def test_get_other_users_list(self, client, list_id, other_user_id):
        response = client.get(f"/api/shopping-lists/{list_id}", params={"user_id": other_user_id})

        assert response.status_code == 404
        assert response.json() == {"error": "Shopping list not found"}

    @pytest.mark.integration
    def test_rename(self, client, params, list_id):
        response = client.patch(f"/api/shopping-lists/{list_id}", params=params, json={"name": "Renamed"})

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed"
        assert response.json()["message"] == "Shopping list updated successfully"

    @pytest.mark.integration
    def test_add_check_and_remove_item(self, client, params, list_id):
        added = client.post(
            f"/api/shopping-lists/{list_id}/items",
            params=params,
            json={"name": "Butter", "quantity": 250, "unit": "g"},
        )
        assert added.status_code == 200
        item_id = added.json()["id"]

        checked = client.patch(
            f"/api/shopping-lists/{list_id}/items/{item_id}",
            params=params,
            json={"is_checked": True},
        )
        assert checked.status_code == 200
        assert checked.json()["message"] == "Item updated successfully"

        listing = client.get(f"/api/shopping-lists/{list_id}", params=params).json()
        assert listing["list"]["checked_count"] == 1
        assert listing["items"][-1]["id"] == item_id

        removed = client.delete(f"/api/shopping-lists/{list_id}/items/{item_id}", params=params)
        assert removed.status_code == 200
        assert removed.json() == {"message": "Item removed successfully"}

    @pytest.mark.integration
    def test_add_item_missing_fields(self, client, params, list_id):
        response = client.post(f"/api/shopping-lists/{list_id}/items", params=params, json={"name": "Butter"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Missing required fields"
        assert len(body["details"]) == 2

    @pytest.mark.integration
    def test_delete_list(self, client, params, list_id):
        response = client.delete(f"/api/shopping-lists/{list_id}", params=params)
        assert response.status_code == 200

        response = client.get(f"/api/shopping-lists/{list_id}", params=params)
        assert response.status_code == 404


class TestApiKey:
    """Tests for the API key middleware."""

    @pytest.mark.integration
    def test_rejects_missing_key(self, client, params, fake_db, monkeypatch):
        monkeypatch.setattr(main_module.settings, "api_key", "secret")

        response = client.get("/api/shopping-lists", params=params)

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    @pytest.mark.integration
    def test_accepts_valid_key(self, client, params, fake_db, monkeypatch):
        monkeypatch.setattr(main_module.settings, "api_key", "secret")

        response = client.get("/api/shopping-lists", params=params, headers={"X-API-Key": "secret"})

        assert response.status_code == 200

    @pytest.mark.integration
    def test_health_is_public(self, client, monkeypatch):
        monkeypatch.setattr(main_module.settings, "api_key", "secret")
        assert client.get("/health").status_code == 200


class TestMalformedBodies:
    """Malformed request bodies come back as 400 InvalidInput."""

    @pytest.mark.integration
    def test_wrong_typed_name(self, client, params, flour_and_wine_plan, fake_db):
        response = client.post(
            "/api/shopping-lists/generate",
            params=params,
            json={"mealPlanId": flour_and_wine_plan["plan_id"], "name": 123},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request body"
        assert body["details"][0]["path"] == ["name"]
        assert fake_db.writes() == []

    @pytest.mark.integration
    def test_missing_body(self, client, params, fake_db):
        response = client.post("/api/shopping-lists/generate", params=params)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"
        assert fake_db.writes() == []

    @pytest.mark.integration
    def test_plan_route_missing_body(self, client, params, flour_and_wine_plan):
        response = client.post(f"/api/meal-plans/{flour_and_wine_plan['plan_id']}/shopping-list", params=params)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"


class TestItemUpdateEndpoint:
    """Tests for PATCH /api/shopping-lists/{id}/items/{item_id} input handling."""

    @pytest.fixture
    def item(self, client, params, flour_and_wine_plan, fake_db):
        list_id = generate(client, params, flour_and_wine_plan["plan_id"]).json()["id"]
        return list_id, fake_db.tables["shopping_list_items"][0]

    @pytest.mark.integration
    def test_camel_case_is_checked(self, client, params, item):
        list_id, row = item

        response = client.patch(
            f"/api/shopping-lists/{list_id}/items/{row['id']}", params=params, json={"isChecked": True}
        )

        assert response.status_code == 200
        assert row["is_checked"] is True

    @pytest.mark.integration
    def test_null_quantity_rejected(self, client, params, item):
        list_id, row = item

        response = client.patch(
            f"/api/shopping-lists/{list_id}/items/{row['id']}", params=params, json={"quantity": None}
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["path"] == ["quantity"]
        assert row["quantity"] == 450

    @pytest.mark.integration
    def test_empty_update_rejected(self, client, params, item):
        list_id, row = item

        response = client.patch(f"/api/shopping-lists/{list_id}/items/{row['id']}", params=params, json={})

        assert response.status_code == 400
        assert response.json() == {"error": "No fields to update"}


class TestCreateListEndpoint:
    """Tests for POST /api/shopping-lists."""

    @pytest.mark.integration
    def test_create_empty_list(self, client, params, fake_db):
        response = client.post("/api/shopping-lists", params=params, json={"name": "Party supplies"})

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Party supplies"
        assert data["mealPlanId"] is None
        assert data["items"] == []
        assert "createdAt" in data and "updatedAt" in data

        listed = client.get("/api/shopping-lists", params=params).json()
        assert [row["id"] for row in listed] == [data["id"]]

    @pytest.mark.integration
    def test_create_linked_to_plan(self, client, params, seed):
        plan_id = seed.plan([])

        response = client.post(
            "/api/shopping-lists", params=params, json={"name": "Extras", "mealPlanId": plan_id}
        )

        assert response.status_code == 200
        assert response.json()["mealPlanId"] == plan_id

    @pytest.mark.integration
    @pytest.mark.parametrize("body, status, error", [
        ({}, 400, "Name is required"),
        ({"name": "Extras", "mealPlanId": "abc"}, 400, "Invalid meal plan ID format"),
        ({"name": "Extras", "mealPlanId": "00000000-0000-0000-0000-000000000000"}, 404, "Meal plan not found"),
    ])
    def test_create_errors(self, client, params, fake_db, body, status, error):
        response = client.post("/api/shopping-lists", params=params, json=body)

        assert response.status_code == status
        assert response.json() == {"error": error}
        assert fake_db.writes() == []
