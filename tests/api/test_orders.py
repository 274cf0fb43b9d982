"""Tests for order API endpoints."""
import pytest


class TestOrders:
    def test_create(self, client, recipe_factory):
        recipe = recipe_factory(name="Mix")
        response = client.post("/api/orders", json={
            "customer_id": recipe.customer_id,
            "recipe_id": recipe.id,
            "quantity": "500",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["recipe_name"] == "Mix"
        assert data["customer_name"] == "Owner of Mix"

    def test_create_for_deleted_recipe(self, client, db, recipe_factory):
        recipe = recipe_factory()
        recipe.soft_delete()
        db.flush()
        response = client.post("/api/orders", json={
            "customer_id": recipe.customer_id,
            "recipe_id": recipe.id,
            "quantity": "1",
        })
        assert response.status_code == 404

    def test_invalid_status(self, client, recipe_factory):
        recipe = recipe_factory()
        response = client.post("/api/orders", json={
            "customer_id": recipe.customer_id,
            "recipe_id": recipe.id,
            "quantity": "1",
            "status": "shipped",
        })
        assert response.status_code == 400

    @pytest.mark.parametrize("status", ["confirmed", "cancelled"])
    def test_new_order_must_be_pending(self, client, recipe_factory, status):
        recipe = recipe_factory()
        response = client.post("/api/orders", json={
            "customer_id": recipe.customer_id,
            "recipe_id": recipe.id,
            "quantity": "1",
            "status": status,
        })
        assert response.status_code == 400
        assert response.json()["error_type"] == "validation_error"
        assert client.get("/api/orders").json()["count"] == 0

    def test_status_moves_forward_only(self, client, recipe_factory, order_factory):
        order = order_factory(recipe_factory())

        response = client.put(f"/api/orders/{order.id}/status", json={"status": "confirmed"})
        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"

        response = client.put(f"/api/orders/{order.id}/status", json={"status": "pending"})
        assert response.status_code == 400
        response = client.put(f"/api/orders/{order.id}/status", json={"status": "cancelled"})
        assert response.status_code == 400

    def test_active_lists_pending_only(self, client, recipe_factory, order_factory):
        recipe = recipe_factory()
        pending = order_factory(recipe)
        order_factory(recipe, status="confirmed")

        data = client.get("/api/orders/active").json()
        assert [o["id"] for o in data["orders"]] == [pending.id]
        assert client.get("/api/orders").json()["count"] == 2

    def test_delete_is_soft(self, client, recipe_factory, order_factory):
        order = order_factory(recipe_factory())
        assert client.delete(f"/api/orders/{order.id}").status_code == 204
        assert client.get(f"/api/orders/{order.id}").status_code == 404
        assert client.get("/api/orders").json()["count"] == 0
