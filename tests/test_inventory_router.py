"""
Tests for the inventory API endpoints.
"""
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from src.models import MenuItem


class TestMovements:
    """Tests for POST /api/inventory/{item_id}/movements."""

    def test_purchase(self, client: TestClient, cashier_headers: dict, menu_item: MenuItem):
        response = client.post(
            f"/api/inventory/{menu_item.id}/movements",
            json={"movement_type": "purchase", "quantity": 5, "notes": "Morning delivery"},
            headers=cashier_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "item_id": menu_item.id, "previous_stock": 10, "new_stock": 15}

    def test_waste_floors_at_zero(self, client: TestClient, cashier_headers: dict, menu_item: MenuItem):
        response = client.post(
            f"/api/inventory/{menu_item.id}/movements",
            json={"movement_type": "waste", "quantity": 50},
            headers=cashier_headers,
        )

        assert response.json()["new_stock"] == 0

    def test_invalid_type(self, client: TestClient, cashier_headers: dict, menu_item: MenuItem):
        response = client.post(
            f"/api/inventory/{menu_item.id}/movements",
            json={"movement_type": "gift", "quantity": 1},
            headers=cashier_headers,
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "validation_error",
            "message": "Invalid movement type: gift",
        }

    def test_zero_quantity(self, client: TestClient, cashier_headers: dict, menu_item: MenuItem):
        response = client.post(
            f"/api/inventory/{menu_item.id}/movements",
            json={"movement_type": "purchase", "quantity": 0},
            headers=cashier_headers,
        )

        assert response.status_code == 400

    def test_unknown_item(self, client: TestClient, cashier_headers: dict):
        response = client.post(
            "/api/inventory/999/movements",
            json={"movement_type": "purchase", "quantity": 1},
            headers=cashier_headers,
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Item not found"

    def test_requires_authentication(self, client: TestClient, menu_item: MenuItem):
        response = client.post(
            f"/api/inventory/{menu_item.id}/movements",
            json={"movement_type": "purchase", "quantity": 1},
        )

        assert response.status_code == 401


class TestSetStock:
    """Tests for PUT /api/inventory/{item_id}/stock."""

    def test_set_stock(self, client: TestClient, cashier_headers: dict, menu_item: MenuItem):
        response = client.put(
            f"/api/inventory/{menu_item.id}/stock", json={"quantity": 3}, headers=cashier_headers
        )

        assert response.status_code == 200
        assert response.json()["new_stock"] == 3

        history = client.get(f"/api/inventory/{menu_item.id}/history", headers=cashier_headers).json()
        entry = history["movements"][0]
        assert entry["movement_type"] == "adjustment"
        assert entry["is_absolute"] is True
        assert entry["quantity"] == 7
        assert entry["notes"] == "Stock adjustment"
        assert entry["user_name"] == "Front Till"

    def test_negative_rejected(self, client: TestClient, cashier_headers: dict, menu_item: MenuItem):
        response = client.put(
            f"/api/inventory/{menu_item.id}/stock", json={"quantity": -2}, headers=cashier_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestStockViews:
    """Tests for listing, low stock, settings and history."""

    def test_list_tracked(self, client: TestClient, cashier_headers: dict, menu_item: MenuItem, untracked_item: MenuItem):
        response = client.get("/api/inventory", headers=cashier_headers)

        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == menu_item.id
        assert data["items"][0]["category_name"] == "SHAWARMA"

    def test_low_stock_after_sale(self, client: TestClient, cashier_headers: dict, menu_item: MenuItem):
        assert client.get("/api/inventory/low-stock", headers=cashier_headers).json()["total"] == 0

        client.post(
            f"/api/inventory/{menu_item.id}/movements",
            json={"movement_type": "sale", "quantity": 6},
            headers=cashier_headers,
        )

        low = client.get("/api/inventory/low-stock", headers=cashier_headers).json()
        assert [i["id"] for i in low["items"]] == [menu_item.id]
        assert low["items"][0]["stock_quantity"] == 4

    def test_update_settings(self, client: TestClient, db: Session, cashier_headers: dict, menu_item: MenuItem):
        response = client.patch(
            f"/api/inventory/{menu_item.id}/settings",
            json={"low_stock_threshold": 20},
            headers=cashier_headers,
        )

        assert response.status_code == 200
        assert response.json()["low_stock_threshold"] == 20
        assert response.json()["track_stock"] is True
        assert client.get("/api/inventory/low-stock", headers=cashier_headers).json()["total"] == 1

    def test_update_settings_empty(self, client: TestClient, cashier_headers: dict, menu_item: MenuItem):
        response = client.patch(f"/api/inventory/{menu_item.id}/settings", json={}, headers=cashier_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "No settings provided"

    def test_history_limit_bounds(self, client: TestClient, cashier_headers: dict, menu_item: MenuItem):
        response = client.get(
            f"/api/inventory/{menu_item.id}/history", params={"limit": 0}, headers=cashier_headers
        )

        assert response.status_code == 422
