"""API tests for inventory items and direct stock updates."""

import pytest

from models.item import Item
from models.warehouse_log import WarehouseLog, WarehouseLogStatus, WarehouseLogType


class TestItemCrud:
    def test_create_with_generated_id(self, client, csr_headers, distributor):
        response = client.post(
            "/api/inventory",
            json={"name": "Olive Oil 1L", "category": "Pantry", "price": "12.75", "stock": 30, "distributor_id": distributor.id},
            headers=csr_headers,
        )

        assert response.status_code == 201
        item = response.json()["data"]["item"]
        assert item["id"].startswith("sku-")
        assert item["stock"] == 30
        assert item["price"] == 12.75
        assert item["min_stock_level"] == 10
        assert item["distributor"]["name"] == "Northwind Supply"

    def test_duplicate_sku_conflicts(self, client, csr_headers, make_item):
        make_item("item-001", sku="SKU-1")
        response = client.post(
            "/api/inventory",
            json={"name": "Copy", "category": "Pantry", "price": "1.00", "sku": "SKU-1"},
            headers=csr_headers,
        )
        assert response.status_code == 409

    def test_duplicate_id_conflicts(self, client, csr_headers, item):
        response = client.post(
            "/api/inventory",
            json={"id": item.id, "name": "Copy", "category": "Pantry", "price": "1.00"},
            headers=csr_headers,
        )
        assert response.status_code == 409
        assert response.json()["message"] == "Item with this ID already exists"

    def test_unknown_distributor(self, client, csr_headers):
        response = client.post(
            "/api/inventory",
            json={"name": "Orphan", "category": "Pantry", "price": "1.00", "distributor_id": 42},
            headers=csr_headers,
        )
        assert response.status_code == 404

    def test_update_ignores_stock(self, client, csr_headers, item):
        response = client.put(
            f"/api/inventory/{item.id}",
            json={"name": "Renamed", "price": "30.00", "stock": 999},
            headers=csr_headers,
        )

        assert response.status_code == 200
        updated = response.json()["data"]["item"]
        assert updated["name"] == "Renamed"
        assert updated["price"] == 30.0
        assert updated["stock"] == 10

    def test_list_search_and_categories(self, client, csr_headers, make_item):
        make_item("item-001", name="Arabica Coffee", category="Beverages")
        make_item("item-002", name="Sea Salt", category="Pantry")

        found = client.get("/api/inventory", params={"search": "coffee"}, headers=csr_headers).json()["data"]
        categories = client.get("/api/inventory/categories", headers=csr_headers).json()["data"]["categories"]

        assert [i["id"] for i in found["items"]] == ["item-001"]
        assert found["pagination"]["total_items"] == 1
        assert categories == ["Beverages", "Pantry"]

    def test_filter_by_supplier(self, client, csr_headers, make_item, distributor):
        make_item("item-001", distributor_id=distributor.id)
        make_item("item-002")

        items = client.get("/api/inventory", params={"supplier": "northwind"}, headers=csr_headers).json()["data"]["items"]
        assert [i["id"] for i in items] == ["item-001"]

    def test_get_unknown_item(self, client, csr_headers):
        response = client.get("/api/inventory/missing", headers=csr_headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Item not found"}


class TestItemDelete:
    def test_unreferenced_item_is_removed(self, client, tl_headers, item, db):
        response = client.delete(f"/api/inventory/{item.id}", headers=tl_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Item deleted successfully"
        db.expire_all()
        assert db.get(Item, "item-001") is None

    def test_item_on_order_is_deactivated(self, client, csr_headers, tl_headers, customer, item):
        client.post(
            "/api/orders",
            json={"customer_id": customer.id, "items": [{"item_id": item.id, "quantity": 1, "unit_price": "1.00"}]},
            headers=csr_headers,
        )

        response = client.delete(f"/api/inventory/{item.id}", headers=tl_headers)

        assert response.status_code == 200
        assert "deactivated" in response.json()["message"]
        assert client.get(f"/api/inventory/{item.id}", headers=tl_headers).json()["data"]["item"]["is_active"] is False

    def test_item_with_ledger_history_is_deactivated(self, client, csr_headers, tl_headers, item):
        client.put(f"/api/inventory/{item.id}/stock", json={"stock": 5}, headers=csr_headers)

        response = client.delete(f"/api/inventory/{item.id}", headers=tl_headers)

        assert "deactivated" in response.json()["message"]

    def test_csr_cannot_delete(self, client, csr_headers, item):
        assert client.delete(f"/api/inventory/{item.id}", headers=csr_headers).status_code == 403


class TestStockUpdate:
    def test_sets_stock_and_records_adjustment(self, client, csr_headers, csr_user, item, db):
        response = client.put(f"/api/inventory/{item.id}/stock", json={"stock": 25}, headers=csr_headers)

        assert response.status_code == 200
        assert response.json()["data"]["item"] == {"id": "item-001", "name": "Item item-001", "stock": 25, "old_stock": 10}

        db.expire_all()
        logs = db.query(WarehouseLog).filter(WarehouseLog.item_id == item.id).all()
        assert len(logs) == 1
        assert logs[0].type == WarehouseLogType.ADJUSTMENT
        assert logs[0].status == WarehouseLogStatus.RECEIVED
        assert logs[0].quantity == 15
        assert logs[0].note == "Stock adjusted from 10 to 25"
        assert logs[0].created_by == csr_user.id

    def test_decrease_records_negative_quantity(self, client, csr_headers, item, db):
        client.put(f"/api/inventory/{item.id}/stock", json={"stock": 4, "note": "Cycle count"}, headers=csr_headers)

        db.expire_all()
        log = db.query(WarehouseLog).filter(WarehouseLog.item_id == item.id).one()
        assert log.quantity == -6
        assert log.note == "Cycle count"
        assert db.get(Item, item.id).stock == 4

    def test_negative_stock_rejected(self, client, csr_headers, item, db):
        response = client.put(f"/api/inventory/{item.id}/stock", json={"stock": -1}, headers=csr_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "stock"
        db.expire_all()
        assert db.get(Item, item.id).stock == 10
        assert db.query(WarehouseLog).count() == 0

    @pytest.mark.parametrize("value", [True, "5", 2.5, None])
    def test_non_integer_stock_rejected(self, client, csr_headers, item, db, value):
        response = client.put(f"/api/inventory/{item.id}/stock", json={"stock": value}, headers=csr_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "stock"
        db.expire_all()
        assert db.get(Item, item.id).stock == 10
        assert db.query(WarehouseLog).count() == 0

    def test_unknown_item(self, client, csr_headers):
        response = client.put("/api/inventory/missing/stock", json={"stock": 1}, headers=csr_headers)
        assert response.status_code == 404
