"""API tests for the warehouse ledger."""

import pytest

from models.item import Item
from models.warehouse_log import WarehouseLog
from services import stock as stock_service


def _log(client, headers, **body):
    body.setdefault("status", "received")
    return client.post("/api/warehouse", json=body, headers=headers)


class TestCreateLog:
    def test_adjustment_moves_stock(self, client, csr_headers, item, db):
        response = _log(client, csr_headers, type="adjustment", quantity=5, item_id=item.id)

        assert response.status_code == 201
        log = response.json()["data"]["log"]
        assert log["quantity"] == 5
        assert log["item"]["id"] == item.id
        assert log["creator"]["username"] == "csr1"
        db.expire_all()
        assert db.get(Item, item.id).stock == 15

    def test_adjustment_floors_stock_at_zero(self, client, csr_headers, item, db):
        response = _log(client, csr_headers, type="adjustment", quantity=-15, item_id=item.id)

        assert response.status_code == 201
        db.expire_all()
        assert db.get(Item, item.id).stock == 0
        logs = db.query(WarehouseLog).filter(WarehouseLog.item_id == item.id).all()
        assert len(logs) == 1
        assert logs[0].quantity == -15

    def test_failed_stock_move_discards_log(self, lenient_client, csr_headers, item, db, monkeypatch):
        def failing_delta(session, item_id, delta):
            raise RuntimeError("stock update failed")

        monkeypatch.setattr(stock_service, "apply_stock_delta", failing_delta)

        response = _log(lenient_client, csr_headers, type="adjustment", quantity=-4, item_id=item.id)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}
        db.expire_all()
        assert db.query(WarehouseLog).count() == 0
        assert db.get(Item, item.id).stock == 10

    def test_non_adjustment_leaves_stock(self, client, csr_headers, item, db):
        _log(client, csr_headers, type="received", quantity=40, item_id=item.id)
        _log(client, csr_headers, type="damaged", status="damaged", quantity=2, item_id=item.id)

        db.expire_all()
        assert db.get(Item, item.id).stock == 10
        assert db.query(WarehouseLog).count() == 2

    def test_adjustment_without_item_is_only_logged(self, client, csr_headers, item, db):
        response = _log(client, csr_headers, type="adjustment", quantity=-3, note="Unattributed shrinkage")

        assert response.status_code == 201
        assert response.json()["data"]["log"]["item_id"] is None
        db.expire_all()
        assert db.get(Item, item.id).stock == 10

    @pytest.mark.parametrize("log_type", ["received", "shipped", "damaged", "returned"])
    def test_negative_quantity_only_for_adjustment(self, client, csr_headers, item, db, log_type):
        response = _log(client, csr_headers, type=log_type, quantity=-5, item_id=item.id)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation error"
        assert [e["field"] for e in body["errors"]] == ["quantity"]
        db.expire_all()
        assert db.query(WarehouseLog).count() == 0

    def test_order_reference_is_embedded(self, client, csr_headers, customer, item):
        order = client.post(
            "/api/orders",
            json={"customer_id": customer.id, "items": [{"item_id": item.id, "quantity": 1, "unit_price": "1.00"}]},
            headers=csr_headers,
        ).json()["data"]["order"]

        response = _log(client, csr_headers, type="shipped", status="shipped", quantity=1, order_id=order["id"])

        log = response.json()["data"]["log"]
        assert log["order"] == {"id": order["id"], "order_number": order["order_number"], "status": "pending"}

    def test_unknown_item(self, client, csr_headers):
        response = _log(client, csr_headers, type="adjustment", quantity=1, item_id="missing")
        assert response.status_code == 404

    def test_unknown_order(self, client, csr_headers):
        response = _log(client, csr_headers, type="shipped", quantity=1, order_id=999)
        assert response.status_code == 404
        assert response.json()["message"] == "Order not found"

    def test_accounting_is_read_only(self, client, accounting_headers, item):
        response = _log(client, accounting_headers, type="received", quantity=1, item_id=item.id)
        assert response.status_code == 403
        assert client.get("/api/warehouse", headers=accounting_headers).status_code == 200


class TestManageLogs:
    @pytest.fixture
    def log_id(self, client, csr_headers, item):
        return _log(client, csr_headers, type="received", quantity=12, item_id=item.id).json()["data"]["log"]["id"]

    def test_update_does_not_touch_stock(self, client, csr_headers, item, log_id, db):
        response = client.put(f"/api/warehouse/{log_id}", json={"quantity": 20, "note": "Recounted"}, headers=csr_headers)

        assert response.status_code == 200
        assert response.json()["data"]["log"]["quantity"] == 20
        db.expire_all()
        assert db.get(Item, item.id).stock == 10

    def test_update_rejects_negative_for_non_adjustment(self, client, csr_headers, log_id):
        response = client.put(f"/api/warehouse/{log_id}", json={"quantity": -1}, headers=csr_headers)

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "quantity", "message": "quantity must be greater than or equal to 0 unless type is adjustment"},
        ]

    def test_delete_requires_manager(self, client, csr_headers, tl_headers, log_id):
        assert client.delete(f"/api/warehouse/{log_id}", headers=csr_headers).status_code == 403

        response = client.delete(f"/api/warehouse/{log_id}", headers=tl_headers)

        assert response.status_code == 200
        assert client.get(f"/api/warehouse/{log_id}", headers=tl_headers).status_code == 404

    def test_item_history(self, client, csr_headers, item, log_id):
        client.put(f"/api/inventory/{item.id}/stock", json={"stock": 3}, headers=csr_headers)

        data = client.get(f"/api/warehouse/items/{item.id}", headers=csr_headers).json()["data"]

        assert data["pagination"]["total_items"] == 2
        assert {log["type"] for log in data["logs"]} == {"received", "adjustment"}

    def test_list_filters_by_type(self, client, csr_headers, item, log_id):
        _log(client, csr_headers, type="adjustment", quantity=1, item_id=item.id)

        logs = client.get("/api/warehouse", params={"type": "adjustment"}, headers=csr_headers).json()["data"]["logs"]

        assert [log["type"] for log in logs] == ["adjustment"]


class TestSummary:
    def test_counts_and_quantities(self, client, csr_headers, item):
        _log(client, csr_headers, type="received", quantity=30, item_id=item.id)
        _log(client, csr_headers, type="received", quantity=20, item_id=item.id)
        _log(client, csr_headers, type="adjustment", quantity=-4, item_id=item.id)
        _log(client, csr_headers, type="damaged", status="damaged", quantity=1, item_id=item.id)

        summary = client.get("/api/warehouse/summary", headers=csr_headers).json()["data"]

        assert summary["type_counts"] == {"received": 2, "adjustment": 1, "damaged": 1}
        assert summary["status_counts"] == {"received": 3, "damaged": 1}
        assert summary["quantity_by_type"] == {"received": 50, "adjustment": -4, "damaged": 1}
        assert len(summary["recent_activity"]) == 4

    def test_empty_ledger(self, client, csr_headers):
        summary = client.get("/api/warehouse/summary", headers=csr_headers).json()["data"]
        assert summary == {"type_counts": {}, "status_counts": {}, "quantity_by_type": {}, "recent_activity": []}
