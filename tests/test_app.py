"""Application wiring and response envelope tests."""

import sqlite3

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from config import Settings


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Inventory & Order API is running"}


class TestEnvelope:
    def test_success_envelope(self, client, csr_headers, item):
        body = client.get(f"/api/inventory/{item.id}", headers=csr_headers).json()

        assert body["success"] is True
        assert body["message"] is None
        assert body["data"]["item"]["id"] == item.id

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_query_validation_field_names(self, client, csr_headers):
        response = client.get("/api/orders", params={"page": 0}, headers=csr_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "page"

    def test_cors_allows_frontend(self, client):
        response = client.options(
            "/api/orders",
            headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
        )
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


class TestSettings:
    def test_postgres_scheme_normalized(self):
        settings = Settings(DATABASE_URL="postgres://u:p@db/app", SECRET_KEY="x")
        assert settings.DATABASE_URL == "postgresql://u:p@db/app"

    def test_log_level_upper_cased(self):
        assert Settings(DATABASE_URL="sqlite://", SECRET_KEY="x", LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"


class PgDriverError(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


class TestIntegrityErrors:
    @pytest.fixture
    def raising_client(self, app):
        """Client for an app with a route that fails with the given driver error."""
        def _client(orig):
            @app.post("/api/_integrity")
            def fail():
                raise IntegrityError("INSERT INTO items ...", {}, orig)

            return TestClient(app)
        return _client

    @pytest.mark.parametrize("orig", [
        sqlite3.IntegrityError("FOREIGN KEY constraint failed"),
        PgDriverError('insert or update on table "items" violates a constraint', "23503"),
    ])
    def test_foreign_key_violation_is_invalid_reference(self, raising_client, orig):
        with raising_client(orig) as c:
            response = c.post("/api/_integrity")

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid reference"}

    @pytest.mark.parametrize("orig", [
        sqlite3.IntegrityError("UNIQUE constraint failed: items.sku"),
        PgDriverError('violates constraint "items_sku_key"', "23505"),
    ])
    def test_unique_violation_is_duplicate_entry(self, raising_client, orig):
        with raising_client(orig) as c:
            response = c.post("/api/_integrity")

        assert response.status_code == 409
        assert response.json() == {"success": False, "message": "Duplicate entry"}

    def test_other_constraint_violation(self, raising_client):
        with raising_client(sqlite3.IntegrityError("NOT NULL constraint failed: items.name")) as c:
            response = c.post("/api/_integrity")

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Constraint violation"}

    def test_session_usable_after_conflict(self, client, csr_headers, make_item):
        make_item("item-001", sku="SKU-1")
        body = {"name": "Copy", "category": "Pantry", "price": "1.00", "sku": "SKU-1"}

        assert client.post("/api/inventory", json=body, headers=csr_headers).status_code == 409
        body["sku"] = "SKU-2"
        assert client.post("/api/inventory", json=body, headers=csr_headers).status_code == 201
