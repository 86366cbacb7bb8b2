"""
==============================================================================
API Integration Tests
==============================================================================

Tests for REST API endpoints.

==============================================================================
"""

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from productcatalog.catalog.loader import CatalogLoader
from productcatalog.core.exceptions import CatalogReadError
from productcatalog.main import Application
from productcatalog.services.catalog_service import CatalogService

from conftest import PRODUCTS, FakeConnector, catalog_document


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient):
        """Test health check reports the loaded catalog."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["details"]["products_loaded"] == len(PRODUCTS)

    def test_readiness_probe(self, client: TestClient):
        """Test readiness probe."""
        response = client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json()["ready"] is True

    def test_liveness_probe(self, client: TestClient):
        """Test liveness probe."""
        response = client.get("/api/v1/health/live")
        assert response.status_code == 200
        assert response.json()["alive"] is True

    def test_degraded_without_catalog(self, make_settings, write_catalog):
        """Test a catalog that failed to parse leaves the service degraded."""
        settings = make_settings(products_file=str(write_catalog("{}")))
        application = Application(settings, CatalogService(settings))

        with TestClient(application.app) as client:
            assert client.get("/api/v1/health").json()["status"] == "degraded"
            assert client.get("/api/v1/health/ready").status_code == 503


class TestStartup:
    """Tests for application startup."""

    def test_unreadable_catalog_aborts_startup(self, make_settings, tmp_path: Path):
        """Test a missing catalog file stops the application from starting."""
        settings = make_settings(products_file=str(tmp_path / "absent.json"))
        application = Application(settings, CatalogService(settings))

        with pytest.raises(CatalogReadError):
            with TestClient(application.app):
                pass


class TestProductEndpoints:
    """Tests for product endpoints."""

    def test_list_products(self, client: TestClient):
        """Test listing products in catalog order."""
        response = client.get("/api/v1/products")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == len(PRODUCTS)
        assert [p["id"] for p in data["products"]] == [r["id"] for r in PRODUCTS]

    def test_get_product(self, client: TestClient):
        """Test getting a product uses the wire field names."""
        response = client.get("/api/v1/products/66VCHSJNUP")
        assert response.status_code == 200
        product = response.json()["product"]
        assert product["priceUsd"] == {"currencyCode": "USD", "units": 18, "nanos": 990000000}
        assert product["categories"] == ["clothing", "tops"]

    def test_get_unknown_product(self, client: TestClient):
        """Test unknown product id returns 404."""
        response = client.get("/api/v1/products/UNKNOWN")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_search_products(self, client: TestClient):
        """Test search matches the description."""
        response = client.get("/api/v1/products/search", params={"q": "aviator"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["products"][0]["id"] == "OLJCESPC7Z"

    def test_search_requires_query(self, client: TestClient):
        """Test empty query is rejected."""
        response = client.get("/api/v1/products/search", params={"q": ""})
        assert response.status_code == 422


class TestCatalogEndpoints:
    """Tests for catalog management endpoints."""

    def test_catalog_status(self, client: TestClient):
        """Test catalog status."""
        data = client.get("/api/v1/catalog").json()
        assert data["loaded"] is True
        assert data["products"] == len(PRODUCTS)
        assert data["reloading"] is False

    def test_refresh_picks_up_changes(self, client: TestClient, products_file: Path):
        """Test refresh publishes the new file content."""
        products_file.write_text(
            json.dumps(catalog_document(PRODUCTS[:2])), encoding="utf-8"
        )

        response = client.post("/api/v1/catalog/refresh")
        assert response.status_code == 200
        assert response.json()["products"] == 2
        assert client.get("/api/v1/products").json()["total"] == 2

    def test_refresh_file_error_keeps_catalog(self, client: TestClient, products_file: Path):
        """Test a broken file is reported and the old catalog stays live."""
        products_file.write_text("{ broken", encoding="utf-8")

        response = client.post("/api/v1/catalog/refresh")
        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "CATALOG_FILE_ERROR"
        assert error["details"]["error"] == "CatalogParseError"
        assert client.get("/api/v1/products").json()["total"] == len(PRODUCTS)

    def test_refresh_database_error(self, database_settings, alloydb_path, sqlite_url, file_catalog):
        """Test database failures are reported apart from file failures."""
        connector = FakeConnector(alloydb_path, fail_connect=True)
        loader = CatalogLoader(
            database_settings, connector_factory=lambda: connector, driver_url=sqlite_url
        )
        service = CatalogService(database_settings, loader=loader)
        service.store.publish(file_catalog)
        application = Application(database_settings, service)

        with TestClient(application.app) as client:
            response = client.post("/api/v1/catalog/refresh")

            assert response.status_code == 502
            error = response.json()["error"]
            assert error["code"] == "CATALOG_DATABASE_ERROR"
            assert error["details"]["source"] == "database"
            assert client.get("/api/v1/products").json()["total"] == len(PRODUCTS)
