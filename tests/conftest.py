"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides catalog documents, settings, a fake AlloyDB connector backed by
SQLite, and an API test client.

==============================================================================
"""

import copy
import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from productcatalog.catalog import load_from_file
from productcatalog.config import Settings
from productcatalog.db import CatalogTableInitializer
from productcatalog.main import Application
from productcatalog.services.catalog_service import CatalogService


# ============================================================================
# CATALOG DOCUMENTS
# ============================================================================

PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": "OLJCESPC7Z",
        "name": "Sunglasses",
        "description": "Add a modern touch to your outfits with these sleek aviator sunglasses.",
        "picture": "/static/img/products/sunglasses.jpg",
        "priceUsd": {"currencyCode": "USD", "units": 19, "nanos": 990000000},
        "categories": ["Accessories"],
    },
    {
        "id": "66VCHSJNUP",
        "name": "Tank Top",
        "description": "Perfectly cropped cotton tank, with a scooped neckline.",
        "picture": "/static/img/products/tank-top.jpg",
        "priceUsd": {"currencyCode": "USD", "units": 18, "nanos": 990000000},
        "categories": "Clothing,TOPS",
    },
    {
        "id": "6E92ZMYYFZ",
        "name": "Mug",
        "description": "A simple mug with a mustard interior.",
        "picture": "/static/img/products/mug.jpg",
        "priceUsd": {"currencyCode": "USD", "units": "8", "nanos": 990000000},
        "categories": ["kitchen"],
    },
]

# Rows of the database catalog, in query column order
DATABASE_ROWS = [
    ("DB0000001", "Notebook", "Ruled notebook.", "/img/notebook.jpg", "USD", 4, 500000000, "Books,STATIONERY"),
    ("DB0000002", "Fountain Pen", "Steel nib.", "/img/pen.jpg", "EUR", 25, 0, "stationery"),
]

TABLE_NAME = "catalog_items"

DATABASE_VALUES: Dict[str, Any] = {
    "alloydb_cluster_name": "catalog-cluster",
    "project_id": "demo-project",
    "region": "us-central1",
    "alloydb_instance_name": "catalog-primary",
    "alloydb_database_name": "products",
    "alloydb_table_name": TABLE_NAME,
    "alloydb_password": "from-secret-store",
    "alloydb_timeout_seconds": 5,
}


def catalog_document(products: List[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build a catalog document (deep copy of the sample products)."""
    return {"products": copy.deepcopy(PRODUCTS if products is None else products)}


@pytest.fixture
def write_catalog(tmp_path: Path) -> Callable[..., Path]:
    """Write a catalog document to a file and return its path."""
    def _write(document: Any, name: str = "products.json") -> Path:
        path = tmp_path / name
        if isinstance(document, str):
            path.write_text(document, encoding="utf-8")
        else:
            path.write_text(json.dumps(document), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def products_file(write_catalog) -> Path:
    """Valid catalog file with the sample products."""
    return write_catalog(catalog_document())


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture
def make_settings(products_file: Path) -> Callable[..., Settings]:
    """Build isolated Settings; ignores the process environment's .env file."""
    def _make(**overrides: Any) -> Settings:
        values = {"products_file": str(products_file)}
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def file_settings(make_settings) -> Settings:
    """Settings with the database source disabled."""
    return make_settings(alloydb_cluster_name="")


@pytest.fixture
def database_settings(make_settings) -> Settings:
    """Settings with the database source enabled."""
    return make_settings(**DATABASE_VALUES)


# ============================================================================
# FAKE ALLOYDB
# ============================================================================

class FakeConnector:
    """
    Stand-in for the AlloyDB connector.

    Dials a local SQLite file instead of an AlloyDB instance and records
    how it was used. With `stall` set, each dial blocks until the event
    is set, like an instance that never answers.
    """

    def __init__(
        self,
        db_path: Path,
        fail_connect: bool = False,
        stall: Optional[threading.Event] = None,
    ) -> None:
        self.db_path = db_path
        self.fail_connect = fail_connect
        self.stall = stall
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def connect(self, instance_uri: str, driver: str, **kwargs: Any) -> sqlite3.Connection:
        self.calls.append({"instance_uri": instance_uri, "driver": driver, **kwargs})
        if self.fail_connect:
            raise TimeoutError("dial timed out")
        if self.stall is not None:
            self.stall.wait(timeout=10)
        return sqlite3.connect(self.db_path, check_same_thread=False)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def alloydb_path(tmp_path: Path) -> Path:
    """SQLite file holding the catalog table with DATABASE_ROWS."""
    path = tmp_path / "alloydb.sqlite"
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        initializer = CatalogTableInitializer(conn, TABLE_NAME)
        initializer.create_table()
        conn.execute(
            initializer.table.insert(),
            [dict(zip(initializer.table.columns.keys(), row)) for row in DATABASE_ROWS],
        )
    engine.dispose()
    return path


@pytest.fixture
def connector(alloydb_path: Path) -> FakeConnector:
    """Fake connector dialing the seeded SQLite catalog."""
    return FakeConnector(alloydb_path)


@pytest.fixture
def sqlite_url(alloydb_path: Path) -> str:
    """Dialect URL used in place of postgresql+pg8000."""
    return f"sqlite:///{alloydb_path}"


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================

@pytest.fixture
def file_catalog(products_file: Path):
    """The sample catalog as loaded from file."""
    return load_from_file(products_file)


@pytest.fixture
def catalog_service(file_settings: Settings) -> CatalogService:
    """CatalogService over the sample file."""
    return CatalogService(file_settings)


@pytest.fixture
def client(file_settings: Settings, catalog_service: CatalogService) -> Generator[TestClient, None, None]:
    """Test client for an application serving the sample file."""
    application = Application(file_settings, catalog_service)
    with TestClient(application.app) as test_client:
        yield test_client
