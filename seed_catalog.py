#!/usr/bin/env python3
"""
Seed AlloyDB Catalog Script
Creates the catalog table and fills it from the bundled products file
"""

import sys

from sqlalchemy.exc import SQLAlchemyError

from productcatalog.catalog import load_from_file
from productcatalog.config import get_settings
from productcatalog.core.exceptions import LoadError
from productcatalog.db import CatalogDatabase, CatalogTableInitializer, check_database_settings
from productcatalog.db.database import DEFAULT_DRIVER_URL


def seed_catalog(settings=None, connector_factory=None, driver_url=DEFAULT_DRIVER_URL):
    """Copy the file catalog into the configured AlloyDB table"""
    settings = settings or get_settings()

    try:
        check_database_settings(settings)
        catalog = load_from_file(settings.products_path)

        with CatalogDatabase(settings, connector_factory, driver_url) as database:
            with database.connect() as conn, conn.begin():
                count = CatalogTableInitializer(conn, settings.alloydb_table_name).initialize(catalog)

        print(f"✅ SUCCESS: Seeded {count} products into {settings.alloydb_table_name}")
        return count

    except (LoadError, SQLAlchemyError) as e:
        print(f"❌ ERROR: {e}")
        print("\nMake sure:")
        print("1. ALLOYDB_* settings, PROJECT_ID and REGION are set")
        print("2. PRODUCTS_FILE points to a valid catalog")
        print("3. The AlloyDB instance is reachable")
        sys.exit(1)


if __name__ == "__main__":
    print("=" * 60)
    print("SEED ALLOYDB CATALOG")
    print("=" * 60)
    print()
    seed_catalog()
    print()
    print("=" * 60)
