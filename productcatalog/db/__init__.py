"""
==============================================================================
Database Package
==============================================================================

AlloyDB access for the catalog database source.

Architecture:
------------
├── database.py   - CatalogDatabase (connector + pool), load_from_database
└── init_db.py    - Catalog table definition and seeding

Usage:
------
    from productcatalog.db import load_from_database

    catalog = load_from_database(settings)

==============================================================================
"""

from .database import CatalogDatabase, check_database_settings, load_from_database
from .init_db import CatalogTableInitializer, catalog_table

__all__ = [
    "CatalogDatabase",
    "check_database_settings",
    "load_from_database",
    "CatalogTableInitializer",
    "catalog_table",
]
