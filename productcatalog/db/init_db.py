"""
==============================================================================
Catalog Table Initialization Module
==============================================================================

Provisioning utilities for the AlloyDB catalog table.

This module implements:
- catalog_table: SQLAlchemy Core definition of the catalog table
- CatalogTableInitializer: Creates the table and seeds it from a Catalog

Table Layout:
------------
    id                        TEXT PRIMARY KEY
    name                      TEXT
    description               TEXT
    picture                   TEXT
    price_usd_currency_code   VARCHAR(3)
    price_usd_units           BIGINT
    price_usd_nanos           INTEGER
    categories                TEXT  (comma-delimited)

Usage:
------
    from productcatalog.db import CatalogTableInitializer

    with engine.begin() as conn:
        CatalogTableInitializer(conn, "products").initialize(catalog)

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import BigInteger, Column, Integer, MetaData, String, Table, Text, delete
from sqlalchemy.engine import Connection

from productcatalog.catalog.mapper import CATEGORY_DELIMITER
from productcatalog.catalog.models import Catalog


# Module logger
logger = logging.getLogger(__name__)


def catalog_table(name: str, metadata: Optional[MetaData] = None) -> Table:
    """
    Build the Core table definition for the catalog.

    Args:
        name: Table name, optionally schema-qualified ("schema.table")
        metadata: MetaData to attach to (a new one if None)

    Returns:
        SQLAlchemy Table
    """
    schema = None
    if "." in name:
        schema, name = name.split(".", 1)

    return Table(
        name,
        metadata if metadata is not None else MetaData(),
        Column("id", Text, primary_key=True),
        Column("name", Text, nullable=False),
        Column("description", Text, nullable=False),
        Column("picture", Text, nullable=False),
        Column("price_usd_currency_code", String(3), nullable=False),
        Column("price_usd_units", BigInteger, nullable=False),
        Column("price_usd_nanos", Integer, nullable=False),
        Column("categories", Text, nullable=False),
        schema=schema,
    )


class CatalogTableInitializer:
    """
    Creates and seeds the catalog table.

    Attributes:
        _conn: Open connection; the caller owns the transaction
        _table: Catalog table definition

    Example:
        >>> with engine.begin() as conn:
        ...     initializer = CatalogTableInitializer(conn, "products")
        ...     initializer.initialize(catalog)
    """

    def __init__(self, conn: Connection, table_name: str) -> None:
        self._conn = conn
        self._table = catalog_table(table_name)

    @property
    def table(self) -> Table:
        """Get the table definition."""
        return self._table

    def create_table(self) -> None:
        """Create the catalog table if it does not exist."""
        self._table.create(self._conn, checkfirst=True)
        logger.info(f"Catalog table {self._table.fullname} created/verified")

    def seed(self, catalog: Catalog, replace: bool = True) -> int:
        """
        Insert every product of a catalog.

        Args:
            catalog: Products to insert
            replace: Delete existing rows first

        Returns:
            Number of rows inserted
        """
        if replace:
            self._conn.execute(delete(self._table))

        rows = [
            {
                "id": product.id,
                "name": product.name,
                "description": product.description,
                "picture": product.picture,
                "price_usd_currency_code": product.price_usd.currency_code,
                "price_usd_units": product.price_usd.units,
                "price_usd_nanos": product.price_usd.nanos,
                "categories": CATEGORY_DELIMITER.join(product.categories),
            }
            for product in catalog.products
        ]
        if rows:
            self._conn.execute(self._table.insert(), rows)

        logger.info(f"✅ Seeded {len(rows)} products into {self._table.fullname}")
        return len(rows)

    def initialize(self, catalog: Catalog) -> int:
        """Create the table and replace its content with the catalog."""
        self.create_table()
        return self.seed(catalog)
