"""
==============================================================================
Catalog Sources Module
==============================================================================

The two interchangeable catalog sources and the rule choosing between them.

Classes:
--------
- FileSource: Loads the bundled JSON document
- DatabaseSource: Loads the AlloyDB catalog table

Selection:
---------
select_sources() returns the sources of one load, in run order:

    ALLOYDB_CLUSTER_NAME empty  ->  [FileSource]
    ALLOYDB_CLUSTER_NAME set    ->  [DatabaseSource, FileSource]

The last source's catalog is the one published, so with the database
enabled the file catalog still replaces the database result.

==============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from productcatalog.config import Settings
from productcatalog.db import database as catalog_database

from .file_loader import load_from_file
from .models import Catalog


@dataclass(frozen=True)
class FileSource:
    """Catalog source backed by a local JSON document."""

    path: Path
    kind: str = "file"

    def load(self) -> Catalog:
        return load_from_file(self.path)

    def describe(self) -> str:
        return f"file {self.path}"


@dataclass(frozen=True)
class DatabaseSource:
    """Catalog source backed by the AlloyDB catalog table."""

    settings: Settings
    connector_factory: Optional[catalog_database.ConnectorFactory] = None
    driver_url: str = catalog_database.DEFAULT_DRIVER_URL
    kind: str = "database"

    def load(self) -> Catalog:
        return catalog_database.load_from_database(
            self.settings,
            connector_factory=self.connector_factory,
            driver_url=self.driver_url,
        )

    def describe(self) -> str:
        return f"AlloyDB table {self.settings.alloydb_table_name}"


CatalogSource = Union[FileSource, DatabaseSource]


def select_sources(
    settings: Settings,
    connector_factory: Optional[catalog_database.ConnectorFactory] = None,
    driver_url: str = catalog_database.DEFAULT_DRIVER_URL,
) -> List[CatalogSource]:
    """
    Choose the sources for one catalog load.

    Args:
        settings: Application settings
        connector_factory: Dialer override for the database source
        driver_url: Dialect URL for the database source

    Returns:
        Sources in the order they run
    """
    sources: List[CatalogSource] = []

    if settings.database_enabled:
        sources.append(DatabaseSource(settings, connector_factory, driver_url))

    sources.append(FileSource(settings.products_path))
    return sources
