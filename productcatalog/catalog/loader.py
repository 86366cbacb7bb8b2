"""
==============================================================================
Catalog Loader Module
==============================================================================

Runs one catalog load: selects the sources, builds the snapshot and
publishes it into the store.

Load Flow:
---------
1. Take the store's load lock
2. Run every selected source in order; the first failure aborts the load
3. Publish the last source's catalog

A failed load publishes nothing; the previous snapshot stays current.

Note:
-----
With ALLOYDB_CLUSTER_NAME set, the database is loaded first and the file
is loaded after it, so the published catalog is always the file catalog.
The database load still has to succeed. This is the established
behavior of the service and is pinned by tests.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from productcatalog.config import Settings
from productcatalog.core.exceptions import LoadError
from productcatalog.db import database as catalog_database

from .models import Catalog
from .sources import select_sources
from .store import CatalogStore


# Module logger
logger = logging.getLogger(__name__)


class CatalogLoader:
    """
    Loader orchestrator for the catalog store.

    Attributes:
        _settings: Application settings
        _connector_factory: Dialer override for the database source
        _driver_url: Dialect URL for the database source

    Example:
        >>> loader = CatalogLoader(settings)
        >>> catalog = loader.load(store)
    """

    def __init__(
        self,
        settings: Settings,
        connector_factory: Optional[catalog_database.ConnectorFactory] = None,
        driver_url: str = catalog_database.DEFAULT_DRIVER_URL,
    ) -> None:
        self._settings = settings
        self._connector_factory = connector_factory
        self._driver_url = driver_url

    def load(self, store: CatalogStore) -> Catalog:
        """
        Load the catalog and publish it into the store.

        Args:
            store: Store receiving the new snapshot

        Returns:
            The published Catalog

        Raises:
            LoadError: From the first source that fails; nothing is published
        """
        with store.exclusive():
            sources = select_sources(
                self._settings, self._connector_factory, self._driver_url
            )

            catalog: Optional[Catalog] = None
            for source in sources:
                logger.info(f"Loading product catalog from {source.describe()}")
                try:
                    catalog = source.load()
                except LoadError as e:
                    logger.warning(
                        f"Catalog load from {source.describe()} failed "
                        f"({type(e).__name__}): {e}"
                    )
                    raise

            store.publish(catalog)
            return catalog
