"""
==============================================================================
Catalog Service Module
==============================================================================

Business layer between the API and the catalog store.

This module implements:
- CatalogService: refresh/read operations over one CatalogStore
- Reload-on-read mode, toggled at runtime (SIGUSR1 / SIGUSR2)

Failure Policy:
--------------
- Startup: an unreadable catalog file is fatal; any other load error is
  logged and the service starts with an empty catalog
- Running: a failed refresh is logged and the previous snapshot stays
  current

==============================================================================
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from productcatalog.catalog.loader import CatalogLoader
from productcatalog.catalog.models import Catalog, Product
from productcatalog.catalog.store import CatalogStore
from productcatalog.config import Settings
from productcatalog.core.exceptions import CatalogReadError, LoadError


# Module logger
logger = logging.getLogger(__name__)


class CatalogService:
    """
    Service exposing the catalog to the serving layer.

    Attributes:
        _settings: Application settings
        _store: Store holding the live snapshot
        _loader: Orchestrator used for refreshes
        _reloading: Reload before every read when True

    Example:
        >>> service = CatalogService(settings)
        >>> service.refresh_catalog()
        >>> service.get_current_catalog()
    """

    def __init__(
        self,
        settings: Settings,
        store: Optional[CatalogStore] = None,
        loader: Optional[CatalogLoader] = None,
    ) -> None:
        self._settings = settings
        self._store = store if store is not None else CatalogStore()
        self._loader = loader if loader is not None else CatalogLoader(settings)
        self._toggle_lock = threading.Lock()
        self._reloading = settings.reload_catalog_on_read

    @property
    def store(self) -> CatalogStore:
        """Get the catalog store."""
        return self._store

    # =========================================================================
    # LOADING
    # =========================================================================

    def refresh_catalog(self) -> Catalog:
        """
        Reload the catalog from its sources and publish it.

        Raises:
            LoadError: If the load fails; the previous snapshot stays current
        """
        return self._loader.load(self._store)

    def load_initial_catalog(self) -> Optional[Catalog]:
        """
        First load at startup.

        Returns:
            The loaded catalog, or None if it could not be parsed/loaded

        Raises:
            CatalogReadError: If the catalog file cannot be read
        """
        try:
            catalog = self.refresh_catalog()
        except CatalogReadError as e:
            logger.critical(f"❌ Cannot read product catalog, aborting startup: {e}")
            raise
        except LoadError as e:
            logger.error(f"❌ Failed to load catalog, serving an empty one: {e}")
            return None

        logger.info(f"✅ Loaded {len(catalog)} products")
        return catalog

    # =========================================================================
    # RELOAD MODE
    # =========================================================================

    @property
    def is_reloading(self) -> bool:
        """True when every read reloads the catalog."""
        with self._toggle_lock:
            return self._reloading

    def enable_reloading(self) -> None:
        """Reload the catalog before every read."""
        with self._toggle_lock:
            self._reloading = True
        logger.info("Enable catalog reloading")

    def disable_reloading(self) -> None:
        """Serve the published snapshot without reloading."""
        with self._toggle_lock:
            self._reloading = False
        logger.info("Disable catalog reloading")

    # =========================================================================
    # READS
    # =========================================================================

    def get_current_catalog(self) -> Catalog:
        """
        Get the current snapshot, reloading first in reload mode.

        A failed reload is logged and the previous snapshot returned.
        """
        if self.is_reloading:
            try:
                return self.refresh_catalog()
            except LoadError as e:
                logger.error(f"Catalog reload failed, serving previous snapshot: {e}")
        return self._store.current()

    def list_products(self) -> List[Product]:
        """All products of the current snapshot."""
        return list(self.get_current_catalog().products)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Find a product by id."""
        return self.get_current_catalog().find(product_id)

    def search_products(self, query: str) -> List[Product]:
        """Products whose name or description contains the query."""
        return self.get_current_catalog().search(query)
