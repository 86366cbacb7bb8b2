"""
==============================================================================
Catalog Store Module
==============================================================================

Process-scoped holder of the live catalog snapshot.

Locking:
-------
- load lock: held by a loader for the whole build-and-publish; loads run
  one at a time
- snapshot lock: held only for the reference swap and the read

Readers never wait for a slow load. They keep getting the previous
snapshot until the new one is swapped in whole.

==============================================================================
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from .models import Catalog


# Module logger
logger = logging.getLogger(__name__)


class CatalogStore:
    """
    Holder of the current catalog snapshot.

    Starts with an empty snapshot and is_loaded False.

    Example:
        >>> store = CatalogStore()
        >>> with store.exclusive():
        ...     store.publish(catalog)
        >>> store.current()
    """

    def __init__(self) -> None:
        self._load_lock = threading.Lock()
        self._snapshot_lock = threading.Lock()
        self._catalog = Catalog()
        self._loaded_at: Optional[datetime] = None

    @contextmanager
    def exclusive(self) -> Iterator[CatalogStore]:
        """Hold the load lock for the duration of a load."""
        with self._load_lock:
            yield self

    def publish(self, catalog: Catalog) -> None:
        """Replace the current snapshot in one step."""
        with self._snapshot_lock:
            self._catalog = catalog
            self._loaded_at = datetime.now(timezone.utc)
        logger.info(f"Published catalog snapshot with {len(catalog)} products")

    def current(self) -> Catalog:
        """Get the current snapshot."""
        with self._snapshot_lock:
            return self._catalog

    @property
    def is_loaded(self) -> bool:
        """True once a snapshot has been published."""
        with self._snapshot_lock:
            return self._loaded_at is not None

    @property
    def loaded_at(self) -> Optional[datetime]:
        """When the current snapshot was published."""
        with self._snapshot_lock:
            return self._loaded_at

    def __repr__(self) -> str:
        return f"CatalogStore(products={len(self.current())}, loaded={self.is_loaded})"
