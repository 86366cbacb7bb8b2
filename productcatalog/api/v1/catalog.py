"""
==============================================================================
Catalog Management Endpoints
==============================================================================

Refresh the live catalog and inspect its state.

==============================================================================
"""

import logging

from fastapi import APIRouter, Depends

from productcatalog.core import exceptions
from productcatalog.core.dependencies import get_catalog_service
from productcatalog.core.exceptions import LoadError
from productcatalog.services.catalog_service import CatalogService


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["Catalog"])


class CatalogController:
    """Controller for catalog management operations."""

    def __init__(self, service: CatalogService):
        self._service = service

    def status(self) -> dict:
        """Describe the live snapshot."""
        store = self._service.store
        loaded_at = store.loaded_at
        return {
            "success": True,
            "loaded": store.is_loaded,
            "loaded_at": loaded_at.isoformat() if loaded_at else None,
            "products": len(store.current()),
            "reloading": self._service.is_reloading,
        }

    def refresh(self) -> dict:
        """Reload the catalog from its sources."""
        try:
            catalog = self._service.refresh_catalog()
        except LoadError as e:
            logger.error(f"Catalog refresh failed ({e.source}): {e}")
            raise exceptions.catalog_refresh_failed(e) from e

        return {
            "success": True,
            "products": len(catalog)
        }


@router.get("")
def catalog_status(service: CatalogService = Depends(get_catalog_service)):
    """Get the state of the live catalog."""
    return CatalogController(service).status()


@router.post("/refresh")
def refresh_catalog(service: CatalogService = Depends(get_catalog_service)):
    """Reload the catalog; the previous snapshot stays live on failure."""
    return CatalogController(service).refresh()
