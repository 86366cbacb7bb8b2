"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for the API routes.

The CatalogService is created by the application at startup and stored on
app.state; routes receive it through get_catalog_service instead of a
module-level global, so tests can mount their own service.

Usage:
------
    @router.get("/products")
    def list_products(service: CatalogService = Depends(get_catalog_service)):
        return service.list_products()

==============================================================================
"""

from __future__ import annotations

import logging

from fastapi import Request

from productcatalog.core import exceptions
from productcatalog.services.catalog_service import CatalogService


# Module logger
logger = logging.getLogger(__name__)


def get_catalog_service(request: Request) -> CatalogService:
    """Get the CatalogService attached to the application."""
    service = getattr(request.app.state, "catalog_service", None)
    if service is None:
        logger.error("CatalogService is not attached to the application")
        raise exceptions.internal_error("Catalog service unavailable")
    return service

