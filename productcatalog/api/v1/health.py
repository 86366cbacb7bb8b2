"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends

from productcatalog.core import exceptions
from productcatalog.core.dependencies import get_catalog_service
from productcatalog.services.catalog_service import CatalogService


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, service: CatalogService):
        self._service = service

    def check_catalog(self) -> dict:
        """Check catalog status."""
        store = self._service.store
        if store.is_loaded:
            return {"status": "healthy", "products": len(store.current())}
        return {"status": "not_loaded", "products": 0}

    def get_health(self) -> dict:
        """Get full health status."""
        catalog_info = self.check_catalog()

        overall = "healthy" if catalog_info["status"] == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "catalog": catalog_info["status"]
            },
            "details": {
                "products_loaded": catalog_info["products"]
            }
        }


@router.get("")
def health_check(service: CatalogService = Depends(get_catalog_service)):
    """
    Health check endpoint.

    Returns system status including API and catalog.
    """
    return HealthController(service).get_health()


@router.get("/ready")
def readiness_check(service: CatalogService = Depends(get_catalog_service)):
    """Readiness probe: ready once a catalog snapshot is published."""
    if not service.store.is_loaded:
        raise exceptions.catalog_not_loaded()
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
