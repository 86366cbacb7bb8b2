"""
==============================================================================
Product Catalog Endpoints
==============================================================================

Endpoints for browsing and searching the product catalog.

Handlers are plain functions: in reload mode a read may hit the catalog
sources, so FastAPI runs them in its threadpool.

==============================================================================
"""

from fastapi import APIRouter, Depends, Query

from productcatalog.core import exceptions
from productcatalog.core.dependencies import get_catalog_service
from productcatalog.services.catalog_service import CatalogService


router = APIRouter(prefix="/products", tags=["Products"])


class ProductController:
    """Controller for product catalog operations."""

    def __init__(self, service: CatalogService):
        self._service = service

    def list_products(self) -> dict:
        """List every product of the current catalog."""
        products = self._service.list_products()
        return {
            "success": True,
            "total": len(products),
            "products": [p.to_record() for p in products]
        }

    def search(self, query: str) -> dict:
        """Search products by name or description."""
        matched = self._service.search_products(query)
        return {
            "success": True,
            "query": query,
            "total": len(matched),
            "products": [p.to_record() for p in matched]
        }

    def get_by_id(self, product_id: str) -> dict:
        """Get product by id."""
        product = self._service.get_product(product_id)

        if not product:
            raise exceptions.product_not_found(product_id)

        return {
            "success": True,
            "product": product.to_record()
        }


@router.get("")
def list_products(service: CatalogService = Depends(get_catalog_service)):
    """List all products."""
    return ProductController(service).list_products()


@router.get("/search")
def search_products(
    q: str = Query(..., min_length=1),
    service: CatalogService = Depends(get_catalog_service)
):
    """Search products by name or description."""
    return ProductController(service).search(q)


@router.get("/{product_id}")
def get_product(product_id: str, service: CatalogService = Depends(get_catalog_service)):
    """Get product by id."""
    return ProductController(service).get_by_id(product_id)
