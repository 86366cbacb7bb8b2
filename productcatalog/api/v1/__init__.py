"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- products: Product catalog reads
- catalog: Catalog refresh and status

==============================================================================
"""

from . import catalog, health, products

__all__ = ["catalog", "health", "products"]
