"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes between the API endpoints and the catalog machinery.

    ┌─────────────────┐
    │   API Router    │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │ CatalogService  │  ← refresh / read policy
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │  CatalogLoader  │  ← source selection, publish
    └─────────────────┘

==============================================================================
"""

from .catalog_service import CatalogService

__all__ = [
    "CatalogService",
]
