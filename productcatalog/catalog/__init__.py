"""
==============================================================================
Catalog Package - Product Catalog Loading
==============================================================================

In-memory product catalog and the machinery that (re)loads it.

Classes:
--------
- Money, Product, Catalog: Frozen Pydantic models
- CatalogStore: Holder of the live snapshot

Modules:
--------
- mapper: Raw record -> Product
- file_loader: JSON document source
- sources: FileSource / DatabaseSource selection
- loader: CatalogLoader orchestrator

The sources and loader modules depend on productcatalog.db and are
imported from their modules directly:

    from productcatalog.catalog.loader import CatalogLoader

==============================================================================
"""

from .models import Catalog, Money, Product
from .mapper import normalize_categories, product_from_record, product_from_row
from .file_loader import dump_catalog, load_from_file
from .store import CatalogStore

__all__ = [
    "Catalog",
    "Money",
    "Product",
    "normalize_categories",
    "product_from_record",
    "product_from_row",
    "dump_catalog",
    "load_from_file",
    "CatalogStore",
]
