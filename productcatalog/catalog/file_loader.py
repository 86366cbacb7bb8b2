"""
==============================================================================
Catalog File Loader
==============================================================================

Loads the catalog from the JSON document bundled with the service.

JSON Structure:
--------------
{
  "products": [
    {
      "id": "OLJCESPC7Z",
      "name": "Sunglasses",
      "description": "Add a modern touch to your outfits.",
      "picture": "/static/img/products/sunglasses.jpg",
      "priceUsd": {"currencyCode": "USD", "units": 19, "nanos": 990000000},
      "categories": ["accessories"]
    }
  ]
}

"categories" may also be a comma-delimited string.

==============================================================================
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from productcatalog.core.exceptions import CatalogParseError, CatalogReadError

from .mapper import product_from_record
from .models import Catalog


# Module logger
logger = logging.getLogger(__name__)

DOCUMENT_KEY = "products"


def load_from_file(path: Union[str, Path]) -> Catalog:
    """
    Load a full catalog snapshot from a JSON file.

    Args:
        path: Path to the catalog document

    Returns:
        Fully populated Catalog

    Raises:
        CatalogReadError: If the file cannot be opened or read
        CatalogParseError: If the content is not a valid catalog document
    """
    path = Path(path)

    try:
        raw = path.read_bytes()
    except OSError as exc:
        logger.error(f"Failed to open product catalog file {path}: {exc}")
        raise CatalogReadError(f"cannot read catalog file {path}: {exc}") from exc

    try:
        document = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning(f"Failed to parse the catalog JSON: {exc}")
        raise CatalogParseError(f"invalid JSON in {path}: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get(DOCUMENT_KEY), list):
        raise CatalogParseError(f"{path}: expected an object with a '{DOCUMENT_KEY}' list")

    products = [
        product_from_record(record, index)
        for index, record in enumerate(document[DOCUMENT_KEY])
    ]

    try:
        catalog = Catalog(products=products)
    except ValidationError as exc:
        raise CatalogParseError(f"{path}: {exc}") from exc

    logger.info(f"Successfully parsed product catalog json ({len(catalog)} products)")
    return catalog


def dump_catalog(catalog: Catalog, path: Union[str, Path]) -> None:
    """
    Write a catalog to a JSON file in the catalog document schema.

    Args:
        catalog: Snapshot to serialize
        path: Destination file
    """
    path = Path(path)
    path.write_text(
        json.dumps(catalog.to_document(), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    logger.debug(f"Wrote {len(catalog)} products to {path}")
