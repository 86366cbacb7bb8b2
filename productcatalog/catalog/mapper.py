"""
==============================================================================
Record Mapper Module
==============================================================================

Turns one raw record into a Product.

Two record shapes are supported:
- File records: dicts from the catalog JSON document
- Database rows: positional tuples in ROW_COLUMNS order

Categories arrive either as a list of tags or as a comma-delimited string;
both are normalized to lower-case tags.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence, Tuple

from pydantic import ValidationError

from productcatalog.core.exceptions import CatalogParseError, RowMappingError

from .models import Product


# Module logger
logger = logging.getLogger(__name__)

CATEGORY_DELIMITER = ","

# Column order of the catalog query
ROW_COLUMNS = (
    "id",
    "name",
    "description",
    "picture",
    "price_usd_currency_code",
    "price_usd_units",
    "price_usd_nanos",
    "categories",
)


def normalize_categories(value: Any) -> Tuple[str, ...]:
    """
    Normalize a categories value to lower-case tags.

    Args:
        value: Comma-delimited string or sequence of strings

    Returns:
        Tuple of lower-cased, whitespace-stripped tags

    Raises:
        ValueError: If the value is neither a string nor a list of strings

    Example:
        >>> normalize_categories("Books,STATIONERY")
        ('books', 'stationery')
    """
    if isinstance(value, str):
        return tuple(tag.strip() for tag in value.lower().split(CATEGORY_DELIMITER))

    if isinstance(value, (list, tuple)):
        tags = []
        for tag in value:
            if not isinstance(tag, str):
                raise ValueError(f"category tag must be a string, got {type(tag).__name__}")
            tags.append(tag.strip().lower())
        return tuple(tags)

    raise ValueError(f"categories must be a string or a list, got {type(value).__name__}")


def product_from_record(record: Any, index: int = 0) -> Product:
    """
    Map one catalog document record to a Product.

    Args:
        record: Product-shaped dict from the catalog document
        index: Position of the record, used in error messages

    Returns:
        Validated Product

    Raises:
        CatalogParseError: If the record does not match the product schema
    """
    if not isinstance(record, Mapping):
        raise CatalogParseError(f"product #{index} is not an object")

    data = dict(record)
    try:
        if "categories" in data:
            data["categories"] = normalize_categories(data["categories"])
        return Product.model_validate(data)
    except (ValidationError, ValueError) as exc:
        raise CatalogParseError(
            f"invalid product #{index} ({data.get('id', '?')}): {exc}"
        ) from exc


def product_from_row(row: Sequence[Any]) -> Product:
    """
    Map one database row to a Product.

    The row is read positionally in ROW_COLUMNS order.

    Args:
        row: Result row of the catalog query

    Returns:
        Validated Product

    Raises:
        RowMappingError: If the row shape or a column value does not fit
    """
    values = tuple(row)
    if len(values) != len(ROW_COLUMNS):
        raise RowMappingError(
            f"expected {len(ROW_COLUMNS)} columns, got {len(values)}"
        )

    (product_id, name, description, picture,
     currency_code, units, nanos, categories) = values

    if not isinstance(categories, str):
        raise RowMappingError(f"row {product_id!r}: categories column is not text")

    try:
        return Product(
            id=product_id,
            name=name,
            description=description,
            picture=picture,
            price_usd={"currency_code": currency_code, "units": units, "nanos": nanos},
            categories=normalize_categories(categories),
        )
    except (ValidationError, ValueError) as exc:
        raise RowMappingError(f"row {product_id!r}: {exc}") from exc
