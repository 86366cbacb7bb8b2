"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for the product catalog.

Wire format:
-----------
Models accept and emit the camelCase field names of the catalog document
("priceUsd", "currencyCode") while exposing snake_case attributes.

All models are frozen: a Product or Catalog never changes after it is built.

==============================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


NANOS_MAX = 999_999_999


class Money(BaseModel):
    """
    Amount of money in a given currency.

    Attributes:
        currency_code: ISO 4217 three-letter code, e.g. "USD"
        units: Whole units of the amount
        nanos: Nano units (10^-9) of the amount; same sign as units
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    currency_code: str = Field(
        ...,
        alias="currencyCode",
        pattern=r"^[A-Z]{3}$",
        description="ISO 4217 currency code"
    )
    units: int = Field(default=0, description="Whole units")
    nanos: int = Field(
        default=0,
        ge=-NANOS_MAX,
        le=NANOS_MAX,
        description="Nano units of the amount"
    )

    @field_validator("units", "nanos", mode="before")
    @classmethod
    def reject_booleans(cls, value: Any) -> Any:
        """JSON true/false are not amounts."""
        if isinstance(value, bool):
            raise ValueError("amount must be a number, not a boolean")
        return value

    @model_validator(mode="after")
    def check_signs(self) -> "Money":
        """Units and nanos must not have opposite signs."""
        if (self.units > 0 and self.nanos < 0) or (self.units < 0 and self.nanos > 0):
            raise ValueError("units and nanos must have the same sign")
        return self


class Product(BaseModel):
    """
    Product entry of the catalog.

    Attributes:
        id: Unique product identifier, stable across reloads
        name: Display name
        description: Human-readable description
        picture: Path or URL of the product image
        price_usd: Product price
        categories: Lower-case category tags, at least one
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Product id")
    name: str = Field(..., description="Product name")
    description: str = Field(default="", description="Product description")
    picture: str = Field(default="", description="Product image")
    price_usd: Money = Field(..., alias="priceUsd", description="Product price")
    categories: Tuple[str, ...] = Field(..., min_length=1, description="Category tags")

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        """Tags must be non-empty and lower-case."""
        for tag in value:
            if not tag:
                raise ValueError("category tags must not be empty")
            if tag != tag.lower():
                raise ValueError(f"category tag '{tag}' is not lower-case")
        return value

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name or description."""
        needle = query.lower()
        return needle in self.name.lower() or needle in self.description.lower()

    def to_record(self) -> Dict[str, Any]:
        """Serialize to a catalog document record."""
        return self.model_dump(by_alias=True, mode="json")


class Catalog(BaseModel):
    """
    One complete, immutable snapshot of the product catalog.

    Products keep the order of their source. Product ids are unique.

    Example:
        >>> catalog = Catalog(products=[product])
        >>> catalog.find("OLJCESPC7Z")
    """

    model_config = ConfigDict(frozen=True)

    products: Tuple[Product, ...] = Field(default=())

    @field_validator("products")
    @classmethod
    def validate_unique_ids(cls, value: Tuple[Product, ...]) -> Tuple[Product, ...]:
        """Reject snapshots with duplicate product ids."""
        seen = set()
        for product in value:
            if product.id in seen:
                raise ValueError(f"duplicate product id '{product.id}'")
            seen.add(product.id)
        return value

    def __len__(self) -> int:
        return len(self.products)

    @property
    def ids(self) -> List[str]:
        """Product ids in catalog order."""
        return [product.id for product in self.products]

    def find(self, product_id: str) -> Optional[Product]:
        """Find a product by id."""
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def search(self, query: str) -> List[Product]:
        """Products whose name or description contains the query."""
        query = query.strip()
        if not query:
            return []
        return [product for product in self.products if product.matches(query)]

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the catalog document schema."""
        return {"products": [product.to_record() for product in self.products]}
