"""
==============================================================================
Catalog File Loader Tests
==============================================================================
"""

from pathlib import Path

import pytest

from productcatalog.catalog import dump_catalog, load_from_file
from productcatalog.core.exceptions import CatalogParseError, CatalogReadError, FileLoadError

from conftest import PRODUCTS, catalog_document


class TestLoadFromFile:
    """Tests for loading the JSON catalog document."""

    def test_loads_every_record(self, products_file: Path):
        """Test every record of the document becomes a product."""
        catalog = load_from_file(products_file)
        assert len(catalog) == len(PRODUCTS)
        assert catalog.ids == [record["id"] for record in PRODUCTS]

    def test_categories_are_lowercase(self, products_file: Path):
        """Test category tags are normalized to lower case."""
        catalog = load_from_file(products_file)
        for product in catalog.products:
            assert all(tag == tag.lower() for tag in product.categories)
        assert catalog.find("66VCHSJNUP").categories == ("clothing", "tops")

    def test_bundled_catalog_loads(self):
        """Test the catalog shipped with the service loads."""
        bundled = Path(__file__).resolve().parent.parent / "data" / "products.json"
        assert len(load_from_file(bundled)) == 9

    def test_missing_file(self, tmp_path: Path):
        """Test a missing file is a read error."""
        with pytest.raises(CatalogReadError) as exc_info:
            load_from_file(tmp_path / "absent.json")
        assert exc_info.value.source == "file"

    def test_invalid_json(self, write_catalog):
        """Test malformed JSON is a parse error."""
        with pytest.raises(CatalogParseError):
            load_from_file(write_catalog("{ not json"))

    def test_missing_container_key(self, write_catalog):
        """Test a document without a products list is a parse error."""
        with pytest.raises(CatalogParseError):
            load_from_file(write_catalog({"items": []}))

    @pytest.mark.parametrize("price", [
        {"currencyCode": "USD", "units": "nineteen", "nanos": 0},
        {"currencyCode": "USD", "units": 19, "nanos": "lots"},
        {"currencyCode": "USD", "units": 19.5, "nanos": 0},
        {"currencyCode": "USD", "units": True, "nanos": 0},
        {"currencyCode": "USD", "units": 19, "nanos": False},
        {"units": 19, "nanos": 0},
        "19.99",
    ])
    def test_malformed_price(self, write_catalog, price):
        """Test a malformed price is a parse error."""
        document = catalog_document()
        document["products"][0]["priceUsd"] = price
        with pytest.raises(CatalogParseError):
            load_from_file(write_catalog(document))

    def test_invalid_utf8_is_parse_error(self, tmp_path: Path):
        """Test undecodable bytes are a parse error, not a read error."""
        path = tmp_path / "products.json"
        path.write_bytes(b'{"products": [{"id": "\xff\xfe"}]}')

        with pytest.raises(CatalogParseError):
            load_from_file(path)

    def test_duplicate_ids(self, write_catalog):
        """Test duplicate product ids are rejected."""
        document = catalog_document(PRODUCTS + PRODUCTS[:1])
        with pytest.raises(CatalogParseError):
            load_from_file(write_catalog(document))

    def test_parse_errors_are_file_errors(self, write_catalog):
        """Test parse errors report the file source."""
        with pytest.raises(FileLoadError):
            load_from_file(write_catalog("[]"))


class TestDumpCatalog:
    """Tests for writing a catalog back to the document schema."""

    def test_dump_and_reload_is_identical(self, products_file: Path, tmp_path: Path):
        """Test a dumped catalog loads back unchanged."""
        catalog = load_from_file(products_file)
        copy_path = tmp_path / "copy.json"

        dump_catalog(catalog, copy_path)
        reloaded = load_from_file(copy_path)

        assert reloaded == catalog
        assert reloaded.ids == catalog.ids
