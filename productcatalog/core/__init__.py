"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

Modules:
--------
- exceptions: Catalog load errors, AppException and its factory functions
- dependencies: FastAPI dependency injection functions (import directly)

Usage:
------
    from productcatalog.core import AppException, LoadError

    from productcatalog.core import exceptions
    raise exceptions.product_not_found("OLJCESPC7Z")

==============================================================================
"""

from .exceptions import (
    AppException,
    CatalogParseError,
    CatalogReadError,
    ConfigError,
    DatabaseLoadError,
    FileLoadError,
    LoadError,
    QueryError,
    RowMappingError,
    SourceConnectionError,
    register_exception_handlers,
)

__all__ = [
    # Load errors
    "LoadError",
    "ConfigError",
    "DatabaseLoadError",
    "SourceConnectionError",
    "QueryError",
    "RowMappingError",
    "FileLoadError",
    "CatalogReadError",
    "CatalogParseError",
    # API errors
    "AppException",
    "register_exception_handlers",
]
