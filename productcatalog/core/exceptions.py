"""
Application Exception Handling

Catalog load errors raised by the loaders, plus a single AppException class
for API errors with FastAPI integration.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


# ============================================
# CATALOG LOAD ERRORS
# ============================================

class LoadError(Exception):
    """
    Base class for every failure while loading the catalog.

    Attributes:
        message: Human-readable error message
        source: Which side failed: "config", "database" or "file"
    """

    source = "catalog"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigError(LoadError):
    """Required database configuration is missing or invalid."""

    source = "config"


class DatabaseLoadError(LoadError):
    """Infrastructure failure on the AlloyDB path."""

    source = "database"


class SourceConnectionError(DatabaseLoadError):
    """The dialer or the connection pool could not be set up."""


class QueryError(DatabaseLoadError):
    """The catalog query failed or timed out."""


class RowMappingError(DatabaseLoadError):
    """A database row could not be mapped to a product."""


class FileLoadError(LoadError):
    """Failure on the local catalog file path."""

    source = "file"


class CatalogReadError(FileLoadError):
    """The catalog file could not be opened or read."""


class CatalogParseError(FileLoadError):
    """The catalog file does not match the catalog document schema."""


# ============================================
# API EXCEPTIONS
# ============================================

class AppException(Exception):
    """
    Unified application exception for API error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Product not found", "PRODUCT_NOT_FOUND", 404)

    Error Codes:
        Catalog:
            - PRODUCT_NOT_FOUND (404)
            - CATALOG_NOT_LOADED (503)
            - CATALOG_CONFIG_ERROR (500)
            - CATALOG_DATABASE_ERROR (502)
            - CATALOG_FILE_ERROR (500)

        General:
            - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def product_not_found(product_id: str) -> AppException:
    """Create product not found exception."""
    return AppException(
        f"No product with ID {product_id}",
        "PRODUCT_NOT_FOUND",
        404,
        {"product_id": product_id}
    )


def catalog_not_loaded() -> AppException:
    """Create catalog not loaded exception."""
    return AppException(
        "Product catalog not loaded",
        "CATALOG_NOT_LOADED",
        503
    )


def catalog_refresh_failed(error: LoadError) -> AppException:
    """
    Translate a catalog load error into an API error.

    Database failures map to 502 so operators can tell infrastructure
    problems apart from a broken catalog file.
    """
    details = {"source": error.source, "error": type(error).__name__}

    if isinstance(error, ConfigError):
        return AppException(error.message, "CATALOG_CONFIG_ERROR", 500, details)
    if isinstance(error, DatabaseLoadError):
        return AppException(error.message, "CATALOG_DATABASE_ERROR", 502, details)
    if isinstance(error, FileLoadError):
        return AppException(error.message, "CATALOG_FILE_ERROR", 500, details)
    return internal_error(error.message)


def internal_error(message: str = "Internal server error") -> AppException:
    """Create internal server error exception."""
    return AppException(message, "INTERNAL_ERROR", 500)
