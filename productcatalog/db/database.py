"""
==============================================================================
AlloyDB Catalog Database Module
==============================================================================

Loads the product catalog from AlloyDB through SQLAlchemy.

This module implements:
- CatalogDatabase: Owner of one connector and one connection pool
- load_from_database: Database source of the catalog loader

Connection Architecture:
-----------------------
    ┌─────────────────┐
    │ CatalogDatabase │ (one per catalog load)
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │     Engine      │ (QueuePool, creator = connector dial)
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Connector    │ (AlloyDB connector: IAM + TLS to the instance)
    └─────────────────┘

The engine never learns a host name. Every pooled connection is created
by the connector from the instance URI:

    projects/<project>/locations/<region>/clusters/<cluster>/instances/<instance>

Deadline:
--------
ALLOYDB_TIMEOUT_SECONDS bounds each dial (the dial runs on a worker and is
abandoned when the deadline passes), each pool checkout, and each statement
through the server-side statement_timeout set on every new connection.

Lifecycle:
---------
Connector and engine are created for one load and released when it
returns, on success and on failure alike. Nothing is cached between loads.

==============================================================================
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional

from google.cloud.alloydb.connector import Connector
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool

from productcatalog.catalog.mapper import ROW_COLUMNS, product_from_row
from productcatalog.catalog.models import Catalog
from productcatalog.config import Settings
from productcatalog.core.exceptions import (
    ConfigError,
    QueryError,
    RowMappingError,
    SourceConnectionError,
)


# Module logger
logger = logging.getLogger(__name__)

DEFAULT_DRIVER = "pg8000"
DEFAULT_DRIVER_URL = "postgresql+pg8000://"

ConnectorFactory = Callable[[], Any]


def _close_late_connection(future: Future) -> None:
    """Close a connection whose dial finished after its deadline."""
    if future.cancelled() or future.exception() is not None:
        return
    future.result().close()
    logger.debug("Closed connection dialed after the deadline")


class CatalogDatabase:
    """
    Connection pool to the catalog database, dialed through a connector.

    Use as a context manager so the pool and the connector are always
    released.

    Attributes:
        _settings: Application settings with the AlloyDB fields
        _connector_factory: Builds the dialer (AlloyDB Connector by default)
        _driver_url: SQLAlchemy URL selecting the dialect
        _connector: Live dialer, None until opened
        _engine: Live engine, None until opened
        _dialer: Worker threads running connector dials, None until opened

    Example:
        >>> with CatalogDatabase(settings) as database:
        ...     catalog = database.fetch_catalog()
    """

    def __init__(
        self,
        settings: Settings,
        connector_factory: Optional[ConnectorFactory] = None,
        driver_url: str = DEFAULT_DRIVER_URL,
        driver: str = DEFAULT_DRIVER,
    ) -> None:
        self._settings = settings
        self._connector_factory = connector_factory or Connector
        self._driver_url = driver_url
        self._driver = driver
        self._connector: Optional[Any] = None
        self._engine: Optional[Engine] = None
        self._dialer: Optional[ThreadPoolExecutor] = None

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def __enter__(self) -> CatalogDatabase:
        try:
            self.open()
        except BaseException:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def open(self) -> None:
        """
        Create the connector and the connection pool.

        Raises:
            SourceConnectionError: If either cannot be constructed
        """
        try:
            self._connector = self._connector_factory()
        except Exception as e:
            raise SourceConnectionError(f"failed to create AlloyDB connector: {e}") from e

        try:
            self._engine = create_engine(
                self._driver_url,
                creator=self._dial,
                poolclass=QueuePool,
                pool_size=self._settings.alloydb_pool_size,
                max_overflow=0,
                pool_timeout=self._settings.alloydb_timeout_seconds,
                pool_pre_ping=True,
                echo=self._settings.debug,
            )
        except (SQLAlchemyError, TypeError, ImportError) as e:
            raise SourceConnectionError(f"failed to create connection pool: {e}") from e

        if self._engine.dialect.name == "postgresql":
            event.listen(self._engine, "connect", self.apply_statement_timeout)

        self._dialer = ThreadPoolExecutor(
            max_workers=self._settings.alloydb_pool_size,
            thread_name_prefix="alloydb-dial",
        )

        logger.debug(f"Created connection pool for {self._settings.alloydb_instance_uri}")

    def close(self) -> None:
        """Dispose of the pool, close the connector and drop pending dials."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.debug("Database connection pool disposed")

        if self._connector is not None:
            connector, self._connector = self._connector, None
            connector.close()
            logger.debug("AlloyDB connector closed")

        if self._dialer is not None:
            dialer, self._dialer = self._dialer, None
            dialer.shutdown(wait=False, cancel_futures=True)

    @property
    def statement_timeout_ms(self) -> int:
        """Server-side statement deadline in milliseconds."""
        return max(1, int(self._settings.alloydb_timeout_seconds * 1000))

    def apply_statement_timeout(self, dbapi_connection: Any, connection_record: Any = None) -> None:
        """
        Set statement_timeout on a freshly dialed connection.

        Runs in autocommit so the pool's rollback-on-return keeps the setting.
        """
        autocommit = dbapi_connection.autocommit
        dbapi_connection.autocommit = True
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute(f"SET statement_timeout = {self.statement_timeout_ms}")
        finally:
            cursor.close()
            dbapi_connection.autocommit = autocommit

    def _dial(self) -> Any:
        """
        Open one DBAPI connection through the connector.

        Raises:
            SourceConnectionError: If the dial does not finish within the deadline
        """
        timeout = self._settings.alloydb_timeout_seconds
        future = self._dialer.submit(
            self._connector.connect,
            self._settings.alloydb_instance_uri,
            self._driver,
            user=self._settings.alloydb_user,
            password=self._settings.alloydb_password.get_secret_value(),
            db=self._settings.alloydb_database_name,
            timeout=timeout,
        )

        done, _ = wait([future], timeout=timeout)
        if not done:
            future.add_done_callback(_close_late_connection)
            raise SourceConnectionError(
                f"dial to {self._settings.alloydb_instance_uri} timed out after {timeout}s"
            )
        return future.result()

    @property
    def engine(self) -> Engine:
        """Get the live engine."""
        if self._engine is None:
            raise RuntimeError("CatalogDatabase is not open")
        return self._engine

    # =========================================================================
    # QUERIES
    # =========================================================================

    def connect(self) -> Connection:
        """
        Check out a connection from the pool.

        Raises:
            SourceConnectionError: If no connection can be established
        """
        try:
            return self.engine.connect()
        except Exception as e:
            raise SourceConnectionError(
                f"failed to connect to {self._settings.alloydb_instance_uri}: {e}"
            ) from e

    def catalog_query(self):
        """SELECT statement for the configured catalog table."""
        table = self._settings.alloydb_table_name
        return text(f"SELECT {', '.join(ROW_COLUMNS)} FROM {table}")

    def fetch_catalog(self) -> Catalog:
        """
        Run the catalog query and map every row.

        Returns:
            Fully populated Catalog

        Raises:
            SourceConnectionError: If no connection can be established
            QueryError: If the query fails
            RowMappingError: If a row cannot be mapped
        """
        with self.connect() as conn:
            try:
                rows = conn.execute(self.catalog_query()).fetchall()
            except SQLAlchemyError as e:
                raise QueryError(
                    f"catalog query on {self._settings.alloydb_table_name} failed: {e}"
                ) from e

        products = []
        for row in rows:
            product = product_from_row(row)
            logger.debug(
                f"Loaded product {product.id} {product.name!r} {list(product.categories)}"
            )
            products.append(product)

        try:
            return Catalog(products=products)
        except ValueError as e:
            raise RowMappingError(str(e)) from e

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"CatalogDatabase(instance={self._settings.alloydb_instance_uri!r})"


# =============================================================================
# CATALOG SOURCE
# =============================================================================

def check_database_settings(settings: Settings) -> None:
    """
    Validate the settings the database source needs.

    Raises:
        ConfigError: If a required setting is empty or the table name is unsafe
    """
    missing = settings.missing_database_settings()
    if missing:
        raise ConfigError(f"missing AlloyDB settings: {', '.join(missing)}")

    if not settings.has_valid_table_name():
        raise ConfigError(
            f"invalid table name {settings.alloydb_table_name!r}: "
            "expected a plain SQL identifier"
        )


def load_from_database(
    settings: Settings,
    *,
    connector_factory: Optional[ConnectorFactory] = None,
    driver_url: str = DEFAULT_DRIVER_URL,
) -> Catalog:
    """
    Load a full catalog snapshot from AlloyDB.

    Args:
        settings: Application settings with the AlloyDB fields
        connector_factory: Builds the dialer; defaults to the AlloyDB Connector
        driver_url: SQLAlchemy URL selecting the dialect

    Returns:
        Fully populated Catalog

    Raises:
        ConfigError: If required settings are missing
        SourceConnectionError: If the dialer or the pool cannot be set up
        QueryError: If the query fails
        RowMappingError: If a row cannot be mapped
    """
    check_database_settings(settings)

    logger.info(
        f"Loading catalog from AlloyDB table {settings.alloydb_table_name} "
        f"({settings.alloydb_instance_uri})"
    )

    with CatalogDatabase(settings, connector_factory, driver_url) as database:
        catalog = database.fetch_catalog()

    logger.info(f"Loaded {len(catalog)} products from AlloyDB")
    return catalog
