"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management for the product catalog service using Pydantic
Settings.

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- AlloyDB source settings with secret password handling
- Cached singleton accessor

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Catalog Source Selection:
------------------------
Setting ALLOYDB_CLUSTER_NAME to a non-empty value enables the database
source. PROJECT_ID, REGION, ALLOYDB_INSTANCE_NAME, ALLOYDB_DATABASE_NAME,
ALLOYDB_TABLE_NAME and ALLOYDB_PASSWORD are then required.

Security Considerations:
-----------------------
- Never commit .env files to version control
- ALLOYDB_PASSWORD is held as a SecretStr and never logged

==============================================================================
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)

# Plain (optionally schema-qualified) SQL identifier
TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        products_file: Path to the bundled product catalog JSON
        reload_catalog_on_read: Reload the catalog before every read
        alloydb_cluster_name: AlloyDB cluster; non-empty enables the DB source
        project_id: Google Cloud project hosting the cluster
        region: Cluster region
        alloydb_instance_name: AlloyDB instance within the cluster
        alloydb_database_name: Database holding the catalog table
        alloydb_table_name: Table the catalog is selected from
        alloydb_user: Database user
        alloydb_password: Database password (secret)
        alloydb_timeout_seconds: Deadline for connecting and querying
        alloydb_pool_size: Connection pool size for one load

    Example:
        >>> settings = Settings(alloydb_cluster_name="")
        >>> settings.database_enabled
        False
    """

    # =========================================================================
    # PYDANTIC SETTINGS CONFIGURATION
    # =========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Product Catalog Service",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=3550,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # =========================================================================
    # CATALOG SETTINGS
    # =========================================================================
    products_file: str = Field(
        default="data/products.json",
        description="Path to product catalog JSON"
    )

    reload_catalog_on_read: bool = Field(
        default=False,
        description="Reload the catalog from its sources before every read"
    )

    # =========================================================================
    # ALLOYDB SETTINGS
    # =========================================================================
    alloydb_cluster_name: str = Field(
        default="",
        description="AlloyDB cluster name; enables the database source when set"
    )

    project_id: str = Field(default="", description="Google Cloud project id")
    region: str = Field(default="", description="AlloyDB cluster region")
    alloydb_instance_name: str = Field(default="", description="AlloyDB instance name")
    alloydb_database_name: str = Field(default="", description="Catalog database name")
    alloydb_table_name: str = Field(default="", description="Catalog table name")

    alloydb_user: str = Field(
        default="postgres",
        description="Database user"
    )

    alloydb_password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password"
    )

    alloydb_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=600,
        description="Deadline in seconds for connecting to and querying AlloyDB"
    )

    alloydb_pool_size: int = Field(
        default=2,
        ge=1,
        le=20,
        description="Connection pool size used by one catalog load"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.

        Unknown values fall back to 'development' with a warning.
        """
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator(
        "alloydb_cluster_name",
        "project_id",
        "region",
        "alloydb_instance_name",
        "alloydb_database_name",
        "alloydb_table_name",
    )
    @classmethod
    def strip_value(cls, value: str) -> str:
        """Trim surrounding whitespace from identifiers."""
        return value.strip()

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def products_path(self) -> Path:
        """Get products file as Path object."""
        return Path(self.products_file)

    @property
    def database_enabled(self) -> bool:
        """True when the AlloyDB source takes part in catalog loads."""
        return bool(self.alloydb_cluster_name)

    @property
    def alloydb_instance_uri(self) -> str:
        """
        Fully-qualified AlloyDB instance path understood by the connector.

        Returns:
            projects/<project>/locations/<region>/clusters/<cluster>/instances/<instance>
        """
        return (
            f"projects/{self.project_id}"
            f"/locations/{self.region}"
            f"/clusters/{self.alloydb_cluster_name}"
            f"/instances/{self.alloydb_instance_name}"
        )

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def missing_database_settings(self) -> List[str]:
        """
        List required AlloyDB settings that are empty.

        Returns:
            Environment variable names of the missing settings
        """
        required = {
            "PROJECT_ID": self.project_id,
            "REGION": self.region,
            "ALLOYDB_CLUSTER_NAME": self.alloydb_cluster_name,
            "ALLOYDB_INSTANCE_NAME": self.alloydb_instance_name,
            "ALLOYDB_DATABASE_NAME": self.alloydb_database_name,
            "ALLOYDB_TABLE_NAME": self.alloydb_table_name,
            "ALLOYDB_PASSWORD": self.alloydb_password.get_secret_value(),
        }
        return [name for name, value in required.items() if not value]

    def has_valid_table_name(self) -> bool:
        """Check the table name is a plain SQL identifier."""
        return bool(TABLE_NAME_PATTERN.match(self.alloydb_table_name))

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"database_enabled={self.database_enabled}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Uses lru_cache so only one Settings instance is created for the
    process. Tests build their own Settings and pass them explicitly.

    Returns:
        Global Settings instance
    """
    settings = Settings()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
