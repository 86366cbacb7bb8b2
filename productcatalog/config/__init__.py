"""
==============================================================================
Configuration Package
==============================================================================

Centralized configuration management using Pydantic Settings.

Usage:
------
    from productcatalog.config import get_settings, Settings

    settings = get_settings()

    if settings.database_enabled:
        print(settings.alloydb_instance_uri)

==============================================================================
"""

from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
