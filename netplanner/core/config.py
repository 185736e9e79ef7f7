"""
Network Design Planner - Configuration
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Centralized configuration with environment variable overrides.

Usage:
    from netplanner.core.config import settings

    limit = settings.pagination.MAX_PAGE_SIZE
"""

import os


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean from environment with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


def _get_list_env(key: str, default: list[str]) -> list[str]:
    """Get comma-separated list from environment with default."""
    value = os.environ.get(key)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


def get_database_url() -> str:
    """
    Get the full database connection URL.

    Priority order:
    1. DATABASE_URL (Docker/production standard)
    2. NDP_DATABASE_URL (explicit override)
    3. SQLite file at NDP_DB_PATH
    """
    db_url = os.environ.get("DATABASE_URL")
    if db_url:
        return db_url

    db_url = os.environ.get("NDP_DATABASE_URL")
    if db_url:
        return db_url

    db_path = os.environ.get("NDP_DB_PATH", "./netplanner.db")
    return f"sqlite:///{db_path}"


class DatabaseConfig:
    """Document store connection settings."""

    URL: str = get_database_url()

    # Echo SQL statements (development only)
    ECHO: bool = _get_bool_env("NDP_DB_ECHO", False)


class LoggingConfig:
    """Log output settings."""

    LEVEL: str = os.environ.get("NDP_LOG_LEVEL", "INFO")
    STRUCTURED: bool = _get_bool_env("NDP_LOG_STRUCTURED", False)
    FILE: str | None = os.environ.get("NDP_LOG_FILE") or None


class IdentityConfig:
    """
    Caller identity settings.

    The identity provider sits in front of the API and forwards the
    authenticated user id in a request header.
    """

    HEADER: str = os.environ.get("NDP_IDENTITY_HEADER", "X-User-Id")


class PaginationConfig:
    """List endpoint limits."""

    DEFAULT_PAGE_SIZE: int = _get_int_env("NDP_DEFAULT_PAGE_SIZE", 50)
    MAX_PAGE_SIZE: int = _get_int_env("NDP_MAX_PAGE_SIZE", 200)


class Settings:
    """Aggregated settings for the application."""

    def __init__(self):
        self.database = DatabaseConfig()
        self.logging = LoggingConfig()
        self.identity = IdentityConfig()
        self.pagination = PaginationConfig()

        self.cors_origins = _get_list_env("NDP_CORS_ORIGINS", ["*"])


# Singleton instance
settings = Settings()
