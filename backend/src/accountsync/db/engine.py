"""Centralized database engine management.

This module provides a unified interface for creating and managing
SQLAlchemy engines with settings appropriate for Lambda execution.
"""

from __future__ import annotations

import os
from typing import Any
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

from accountsync.db.connection import get_database_url
from accountsync.db.connection import use_iam_auth

# Module-level engine cache for connection reuse across Lambda invocations
_ENGINE_CACHE: dict[str, Engine] = {}


def get_engine(
    use_cache: bool = True,
    pool_class: Optional[type] = None,
) -> Engine:
    """Get or create a SQLAlchemy engine.

    For IAM authentication, a new engine is always created since
    auth tokens expire. For password authentication, the engine
    is cached and reused across invocations.

    Args:
        use_cache: Whether to use the engine cache (ignored for IAM auth).
        pool_class: Override the connection pool class.

    Returns:
        A configured SQLAlchemy engine.
    """
    iam_auth = use_iam_auth()

    # IAM auth tokens expire, so don't cache the engine
    if iam_auth:
        use_cache = False
        pool_class = NullPool

    cache_key = "default"
    if use_cache and cache_key in _ENGINE_CACHE:
        return _ENGINE_CACHE[cache_key]

    database_url = get_database_url()
    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=_get_connect_args(database_url),
        **_get_pool_settings(database_url, iam_auth, pool_class),
    )

    if use_cache:
        _ENGINE_CACHE[cache_key] = engine

    return engine


def clear_engine_cache() -> None:
    """Dispose and forget cached engines (useful in tests)."""
    for engine in _ENGINE_CACHE.values():
        engine.dispose()
    _ENGINE_CACHE.clear()


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def _get_connect_args(database_url: str) -> dict[str, str]:
    """Return connection arguments for the database driver."""
    if _is_sqlite(database_url):
        return {}
    return {"sslmode": os.getenv("DATABASE_SSLMODE", "require")}


def _get_pool_settings(
    database_url: str,
    iam_auth: bool,
    pool_class: Optional[type],
) -> dict[str, Any]:
    """Return connection pool settings tuned for Lambda.

    Each execution environment serves one invocation at a time, so a
    single pooled connection is enough.
    """
    if iam_auth or pool_class == NullPool:
        return {"poolclass": NullPool}
    if pool_class is not None:
        return {"poolclass": pool_class}
    if _is_sqlite(database_url):
        return {}

    return {
        "pool_size": int(os.getenv("DB_POOL_SIZE", "1")),
        "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "0")),
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE", "300")),
        "pool_timeout": int(os.getenv("DB_POOL_TIMEOUT", "30")),
    }
