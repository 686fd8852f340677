"""Alembic environment for the profile store schema."""

from __future__ import annotations

import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import engine_from_config
from sqlalchemy import pool

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

base_dir = Path(__file__).resolve().parents[2]
sys.path.append(str(base_dir / "src"))

from accountsync.db import Base  # noqa: E402
from accountsync.db.connection import get_database_url as _resolve_url  # noqa: E402

target_metadata = Base.metadata


def get_database_url() -> str:
    """Return the URL from alembic config, falling back to the app's resolver."""
    url = config.get_main_option("sqlalchemy.url")
    return url or _resolve_url()


def _escape_for_config(value: str) -> str:
    """Escape percent signs for configparser interpolation."""
    return value.replace("%", "%%")


def run_migrations_offline() -> None:
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    config.set_main_option("sqlalchemy.url", _escape_for_config(get_database_url()))
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
