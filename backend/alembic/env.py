"""Alembic environment — migrations for the API definition registry.

The URL comes from procgate Settings (DATABASE_URL or .env, mysql:// rewritten for
aiomysql) whenever DATABASE_URL is set; otherwise alembic.ini's local URL is used.
Online migrations run on a throwaway NullPool engine, never on the app pool.
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from procgate.config import Settings
from procgate.db.base import Base
# Registers ApiDefinition on Base.metadata
import procgate.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _registry_url() -> str:
    if os.environ.get("DATABASE_URL"):
        return Settings().database_url
    return config.get_main_option("sqlalchemy.url")


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        **kwargs,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_offline() -> None:
    """Emit SQL to stdout (alembic upgrade --sql)."""
    _configure(
        url=_registry_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )


def _run_on_connection(connection: Connection) -> None:
    _configure(connection=connection)


async def run_online() -> None:
    engine = create_async_engine(_registry_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_on_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
