"""Alembic environment - applies Roomkeeper migrations over an async connection.

Only online migrations are supported: the rooms.version compare-and-swap
column must exist before the API starts, so migrations always run against
a live database.

Design Decisions:
    - DATABASE_URL (normalised by roomkeeper.config.Settings) wins over alembic.ini
    - NullPool: the migration engine lives for a single run
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from roomkeeper.config import get_settings
from roomkeeper.db.base import Base
import roomkeeper.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _database_url() -> str:
    if os.environ.get("DATABASE_URL"):
        return get_settings().database_url
    return config.get_main_option("sqlalchemy.url")


def _migrate(connection) -> None:
    context.configure(connection=connection, target_metadata=Base.metadata)
    with context.begin_transaction():
        context.run_migrations()


async def _run() -> None:
    engine = create_async_engine(_database_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    raise SystemExit("Offline (--sql) migrations are not supported")
asyncio.run(_run())
