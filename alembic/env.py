"""Alembic environment configuration for async SQLAlchemy.

The application reads its DB URL from MEDIA_DATABASE_URL while Alembic
defaults to the URL in alembic.ini. In containers the database usually lives
on a mounted volume, so the env var wins when set; otherwise migrations could
land in a different file than the one the app opens.
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from app.database import Base, normalize_async_url
from app.models.orm import MediaCommentModel, MediaLikeModel, MediaRecordModel  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str | None:
    raw = os.environ.get("MEDIA_DATABASE_URL") or os.environ.get("DATABASE_URL")
    if raw:
        return normalize_async_url(raw)
    return config.get_main_option("sqlalchemy.url")


def run_migrations_offline() -> None:
    """Emit migration SQL without a database connection."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    """Run migrations with the given connection."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Run migrations in 'online' mode with async engine."""
    section = config.get_section(config.config_ini_section, {})
    url = _database_url()
    if url:
        section["sqlalchemy.url"] = url
    connectable = async_engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
