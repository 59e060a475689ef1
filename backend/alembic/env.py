"""Alembic environment for the workflow engine schema.

Migrations run against ``DATABASE_URL`` through the same async driver the
service uses. Plain ``postgres://`` URLs, as handed out by most hosting
platforms, are rewritten to asyncpg.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

# Importing the models registers workflows and workflow_runs on the metadata
from aioffice.models import Base, Workflow, WorkflowRun  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
}


def database_url() -> str:
    """Resolve the async URL migrations connect with.

    Raises:
        RuntimeError: If DATABASE_URL is not configured.
    """
    from aioffice.core.config import settings

    if not settings.DATABASE_URL:
        raise RuntimeError("DATABASE_URL must be set to run migrations")

    url = settings.DATABASE_URL
    for prefix, driver in _ASYNC_DRIVERS.items():
        if url.startswith(prefix):
            return driver + url.removeprefix(prefix)
    return url


def run_offline() -> None:
    """Emit SQL for the pending revisions without connecting."""
    context.configure(
        url=database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_online() -> None:
    """Apply pending revisions over an async connection."""
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = database_url()

    engine = async_engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
