"""
NoteAssist migrations environment.

The only schema is the `notes` table (noteassist.models.note). Migrations
connect with the same DATABASE_URL the API uses, read from
noteassist.config.settings; alembic.ini carries no URL.

    cd backend && alembic upgrade head          # apply
    cd backend && alembic upgrade head --sql    # print SQL for a DBA
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from noteassist.config import settings
from noteassist.database import Base
from noteassist.models.note import Note  # noqa: F401  (registers the table)

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

# SQLite cannot ALTER most columns in place; batch mode rebuilds the table
RENDER_AS_BATCH = settings.database_url.startswith("sqlite")


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=Base.metadata,
        compare_type=True,
        render_as_batch=RENDER_AS_BATCH,
        **kwargs,
    )


def _migrate(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    # One short-lived connection; the app's pool settings don't apply here
    engine = create_async_engine(settings.database_url, poolclass=NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _configure(url=settings.database_url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()
else:
    asyncio.run(_migrate_online())
