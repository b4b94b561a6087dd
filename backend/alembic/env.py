# alembic/env.py
from logging.config import fileConfig
import asyncio

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from hms.db.base import Base
import hms.db.models  # noqa: F401  (registers every table on Base.metadata)
from hms.config.settings import settings

#####################################################################
# 1.  URLs
#####################################################################

# the same DATABASE_URL the services use, e.g. postgresql+asyncpg://...
ASYNC_URL = settings.database_url
IS_SQLITE = ASYNC_URL.startswith("sqlite")

config = context.config
config.set_main_option("sqlalchemy.url", ASYNC_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

#####################################################################
# 2.  Shared configure() arguments
#####################################################################

def _configure_kwargs() -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        # sqlite cannot ALTER columns in place
        "render_as_batch": IS_SQLITE,
    }

#####################################################################
# 3.  Offline: emit SQL without a connection
#####################################################################

def run_migrations_offline() -> None:
    context.configure(
        url=ASYNC_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(),
    )
    with context.begin_transaction():
        context.run_migrations()

#####################################################################
# 4.  Online: run through the async driver
#####################################################################

def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, **_configure_kwargs())
    with context.begin_transaction():
        context.run_migrations()

async def run_migrations_online() -> None:
    engine = create_async_engine(ASYNC_URL, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(do_run_migrations)
    finally:
        await engine.dispose()

if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
