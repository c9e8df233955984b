"""
Migrations for the bookings schema.

The URL comes from moviepay settings (DATABASE_URL_SYNC, or DATABASE_URL
rewritten to the psycopg2 driver), never from alembic.ini, so migrations and
the app always target the same database. `alembic upgrade head --sql` renders
the DDL offline for review.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from moviepay.core.config import get_settings
from moviepay.core.exceptions import ConfigurationError
from moviepay.db.base import Base
import moviepay.models  # noqa: F401 - registers Booking on Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def database_url() -> str:
    settings = get_settings()
    if not (settings.DATABASE_URL_SYNC or settings.DATABASE_URL):
        raise ConfigurationError("Missing required configuration: DATABASE_URL")
    return settings.sync_database_url


def configure_options() -> dict:
    # autogenerate also diffs column types (amount precision) and server defaults
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "compare_server_default": True,
    }


def run_migrations_offline() -> None:
    context.configure(
        url=database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, **configure_options())
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
