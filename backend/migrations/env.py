"""Alembic environment for the sekreterlik access tables.

The database URL comes from ``DATABASE_URL`` (same default as the app), so
``alembic upgrade head`` and ``create_app()`` always point at one database.
"""
from __future__ import annotations
from logging.config import fileConfig
from sqlalchemy import create_engine, pool
from alembic import context
import os, sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sekreterlik import DEFAULT_DATABASE_URL  # noqa: E402
from sekreterlik.models.authz import Base  # noqa: E402
import sekreterlik.models.audit  # noqa: E402,F401  audit_logs shares Base.metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def database_url() -> str:
    return os.getenv('DATABASE_URL', DEFAULT_DATABASE_URL)


def run_offline():
    context.configure(url=database_url(), target_metadata=target_metadata, literal_binds=True, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()


def run_online():
    engine = create_engine(database_url(), poolclass=pool.NullPool, future=True)
    with engine.connect() as connection:
        # batch mode so ALTERs work on SQLite
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
