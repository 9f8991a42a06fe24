"""Schema history for the likes table, applied with Alembic.

The revisions use their own version table so they can live next to the
host application's migration history.

Each revision runs in its own transaction. SQLite only honours that when
the engine comes from ``create_migration_engine`` (or has
``enable_sqlite_transactional_ddl`` applied): the stock driver commits DDL
on its own.
"""
from pathlib import Path
from typing import Any, Optional, TextIO

from alembic import command
from alembic.config import Config
from alembic.migration import MigrationContext
from sqlalchemy import create_engine, event, pool
from sqlalchemy.engine import Connection, Engine

MIGRATIONS_DIR = Path(__file__).resolve().parent
VERSION_TABLE = "likeable_alembic_version"


def enable_sqlite_transactional_ddl(engine: Engine) -> None:
    """Let SQLAlchemy, not the driver, emit BEGIN so DDL joins the transaction.

    Works for pysqlite engines and for ``AsyncEngine.sync_engine`` of
    aiosqlite ones.
    """

    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_migration_engine(url: str, **kwargs: Any) -> Engine:
    engine = create_engine(url, poolclass=pool.NullPool, **kwargs)
    if engine.dialect.name == "sqlite":
        enable_sqlite_transactional_ddl(engine)
    return engine


def alembic_config(
    url: Optional[str] = None,
    connection: Optional[Connection] = None,
    output_buffer: Optional[TextIO] = None,
) -> Config:
    config = Config(output_buffer=output_buffer)
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    if url:
        # configparser interpolation
        config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    if connection is not None:
        config.attributes["connection"] = connection
    return config


def upgrade(connection: Connection, revision: str = "head") -> None:
    """Apply pending revisions on ``connection``.

    Pass a connection without an open transaction to get one transaction
    per revision; an open one makes the whole run a single unit.
    """
    command.upgrade(alembic_config(connection=connection), revision)


def downgrade(connection: Connection, revision: str) -> None:
    command.downgrade(alembic_config(connection=connection), revision)


def current_revision(connection: Connection) -> Optional[str]:
    context = MigrationContext.configure(connection, opts={"version_table": VERSION_TABLE})
    return context.get_current_revision()
