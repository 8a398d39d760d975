"""SQLModel database engine and session management."""

import logging

from sqlalchemy import inspect
from sqlmodel import SQLModel, create_engine, Session

from tradejournal.config import settings

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False; PostgreSQL does not
connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=connect_args,
)

# Columns added to the user table after the first release.
_USER_TARGET_COLUMNS = {
    "monthly_pnl_goal": "FLOAT NOT NULL DEFAULT 0",
    "win_rate_goal": "FLOAT NOT NULL DEFAULT 0",
    "monthly_trades_goal": "INTEGER NOT NULL DEFAULT 0",
}


def _run_migrations(bind=None):
    """Run lightweight schema migrations for added columns."""
    from sqlalchemy import text

    bind = bind or engine
    inspector = inspect(bind)

    if "user" not in inspector.get_table_names():
        return

    columns = {col["name"] for col in inspector.get_columns("user")}
    missing = [name for name in _USER_TARGET_COLUMNS if name not in columns]
    if not missing:
        return

    with bind.connect() as conn:
        for name in missing:
            logger.info(f"Migrating: adding user.{name}")
            conn.execute(text(f'ALTER TABLE "user" ADD COLUMN {name} {_USER_TARGET_COLUMNS[name]}'))
        conn.commit()


def create_db_and_tables(bind=None):
    """Create all tables. Called on startup."""
    import tradejournal.models  # noqa: F401  registers table metadata

    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    _run_migrations(bind)


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
