"""
Database connection and session management.

This module provides the SQLAlchemy engine and session factory. The backend
runs on PostgreSQL in production and on SQLite for local development and
tests; the URL comes from EVENTDASH_DB_URL.

Budget linkage steps run inside SAVEPOINTs (``Session.begin_nested()``), so
SQLite connections are configured to let SQLAlchemy emit BEGIN itself.
"""

import os
from pathlib import Path
from typing import Generator

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session


# Look for .env in backend directory (parent of src)
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.environ.get(
    "EVENTDASH_DB_URL",
    "sqlite:///./eventdash.db"
)


def configure_sqlite_engine(target: Engine) -> None:
    """
    Make SAVEPOINT and foreign keys work on a pysqlite engine.

    pysqlite issues its own BEGIN lazily and ignores SAVEPOINT boundaries,
    so driver-level transaction handling is turned off and BEGIN is emitted
    from the engine's ``begin`` event instead. Foreign key enforcement is
    enabled per connection so ON DELETE CASCADE / SET NULL apply.

    Args:
        target: Engine created for a ``sqlite`` URL
    """

    @event.listens_for(target, "connect")
    def _on_connect(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(target, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


if DATABASE_URL.startswith("sqlite"):
    # SQLite doesn't support pool_size, max_overflow, or pool_recycle
    from sqlalchemy.pool import StaticPool
    engine = create_engine(
        DATABASE_URL,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
        echo=False,
        future=True
    )
    configure_sqlite_engine(engine)
else:
    engine = create_engine(
        DATABASE_URL,
        pool_size=20,
        max_overflow=10,
        pool_pre_ping=True,    # Verify connections before checkout
        pool_recycle=3600,     # Recycle connections after 1 hour
        echo=False,
        future=True
    )


SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True
)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI routes to get database session.

    Yields:
        Session: SQLAlchemy database session

    Usage:
        @router.get("/events")
        async def list_events(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Create all tables directly from the models.

    Only meant for local development and tests; deployments use Alembic.
    """
    from backend.src.models import Base
    Base.metadata.create_all(bind=engine)


def dispose_engine():
    """Dispose of the engine and close all pooled connections."""
    engine.dispose()
