"""
Database engine and session management.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session as SQLAlchemySession
from sqlalchemy.pool import QueuePool, StaticPool
from typing import Generator, Optional

from scamshield.core.logging import get_logger
from config.settings import settings

logger = get_logger(__name__)


def build_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create an engine for ``url`` (defaults to the configured database).

    SQLite gets a thread-shareable connection; an in-memory SQLite database
    is pinned to a single connection so every session sees the same data.
    """
    url = url or settings.database.url
    echo = settings.database.echo if echo is None else echo

    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            options["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **options)

    return create_engine(
        url,
        echo=echo,
        poolclass=QueuePool,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
        pool_timeout=settings.database.pool_timeout,
        pool_recycle=settings.database.pool_recycle,
        pool_pre_ping=True,
        connect_args={
            "options": "-c timezone=utc",
            "application_name": "scamshield_core",
        }
    )


engine = build_engine()

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False  # Keep objects accessible after commit
)


def get_db() -> Generator[SQLAlchemySession, None, None]:
    """
    Yield a session that is rolled back on error and always closed.

    Usage:
        for db in get_db():
            service = build_service(db)
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def check_database_health(bind: Optional[Engine] = None) -> bool:
    """
    Check database connectivity.

    Returns:
        bool: True if a trivial query succeeds, False otherwise
    """
    try:
        with (bind or engine).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


def create_tables(bind: Optional[Engine] = None):
    """
    Create all tables.
    Development and tests only; production schemas come from Alembic.
    """
    from .models import Base
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created successfully")


def drop_tables(bind: Optional[Engine] = None):
    """
    Drop all tables. Deletes all data.
    """
    from .models import Base
    Base.metadata.drop_all(bind=bind or engine)
    logger.warning("All database tables dropped")
