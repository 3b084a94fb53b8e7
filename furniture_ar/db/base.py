"""Database configuration and base setup for the Furniture AR catalog."""

from typing import Generator, Optional

import structlog
from sqlalchemy import Engine, create_engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_settings

logger = structlog.get_logger()


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


def get_database_url(raw_url: str) -> str:
    """Map bare postgres:// URLs, as handed out by hosting providers, to psycopg."""
    url = make_url(raw_url)
    if url.drivername in ("postgres", "postgresql"):
        url = url.set(drivername="postgresql+psycopg")
    # str(url) masks the password
    return url.render_as_string(hide_password=False)


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Create and cache the database engine on first use."""
    global _engine
    if _engine is not None:
        return _engine

    settings = get_settings()
    database_url = get_database_url(settings.database_url)

    if database_url.startswith("sqlite"):
        _engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        # statement_timeout bounds every resolver read
        timeout_ms = settings.resolver_timeout_seconds * 1000
        _engine = create_engine(
            database_url,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            pool_recycle=3600,
            connect_args={
                "connect_timeout": 10,
                "options": f"-c statement_timeout={timeout_ms}",
            },
        )

    return _engine


def get_session_local() -> sessionmaker:
    """Get a sessionmaker bound to the current engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    """Dependency to get database session."""
    session_local = get_session_local()
    db = session_local()
    try:
        yield db
    finally:
        db.close()


def init_database() -> None:
    """Create missing tables for local development; Alembic owns production schemas."""
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
    logger.info("Database initialized")
