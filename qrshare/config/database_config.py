"""
Database Configuration

Configures the SQLAlchemy engine for the image record store and provides
the session factory the SQL record store is built on.
"""

import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from qrshare.infrastructure.sql_image_record_repository import Base


class DatabaseConfig:
    """Database configuration settings."""

    def __init__(self, url: Optional[str] = None):
        self.url = url or os.getenv("DATABASE_URL", "sqlite:///qrshare.db")
        self.echo = os.getenv("DATABASE_ECHO", "false").lower() == "true"

    @property
    def is_sqlite_memory(self) -> bool:
        return self.url in ("sqlite://", "sqlite:///:memory:")


# Global engine and session factory
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def init_database(config: Optional[DatabaseConfig] = None) -> Engine:
    """
    Initialize the database engine and create tables if missing.

    Args:
        config: Database configuration, uses default if None

    Returns:
        SQLAlchemy Engine
    """
    global _engine, _session_factory

    if config is None:
        config = DatabaseConfig()

    engine_kwargs = {"echo": config.echo, "future": True}
    if config.url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if config.is_sqlite_memory:
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_pre_ping"] = True

    _engine = create_engine(config.url, **engine_kwargs)
    Base.metadata.create_all(_engine)
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)
    return _engine


def get_session_factory() -> sessionmaker:
    """
    Get the session factory.

    Raises:
        RuntimeError: If the database is not initialized
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    return _session_factory

