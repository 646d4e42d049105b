"""
==============================================================================
Database Connection Management Module
==============================================================================

Connection management for the hosted Postgres database using SQLAlchemy.

This module implements:
- DatabaseManager: Singleton owning the engine and session factory
- Access-key injection into the connection URL
- get_db(): request-scoped session dependency

SQLAlchemy Architecture:
-----------------------
    ┌─────────────────┐
    │ DatabaseManager │ (Singleton)
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │     Engine      │ (Connection pool, process-wide)
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Session      │ (Request-scoped)
    └─────────────────┘

The hosted database is addressed by DATABASE_URL. When that URL carries no
password, DATABASE_KEY is used as one. SQLite URLs are accepted for local
development and tests.

==============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from suki_api.config import get_settings


# Module logger
logger = logging.getLogger(__name__)

# SQLAlchemy declarative base for all models
Base = declarative_base()


class DatabaseManager:
    """
    Centralized database connection manager.

    The engine is created lazily on first access so configuration can be
    adjusted before any connection is opened.

    Example:
        >>> db_manager = DatabaseManager()
        >>> session = db_manager.get_session()
        >>> try:
        ...     session.execute(text("SELECT 1"))
        ... finally:
        ...     session.close()
    """

    _instance: Optional[DatabaseManager] = None

    def __new__(cls) -> DatabaseManager:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, '_initialized', False):
            return

        self._settings = get_settings()
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._initialized = True

        logger.debug("DatabaseManager initialized")

    # =========================================================================
    # ENGINE MANAGEMENT
    # =========================================================================

    @property
    def url(self) -> URL:
        """Connection URL with the access key applied."""
        return build_database_url(
            self._settings.database_url,
            self._settings.database_key
        )

    @property
    def engine(self) -> Engine:
        """Get the SQLAlchemy engine (lazy initialization)."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """
        Create the SQLAlchemy engine.

        SQLite gets check_same_thread disabled; everything else gets a
        pre-pinged connection pool.
        """
        url = self.url

        if url.get_backend_name() == "sqlite":
            engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                echo=self._settings.debug,
            )
            logger.info(f"Created SQLite engine: {url.render_as_string(hide_password=True)}")
        else:
            engine = create_engine(
                url,
                pool_size=5,
                max_overflow=10,
                pool_timeout=30,
                pool_recycle=1800,
                pool_pre_ping=True,
                echo=self._settings.debug,
            )
            logger.info(
                f"Created database engine with pooling: "
                f"{url.render_as_string(hide_password=True)}"
            )

        return engine

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    @property
    def session_factory(self) -> sessionmaker:
        """Get the session factory (lazy initialization)."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory

    def get_session(self) -> Session:
        """
        Get a new database session.

        The caller is responsible for closing the session.
        """
        return self.session_factory()

    # =========================================================================
    # TABLE & CONNECTION MANAGEMENT
    # =========================================================================

    def create_tables(self) -> None:
        """Create any missing tables defined in the models."""
        # Register the models on Base.metadata
        from suki_api.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created/verified")

    def verify_connection(self) -> bool:
        """
        Verify database connection is working.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("✅ Database connected successfully")
            return True
        except Exception as e:
            logger.error(f"❌ Database connection failed: {e}")
            return False

    def dispose(self) -> None:
        """Dispose of the connection pool."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database connection pool disposed")

    def __repr__(self) -> str:
        return f"DatabaseManager(url={self.url.render_as_string(hide_password=True)!r})"


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def build_database_url(database_url: str, database_key: str) -> URL:
    """
    Parse a connection string and apply the access key.

    The key becomes the connection password unless the URL already has one
    or points at SQLite.

    Args:
        database_url: SQLAlchemy connection string
        database_key: Database access key

    Returns:
        Parsed SQLAlchemy URL
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" and not url.password:
        url = url.set(password=database_key)
    return url


@lru_cache(maxsize=1)
def get_database_manager() -> DatabaseManager:
    """Get the global DatabaseManager instance."""
    return DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @router.get("/health")
        async def health(db: Session = Depends(get_db)):
            ...
    """
    db_manager = get_database_manager()
    session = db_manager.get_session()
    try:
        yield session
    finally:
        session.close()
