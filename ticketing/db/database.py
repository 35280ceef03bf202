"""
Database connection and session management for the Ticketing Service.
"""

import logging
from typing import Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ticketing.core.config import config
from ticketing.models import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Database manager for the Ticketing Service.
    Handles engine creation, session factories and schema bootstrap.
    """

    def __init__(self):
        self.engine = None
        self.session_factory = None
        self._initialized = False

    async def initialize(self, database_url: str = None):
        """
        Initialize the engine and session factory.

        Args:
            database_url: Optional URL overriding the configured one
        """
        if self._initialized:
            return

        try:
            db_url = database_url or await config.get_database_url()

            if db_url.startswith("sqlite"):
                self.engine = create_engine(
                    db_url,
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                    echo=False
                )
                self._enable_sqlite_foreign_keys()
            else:
                db_config = await config.get_database_config()
                self.engine = create_engine(
                    db_url,
                    pool_size=db_config["pool_size"],
                    max_overflow=db_config["max_overflow"],
                    pool_recycle=db_config["pool_recycle"],
                    pool_pre_ping=True,
                    echo=False
                )

            self.session_factory = sessionmaker(
                bind=self.engine,
                class_=Session,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False
            )

            self._initialized = True
            logger.info("Database manager initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize database manager: {e}")
            raise

    def _enable_sqlite_foreign_keys(self):
        @event.listens_for(self.engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    def create_tables(self):
        """Create all database tables."""
        if not self._initialized:
            raise RuntimeError("Database manager not initialized")

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created successfully")

    def health_check(self) -> bool:
        """
        Check database health.

        Returns:
            True if the database answers a trivial query
        """
        if not self._initialized:
            return False

        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    async def close(self):
        """Dispose of the connection pool."""
        if self.engine is not None:
            self.engine.dispose()
        self._initialized = False
        logger.info("Database connections closed")


# Global database manager instance
db_manager = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    Get database session dependency for FastAPI.

    Yields:
        SQLAlchemy database session
    """
    if not db_manager._initialized:
        raise RuntimeError("Database manager not initialized")

    session = db_manager.session_factory()
    try:
        yield session
    finally:
        session.close()
