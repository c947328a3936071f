"""
Database connection and session management.
Handles async database operations with SQLAlchemy, connection pooling and
best-effort table creation at startup. Engines and session factories are
built per application from its settings.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool
from fastapi import Request
from sqlalchemy import event, text, Integer
from typing import Optional
from estate_api.config import Settings, get_settings
import logging

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine with pool settings suited to the backend.

    PostgreSQL gets a bounded connection pool; SQLite (used by the test suite)
    gets a single shared connection with foreign key enforcement switched on so
    that ON DELETE CASCADE behaves like it does on the server databases.
    """
    if database_url.startswith("sqlite"):
        engine = create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=10,  # Number of connections to maintain in the pool
        max_overflow=20,  # Additional connections that can be created on demand
        pool_pre_ping=True,  # Validate connections before use
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_timeout=30,  # Timeout for getting connection from pool
    )

def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create the async session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


class Base(DeclarativeBase):
    """
    Base class for all database models.
    Every table has a server-generated integer primary key.
    """

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    def __repr__(self) -> str:
        """String representation of the model."""
        return f"<{self.__class__.__name__}(id={self.id})>"


async def get_db(request: Request) -> AsyncSession:
    """
    Dependency to get database session.
    Sessions come from the factory the running app was built with; the
    session is rolled back on error and closed after use.
    """
    async with request.app.state.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def check_database_connection(target_engine: AsyncEngine) -> bool:
    """
    Test database connectivity.
    Returns True if connection is successful, False otherwise.
    """
    try:
        async with target_engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            result.scalar()
            logger.info("Database connection successful")
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


async def create_tables(target_engine: AsyncEngine) -> None:
    """
    Create the Users and Properties tables if they do not exist.

    Tables are created one at a time in dependency order. A failure is logged
    and does not stop startup; requests touching a missing table fail later.
    """
    # Registers the mapped tables on Base.metadata
    from estate_api.models import User, Property

    for table in (User.__table__, Property.__table__):
        try:
            async with target_engine.begin() as conn:
                await conn.run_sync(table.create, checkfirst=True)
            logger.info(f"{table.name} table created or already exists.")
        except Exception as e:
            logger.error(f"Error creating {table.name} table: {e}")


async def drop_tables(target_engine: AsyncEngine, settings: Optional[Settings] = None) -> None:
    """
    Drop all database tables.
    This should only be used in testing or development.

    Raises:
        RuntimeError: If the settings describe a production environment
    """
    settings = settings or get_settings()
    if settings.is_production:
        raise RuntimeError("Cannot drop tables in production environment")

    async with target_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped successfully")


async def close_db_connection(target_engine: AsyncEngine) -> None:
    """
    Close database connection.
    This should be called during application shutdown.
    """
    await target_engine.dispose()
    logger.info("Database connections closed")
