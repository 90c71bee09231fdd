"""Database engine and session management."""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Tuple

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine
)

from faceauth.core.logging import get_logger

logger = get_logger(__name__)


def create_session_factory(
    database_url: str,
    echo: bool = False,
    **engine_kwargs
) -> Tuple[AsyncEngine, async_sessionmaker]:
    """Create an async engine and a session factory bound to it.

    Args:
        database_url: SQLAlchemy async database URL
        echo: Whether to log emitted SQL
        **engine_kwargs: Extra arguments for create_async_engine (pool sizing etc.)

    Returns:
        Tuple of (engine, session factory)
    """
    engine = create_async_engine(database_url, echo=echo, **engine_kwargs)
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )
    return engine, session_factory


@asynccontextmanager
async def get_db_session(
    session_factory: async_sessionmaker,
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Yields:
        AsyncSession: Database session

    Example:
        ```python
        async with get_db_session(session_factory) as session:
            await session.execute(query)
            await session.commit()
        ```
    """
    session = session_factory()
    logger.debug("Creating new database session")
    try:
        yield session
    except Exception as e:
        logger.error(
            "Database session error",
            error=str(e),
            exc_info=True
        )
        await session.rollback()
        raise
    finally:
        logger.debug("Closing database session")
        await session.close()
