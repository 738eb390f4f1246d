"""Database Session Manager — one bounded async pool for the registry and procedure calls.

Invariants:
    - Pool capacity is fixed: pool_size connections plus max_overflow (0 by default)
    - A caller facing an exhausted pool waits up to pool_timeout, then fails
    - Registry sessions roll back on any escaping exception; SQLAlchemy failures
      leave the session as DatabaseError
    - ProcedureExecutor borrows connections from the same engine (one capacity budget)

Design Decisions:
    - Module-level manager set by init_db() from the lifespan, never at import time
    - expire_on_commit=False: returned ApiDefinition rows stay readable after commit
    - pool_pre_ping + pool_recycle: MySQL drops idle connections after wait_timeout
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from procgate.core.errors import DatabaseError

logger = logging.getLogger(__name__)

_MYSQL_IDLE_RECYCLE_SECONDS = 3600


def _describe_failure(exc: SQLAlchemyError) -> tuple[str, str]:
    """(message, operation) for a SQLAlchemy failure; most specific class first."""
    if isinstance(exc, IntegrityError):
        return "Integrity constraint violated", "commit"
    if isinstance(exc, OperationalError):
        return "Database unreachable or connection pool exhausted", "connect"
    if isinstance(exc, DBAPIError):
        return "Database driver error", "query"
    return "Registry operation failed", "session"


class DatabaseSessionManager:
    """Owns the async engine and hands out registry sessions."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: float = 30.0,
    ):
        engine_options = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=_MYSQL_IDLE_RECYCLE_SECONDS,
            )
        self.engine: AsyncEngine = create_async_engine(database_url, **engine_options)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Registry session; rolled back and closed on every exit path."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message, operation = _describe_failure(e)
            logger.error(f"Registry {operation} failed: {e}")
            raise DatabaseError(message, operation) from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when a pooled connection answers SELECT 1."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database readiness check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **pool_options) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **pool_options)
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one registry session per request."""
    async with get_db_manager().session() as session:
        yield session
