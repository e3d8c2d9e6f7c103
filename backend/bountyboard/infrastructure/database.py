"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - Lock waits are bounded (PostgreSQL lock_timeout); a lock or pool timeout maps to
      the retryable StoreBusyError, every other SQLAlchemy failure to DatabaseError

Design Decisions:
    - Singleton db_manager initialized on startup by create_lifecycle
      (no global import side effects)
    - expire_on_commit=False: records are built after commit without lazy reloads
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy import text

from bountyboard.core.errors import DatabaseError, StoreBusyError

logger = logging.getLogger(__name__)

# Driver messages that mean "could not get the lock in time"
_LOCK_TIMEOUT_MARKERS = (
    "lock timeout",
    "lock_timeout",
    "lock not available",
    "could not obtain lock",
    "database is locked",
)


def is_lock_timeout(exc: BaseException) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in _LOCK_TIMEOUT_MARKERS)


def _connect_args(database_url: str, lock_timeout_ms: int) -> dict:
    if database_url.startswith("postgresql+asyncpg"):
        return {"server_settings": {"lock_timeout": str(lock_timeout_ms)}}
    if database_url.startswith("sqlite"):
        return {"timeout": lock_timeout_ms / 1000}
    return {}


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
        lock_timeout_ms: int = 5_000,
    ):
        self.lock_timeout_ms = lock_timeout_ms
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=lock_timeout_ms / 1000,
            pool_pre_ping=True,
            pool_recycle=3600,
            connect_args=_connect_args(database_url, lock_timeout_ms),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit")
        except PoolTimeoutError as e:
            await session.rollback()
            logger.warning(f"DB pool exhausted: {e}")
            raise StoreBusyError(
                "No database connection available", self.lock_timeout_ms,
            )
        except (OperationalError, DBAPIError) as e:
            await session.rollback()
            if is_lock_timeout(e):
                logger.warning(f"DB lock timeout: {e}")
                raise StoreBusyError(
                    "Record is locked by a concurrent operation", self.lock_timeout_ms,
                )
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Connection or operational error", "execute")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager
