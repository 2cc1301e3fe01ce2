"""
Database connection factory utilities for fleetview.

Provides centralized management of the async PostgreSQL pool that backs the
document source, with proper lifecycle management. The PoolManager singleton
hands out one shared pool per process; `aclose_all()` releases it.

Includes retry logic for transient connection failures using tenacity.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Optional

import psycopg
from psycopg import AsyncCursor
from psycopg_pool import AsyncConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from fleetview.config import get_settings

DOCUMENTS_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS public.documents (
    position   BIGSERIAL PRIMARY KEY,
    collection TEXT NOT NULL,
    doc_id     TEXT NOT NULL,
    data       JSONB NOT NULL,
    UNIQUE (collection, doc_id)
);
"""


def build_dsn() -> str:
    """Compose a DSN string from settings."""
    settings = get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


class PoolManager:
    """
    Thread-safe singleton for managing the async connection pool.

    Pool creation is serialized with an asyncio.Lock bound to the running
    loop, so concurrent first callers share one pool.
    """

    _instance: Optional["PoolManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "PoolManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._async_pool = None
                cls._instance._pool_lock = None
                cls._instance._pool_lock_loop = None
            return cls._instance

    def _creation_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._pool_lock is None or self._pool_lock_loop is not loop:
            self._pool_lock = asyncio.Lock()
            self._pool_lock_loop = loop
        return self._pool_lock

    async def get_async_pool(
        self, min_size: int = 1, max_size: int = 4, dsn: Optional[str] = None
    ) -> AsyncConnectionPool:
        """
        Get or create (and open) the asynchronous connection pool.

        Parameters
        ----------
        min_size : int
            Minimum number of idle connections to keep.
        max_size : int
            Maximum total connections in the pool.
        dsn : str | None
            Connection string; defaults to the one built from settings.

        Returns
        -------
        AsyncConnectionPool
            The managed async pool instance.
        """
        if self._async_pool is not None:
            return self._async_pool
        async with self._creation_lock():
            if self._async_pool is None:
                self._async_pool = await self._open_pool(min_size, max_size, dsn)
        return self._async_pool

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((psycopg.OperationalError, OSError)),
        reraise=True,
    )
    async def _open_pool(
        self, min_size: int, max_size: int, dsn: Optional[str]
    ) -> AsyncConnectionPool:
        """
        Open a new pool, retrying up to 3 times with exponential backoff when
        the server is unreachable.
        """
        settings = get_settings()
        pool = AsyncConnectionPool(
            conninfo=dsn or build_dsn(),
            min_size=min_size,
            max_size=max_size,
            timeout=settings.fetch_timeout_seconds,
            open=False,
        )
        try:
            await pool.open(wait=True, timeout=settings.fetch_timeout_seconds)
        except Exception:
            await pool.close()
            raise
        return pool

    async def aclose_all(self) -> None:
        """
        Close the managed pool and release resources.
        """
        pool, self._async_pool = self._async_pool, None
        if pool is not None:
            await pool.close()


async def apply_statement_timeout(cur: AsyncCursor, timeout_seconds: float) -> None:
    """Bound the statements of the current transaction server-side."""
    timeout_ms = max(int(timeout_seconds * 1000), 1)
    await cur.execute("SELECT set_config('statement_timeout', %s, true)", (f"{timeout_ms}ms",))


__all__ = [
    "DOCUMENTS_TABLE_DDL",
    "PoolManager",
    "apply_statement_timeout",
    "build_dsn",
]
