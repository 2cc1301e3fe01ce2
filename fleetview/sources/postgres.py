"""
Postgres document source for fleetview.

Stores every collection in a single JSONB table (`public.documents`), one row
per document, ordered by insertion position. This mirrors a document database:
the view core never sees SQL, only raw dicts keyed by field name.

Transport failures (unreachable server, pool timeout, query errors) are
reported as FetchError so the store can keep its last good snapshot.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, List, Optional

import psycopg
from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from fleetview.config import get_settings
from fleetview.domain.errors import FetchError
from fleetview.infrastructure.db_factory import PoolManager, apply_statement_timeout
from fleetview.sources.abstract import AbstractRecordSource, Predicate, RawDocument
from fleetview.utils.logging import get_logger

log = get_logger(__name__)

_SELECT_SQL = "SELECT doc_id, data FROM public.documents WHERE collection = %s"
_PREDICATE_SQL = " AND data -> %s::text = %s"
_ORDER_SQL = " ORDER BY position"


class PostgresDocumentSource(AbstractRecordSource):
    """
    Read whole collections from the JSONB documents table.

    Uses the process-wide pool from PoolManager unless a DSN override is given,
    in which case a private pool is opened lazily (useful for tests).
    """

    name: str = "postgres"

    def __init__(
        self,
        dsn_override: Optional[str] = None,
        pool_min_size: int = 1,
        pool_max_size: int = 4,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self.pool_min_size = pool_min_size
        self.pool_max_size = pool_max_size
        self.timeout_seconds = timeout_seconds or settings.fetch_timeout_seconds
        self._dsn_override = dsn_override
        self._pool_instance: AsyncConnectionPool | None = None
        self._pool_lock = asyncio.Lock()

    async def _get_pool(self) -> AsyncConnectionPool:
        if self._pool_instance is not None:
            return self._pool_instance
        async with self._pool_lock:
            if self._pool_instance is None:
                self._pool_instance = await self._open_pool()
        return self._pool_instance

    async def _open_pool(self) -> AsyncConnectionPool:
        if self._dsn_override:
            pool = AsyncConnectionPool(
                conninfo=self._dsn_override,
                min_size=self.pool_min_size,
                max_size=self.pool_max_size,
                timeout=self.timeout_seconds,
                open=False,
            )
            try:
                await pool.open(wait=True, timeout=self.timeout_seconds)
            except Exception:
                await pool.close()
                raise
            return pool
        return await PoolManager().get_async_pool(
            min_size=self.pool_min_size, max_size=self.pool_max_size
        )

    @staticmethod
    def _build_query(collection: str, predicate: Optional[Predicate]) -> tuple[str, tuple[Any, ...]]:
        sql = _SELECT_SQL
        params: tuple[Any, ...] = (collection,)
        if predicate is not None:
            sql += _PREDICATE_SQL
            params += (predicate.field, Jsonb(predicate.value))
        return sql + _ORDER_SQL, params

    async def fetch_all(
        self, collection: str, predicate: Optional[Predicate] = None
    ) -> List[RawDocument]:
        sql, params = self._build_query(collection, predicate)
        start = time.perf_counter()
        try:
            pool = await self._get_pool()
            async with pool.connection() as conn:
                async with conn.cursor() as cur:
                    await apply_statement_timeout(cur, self.timeout_seconds)
                    await cur.execute(sql, params)
                    rows = await cur.fetchall()
        except (psycopg.Error, OSError) as exc:
            log.warning(
                f"[FETCH FAILED] {collection}",
                extra={"collection": collection, "source": self.name, "error": str(exc)},
            )
            raise FetchError(collection, str(exc)) from exc

        documents: List[RawDocument] = []
        for doc_id, data in rows:
            document = dict(data) if isinstance(data, dict) else {"_raw": data}
            document["id"] = doc_id
            documents.append(document)

        log.debug(
            f"[FETCH OK] {collection}",
            extra={
                "collection": collection,
                "documents": len(documents),
                "duration_seconds": round(time.perf_counter() - start, 4),
            },
        )
        return documents

    async def close(self) -> None:
        """Close the private pool, if this source owns one."""
        if self._dsn_override and self._pool_instance is not None:
            await self._pool_instance.close()
        self._pool_instance = None


__all__ = ["PostgresDocumentSource"]
