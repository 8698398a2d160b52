import asyncio
from contextlib import asynccontextmanager
from typing import Optional
from psycopg_pool import AsyncConnectionPool
from portfolio.core.settings import settings

_pool: Optional[AsyncConnectionPool] = None
_pool_lock = asyncio.Lock()

def _normalize_conninfo(url: str) -> str:
    """Normalize the database connection string for psycopg_pool."""
    if url.startswith("postgresql+psycopg2://") or url.startswith("postgresql+psycopg://"):
        return "postgresql://" + url.split("://", 1)[1]
    return url

async def get_pool() -> AsyncConnectionPool:
    """Return the shared pool, opening it on first use. Concurrent first callers get the same pool."""
    global _pool
    if _pool is not None:
        return _pool
    async with _pool_lock:
        if _pool is None:
            pool = AsyncConnectionPool(_normalize_conninfo(settings.database_url), min_size=1, max_size=10, open=False)
            await pool.open(wait=True)
            _pool = pool
    return _pool

@asynccontextmanager
async def db_conn():
    """Yield (conn, cur) from a pooled connection."""
    pool = await get_pool()
    async with pool.connection() as conn:
        async with conn.cursor() as cur:
            yield conn, cur

async def close_pool():
    global _pool
    async with _pool_lock:
        if _pool is not None:
            await _pool.close()
            _pool = None
