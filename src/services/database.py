import aiosqlite
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional
import logging

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, path: str):
        self.path = path
        self._initialized = False
        self._memory_conn: Optional[aiosqlite.Connection] = None

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        # An in-memory database only lives as long as its connection, so it is shared.
        if self.path == ":memory:":
            if self._memory_conn is None:
                self._memory_conn = await aiosqlite.connect(self.path)
            yield self._memory_conn
            return

        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(self.path)
        await conn.execute("PRAGMA journal_mode=WAL;")
        try:
            yield conn
        finally:
            await conn.close()

    async def execute(self, query: str, params: tuple = ()) -> int:
        async with self.connect() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            return cursor.rowcount

    async def fetchone(self, query: str, params: tuple = ()):
        async with self.connect() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchone()

    async def fetchall(self, query: str, params: tuple = ()):
        async with self.connect() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchall()

    async def init_tables(self) -> None:
        """Create the processed-id and staging tables if they do not exist yet."""
        if self._initialized:
            return
        async with self.connect() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS processed_items (
                    id TEXT PRIMARY KEY,
                    processed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS staged_records (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    staged_at TIMESTAMP NOT NULL,
                    payload TEXT NOT NULL
                )
            """)
            await conn.commit()
        self._initialized = True
        logger.info(f"Database tables initialized ({self.path})")

    async def close(self) -> None:
        """Release the shared in-memory connection, if one was opened."""
        if self._memory_conn is not None:
            await self._memory_conn.close()
            self._memory_conn = None
            self._initialized = False
