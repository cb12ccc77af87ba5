"""
DedupStore - durable set of feed item ids that already went through the pipeline.
"""
import logging
from datetime import datetime, timezone
from typing import Set

import aiosqlite

from services.database import Database

logger = logging.getLogger(__name__)


class DedupStore:
    """
    Grows monotonically; `clear` is an admin operation outside the normal run.
    """

    def __init__(self, database: Database):
        self.db = database

    async def load_processed_ids(self) -> Set[str]:
        """
        Return every processed id. A missing or unreadable store counts as empty.
        """
        try:
            await self.db.init_tables()
            rows = await self.db.fetchall("SELECT id FROM processed_items")
        except aiosqlite.Error as e:
            logger.error(f"Could not read processed ids from {self.db.path}: {e}")
            return set()
        return {row[0] for row in rows}

    async def mark_processed(self, item_id: str) -> None:
        await self.db.init_tables()
        await self.db.execute(
            "INSERT OR IGNORE INTO processed_items (id, processed_at) VALUES (?, ?)",
            (item_id, datetime.now(timezone.utc).isoformat()),
        )

    async def clear(self) -> int:
        await self.db.init_tables()
        count = await self.db.execute("DELETE FROM processed_items")
        logger.warning(f"Cleared {count} processed ids")
        return count
