"""
StagingStore - ordered, durable holding area for enriched items awaiting review.
"""
import logging
from typing import Iterable, List

import aiosqlite
from pydantic import ValidationError

from core.entities import StagedRecord
from services.database import Database

logger = logging.getLogger(__name__)

# Stays under SQLite's default host-parameter limit.
REMOVE_BATCH_SIZE = 500


class StagingStore:
    def __init__(self, database: Database):
        self.db = database

    async def list(self) -> List[StagedRecord]:
        """Snapshot of staged records in staging order."""
        try:
            await self.db.init_tables()
            rows = await self.db.fetchall(
                "SELECT id, payload FROM staged_records ORDER BY seq"
            )
        except aiosqlite.Error as e:
            logger.error(f"Could not read staging area from {self.db.path}: {e}")
            return []
        return self._decode(rows)

    async def get_by_ids(self, ids: Iterable[str]) -> List[StagedRecord]:
        wanted = set(ids)
        return [record for record in await self.list() if record.id in wanted]

    async def append(self, record: StagedRecord) -> bool:
        """
        Stage a record. Returns False when the id is already staged.
        """
        await self.db.init_tables()
        inserted = await self.db.execute(
            "INSERT OR IGNORE INTO staged_records (id, staged_at, payload) VALUES (?, ?, ?)",
            (record.id, record.staged_at.isoformat(), record.model_dump_json()),
        )
        if not inserted:
            logger.debug(f"Record {record.id} already staged, skipping")
        return bool(inserted)

    async def remove_by_ids(self, ids: Iterable[str]) -> int:
        ids = list(set(ids))
        if not ids:
            return 0
        await self.db.init_tables()
        removed = 0
        for start in range(0, len(ids), REMOVE_BATCH_SIZE):
            batch = ids[start:start + REMOVE_BATCH_SIZE]
            placeholders = ",".join("?" for _ in batch)
            removed += await self.db.execute(
                f"DELETE FROM staged_records WHERE id IN ({placeholders})",
                tuple(batch),
            )
        logger.info(f"Removed {removed} record(s) from staging")
        return removed

    async def clear(self) -> int:
        await self.db.init_tables()
        count = await self.db.execute("DELETE FROM staged_records")
        logger.warning(f"Cleared {count} staged records")
        return count

    @staticmethod
    def _decode(rows) -> List[StagedRecord]:
        records: List[StagedRecord] = []
        for item_id, payload in rows:
            try:
                records.append(StagedRecord.model_validate_json(payload))
            except ValidationError as e:
                logger.error(f"Unreadable staged record {item_id}: {e}")
        return records
