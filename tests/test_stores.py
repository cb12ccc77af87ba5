"""Tests for the processed-id set and the staging area."""

import asyncio
from datetime import datetime, timezone

from core.entities import StagedRecord
from services.database import Database
from services.dedup_store import DedupStore
from services.staging_store import StagingStore


def test_dedup_bootstrap_is_empty(tmp_path):
    store = DedupStore(Database(str(tmp_path / "fresh" / "app.db")))
    assert asyncio.run(store.load_processed_ids()) == set()


def test_mark_processed_is_idempotent_and_durable(tmp_path):
    path = str(tmp_path / "app.db")

    async def scenario():
        store = DedupStore(Database(path))
        await store.mark_processed("t3_a")
        await store.mark_processed("t3_a")
        await store.mark_processed("t3_b")
        return await DedupStore(Database(path)).load_processed_ids()

    assert asyncio.run(scenario()) == {"t3_a", "t3_b"}


def test_staging_round_trip(tmp_path, make_item):
    staged_at = datetime(2024, 6, 21, 10, 0, tzinfo=timezone.utc)
    record = StagedRecord.from_item(
        make_item(producers=["250", "FRNK"], synopsis="Some text"), staged_at=staged_at
    )

    async def scenario():
        store = StagingStore(Database(str(tmp_path / "app.db")))
        await store.append(record)
        listed = await store.list()
        await store.remove_by_ids({record.id})
        return listed, await store.list()

    listed, after = asyncio.run(scenario())
    assert listed == [record]
    assert listed[0].producers == ["250", "FRNK"]
    assert after == []


def test_staging_append_duplicate_is_noop(tmp_path, make_item):
    first = StagedRecord.from_item(make_item(synopsis="first"))
    second = StagedRecord.from_item(make_item(synopsis="second"))

    async def scenario():
        store = StagingStore(Database(str(tmp_path / "app.db")))
        added = [await store.append(first), await store.append(second)]
        return added, await store.list()

    added, records = asyncio.run(scenario())
    assert added == [True, False]
    assert len(records) == 1
    assert records[0].synopsis == "first"


def test_staging_keeps_order_and_ignores_unknown_ids(tmp_path, make_item):
    records = [StagedRecord.from_item(make_item(id=f"t3_{n}")) for n in range(3)]

    async def scenario():
        store = StagingStore(Database(str(tmp_path / "app.db")))
        for record in records:
            await store.append(record)
        removed = await store.remove_by_ids({"t3_1", "t3_missing"})
        return removed, [r.id for r in await store.list()]

    removed, ids = asyncio.run(scenario())
    assert removed == 1
    assert ids == ["t3_0", "t3_2"]


def test_clear_resets_both_stores(tmp_path, make_item):
    database = Database(str(tmp_path / "app.db"))

    async def scenario():
        dedup, staging = DedupStore(database), StagingStore(database)
        await dedup.mark_processed("t3_a")
        await staging.append(StagedRecord.from_item(make_item()))
        await dedup.clear()
        await staging.clear()
        return await dedup.load_processed_ids(), await staging.list()

    assert asyncio.run(scenario()) == (set(), [])


def test_in_memory_database_keeps_tables_between_calls(make_item):
    async def scenario():
        database = Database(":memory:")
        try:
            dedup = DedupStore(database)
            staging = StagingStore(database)
            await dedup.mark_processed("t3_mem")
            await staging.append(StagedRecord.from_item(make_item(id="t3_mem")))
            return await dedup.load_processed_ids(), [r.id for r in await staging.list()]
        finally:
            await database.close()

    assert asyncio.run(scenario()) == ({"t3_mem"}, ["t3_mem"])


def test_remove_large_selection(tmp_path, make_item):
    staging = StagingStore(Database(str(tmp_path / "app.db")))
    ids = [f"t3_{n}" for n in range(1200)]

    async def scenario():
        for item_id in ("t3_5", "t3_999", "t3_keep"):
            await staging.append(StagedRecord.from_item(make_item(id=item_id)))
        removed = await staging.remove_by_ids(ids)
        return removed, [record.id for record in await staging.list()]

    assert asyncio.run(scenario()) == (2, ["t3_keep"])
