"""
StagingPipeline - one fetch → dedup → enrich → stage batch run.
"""
import logging
from typing import Awaitable, Callable, Optional

from core.entities import CanonicalItem, RunSummary, StagedRecord
from ingestion.base import SourceAdapter
from processing.category_enricher import CategoryEnricher
from processing.deduplicator import filter_unprocessed
from processing.eligibility import is_eligible_for_staging
from processing.summarizer import SummaryEnricher
from publishing.markdown_debug import MarkdownDebugWriter
from services.dedup_store import DedupStore
from services.staging_store import StagingStore
from workflows.base import IngestionPipeline

logger = logging.getLogger(__name__)


class StagingPipeline(IngestionPipeline):
    """
    Items are processed strictly one after another so outbound calls against
    rate-limited APIs stay sequential and one item's failure stays contained.
    """

    def __init__(
        self,
        source: SourceAdapter,
        dedup: DedupStore,
        staging: StagingStore,
        category_enricher: CategoryEnricher,
        summary_enricher: Optional[SummaryEnricher] = None,
        fetch_limit: int = 100,
        debug_writer: Optional[MarkdownDebugWriter] = None,
    ):
        self.source = source
        self.dedup = dedup
        self.staging = staging
        self.category_enricher = category_enricher
        self.summary_enricher = summary_enricher or SummaryEnricher()
        self.fetch_limit = fetch_limit
        self.debug_writer = debug_writer

    @property
    def name(self) -> str:
        return self.source.name

    async def run_once(self) -> RunSummary:
        logger.info(f"[{self.name}] Starting pipeline run")

        processed_ids = await self.dedup.load_processed_ids()
        logger.info(f"[{self.name}] Loaded {len(processed_ids)} processed id(s)")

        try:
            items = await self.source.fetch_items(self.fetch_limit)
        except Exception as e:
            logger.error(f"[{self.name}] Source failed: {e}")
            items = []

        if not items:
            logger.info(f"[{self.name}] No items fetched")
            return self._finish(RunSummary())

        new_items = filter_unprocessed(items, processed_ids)
        logger.info(f"[{self.name}] {len(new_items)} new of {len(items)} fetched")

        staged_count = 0
        skipped_count = 0
        for item in new_items:
            outcome = await self._process_item(item)
            if outcome == "staged":
                staged_count += 1
            elif outcome == "skipped":
                skipped_count += 1

        return self._finish(
            RunSummary(
                fetched=len(items),
                new_count=len(new_items),
                staged_count=staged_count,
                skipped_count=skipped_count,
            )
        )

    async def _process_item(self, item: CanonicalItem) -> str:
        """
        Returns "staged", "skipped" (gate failed, marked processed), "already staged"
        (staged by an earlier run that did not get to mark it) or "failed"
        (persistence error, left for the next run).
        """
        logger.info(f"[{self.name}] Processing {item.id}: {item.title}")

        item = await self._step("category enrichment", self.category_enricher.enrich, item)
        item = await self._step("summary", self.summary_enricher.enrich, item)

        if self.debug_writer is not None:
            try:
                self.debug_writer.write(item)
            except OSError as e:
                logger.warning(f"[{self.name}] Debug markdown for {item.id} failed: {e}")

        eligible = is_eligible_for_staging(item)
        outcome = "staged" if eligible else "skipped"
        try:
            if eligible:
                if not await self.staging.append(StagedRecord.from_item(item)):
                    outcome = "already staged"
            else:
                logger.warning(
                    f"[{self.name}] Skipping staging for '{item.title}' ({item.id}): "
                    "missing critical information"
                )
            await self.dedup.mark_processed(item.id)
        except Exception as e:
            logger.error(f"[{self.name}] Persisting {item.id} failed, will retry next run: {e}")
            return "failed"

        return outcome

    async def _step(
        self,
        label: str,
        enrich: Callable[[CanonicalItem], Awaitable[CanonicalItem]],
        item: CanonicalItem,
    ) -> CanonicalItem:
        try:
            return await enrich(item)
        except Exception:
            logger.exception(f"[{self.name}] {label} failed for {item.id}, continuing")
            return item

    def _finish(self, summary: RunSummary) -> RunSummary:
        logger.info(
            f"[{self.name}] Run finished: fetched={summary.fetched} new={summary.new_count} "
            f"staged={summary.staged_count} skipped={summary.skipped_count}"
        )
        return summary
