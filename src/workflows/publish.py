"""
Publish flow: push selected staged records to the CMS and unstage the ones that made it.
"""
import logging
from typing import Iterable, List

from core.entities import PublishSummary
from publishing.base import CmsClient
from services.staging_store import StagingStore

logger = logging.getLogger(__name__)


async def publish_staged(
    staging: StagingStore,
    cms: CmsClient,
    ids: Iterable[str],
) -> PublishSummary:
    """
    Records are published in staging order; failures stay staged for a later attempt.
    """
    records = await staging.get_by_ids(ids)
    if not records:
        logger.info("No staged records selected for publishing")
        return PublishSummary()

    published: List[str] = []
    for record in records:
        logger.info(f"Publishing: '{record.title}' ({record.id})")
        try:
            post = await cms.create_post(record)
        except Exception:
            logger.exception(f"Publishing {record.id} via {cms.name} raised")
            post = None

        if post is None:
            logger.error(f"Failed to publish '{record.title}', it stays staged")
            continue
        published.append(record.id)

    if published:
        await staging.remove_by_ids(published)

    summary = PublishSummary(
        selected=len(records),
        published=len(published),
        failed=len(records) - len(published),
    )
    logger.info(
        f"Publish finished: selected={summary.selected} "
        f"published={summary.published} failed={summary.failed}"
    )
    return summary
