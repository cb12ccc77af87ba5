import logging
from typing import AbstractSet, List

from core.entities import CanonicalItem

logger = logging.getLogger(__name__)


def filter_unprocessed(
    items: List[CanonicalItem],
    processed_ids: AbstractSet[str],
) -> List[CanonicalItem]:
    """
    Drop items already processed in an earlier run, and repeats inside this batch.
    Order of first appearance is kept.
    """
    unique_items: List[CanonicalItem] = []
    seen_ids = set()

    for item in items:
        if item.id in processed_ids:
            continue
        if item.id in seen_ids:
            logger.debug(f"Skipping batch duplicate: {item.id}")
            continue
        seen_ids.add(item.id)
        unique_items.append(item)

    logger.info(f"Dedup filter: {len(items)} -> {len(unique_items)} items")
    return unique_items
