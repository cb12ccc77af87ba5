import logging

from core.entities import Category, CanonicalItem, MUSIC_CATEGORIES, TEXT_CATEGORIES

logger = logging.getLogger(__name__)

MIN_SYNOPSIS_LENGTH = 20


def is_eligible_for_staging(item: CanonicalItem) -> bool:
    """
    Minimum material an item needs before a reviewer sees it.
    """
    if item.category in MUSIC_CATEGORIES:
        return item.has_release_identity

    if item.category in TEXT_CATEGORIES:
        return bool(item.synopsis) and len(item.synopsis) > MIN_SYNOPSIS_LENGTH

    if item.category is Category.OTHER:
        return bool(item.title and item.origin_link)

    return False
