"""
Title and flair parsing for feed posts.

Flair and title are both lower-cased before matching. Category checks run in a
fixed priority order and the first match wins.
"""
import re
from typing import Optional, Tuple

from core.entities import Category

_EP_WORD = re.compile(r"\bep\b")

# "Artist - Work [TAG] (feat. Someone)"
_PRIMARY_TITLE = re.compile(
    r"^(.*?)\s+-\s+(.*?)(?:\s*\[([^\]]*)\])?(?:\s*\(feat\.\s*(.*?)\))?$",
    re.IGNORECASE,
)
_BRACKETED = re.compile(r"\[.*?\]")
_STRIP_FROM_WORK = re.compile(
    r"(\[MV\]|\[Audio\]|\[Album\]|\[EP\]|\([^)]*?Prod[^)]*?\))",
    re.IGNORECASE,
)
_TITLE_TAG = re.compile(r"\[([^\]]+)\]")


def determine_category(flair: Optional[str], title: Optional[str]) -> Category:
    tag = (flair or "").lower()
    text = (title or "").lower()

    if "music video" in tag or "[mv]" in text:
        return Category.MUSIC_VIDEO
    if "album" in tag:
        return Category.ALBUM
    if _EP_WORD.search(tag):
        return Category.EP
    if "audio" in tag or "track" in tag or "[audio]" in text:
        return Category.TRACK
    if "news" in tag:
        return Category.NEWS
    if "rumor" in tag:
        return Category.RUMOR
    return Category.OTHER


def category_from_title_tag(tag: Optional[str]) -> Optional[Category]:
    """Map a bracket tag such as ``MV`` or ``Album`` to a category."""
    if not tag:
        return None
    tag = tag.strip().lower()
    if tag == "mv" or "music video" in tag:
        return Category.MUSIC_VIDEO
    if "album" in tag:
        return Category.ALBUM
    if _EP_WORD.search(tag):
        return Category.EP
    if "audio" in tag:
        return Category.TRACK
    return None


def refine_category_from_title(category: Category, title: str) -> Category:
    """
    Only ``Other`` is refined; any flair-derived category stands.
    """
    if category is not Category.OTHER:
        return category
    for tag in _TITLE_TAG.findall(title or ""):
        refined = category_from_title_tag(tag)
        if refined is not None:
            return refined
    return category


def _clean_work_title(work_title: Optional[str]) -> Optional[str]:
    if not work_title:
        return None
    cleaned = _STRIP_FROM_WORK.sub("", work_title)
    cleaned = re.sub(r"\s{2,}", " ", cleaned).strip()
    return cleaned or None


def extract_artist_and_title(
    title: str,
    category: Category,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Best-effort split of a post title into (artist, work title).

    Returns (None, None) when the title carries no usable separator.
    """
    artist: Optional[str] = None
    work_title: Optional[str] = None

    match = _PRIMARY_TITLE.match(title.strip())
    if match:
        artist = (match.group(1) or "").strip() or None
        work_title = (match.group(2) or "").strip() or None
        featured = (match.group(4) or "").strip()
        if work_title and featured and category is Category.TRACK:
            work_title = f"{work_title} (feat. {featured})"
    elif "-" in title:
        parts = [part.strip() for part in title.split("-")]
        artist = parts[0] or None
        work_title = _BRACKETED.sub("", " - ".join(parts[1:])).strip() or None

    return artist, _clean_work_title(work_title)
