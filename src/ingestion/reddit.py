import html
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import httpx

from core.classification import (
    determine_category,
    extract_artist_and_title,
    refine_category_from_title,
)
from core.entities import CanonicalItem
from ingestion.base import SourceAdapter

logger = logging.getLogger(__name__)

DEFAULT_LISTING_URL = "https://www.reddit.com/r/khiphop/new.json"
DEFAULT_USER_AGENT = "khiphop-pipeline/1.0"

_NO_THUMBNAIL = {"", "self", "default", "nsfw"}


class RedditAdapter(SourceAdapter):
    name = "reddit"

    def __init__(
        self,
        listing_url: str = DEFAULT_LISTING_URL,
        allowed_flairs: Sequence[str] = (),
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.listing_url = listing_url
        self.allowed_flairs = list(allowed_flairs)
        self.user_agent = user_agent
        self.timeout = timeout
        self.transport = transport

    async def fetch_items(self, limit: int) -> List[CanonicalItem]:
        headers = {"User-Agent": self.user_agent}
        params = {"limit": str(limit), "t": "day"}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self.transport,
            ) as client:
                resp = await client.get(self.listing_url, params=params)
                resp.raise_for_status()
                payload = resp.json()

            children = payload["data"]["children"]
            if not isinstance(children, list):
                raise TypeError("listing children is not a list")

        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Reddit fetch failed ({self.listing_url}): {e}")
            return []

        items: List[CanonicalItem] = []
        for child in children[:limit]:
            data = child.get("data") if isinstance(child, dict) else None
            if not isinstance(data, dict):
                continue
            if data.get("stickied"):
                continue
            if not self._flair_allowed(data.get("link_flair_text")):
                continue
            try:
                items.append(self._map_post(data))
            except (ValueError, TypeError, KeyError) as e:
                logger.warning(f"Skipping malformed Reddit post {data.get('name')}: {e}")

        logger.info(f"Fetched {len(items)} items from {self.listing_url}")
        return items

    def _flair_allowed(self, flair: Optional[str]) -> bool:
        if not self.allowed_flairs:
            return True
        return bool(flair) and flair in self.allowed_flairs

    def _map_post(self, data: Dict[str, Any]) -> CanonicalItem:
        title = html.unescape(data.get("title") or "")
        flair = data.get("link_flair_text") or None

        thumbnail = data.get("thumbnail")
        if not thumbnail or thumbnail in _NO_THUMBNAIL:
            thumbnail = None

        category = determine_category(flair, title)
        category = refine_category_from_title(category, title)
        artist, work_title = extract_artist_and_title(title, category)

        return CanonicalItem(
            id=data["name"],
            title=title,
            category=category,
            flair=flair,
            source_link=f"https://www.reddit.com{data.get('permalink', '')}",
            origin_link=data.get("url") or "",
            origin_domain=data.get("domain") or "",
            raw_text=data.get("selftext") or None,
            thumbnail_url=thumbnail,
            posted_at=datetime.fromtimestamp(
                float(data.get("created_utc", 0)), tz=timezone.utc
            ),
            artist=artist,
            work_title=work_title,
        )
