"""
Article text resolution for News/Rumor posts.

The main-content extractor is pluggable:
1. placeholder: extracts nothing, so the post gets a note asking for a manual summary (default)
2. trafilatura: purpose-built article extraction
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence
from urllib.parse import urlparse

import httpx
import trafilatura

logger = logging.getLogger(__name__)

MAX_ARTICLE_CHARS = 2000
FEED_DOMAINS = ("reddit.com", "redd.it")
BOT_USER_AGENT = "KhiphopPipelineBot/1.0"

NO_CONTENT_TEXT = "No text content provided in Reddit post or linked article."


class ContentExtractor(ABC):
    name: str

    @abstractmethod
    def extract(self, html: str, url: str) -> Optional[str]:
        """Return the main text of a page, or None when nothing usable is found."""
        raise NotImplementedError


class PlaceholderExtractor(ContentExtractor):
    name = "placeholder"

    def extract(self, html: str, url: str) -> Optional[str]:
        return None


class TrafilaturaExtractor(ContentExtractor):
    name = "trafilatura"

    def extract(self, html: str, url: str) -> Optional[str]:
        text = trafilatura.extract(html, url=url)
        return text.strip() if text else None


def create_extractor(name: str) -> ContentExtractor:
    name = (name or "placeholder").lower()
    if name == "placeholder":
        return PlaceholderExtractor()
    if name == "trafilatura":
        return TrafilaturaExtractor()
    raise ValueError(f"Unknown article extractor: {name}")


def is_feed_domain(domain: str, feed_domains: Sequence[str] = FEED_DOMAINS) -> bool:
    domain = (domain or "").lower()
    return any(domain == d or domain.endswith(f".{d}") for d in feed_domains)


class ArticleResolver:
    """
    Produces the text a News/Rumor post is summarized from: inline body,
    extracted linked article, or an explanatory placeholder.
    """

    def __init__(
        self,
        extractor: Optional[ContentExtractor] = None,
        feed_domains: Sequence[str] = FEED_DOMAINS,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.extractor = extractor or PlaceholderExtractor()
        self.feed_domains = tuple(feed_domains)
        self.timeout = timeout
        self.transport = transport

    def _points_outside_feed(self, link: str, domain: str) -> bool:
        if not link or (domain or "").lower().startswith("self."):
            return False
        host = urlparse(link).netloc or domain
        return not is_feed_domain(host, self.feed_domains)

    async def resolve(
        self,
        raw_text: Optional[str],
        origin_link: str,
        origin_domain: str,
    ) -> str:
        if raw_text and raw_text.strip():
            return raw_text

        if not self._points_outside_feed(origin_link, origin_domain):
            return NO_CONTENT_TEXT

        return await self._fetch_and_extract(origin_link)

    async def _fetch_and_extract(self, url: str) -> str:
        logger.info(f"Fetching external article: {url}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": BOT_USER_AGENT},
                transport=self.transport,
            ) as client:
                resp = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"Error fetching external content from {url}: {e}")
            return f"Error fetching content from link. Visit: {url}"

        content_type = resp.headers.get("content-type", "")
        if not resp.is_success or "text/html" not in content_type:
            return (
                f"Failed to fetch or not HTML content from {url}. "
                f"Status: {resp.status_code}"
            )

        try:
            text = self.extractor.extract(resp.text, url)
        except Exception as e:
            logger.warning(f"{self.extractor.name} extraction failed for {url}: {e}")
            text = None

        if not text:
            return (
                f"(Content from external link: {url} - "
                "needs manual summary or improved extractor)"
            )
        return text[:MAX_ARTICLE_CHARS]
