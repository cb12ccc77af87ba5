"""
CategoryEnricher - dispatches each item to the enrichment strategy of its category.

Music releases go to a Spotify catalog lookup, News/Rumor posts to article text
resolution, everything else passes through untouched.
"""
import logging
from typing import Any, Dict, Optional

from core.entities import Category, CanonicalItem, MUSIC_CATEGORIES, TEXT_CATEGORIES
from processing.article_extractor import ArticleResolver
from processing.producers import producers_from_album
from services.spotify import SpotifyClient, TokenCache

logger = logging.getLogger(__name__)

SEARCH_HINTS = {
    Category.ALBUM: "album",
    Category.EP: "ep",
}


def _first_image(release: Dict[str, Any]) -> Optional[str]:
    images = release.get("images") or []
    if images and isinstance(images[0], dict):
        return images[0].get("url")
    return None


def refine_category(category: Category, release: Dict[str, Any]) -> Category:
    """
    A Track whose underlying release is album-typed becomes an Album.
    """
    if category is Category.TRACK and release.get("album_type") == "album":
        return Category.ALBUM
    return category


def build_search_query(item: CanonicalItem) -> str:
    query = f"{item.artist} {item.work_title}"
    hint = SEARCH_HINTS.get(item.category)
    return f"{query} {hint}" if hint else query


class CategoryEnricher:
    def __init__(
        self,
        catalog: Optional[SpotifyClient] = None,
        articles: Optional[ArticleResolver] = None,
        token_cache: Optional[TokenCache] = None,
    ):
        self.catalog = catalog
        self.articles = articles or ArticleResolver()
        self.token_cache = token_cache or TokenCache()

    async def enrich(self, item: CanonicalItem) -> CanonicalItem:
        if item.category in MUSIC_CATEGORIES:
            return await self._enrich_release(item)
        if item.category in TEXT_CATEGORIES:
            return await self._enrich_article(item)
        if item.category is Category.OTHER:
            return item
        raise ValueError(f"Unhandled category: {item.category}")

    async def _enrich_article(self, item: CanonicalItem) -> CanonicalItem:
        synopsis = await self.articles.resolve(
            item.raw_text, item.origin_link, item.origin_domain
        )
        return item.model_copy(update={"synopsis": synopsis})

    async def _enrich_release(self, item: CanonicalItem) -> CanonicalItem:
        if not item.has_release_identity:
            logger.debug(f"Not enough info for a catalog lookup: {item.title}")
            return item
        if self.catalog is None:
            return item

        token = await self.catalog.refresh_if_stale(self.token_cache)
        if not token:
            return item

        query = build_search_query(item)
        if item.category in (Category.ALBUM, Category.EP):
            update = await self._lookup_album(query, token)
        else:
            update = await self._lookup_track(item, query, token)

        if not update:
            logger.info(f"No catalog match for '{query}'")
            return item
        return item.model_copy(update=update)

    async def _lookup_track(
        self,
        item: CanonicalItem,
        query: str,
        token: str,
    ) -> Dict[str, Any]:
        results = await self.catalog.search(query, "track", token)
        if not results:
            return {}

        track = results[0]
        release = track.get("album") or {}
        update: Dict[str, Any] = {
            "release_date": release.get("release_date"),
            "cover_art_url": _first_image(release),
            "catalog_link": (track.get("external_urls") or {}).get("spotify"),
            "category": refine_category(item.category, release),
        }

        if release.get("id"):
            details = await self.catalog.get_album(release["id"], token)
            if details:
                update["producers"] = producers_from_album(details)
                if not update["cover_art_url"]:
                    update["cover_art_url"] = _first_image(details)
        return update

    async def _lookup_album(self, query: str, token: str) -> Dict[str, Any]:
        results = await self.catalog.search(query, "album", token)
        if not results:
            return {}

        album = results[0]
        update: Dict[str, Any] = {
            "release_date": album.get("release_date"),
            "cover_art_url": _first_image(album),
            "catalog_link": (album.get("external_urls") or {}).get("spotify"),
        }

        if album.get("id"):
            details = await self.catalog.get_album(album["id"], token)
            if details:
                update["producers"] = producers_from_album(details)
                if not update["cover_art_url"]:
                    update["cover_art_url"] = _first_image(details)
        return update
