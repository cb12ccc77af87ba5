"""
WordPress REST client: cover-art upload and draft post creation.
"""
import html
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx

from core.entities import Category, CanonicalItem, PublishedPost, StagedRecord, TEXT_CATEGORIES
from publishing.base import CmsClient

logger = logging.getLogger(__name__)

_MEDIA_HOSTS = ("i.redd.it", "v.redd.it")


def build_post_title(item: CanonicalItem) -> str:
    if not item.has_release_identity:
        return item.title
    if item.category is Category.ALBUM:
        return f"{item.artist} Releases Album [{item.work_title}]"
    if item.category is Category.MUSIC_VIDEO:
        return f"{item.artist} Releases Music Video '{item.work_title}'"
    if item.category is Category.TRACK:
        return f"{item.artist} Releases Single '{item.work_title}'"
    return item.title


def _link(url: str, text: str) -> str:
    return (
        f'<a href="{html.escape(url, quote=True)}" target="_blank" '
        f'rel="noopener noreferrer">{html.escape(text)}</a>'
    )


def render_post_content(item: CanonicalItem) -> str:
    """HTML body for a post."""
    parts: List[str] = []
    is_release = item.category not in TEXT_CATEGORIES

    if is_release and item.has_release_identity:
        parts.append(f"<p><strong>Artist:</strong> {html.escape(item.artist)}</p>")
        parts.append(f"<p><strong>Title:</strong> {html.escape(item.work_title)}</p>")
    if is_release and item.release_date:
        parts.append(f"<p><strong>Release Date:</strong> {html.escape(item.release_date)}</p>")
    if is_release and item.producers:
        producers = html.escape(", ".join(item.producers))
        parts.append(f"<p><strong>Producer(s):</strong> {producers}</p>")

    if item.synopsis:
        synopsis = html.escape(item.synopsis).replace("\n", "<br>")
        parts.append(f"<h2>Synopsis</h2>\n<p>{synopsis}</p>")

    if item.catalog_link:
        parts.append(
            "<h2>Stream/Listen</h2>\n<ul>\n"
            f"  <li>{_link(item.catalog_link, 'Spotify')}</li>\n</ul>"
        )

    footer = f"<p><em>Source: {_link(item.source_link, 'r/khiphop on Reddit')}"
    origin_host = urlparse(item.origin_link).netloc.lower()
    if (
        item.origin_link
        and item.origin_link != item.source_link
        and origin_host not in _MEDIA_HOSTS
    ):
        footer += f" | {_link(item.origin_link, 'Original Source')}"
    footer += "</em></p>"
    parts.append(footer)

    return "\n".join(parts) + "\n"


def media_file_name(image_url: str, title: str, content_type: str) -> str:
    name = urlparse(image_url).path.rsplit("/", 1)[-1]
    if not name:
        name = "-".join(title.split()) + "-cover"
    if "." not in name:
        subtype = content_type.split(";")[0].split("/")[-1].strip() if "/" in content_type else ""
        name = f"{name}.{subtype or 'jpg'}"
    return name


class WordPressClient(CmsClient):
    name = "wordpress"

    def __init__(
        self,
        endpoint: str,
        username: str,
        password: str,
        publish_immediately: bool = False,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.auth = (username, password)
        self.publish_immediately = publish_immediately
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
        )

    async def upload_media(self, image_url: str, title: str) -> Optional[int]:
        """Download an image and upload it to the media library; returns the media id."""
        if not image_url:
            return None

        try:
            async with self._client() as client:
                image = await client.get(image_url)
                image.raise_for_status()
                content_type = image.headers.get("content-type", "image/jpeg")
                file_name = media_file_name(image_url, title, content_type)

                resp = await client.post(
                    f"{self.endpoint}/wp/v2/media",
                    auth=self.auth,
                    files={"file": (file_name, image.content, content_type)},
                    data={
                        "title": f"{title} Album Cover",
                        "alt_text": f"{title} - Cover Art",
                    },
                )
                resp.raise_for_status()
                return int(resp.json()["id"])

        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Error uploading media to WordPress ({image_url}): {e}")
            return None

    async def create_post(self, record: StagedRecord) -> Optional[PublishedPost]:
        featured_media = None
        if record.cover_art_url:
            featured_media = await self.upload_media(
                record.cover_art_url, record.work_title or record.title
            )

        payload: Dict[str, Any] = {
            "title": build_post_title(record),
            "content": render_post_content(record),
            "status": "publish" if self.publish_immediately else "draft",
        }
        if featured_media:
            payload["featured_media"] = featured_media

        try:
            async with self._client() as client:
                resp = await client.post(
                    f"{self.endpoint}/wp/v2/posts",
                    json=payload,
                    auth=self.auth,
                )
                resp.raise_for_status()
                data = resp.json()
            post = PublishedPost(
                id=int(data["id"]),
                link=data.get("link"),
                status=data.get("status", payload["status"]),
            )

        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to create WordPress post for {record.id}: {e}")
            return None

        logger.info(
            f"WordPress post created (ID: {post.id}, Status: {post.status}): {post.link}"
        )
        return post
