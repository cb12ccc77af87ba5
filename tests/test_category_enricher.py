"""Tests for category dispatch, catalog lookup and article resolution."""

import asyncio

import httpx
import pytest

from core.entities import Category
from processing.article_extractor import (
    MAX_ARTICLE_CHARS,
    NO_CONTENT_TEXT,
    ArticleResolver,
    ContentExtractor,
    PlaceholderExtractor,
    TrafilaturaExtractor,
    create_extractor,
)
from processing.category_enricher import CategoryEnricher, build_search_query, refine_category
from services.spotify import SpotifyClient

TRACK_SEARCH = {
    "tracks": {"items": [{
        "id": "trk1",
        "name": "Forget It",
        "external_urls": {"spotify": "https://open.spotify.com/track/trk1"},
        "album": {
            "id": "alb1",
            "album_type": "album",
            "release_date": "2024-05-01",
            "images": [{"url": "https://i.scdn.co/image/cover"}],
        },
    }]}
}
ALBUM_DETAILS = {
    "id": "alb1",
    "label": "MORE VISION",
    "images": [{"url": "https://i.scdn.co/image/cover-large"}],
    "copyrights": [{"text": "2024 MORE VISION, produced by Cha Cha Malone", "type": "P"}],
}


class SpotifyStub:
    def __init__(self, search=TRACK_SEARCH, details=ALBUM_DETAILS, token_status=200):
        self.search = search
        self.details = details
        self.token_status = token_status
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        path = request.url.path
        if path == "/api/token":
            if self.token_status != 200:
                return httpx.Response(self.token_status)
            return httpx.Response(200, json={"access_token": "tok", "expires_in": 3600})
        if path == "/v1/search":
            return httpx.Response(200, json=self.search)
        if path.startswith("/v1/albums/"):
            return httpx.Response(200, json=self.details)
        return httpx.Response(404)

    def paths(self):
        return [request.url.path for request in self.requests]


def _enricher(stub):
    catalog = SpotifyClient("id", "secret", transport=httpx.MockTransport(stub))
    return CategoryEnricher(catalog=catalog)


def test_track_lookup_populates_release_fields(make_item):
    stub = SpotifyStub()
    item = make_item(category=Category.TRACK, artist="Jay Park", work_title="Forget It")

    enriched = asyncio.run(_enricher(stub).enrich(item))

    assert enriched.release_date == "2024-05-01"
    assert enriched.cover_art_url == "https://i.scdn.co/image/cover"
    assert enriched.catalog_link == "https://open.spotify.com/track/trk1"
    assert enriched.producers == ["Cha Cha Malone"]
    assert enriched.category == Category.ALBUM
    assert enriched.artist == "Jay Park"
    assert enriched.work_title == "Forget It"
    assert stub.paths() == ["/api/token", "/v1/search", "/v1/albums/alb1"]


def test_music_video_is_not_refined_to_album(make_item):
    enriched = asyncio.run(_enricher(SpotifyStub()).enrich(make_item()))
    assert enriched.category == Category.MUSIC_VIDEO


def test_album_lookup_uses_album_search_with_hint(make_item):
    search = {"albums": {"items": [{
        "id": "alb9",
        "release_date": "2023-11-11",
        "images": [],
        "external_urls": {"spotify": "https://open.spotify.com/album/alb9"},
    }]}}
    stub = SpotifyStub(search=search)
    item = make_item(category=Category.ALBUM, artist="Epik High", work_title="21C Love")

    enriched = asyncio.run(_enricher(stub).enrich(item))

    search_request = stub.requests[1]
    assert search_request.url.params["type"] == "album"
    assert search_request.url.params["q"] == "Epik High 21C Love album"
    assert enriched.catalog_link == "https://open.spotify.com/album/alb9"
    assert enriched.cover_art_url == "https://i.scdn.co/image/cover-large"
    assert enriched.category == Category.ALBUM


def test_missing_work_title_passes_through_unchanged(make_item):
    stub = SpotifyStub()
    item = make_item(category=Category.TRACK, work_title=None)

    enriched = asyncio.run(_enricher(stub).enrich(item))

    assert enriched == item
    assert stub.requests == []


def test_token_failure_skips_lookup(make_item):
    stub = SpotifyStub(token_status=400)
    item = make_item(category=Category.TRACK)

    assert asyncio.run(_enricher(stub).enrich(item)) == item
    assert stub.paths() == ["/api/token"]


def test_no_search_results_leaves_item(make_item):
    stub = SpotifyStub(search={"tracks": {"items": []}})
    item = make_item(category=Category.TRACK)
    assert asyncio.run(_enricher(stub).enrich(item)) == item


def test_two_lookups_share_one_token(make_item):
    stub = SpotifyStub()
    enricher = _enricher(stub)

    async def scenario():
        await enricher.enrich(make_item(id="t3_1", category=Category.TRACK))
        await enricher.enrich(make_item(id="t3_2", category=Category.TRACK))

    asyncio.run(scenario())
    assert stub.paths().count("/api/token") == 1


def test_no_catalog_configured_passes_through(make_item):
    item = make_item(category=Category.TRACK)
    assert asyncio.run(CategoryEnricher().enrich(item)) == item


def test_other_passes_through(make_item):
    item = make_item(category=Category.OTHER, artist=None, work_title=None)
    assert asyncio.run(_enricher(SpotifyStub()).enrich(item)) == item


def test_single_release_stays_a_track():
    assert refine_category(Category.TRACK, {"album_type": "single"}) == Category.TRACK


def test_build_search_query_for_ep(make_item):
    item = make_item(category=Category.EP, artist="BIG Naughty", work_title="Bunny")
    assert build_search_query(item) == "BIG Naughty Bunny ep"


def test_news_with_inline_text_copies_it(make_item):
    item = make_item(category=Category.NEWS, raw_text="AOMG announces a new signing today.")
    enriched = asyncio.run(CategoryEnricher().enrich(item))
    assert enriched.synopsis == "AOMG announces a new signing today."


def test_news_self_post_without_text_gets_placeholder(make_item):
    item = make_item(
        category=Category.RUMOR,
        origin_link="https://www.reddit.com/r/khiphop/comments/abc123/x/",
        origin_domain="self.khiphop",
    )
    enriched = asyncio.run(CategoryEnricher().enrich(item))
    assert enriched.synopsis == NO_CONTENT_TEXT


class FixedExtractor(ContentExtractor):
    name = "fixed"

    def extract(self, html, url):
        return "Extracted article body " * 10


def test_news_link_uses_extractor(make_item):
    def handler(request):
        return httpx.Response(200, text="<html><body>x</body></html>", headers={"content-type": "text/html; charset=utf-8"})

    resolver = ArticleResolver(extractor=FixedExtractor(), transport=httpx.MockTransport(handler))
    item = make_item(category=Category.NEWS, origin_link="https://news.example.com/a", origin_domain="news.example.com")

    enriched = asyncio.run(CategoryEnricher(articles=resolver).enrich(item))
    assert enriched.synopsis.startswith("Extracted article body")


def test_news_link_default_extractor_gives_placeholder(make_item):
    def handler(request):
        return httpx.Response(200, text="<html></html>", headers={"content-type": "text/html"})

    resolver = ArticleResolver(transport=httpx.MockTransport(handler))
    item = make_item(category=Category.NEWS, origin_link="https://news.example.com/a", origin_domain="news.example.com")

    enriched = asyncio.run(CategoryEnricher(articles=resolver).enrich(item))
    assert "needs manual summary" in enriched.synopsis
    assert "https://news.example.com/a" in enriched.synopsis


def test_news_link_fetch_error_gives_placeholder(make_item):
    def handler(request):
        raise httpx.ConnectTimeout("slow", request=request)

    resolver = ArticleResolver(transport=httpx.MockTransport(handler))
    item = make_item(category=Category.NEWS, origin_link="https://news.example.com/a", origin_domain="news.example.com")

    enriched = asyncio.run(CategoryEnricher(articles=resolver).enrich(item))
    assert enriched.synopsis == "Error fetching content from link. Visit: https://news.example.com/a"


def test_news_link_non_html_gives_status_placeholder(make_item):
    def handler(request):
        return httpx.Response(404, text="nope", headers={"content-type": "text/plain"})

    resolver = ArticleResolver(transport=httpx.MockTransport(handler))
    item = make_item(category=Category.NEWS, origin_link="https://news.example.com/a", origin_domain="news.example.com")

    enriched = asyncio.run(CategoryEnricher(articles=resolver).enrich(item))
    assert enriched.synopsis.endswith("Status: 404")


class LongExtractor(ContentExtractor):
    name = "long"

    def extract(self, html, url):
        return "a" * 5000


def test_extracted_article_is_capped():
    def handler(request):
        return httpx.Response(200, text="<html></html>", headers={"content-type": "text/html"})

    resolver = ArticleResolver(extractor=LongExtractor(), transport=httpx.MockTransport(handler))
    text = asyncio.run(resolver.resolve(None, "https://news.example.com/a", "news.example.com"))
    assert len(text) == MAX_ARTICLE_CHARS


def test_create_extractor_by_name():
    assert isinstance(create_extractor("placeholder"), PlaceholderExtractor)
    assert isinstance(create_extractor("Trafilatura"), TrafilaturaExtractor)
    with pytest.raises(ValueError):
        create_extractor("readability")
