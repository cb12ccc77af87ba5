from datetime import datetime, timezone

import pytest

from core.entities import Category, CanonicalItem


@pytest.fixture
def make_item():
    """Factory for CanonicalItem with sensible feed-derived defaults."""

    def _make(**overrides) -> CanonicalItem:
        fields = {
            "id": "t3_abc123",
            "title": "NewJeans - Supernatural [MV]",
            "category": Category.MUSIC_VIDEO,
            "source_link": "https://www.reddit.com/r/khiphop/comments/abc123/x/",
            "origin_link": "https://www.youtube.com/watch?v=xyz",
            "origin_domain": "youtube.com",
            "posted_at": datetime(2024, 6, 21, 9, 0, tzinfo=timezone.utc),
            "artist": "NewJeans",
            "work_title": "Supernatural",
        }
        fields.update(overrides)
        return CanonicalItem(**fields)

    return _make
