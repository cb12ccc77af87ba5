from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """
    Closed set of content categories a feed item can belong to.
    """
    TRACK = "track"
    ALBUM = "album"
    EP = "ep"
    MUSIC_VIDEO = "mv"
    NEWS = "news"
    RUMOR = "rumor"
    OTHER = "other"


MUSIC_CATEGORIES = frozenset(
    {Category.TRACK, Category.ALBUM, Category.EP, Category.MUSIC_VIDEO}
)
TEXT_CATEGORIES = frozenset({Category.NEWS, Category.RUMOR})


class CanonicalItem(BaseModel):
    """
    Canonical representation of one feed post.
    Feed-derived fields are set at ingestion; enrichment fills the optional ones
    through model_copy(update=...).
    """
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    category: Category
    source_link: str
    origin_link: str
    origin_domain: str
    posted_at: datetime
    flair: Optional[str] = None
    raw_text: Optional[str] = None
    thumbnail_url: Optional[str] = None

    artist: Optional[str] = None
    work_title: Optional[str] = None
    release_date: Optional[str] = None
    producers: List[str] = Field(default_factory=list)
    cover_art_url: Optional[str] = None
    catalog_link: Optional[str] = None
    synopsis: Optional[str] = None

    @property
    def is_music(self) -> bool:
        return self.category in MUSIC_CATEGORIES

    @property
    def has_release_identity(self) -> bool:
        return bool(self.artist and self.work_title)


class StagedRecord(CanonicalItem):
    """
    An enriched item waiting in the staging area for a publish decision.
    """
    staged_at: datetime

    @classmethod
    def from_item(
        cls,
        item: CanonicalItem,
        staged_at: Optional[datetime] = None,
    ) -> "StagedRecord":
        return cls(
            **item.model_dump(),
            staged_at=staged_at or datetime.now(timezone.utc),
        )

    def to_item(self) -> CanonicalItem:
        return CanonicalItem(**self.model_dump(exclude={"staged_at"}))


@dataclass(frozen=True)
class RunSummary:
    """
    Counts reported at the end of one pipeline run.
    """
    fetched: int = 0
    new_count: int = 0
    staged_count: int = 0
    skipped_count: int = 0


@dataclass(frozen=True)
class PublishedPost:
    id: int
    link: Optional[str]
    status: str


@dataclass(frozen=True)
class PublishSummary:
    selected: int = 0
    published: int = 0
    failed: int = 0
