import logging
from typing import Optional

from core.entities import Category, CanonicalItem, MUSIC_CATEGORIES, TEXT_CATEGORIES
from services.llm import LLMClient

logger = logging.getLogger(__name__)

MIN_NEWS_MATERIAL = 50

SYSTEM_PROMPT = (
    "You are a helpful assistant that writes concise summaries "
    "for a Korean Hip-Hop news and music blog."
)

_RELEASE_NAMES = {
    Category.TRACK: "track",
    Category.ALBUM: "album",
    Category.EP: "EP",
    Category.MUSIC_VIDEO: "music video",
}


def build_news_prompt(material: str) -> str:
    return (
        "Generate a concise, SEO-friendly news summary (around 100-150 words) "
        "for a blog post about the following Korean hip-hop news. "
        f'Highlight key information. News content: "{material}"'
    )


def build_release_prompt(item: CanonicalItem) -> str:
    prompt = (
        "Generate a short, engaging, and SEO-friendly synopsis (around 100-150 words) "
        f"for a blog post about the Korean hip-hop {_RELEASE_NAMES[item.category]} "
        f'release titled "{item.work_title}" by "{item.artist}". '
        "Mention the artist and title."
    )
    if item.release_date:
        prompt += f" Release date: {item.release_date}."
    if item.synopsis:
        prompt += f' Available description/details: "{item.synopsis}"'
    return prompt


def build_prompt(item: CanonicalItem) -> Optional[str]:
    """
    Prompt for an eligible item, or None when there is not enough signal.
    """
    if item.category in TEXT_CATEGORIES:
        material = item.synopsis or item.raw_text or ""
        if len(material) < MIN_NEWS_MATERIAL:
            return None
        return build_news_prompt(material)

    if item.category in MUSIC_CATEGORIES:
        if not item.has_release_identity:
            return None
        return build_release_prompt(item)

    return None


class SummaryEnricher:
    def __init__(self, llm: Optional[LLMClient] = None):
        self.llm = llm

    @property
    def enabled(self) -> bool:
        return self.llm is not None

    async def enrich(self, item: CanonicalItem) -> CanonicalItem:
        if self.llm is None:
            return item

        prompt = build_prompt(item)
        if prompt is None:
            logger.debug(f"Not enough material for a synopsis: {item.title}")
            return item

        try:
            result = await self.llm.complete(SYSTEM_PROMPT, prompt)
        except Exception as e:
            logger.warning(f"Synopsis generation failed for {item.id}: {e}")
            return item

        synopsis = result["content"].strip()
        if not synopsis:
            logger.warning(f"Empty synopsis returned for {item.id}")
            return item

        logger.info(f"Generated synopsis for {item.id} ({result['latency_ms']}ms)")
        return item.model_copy(update={"synopsis": synopsis})
