"""
Pipeline Factory - wires the staging pipeline and the publisher from configuration.
"""
import logging
from typing import Optional

from ingestion.reddit import RedditAdapter
from processing.article_extractor import ArticleResolver, create_extractor
from processing.category_enricher import CategoryEnricher
from processing.summarizer import SummaryEnricher
from publishing.markdown_debug import MarkdownDebugWriter
from publishing.wordpress import WordPressClient
from services.config import Config
from services.database import Database
from services.dedup_store import DedupStore
from services.llm import create_llm_client
from services.spotify import SpotifyClient
from services.staging_store import StagingStore
from workflows.pipeline import StagingPipeline

logger = logging.getLogger(__name__)


def create_catalog_client(config: Config) -> Optional[SpotifyClient]:
    if not (config.SPOTIFY_CLIENT_ID and config.SPOTIFY_CLIENT_SECRET):
        logger.warning("Spotify credentials not configured, catalog lookups disabled")
        return None
    return SpotifyClient(
        client_id=config.SPOTIFY_CLIENT_ID,
        client_secret=config.SPOTIFY_CLIENT_SECRET,
        market=config.SPOTIFY_MARKET,
    )


def create_summary_enricher(config: Config) -> SummaryEnricher:
    if not config.SUMMARY_ENABLED:
        logger.info("Synopsis generation disabled")
        return SummaryEnricher()
    llm = create_llm_client(
        config.LLM_PROVIDER,
        ollama_base_url=config.OLLAMA_BASE_URL,
        ollama_model=config.OLLAMA_MODEL,
        openai_api_key=config.OPENAI_API_KEY,
        openai_model=config.OPENAI_MODEL,
    )
    return SummaryEnricher(llm)


def create_pipeline_from_config(
    config: Config,
    database: Optional[Database] = None,
) -> StagingPipeline:
    database = database or Database(config.DATABASE_PATH)

    source = RedditAdapter(
        listing_url=config.REDDIT_SUBREDDIT_URL,
        allowed_flairs=config.REDDIT_ALLOWED_FLAIRS,
        user_agent=config.REDDIT_USER_AGENT,
    )
    enricher = CategoryEnricher(
        catalog=create_catalog_client(config),
        articles=ArticleResolver(extractor=create_extractor(config.ARTICLE_EXTRACTOR)),
    )
    debug_writer = (
        MarkdownDebugWriter(config.DEBUG_MARKDOWN_PATH)
        if config.DEBUG_MARKDOWN_ENABLED
        else None
    )

    pipeline = StagingPipeline(
        source=source,
        dedup=DedupStore(database),
        staging=StagingStore(database),
        category_enricher=enricher,
        summary_enricher=create_summary_enricher(config),
        fetch_limit=config.REDDIT_FETCH_LIMIT,
        debug_writer=debug_writer,
    )
    logger.info(f"Created pipeline: {pipeline.name} ({config.REDDIT_SUBREDDIT_URL})")
    return pipeline


def create_cms_client(config: Config) -> Optional[WordPressClient]:
    if not (config.WORDPRESS_ENDPOINT and config.WORDPRESS_USERNAME and config.WORDPRESS_PASSWORD):
        logger.error("WordPress endpoint or credentials not configured")
        return None
    return WordPressClient(
        endpoint=config.WORDPRESS_ENDPOINT,
        username=config.WORDPRESS_USERNAME,
        password=config.WORDPRESS_PASSWORD,
        publish_immediately=config.WORDPRESS_PUBLISH_IMMEDIATELY,
    )
