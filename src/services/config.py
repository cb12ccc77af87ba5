"""
Loads and handles config from config.yml
Credentials (Spotify, OpenAI, WordPress) are loaded from .env for security
"""
import os
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel


class Config(BaseModel):
    # Core
    DATABASE_PATH: str = "data/khiphop.db"

    # Reddit
    REDDIT_SUBREDDIT_URL: str = "https://www.reddit.com/r/khiphop/new.json"
    REDDIT_FETCH_LIMIT: int = 100
    REDDIT_ALLOWED_FLAIRS: List[str] = []
    REDDIT_USER_AGENT: str = "khiphop-pipeline/1.0"

    # Spotify
    SPOTIFY_CLIENT_ID: Optional[str] = None
    SPOTIFY_CLIENT_SECRET: Optional[str] = None
    SPOTIFY_MARKET: str = "KR"

    # Synopsis generation
    SUMMARY_ENABLED: bool = False
    LLM_PROVIDER: str = "ollama"  # ollama, openai
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "llama3.1:8b"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-3.5-turbo"

    # News/rumor article extraction: placeholder, trafilatura
    ARTICLE_EXTRACTOR: str = "placeholder"

    # WordPress
    WORDPRESS_ENDPOINT: Optional[str] = None
    WORDPRESS_USERNAME: Optional[str] = None
    WORDPRESS_PASSWORD: Optional[str] = None
    WORDPRESS_PUBLISH_IMMEDIATELY: bool = False

    # Debug
    DEBUG_MARKDOWN_ENABLED: bool = False
    DEBUG_MARKDOWN_PATH: str = "debug_markdown_posts"

    # Scheduling
    SCHEDULE_HOUR: int = 8


def _bool(value: str | bool) -> bool:
    """Convert string or bool to boolean."""
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("1", "true", "yes", "on")


def _get_config_path() -> str:
    """Get the path to config.yml, handling different working directories."""
    env_path = os.getenv("KHIPHOP_CONFIG")
    if env_path:
        return env_path

    if os.path.exists('resources/config.yml'):
        return 'resources/config.yml'

    project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    config_path = os.path.join(project_root, 'resources', 'config.yml')
    if os.path.exists(config_path):
        return config_path

    raise FileNotFoundError("Cannot find resources/config.yml")


def _optional(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


def parse_config(data: Dict[str, Any]) -> Config:
    """Build a Config from parsed YAML plus credentials from the environment."""
    defaults = Config()

    return Config(
        DATABASE_PATH=data.get("DATABASE_PATH", defaults.DATABASE_PATH),

        REDDIT_SUBREDDIT_URL=data.get("REDDIT_SUBREDDIT_URL", defaults.REDDIT_SUBREDDIT_URL),
        REDDIT_FETCH_LIMIT=int(data.get("REDDIT_FETCH_LIMIT", defaults.REDDIT_FETCH_LIMIT)),
        REDDIT_ALLOWED_FLAIRS=list(data.get("REDDIT_ALLOWED_FLAIRS") or []),
        REDDIT_USER_AGENT=data.get("REDDIT_USER_AGENT", defaults.REDDIT_USER_AGENT),

        SPOTIFY_CLIENT_ID=_optional(os.getenv("SPOTIFY_CLIENT_ID")),
        SPOTIFY_CLIENT_SECRET=_optional(os.getenv("SPOTIFY_CLIENT_SECRET")),
        SPOTIFY_MARKET=data.get("SPOTIFY_MARKET", defaults.SPOTIFY_MARKET),

        SUMMARY_ENABLED=_bool(data.get("SUMMARY_ENABLED", False)),
        LLM_PROVIDER=data.get("LLM_PROVIDER", defaults.LLM_PROVIDER),
        OLLAMA_BASE_URL=data.get("OLLAMA_BASE_URL", defaults.OLLAMA_BASE_URL),
        OLLAMA_MODEL=data.get("OLLAMA_MODEL", defaults.OLLAMA_MODEL),
        OPENAI_API_KEY=_optional(os.getenv("OPENAI_API_KEY")),
        OPENAI_MODEL=data.get("OPENAI_MODEL", defaults.OPENAI_MODEL),

        ARTICLE_EXTRACTOR=data.get("ARTICLE_EXTRACTOR", defaults.ARTICLE_EXTRACTOR),

        WORDPRESS_ENDPOINT=_optional(data.get("WORDPRESS_ENDPOINT") or os.getenv("WORDPRESS_ENDPOINT")),
        WORDPRESS_USERNAME=_optional(os.getenv("WORDPRESS_USERNAME")),
        WORDPRESS_PASSWORD=_optional(os.getenv("WORDPRESS_PASSWORD")),
        WORDPRESS_PUBLISH_IMMEDIATELY=_bool(data.get("WORDPRESS_PUBLISH_IMMEDIATELY", False)),

        DEBUG_MARKDOWN_ENABLED=_bool(data.get("DEBUG_MARKDOWN_ENABLED", False)),
        DEBUG_MARKDOWN_PATH=data.get("DEBUG_MARKDOWN_PATH", defaults.DEBUG_MARKDOWN_PATH),

        SCHEDULE_HOUR=int(data.get("SCHEDULE_HOUR", defaults.SCHEDULE_HOUR)),
    )


def load_config(path: Optional[str] = None) -> Config:
    """Load configuration from config.yml and credentials from .env."""
    load_dotenv()

    config_path = path or _get_config_path()

    with open(config_path, 'r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or {}

    return parse_config(data)
