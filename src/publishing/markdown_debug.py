"""
Debug Markdown writer: one file per processed item, for eyeballing enrichment output.
"""
import logging
import re
from pathlib import Path
from typing import Any, Dict

import yaml

from core.entities import CanonicalItem

logger = logging.getLogger(__name__)


def _front_matter(item: CanonicalItem) -> Dict[str, Any]:
    fields = item.model_dump(
        mode="json",
        include={
            "title", "source_link", "origin_link", "flair", "origin_domain",
            "thumbnail_url", "artist", "work_title", "category", "release_date",
            "producers", "cover_art_url", "catalog_link",
        },
    )
    return {key: value for key, value in fields.items() if value not in (None, [], "")}


def render_markdown(item: CanonicalItem) -> str:
    md_lines = ["---", yaml.safe_dump(_front_matter(item), allow_unicode=True, sort_keys=False).rstrip(), "---", ""]

    if item.synopsis:
        md_lines += ["## Description", item.synopsis, ""]
    elif item.raw_text:
        md_lines += ["## Text Content", item.raw_text, ""]

    md_lines.append("## Raw Reddit Data")
    md_lines.append(f"Title: {item.title}")
    md_lines.append(f"Flair: {item.flair or 'N/A'}")
    md_lines.append(f"Reddit Link: {item.source_link}")
    md_lines.append(f"Source URL: {item.origin_link}")
    return "\n".join(md_lines) + "\n"


def markdown_file_name(item: CanonicalItem) -> str:
    slug = re.sub(r"[^a-z0-9_\-]+", "_", item.title, flags=re.IGNORECASE).lower()
    return f"{item.id}_{slug}.md"


class MarkdownDebugWriter:
    name = "markdown"

    def __init__(self, output_dir: str = "debug_markdown_posts"):
        self.output_dir = Path(output_dir)

    def write(self, item: CanonicalItem) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / markdown_file_name(item)
        path.write_text(render_markdown(item), encoding="utf-8")
        logger.debug(f"Debug markdown file written to: {path}")
        return path
