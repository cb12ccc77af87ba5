"""Tests for synopsis prompts, the summary enricher and the LLM wrapper."""

import asyncio

from langchain_core.language_models.fake_chat_models import FakeListChatModel

from core.entities import Category
from processing.summarizer import SummaryEnricher, build_prompt
from services.llm import LLMClient, create_llm_client


class FakeLLM:
    def __init__(self, content="A fresh synopsis.", error=None):
        self.content = content
        self.error = error
        self.prompts = []

    async def complete(self, system, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return {"content": self.content, "latency_ms": 0}


def test_release_prompt_mentions_artist_title_and_date(make_item):
    item = make_item(category=Category.TRACK, release_date="2024-05-01")
    prompt = build_prompt(item)
    assert '"Supernatural" by "NewJeans"' in prompt
    assert "Korean hip-hop track" in prompt
    assert "Release date: 2024-05-01." in prompt


def test_short_news_is_not_summarized(make_item):
    item = make_item(category=Category.NEWS, synopsis="Too short to summarize.")
    assert build_prompt(item) is None


def test_other_is_not_summarized(make_item):
    assert build_prompt(make_item(category=Category.OTHER)) is None


def test_news_synopsis_replaced_by_generated_text(make_item):
    llm = FakeLLM("Generated summary of the news.")
    item = make_item(category=Category.NEWS, synopsis="x" * 80)

    enriched = asyncio.run(SummaryEnricher(llm).enrich(item))

    assert enriched.synopsis == "Generated summary of the news."
    assert "x" * 80 in llm.prompts[0]


def test_disabled_enricher_passes_through(make_item):
    item = make_item()
    enricher = SummaryEnricher()
    assert not enricher.enabled
    assert asyncio.run(enricher.enrich(item)) == item


def test_llm_failure_keeps_previous_synopsis(make_item):
    item = make_item(category=Category.NEWS, synopsis="y" * 80)
    enriched = asyncio.run(SummaryEnricher(FakeLLM(error=RuntimeError("boom"))).enrich(item))
    assert enriched.synopsis == "y" * 80


def test_empty_completion_is_ignored(make_item):
    item = make_item()
    assert asyncio.run(SummaryEnricher(FakeLLM("   ")).enrich(item)) == item


def test_llm_client_complete_returns_content():
    client = LLMClient(FakeListChatModel(responses=["Short synopsis."]))
    result = asyncio.run(client.complete("system", "prompt"))
    assert result["content"] == "Short synopsis."
    assert result["latency_ms"] >= 0


def test_openai_provider_without_key_is_disabled():
    assert create_llm_client("openai", openai_api_key=None) is None


def test_unknown_provider_is_disabled():
    assert create_llm_client("carrier-pigeon") is None
