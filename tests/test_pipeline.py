"""Tests for the per-candidate pipeline."""

import random
import re
from collections.abc import Callable
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from samachar.config import Settings
from samachar.core.classifier import Classification
from samachar.core.images import GENRE_IMAGES
from samachar.core.pipeline import ArticlePipeline, ProcessOutcome
from samachar.core.store import ArticleStore
from samachar.fetcher.enricher import ContentEnricher
from samachar.llm.rewriter import (
    FALLBACK_PROVIDER,
    FALLBACK_WORD_COUNT,
    RewriteEngine,
    RewriteResult,
)
from samachar.models.article import ArticleRecord
from samachar.models.candidate import ArticleCandidate, EnrichedContent


def _offline_enricher(settings: Settings) -> ContentEnricher:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(404))
    )
    return ContentEnricher(settings, client=client)


class TestArticlePipeline:
    """Tests for ArticlePipeline.process."""

    async def test_existing_url_skips_all_work(
        self,
        store: ArticleStore,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """A stored URL is never enriched or rewritten."""
        candidate = make_candidate()
        await store.insert(
            ArticleRecord(
                title="पुरानी खबर",
                slug="purani-khabar-abcde",
                source_url=candidate.url,
                ai_content="सामग्री",
                image_url="https://img.example.com/x.jpg",
            )
        )
        enricher = MagicMock()
        enricher.enrich = AsyncMock()
        rewriter = MagicMock()
        rewriter.rewrite = AsyncMock()

        outcome = await ArticlePipeline(store, enricher, rewriter).process(candidate)

        assert outcome is ProcessOutcome.SKIPPED
        enricher.enrich.assert_not_awaited()
        rewriter.rewrite.assert_not_awaited()
        assert await store.count() == 1

    async def test_unreachable_page_without_providers(
        self,
        settings: Settings,
        store: ArticleStore,
        session_factory: async_sessionmaker[AsyncSession],
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """A 404 page and no providers still stores a tagged fallback article."""
        candidate = make_candidate(
            title="पंचायत चुनाव घोषित",
            description="पंचायत चुनाव घोषित",
            url="https://example.com/news/panchayat",
        )
        rewriter = RewriteEngine([], rng=random.Random(0))
        pipeline = ArticlePipeline(store, _offline_enricher(settings), rewriter)

        with patch.object(rewriter, "rewrite", wraps=rewriter.rewrite) as spy:
            outcome = await pipeline.process(candidate)

        assert outcome is ProcessOutcome.INSERTED
        spy.assert_awaited_once_with("पंचायत चुनाव घोषित", "पंचायत चुनाव घोषित")

        async with session_factory() as session:
            result = await session.execute(select(ArticleRecord))
            record = result.scalars().one()

        meta = record.meta_dict()
        assert record.source_url == "https://example.com/news/panchayat"
        assert record.genre == "Politics"
        assert record.image_url == GENRE_IMAGES["Politics"]
        assert "पंचायत चुनाव घोषित" in record.ai_content
        assert meta["ai_provider"] == FALLBACK_PROVIDER
        assert meta["word_count"] == FALLBACK_WORD_COUNT
        assert meta["body_source"] == "description"
        assert meta["image_source"] == "default"
        assert meta["original_title"] == "पंचायत चुनाव घोषित"

    async def test_insert_failure_reported(
        self,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """A database error on insert yields FAILED."""
        store = MagicMock()
        store.exists = AsyncMock(return_value=False)
        store.insert = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("locked")))
        pipeline = ArticlePipeline(store, _stub_enricher(), RewriteEngine([]))
        outcome = await pipeline.process(make_candidate())

        assert outcome is ProcessOutcome.FAILED
        store.insert.assert_awaited_once()

    async def test_dedup_lookup_failure_reported(
        self,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """A database error in the dedup gate yields FAILED without work."""
        store = MagicMock()
        store.exists = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("gone")))
        enricher = _stub_enricher()

        outcome = await ArticlePipeline(store, enricher, RewriteEngine([])).process(
            make_candidate()
        )

        assert outcome is ProcessOutcome.FAILED
        enricher.enrich.assert_not_awaited()

    def test_build_record_keeps_feed_image(
        self,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """A feed image is stored instead of a default one."""
        candidate = make_candidate(image="https://img.example.com/feed.jpg")
        enriched = EnrichedContent(
            candidate=candidate,
            body="body",
            body_source="scraped",
            image=candidate.image,
            image_source="feed",
        )
        result = RewriteResult(
            title="नई खबर", content="क" * 300, provider="groq", word_count=1, success=True
        )
        pipeline = ArticlePipeline(MagicMock(), MagicMock(), MagicMock(), rng=random.Random(0))

        record = pipeline.build_record(enriched, result, Classification("Sports", "india"))

        assert record.image_url == "https://img.example.com/feed.jpg"
        assert record.short_desc == "क" * 200 + "..."
        assert re.fullmatch(r"[a-z0-9-]+-[a-z0-9]{5}", record.slug)
        assert record.meta_dict()["ai_provider"] == "groq"

    def test_candidate_requires_aware_timestamp(
        self,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """Naive publication times are rejected at the candidate boundary."""
        with pytest.raises(ValidationError):
            make_candidate(published_at=datetime(2024, 1, 1, 10, 0))


def _stub_enricher() -> MagicMock:
    """Enricher that returns the feed text without network access."""

    async def enrich(candidate: ArticleCandidate) -> EnrichedContent:
        return EnrichedContent(
            candidate=candidate,
            body=ContentEnricher._fallback_body(candidate),
            body_source="description",
        )

    enricher = MagicMock()
    enricher.enrich = AsyncMock(side_effect=enrich)
    return enricher
