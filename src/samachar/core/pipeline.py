"""Per-candidate pipeline: dedup gate, enrich, rewrite, classify, persist."""

import json
import logging
import random
from enum import Enum
from urllib.parse import urlparse

from sqlalchemy.exc import SQLAlchemyError

from samachar.core.classifier import Classification, classify
from samachar.core.images import default_image
from samachar.core.store import ArticleStore
from samachar.fetcher.enricher import ContentEnricher
from samachar.llm.rewriter import RewriteEngine, RewriteResult
from samachar.models.article import ArticleRecord
from samachar.models.candidate import ArticleCandidate, EnrichedContent
from samachar.utils.text import make_short_desc, make_slug

logger = logging.getLogger(__name__)


class ProcessOutcome(str, Enum):
    """What happened to one candidate."""

    INSERTED = "inserted"
    SKIPPED = "skipped"  # already stored
    FAILED = "failed"


class ArticlePipeline:
    """Turn one candidate into a stored ArticleRecord."""

    def __init__(
        self,
        store: ArticleStore,
        enricher: ContentEnricher,
        rewriter: RewriteEngine,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.enricher = enricher
        self.rewriter = rewriter
        self._rng = rng

    async def process(self, candidate: ArticleCandidate) -> ProcessOutcome:
        """Run the full per-item pipeline for a candidate."""
        # Dedup gate: nothing is fetched or rewritten for a known URL
        try:
            if await self.store.exists(candidate.url):
                logger.info(f"Skipping existing: {candidate.url}")
                return ProcessOutcome.SKIPPED
        except SQLAlchemyError as e:
            logger.warning(f"Dedup lookup failed for {candidate.url}: {e}")
            return ProcessOutcome.FAILED

        logger.info(f"Processing: {candidate.title[:50]} ({candidate.source_name})")

        enriched = await self.enricher.enrich(candidate)
        result = await self.rewriter.rewrite(candidate.title, enriched.body)

        host = urlparse(candidate.url).hostname or ""
        classification = classify(f"{result.title}\n{result.content}", host)
        record = self.build_record(enriched, result, classification)

        try:
            await self.store.insert(record)
        except SQLAlchemyError as e:
            logger.warning(f"Database insert failed for {candidate.url}: {e}")
            return ProcessOutcome.FAILED

        logger.info(
            f"Inserted: {record.title[:60]} via {result.provider} "
            f"({result.word_count} words, {classification.genre}/{classification.region})"
        )
        return ProcessOutcome.INSERTED

    def build_record(
        self,
        enriched: EnrichedContent,
        result: RewriteResult,
        classification: Classification,
    ) -> ArticleRecord:
        """Assemble the stored record."""
        candidate = enriched.candidate

        image_url = enriched.image
        image_source = enriched.image_source
        if not image_url:
            image_url = default_image(classification.genre, classification.region)
            image_source = "default"

        meta = {
            "original_title": candidate.title,
            "source": candidate.source,
            "source_name": candidate.source_name,
            "ai_provider": result.provider,
            "word_count": result.word_count,
            "image_source": image_source,
            "body_source": enriched.body_source,
        }

        return ArticleRecord(
            title=result.title,
            slug=make_slug(result.title, self._rng),
            source_url=candidate.url,
            ai_content=result.content,
            short_desc=make_short_desc(result.content),
            image_url=image_url,
            published_at=candidate.published_at,
            region=classification.region,
            genre=classification.genre,
            meta=json.dumps(meta, ensure_ascii=False),
        )
