"""Cycle orchestrator: fetch, dedupe, process, clean up."""

import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from samachar.config import Settings
from samachar.core.pipeline import ArticlePipeline, ProcessOutcome
from samachar.core.store import ArticleStore
from samachar.core.task_queue import TaskQueue
from samachar.fetcher.feeds import FeedFetcher
from samachar.models.article import utcnow
from samachar.models.candidate import ArticleCandidate
from samachar.sources.registry import FeedSource, iter_sources

logger = logging.getLogger(__name__)


class CycleState(str, Enum):
    """Orchestrator state."""

    IDLE = "idle"
    RUNNING = "running"
    CLEANING_UP = "cleaning_up"


@dataclass
class CycleReport:
    """Outcome of one cycle."""

    fetched: int = 0
    unique: int = 0
    processed: int = 0
    inserted: int = 0
    skipped: int = 0
    failed: int = 0
    deleted: int = 0
    started_at: datetime | None = None
    completed_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("started_at", "completed_at"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data


def dedupe_by_url(candidates: list[ArticleCandidate]) -> list[ArticleCandidate]:
    """Drop repeated URLs; the first occurrence wins."""
    seen: set[str] = set()
    unique = []
    for candidate in candidates:
        if candidate.url in seen:
            continue
        seen.add(candidate.url)
        unique.append(candidate)
    return unique


# Global instance
_orchestrator: "CycleOrchestrator | None" = None


def get_orchestrator() -> "CycleOrchestrator | None":
    """Return the process-wide orchestrator."""
    return _orchestrator


def set_orchestrator(orchestrator: "CycleOrchestrator | None") -> None:
    """Install the process-wide orchestrator."""
    global _orchestrator
    _orchestrator = orchestrator


class CycleOrchestrator:
    """Runs at most one ingestion cycle at a time."""

    def __init__(
        self,
        settings: Settings,
        fetcher: FeedFetcher,
        pipeline: ArticlePipeline,
        store: ArticleStore,
        sources: dict[str, FeedSource] | None = None,
    ) -> None:
        self.settings = settings
        self.fetcher = fetcher
        self.pipeline = pipeline
        self.store = store
        self.sources = sources
        self.queue = TaskQueue(settings.max_concurrent_tasks)
        self.last_report: CycleReport | None = None
        self._state = CycleState.IDLE
        self._background: set[asyncio.Task[CycleReport]] = set()

    @property
    def state(self) -> CycleState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is not CycleState.IDLE

    def _claim(self) -> bool:
        if self._state is not CycleState.IDLE:
            logger.info(f"Cycle already {self._state.value}, request ignored")
            return False
        self._state = CycleState.RUNNING
        return True

    async def run_cycle(self) -> CycleReport | None:
        """Run one cycle now; None if a cycle is already in progress."""
        if not self._claim():
            return None
        return await self._run_claimed()

    def trigger(self) -> bool:
        """Start a cycle in the background; False if one is in progress."""
        if not self._claim():
            return False
        task = asyncio.create_task(self._run_claimed())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return True

    async def _run_claimed(self) -> CycleReport:
        report = CycleReport(started_at=utcnow())
        logger.info("Cycle started")
        try:
            candidates = await self._collect(report)
            await self._process_all(candidates, report)

            self._state = CycleState.CLEANING_UP
            report.deleted = await self._cleanup()
        except Exception:
            logger.exception("Cycle aborted")
        finally:
            report.completed_at = utcnow()
            self.last_report = report
            self._state = CycleState.IDLE

        logger.info(
            f"Cycle completed: fetched={report.fetched}, unique={report.unique}, "
            f"inserted={report.inserted}, skipped={report.skipped}, "
            f"failed={report.failed}, deleted={report.deleted}"
        )
        return report

    async def _collect(self, report: CycleReport) -> list[ArticleCandidate]:
        """Fetch all sources concurrently, dedupe, and apply the cycle cap."""
        sources = iter_sources(self.sources)
        results = await asyncio.gather(
            *(self.fetcher.fetch_feed(source) for source in sources),
            return_exceptions=True,
        )

        combined: list[ArticleCandidate] = []
        for source, result in zip(sources, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(f"Fetch raised for {source.name}: {result}")
                continue
            combined.extend(result)

        unique = dedupe_by_url(combined)
        report.fetched = len(combined)
        report.unique = len(unique)

        batch = unique[: self.settings.process_count]
        if len(unique) > len(batch):
            logger.info(f"Deferring {len(unique) - len(batch)} candidates to the next cycle")
        return batch

    async def _process_all(
        self, candidates: list[ArticleCandidate], report: CycleReport
    ) -> None:
        futures = [
            self.queue.submit(lambda c=candidate: self._process_one(c))
            for candidate in candidates
        ]
        outcomes = await asyncio.gather(*futures, return_exceptions=True)

        for outcome in outcomes:
            report.processed += 1
            if outcome is ProcessOutcome.INSERTED:
                report.inserted += 1
            elif outcome is ProcessOutcome.SKIPPED:
                report.skipped += 1
            else:
                report.failed += 1

    async def _process_one(self, candidate: ArticleCandidate) -> ProcessOutcome:
        try:
            return await self.pipeline.process(candidate)
        except Exception:
            logger.exception(f"Failed to process {candidate.url}")
            return ProcessOutcome.FAILED

    async def _cleanup(self) -> int:
        try:
            return await self.store.delete_older_than(self.settings.cleanup_days)
        except SQLAlchemyError as e:
            logger.warning(f"Retention sweep failed: {e}")
            return 0
