"""Tests for CycleOrchestrator."""

import asyncio
from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import OperationalError

from samachar.config import Settings
from samachar.core.orchestrator import (
    CycleOrchestrator,
    CycleState,
    dedupe_by_url,
)
from samachar.core.pipeline import ProcessOutcome
from samachar.models.candidate import ArticleCandidate
from samachar.sources.registry import FeedSource, SourceKind

REGIONAL = FeedSource(
    key="REGIONAL", name="Regional", kind=SourceKind.RSS, priority=1, url="https://r/rss"
)
NATIONAL = FeedSource(
    key="NATIONAL", name="National", kind=SourceKind.RSS, priority=2, url="https://n/rss"
)
SOURCES = {"NATIONAL": NATIONAL, "REGIONAL": REGIONAL}


def _orchestrator(
    settings: Settings,
    feeds: dict[str, list[ArticleCandidate]],
    process: AsyncMock | None = None,
) -> CycleOrchestrator:
    fetcher = MagicMock()
    fetcher.fetch_feed = AsyncMock(side_effect=lambda source: list(feeds.get(source.key, [])))
    pipeline = MagicMock()
    pipeline.process = process or AsyncMock(return_value=ProcessOutcome.INSERTED)
    store = MagicMock()
    store.delete_older_than = AsyncMock(return_value=0)
    return CycleOrchestrator(settings, fetcher, pipeline, store, sources=SOURCES)


class TestDedupe:
    """Tests for dedupe_by_url."""

    def test_first_occurrence_wins(
        self, make_candidate: Callable[..., ArticleCandidate]
    ) -> None:
        """Later duplicates are dropped."""
        first = make_candidate(url="https://x/1", source_key="REGIONAL")
        dup = make_candidate(url="https://x/1", source_key="NATIONAL")
        other = make_candidate(url="https://x/2")

        assert dedupe_by_url([first, dup, other]) == [first, other]


class TestRunCycle:
    """Tests for a full cycle."""

    async def test_higher_priority_source_wins_duplicate(
        self,
        settings: Settings,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """A URL seen in two sources is processed once, from the higher-priority one."""
        shared = "https://news.example.com/shared"
        orchestrator = _orchestrator(
            settings,
            {
                "NATIONAL": [make_candidate(url=shared, source_key="NATIONAL", priority=2)],
                "REGIONAL": [make_candidate(url=shared, source_key="REGIONAL", priority=1)],
            },
        )

        report = await orchestrator.run_cycle()

        assert report is not None
        assert report.fetched == 2
        assert report.unique == 1
        processed = orchestrator.pipeline.process.await_args.args[0]
        assert processed.source_key == "REGIONAL"

    async def test_cycle_cap(
        self,
        settings: Settings,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """Only process_count candidates are processed per cycle."""
        settings.process_count = 3
        items = [make_candidate(url=f"https://x/{n}") for n in range(5)]
        orchestrator = _orchestrator(settings, {"REGIONAL": items})

        report = await orchestrator.run_cycle()

        assert report is not None
        assert report.unique == 5
        assert report.processed == 3
        assert orchestrator.pipeline.process.await_count == 3
        urls = [c.args[0].url for c in orchestrator.pipeline.process.await_args_list]
        assert sorted(urls) == ["https://x/0", "https://x/1", "https://x/2"]

    async def test_outcomes_counted(
        self,
        settings: Settings,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """Inserted, skipped and failed items are tallied; errors count as failed."""
        outcomes = {
            "https://x/0": ProcessOutcome.INSERTED,
            "https://x/1": ProcessOutcome.SKIPPED,
            "https://x/2": ProcessOutcome.FAILED,
        }

        async def process(candidate: ArticleCandidate) -> ProcessOutcome:
            if candidate.url == "https://x/3":
                raise RuntimeError("unexpected")
            return outcomes[candidate.url]

        items = [make_candidate(url=f"https://x/{n}") for n in range(4)]
        orchestrator = _orchestrator(
            settings, {"REGIONAL": items}, process=AsyncMock(side_effect=process)
        )
        orchestrator.store.delete_older_than = AsyncMock(return_value=7)

        report = await orchestrator.run_cycle()

        assert report is not None
        assert (report.inserted, report.skipped, report.failed) == (1, 1, 2)
        assert report.deleted == 7
        orchestrator.store.delete_older_than.assert_awaited_once_with(settings.cleanup_days)
        assert orchestrator.last_report is report

    async def test_failing_source_does_not_stop_cycle(
        self,
        settings: Settings,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """A source that raises contributes nothing."""
        orchestrator = _orchestrator(settings, {})

        async def fetch(source: FeedSource) -> list[ArticleCandidate]:
            if source.key == "REGIONAL":
                raise RuntimeError("feed down")
            return [make_candidate(url="https://x/national")]

        orchestrator.fetcher.fetch_feed = AsyncMock(side_effect=fetch)

        report = await orchestrator.run_cycle()

        assert report is not None
        assert report.inserted == 1

    async def test_cleanup_failure_tolerated(
        self,
        settings: Settings,
    ) -> None:
        """A database error in the retention sweep leaves deleted at zero."""
        orchestrator = _orchestrator(settings, {})
        orchestrator.store.delete_older_than = AsyncMock(
            side_effect=OperationalError("DELETE", {}, Exception("locked"))
        )

        report = await orchestrator.run_cycle()

        assert report is not None
        assert report.deleted == 0
        assert orchestrator.state is CycleState.IDLE


class TestReentrancy:
    """Tests for the single-cycle guard."""

    async def test_second_request_rejected_while_running(
        self,
        settings: Settings,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """Overlapping requests do not start a second cycle."""
        release = asyncio.Event()

        async def slow_process(candidate: ArticleCandidate) -> ProcessOutcome:
            await release.wait()
            return ProcessOutcome.INSERTED

        orchestrator = _orchestrator(
            settings,
            {"REGIONAL": [make_candidate()]},
            process=AsyncMock(side_effect=slow_process),
        )

        first = asyncio.create_task(orchestrator.run_cycle())
        await asyncio.sleep(0.01)

        assert orchestrator.state is CycleState.RUNNING
        assert await orchestrator.run_cycle() is None
        assert orchestrator.trigger() is False
        assert orchestrator.fetcher.fetch_feed.await_count == len(SOURCES)

        release.set()
        report = await first

        assert report is not None
        assert report.inserted == 1
        assert orchestrator.state is CycleState.IDLE

    async def test_state_released_after_unexpected_error(
        self,
        settings: Settings,
    ) -> None:
        """An unexpected failure still returns the orchestrator to idle."""
        orchestrator = _orchestrator(settings, {})
        orchestrator.store.delete_older_than = AsyncMock(side_effect=RuntimeError("boom"))

        report = await orchestrator.run_cycle()

        assert report is not None
        assert report.completed_at is not None
        assert orchestrator.state is CycleState.IDLE
        assert await orchestrator.run_cycle() is not None

    async def test_trigger_runs_in_background(
        self,
        settings: Settings,
        make_candidate: Callable[..., ArticleCandidate],
    ) -> None:
        """trigger() claims the cycle immediately and runs it as a task."""
        orchestrator = _orchestrator(settings, {"REGIONAL": [make_candidate()]})

        assert orchestrator.trigger() is True
        assert orchestrator.state is CycleState.RUNNING

        await asyncio.gather(*orchestrator._background)

        assert orchestrator.state is CycleState.IDLE
        assert orchestrator.last_report is not None
        assert orchestrator.last_report.inserted == 1
