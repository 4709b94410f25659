"""Article record storage."""

import logging
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from samachar.models.article import ArticleRecord, utcnow

logger = logging.getLogger(__name__)


class ArticleStore:
    """Row-level access to the ai_news table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def exists(self, source_url: str) -> bool:
        """Whether a record with this source_url is stored."""
        async with self._session_factory() as session:
            stmt = (
                select(ArticleRecord.id)
                .where(ArticleRecord.source_url == source_url)
                .limit(1)
            )
            result = await session.execute(stmt)
            return result.first() is not None

    async def insert(self, record: ArticleRecord) -> ArticleRecord:
        """Insert one record; constraint violations propagate."""
        async with self._session_factory() as session:
            session.add(record)
            await session.commit()
            await session.refresh(record)
            return record

    async def delete_older_than(self, days: int, now: datetime | None = None) -> int:
        """Delete records created more than ``days`` days ago."""
        cutoff = (now or utcnow()) - timedelta(days=days)
        async with self._session_factory() as session:
            stmt = delete(ArticleRecord).where(ArticleRecord.created_at < cutoff)  # type: ignore[arg-type]
            result = await session.execute(stmt)
            await session.commit()
            deleted = result.rowcount or 0

        logger.info(f"Retention sweep removed {deleted} records created before {cutoff.isoformat()}")
        return deleted

    async def count(self) -> int:
        """Total stored records."""
        async with self._session_factory() as session:
            result = await session.execute(select(func.count()).select_from(ArticleRecord))
            return int(result.scalar() or 0)

    async def stats(self) -> dict[str, Any]:
        """Totals by region and genre."""
        async with self._session_factory() as session:
            by_region = await session.execute(
                select(ArticleRecord.region, func.count()).group_by(ArticleRecord.region)
            )
            by_genre = await session.execute(
                select(ArticleRecord.genre, func.count()).group_by(ArticleRecord.genre)
            )
            regions = {region: count for region, count in by_region.all()}
            genres = {genre: count for genre, count in by_genre.all()}

        return {
            "total": sum(regions.values()),
            "by_region": regions,
            "by_genre": genres,
        }
