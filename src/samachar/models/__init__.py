"""Data models."""

from samachar.models.article import ArticleRecord
from samachar.models.candidate import ArticleCandidate, EnrichedContent
from samachar.models.database import async_session_maker, close_db, init_db

__all__ = [
    "ArticleCandidate",
    "ArticleRecord",
    "EnrichedContent",
    "async_session_maker",
    "close_db",
    "init_db",
]
