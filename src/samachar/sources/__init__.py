"""News source catalogue."""

from samachar.sources.registry import (
    FRESHNESS_FEED,
    FRESHNESS_LATEST,
    MAX_ITEMS_CEILING,
    NEWS_SOURCES,
    FeedSource,
    SourceKind,
    iter_sources,
)

__all__ = [
    "FRESHNESS_FEED",
    "FRESHNESS_LATEST",
    "MAX_ITEMS_CEILING",
    "NEWS_SOURCES",
    "FeedSource",
    "SourceKind",
    "iter_sources",
]
