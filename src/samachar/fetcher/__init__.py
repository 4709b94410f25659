"""Feed fetching and page enrichment."""

from samachar.fetcher.enricher import ContentEnricher
from samachar.fetcher.feeds import FeedFetcher, FeedFetchError, sanitize_xml

__all__ = [
    "ContentEnricher",
    "FeedFetchError",
    "FeedFetcher",
    "sanitize_xml",
]
