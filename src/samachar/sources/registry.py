"""Feed source registry."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Hard ceiling on items taken from one source per cycle
MAX_ITEMS_CEILING = 200

FRESHNESS_LATEST = "latest"
FRESHNESS_FEED = "feed"


class SourceKind(str, Enum):
    """How a source is fetched."""

    RSS = "rss"
    GNEWS = "gnews"
    NEWSAPI = "newsapi"

    @property
    def is_api(self) -> bool:
        """Fetched from a JSON news API rather than an RSS document."""
        return self is not SourceKind.RSS


@dataclass(frozen=True)
class FeedSource:
    """A static RSS or news API source."""

    key: str
    name: str
    kind: SourceKind
    priority: int  # lower = higher priority
    url: str = ""
    max_items: int = 10
    freshness: str = FRESHNESS_LATEST  # latest: newest first; feed: publisher order
    params: dict[str, Any] = field(default_factory=dict)

    def item_cap(self, overrides: dict[str, int] | None = None) -> int:
        """Configured item cap, bounded by MAX_ITEMS_CEILING."""
        cap = self.max_items
        if overrides and self.key in overrides:
            cap = overrides[self.key]
        return max(0, min(cap, MAX_ITEMS_CEILING))


NEWS_SOURCES: dict[str, FeedSource] = {
    "UTTARAKHAND_NEWS18": FeedSource(
        key="UTTARAKHAND_NEWS18",
        name="News18 Uttarakhand",
        kind=SourceKind.RSS,
        priority=1,
        url="https://hindi.news18.com/rss/uttarakhand/",
        max_items=12,
    ),
    "UTTARAKHAND_AMARUJALA": FeedSource(
        key="UTTARAKHAND_AMARUJALA",
        name="Amar Ujala Uttarakhand",
        kind=SourceKind.RSS,
        priority=2,
        url="https://www.amarujala.com/rss/uttarakhand.xml",
        max_items=12,
    ),
    "UTTARAKHAND_ZEE": FeedSource(
        key="UTTARAKHAND_ZEE",
        name="Zee News Uttarakhand",
        kind=SourceKind.RSS,
        priority=3,
        url="https://zeenews.india.com/hindi/rss/state/uttarakhand.xml",
        max_items=10,
    ),
    "INDIA_AAJ_TAK": FeedSource(
        key="INDIA_AAJ_TAK",
        name="AajTak - India (Hindi)",
        kind=SourceKind.RSS,
        priority=4,
        url="https://aajtak.intoday.in/rssfeeds/?id=home",
        max_items=15,
    ),
    "INDIA_NDTV_KHABAR": FeedSource(
        key="INDIA_NDTV_KHABAR",
        name="NDTV Khabar",
        kind=SourceKind.RSS,
        priority=5,
        url="https://feeds.feedburner.com/ndtvkhabar",
        max_items=10,
    ),
    "INDIA_GNEWS_HI": FeedSource(
        key="INDIA_GNEWS_HI",
        name="GNews India (Hindi)",
        kind=SourceKind.GNEWS,
        priority=6,
        max_items=15,
        params={
            "q": "भारत OR India",
            "lang": "hi",
            "country": "in",
            "sortby": "publishedAt",
        },
    ),
    "INTERNATIONAL_GNEWS": FeedSource(
        key="INTERNATIONAL_GNEWS",
        name="International News (GNews)",
        kind=SourceKind.GNEWS,
        priority=7,
        max_items=10,
        # fetched in English, rewritten to Hindi
        params={"q": "world OR international", "lang": "en", "sortby": "publishedAt"},
    ),
    "INTERNATIONAL_NEWSAPI": FeedSource(
        key="INTERNATIONAL_NEWSAPI",
        name="World News (NewsAPI)",
        kind=SourceKind.NEWSAPI,
        priority=8,
        max_items=10,
        params={
            "q": "world OR international",
            "language": "en",
            "sortBy": "publishedAt",
            "from_hours": 24,
        },
    ),
}


def iter_sources(
    sources: dict[str, FeedSource] | None = None,
) -> list[FeedSource]:
    """Sources in fan-out order: ascending priority, then key."""
    registry = NEWS_SOURCES if sources is None else sources
    return sorted(registry.values(), key=lambda s: (s.priority, s.key))
