"""RSS and news API fetchers."""

import logging
import re
from datetime import UTC, datetime, timedelta
from time import struct_time
from typing import Any
from urllib.parse import urljoin, urlparse

import feedparser
import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from samachar.config import Settings
from samachar.models.article import utcnow
from samachar.models.candidate import ArticleCandidate
from samachar.sources.registry import FRESHNESS_LATEST, FeedSource, SourceKind
from samachar.utils.html_parser import (
    extract_first_image,
    html_to_text,
    normalize_whitespace,
)

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (compatible; SamacharBot/0.1; +https://github.com/samachar) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)

GNEWS_SEARCH_URL = "https://gnews.io/api/v4/search"
GNEWS_TOP_URL = "https://gnews.io/api/v4/top-headlines"
NEWSAPI_URL = "https://newsapi.org/v2/everything"

# A bare "&" that does not start a known entity
_BARE_AMP_RE = re.compile(r"&(?!(?:amp|lt|gt|quot|apos|#\d+|#x[0-9A-Fa-f]+);)")


class FeedFetchError(Exception):
    """A source answered with an unusable payload."""


def sanitize_xml(xml: str) -> str:
    """Escape bare ampersands so the feed parses."""
    if not xml:
        return xml
    return _BARE_AMP_RE.sub("&amp;", xml)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO string or struct_time into aware UTC, defaulting to now."""
    if isinstance(value, struct_time):
        # feedparser normalises parsed dates to UTC
        try:
            return datetime(*value[:6], tzinfo=UTC)
        except (TypeError, ValueError):
            return utcnow()
    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return utcnow()
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        return parsed.astimezone(UTC)
    return utcnow()


def resolve_item_url(link: str, base_url: str = "") -> str | None:
    """Absolute http(s) article URL, or None when the item has none."""
    link = (link or "").strip()
    if not link:
        return None

    try:
        resolved = urljoin(base_url, link) if base_url else link
        parsed = urlparse(resolved)
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return resolved


def _is_image_media(media: Any) -> bool:
    medium = str(media.get("medium") or "").lower()
    mime = str(media.get("type") or "").lower()
    if medium and medium != "image":
        return False
    return not mime or mime.startswith("image/")


def resolve_rss_image(entry: Any) -> str | None:
    """
    Pick an image for an RSS entry.

    Order: image enclosure, media:content, media:thumbnail, then the first
    <img> in any inline HTML. feedparser folds media:group children into
    media_content, so grouped content is covered by the second step.
    """
    for enclosure in entry.get("enclosures") or []:
        href = enclosure.get("href") or enclosure.get("url")
        if href and str(enclosure.get("type", "")).startswith("image/"):
            return href

    for key in ("media_content", "media_thumbnail"):
        for media in entry.get(key) or []:
            if media.get("url") and _is_image_media(media):
                return media["url"]

    html_fields = [c.get("value", "") for c in entry.get("content") or []]
    html_fields.append(entry.get("summary", ""))
    for html in html_fields:
        image = extract_first_image(html)
        if image:
            return image

    return None


class FeedFetcher:
    """Fetch and normalise items from one registry source."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self._client = client or httpx.AsyncClient(
            timeout=settings.feed_timeout_seconds,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def fetch_feed(self, source: FeedSource) -> list[ArticleCandidate]:
        """
        Fetch one source, truncated to its item cap.

        Sources with "latest" freshness are ordered newest first before the
        cap; "feed" sources keep the publisher's order.

        Never raises: any failure is logged and yields an empty list.
        """
        cap = source.item_cap(self.settings.source_max_items)
        try:
            if not source.kind.is_api:
                candidates = await self._fetch_rss(source)
            elif source.kind is SourceKind.GNEWS:
                candidates = await self._fetch_gnews(source, cap)
            else:
                candidates = await self._fetch_newsapi(source, cap)
        except Exception as e:
            logger.warning(f"Failed to fetch {source.name}: {type(e).__name__}: {e}")
            return []

        if not candidates:
            logger.warning(f"No items from {source.name}")
            return []

        if source.freshness == FRESHNESS_LATEST:
            candidates.sort(key=lambda c: c.published_at, reverse=True)
        candidates = candidates[:cap]
        logger.info(
            f"Fetched {len(candidates)} items from {source.name} "
            f"(latest {max(c.published_at for c in candidates).isoformat()})"
        )
        return candidates

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """GET with exponential backoff on transport errors and 5xx/429."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.settings.feed_retries + 1),
            wait=wait_exponential(multiplier=self.settings.feed_retry_base_delay),
            retry=retry_if_exception(self._is_retryable),
            before_sleep=before_sleep_log(logger, logging.INFO),
            reraise=True,
        ):
            with attempt:
                response = await self._client.get(url, params=params)
                response.raise_for_status()
        return response

    @staticmethod
    def _is_retryable(error: BaseException) -> bool:
        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            return status == 429 or status >= 500
        return isinstance(error, httpx.TransportError)

    # RSS

    async def _fetch_rss(self, source: FeedSource) -> list[ArticleCandidate]:
        response = await self._get(source.url)
        feed = feedparser.parse(sanitize_xml(response.text))

        if not feed.entries:
            if feed.bozo:
                msg = f"malformed feed: {feed.get('bozo_exception')}"
                raise FeedFetchError(msg)
            return []

        label = feed.feed.get("title") or source.name
        candidates = []
        for entry in feed.entries:
            candidate = self._normalize_rss_entry(entry, source, label)
            if candidate:
                candidates.append(candidate)
        return candidates

    def _normalize_rss_entry(
        self, entry: Any, source: FeedSource, label: str
    ) -> ArticleCandidate | None:
        # Relative links resolve against the feed; a guid counts only when absolute
        url = resolve_item_url(entry.get("link", ""), source.url) or resolve_item_url(
            entry.get("id", "")
        )
        if not url:
            logger.debug(f"Dropping {source.name} item without a usable URL")
            return None

        title = normalize_whitespace(html_to_text(entry.get("title", ""))) or "No title"

        description = normalize_whitespace(html_to_text(entry.get("summary", "")))
        if not description:
            contents = entry.get("content") or []
            snippet = contents[0].get("value", "") if contents else ""
            description = normalize_whitespace(html_to_text(snippet))
        if not description:
            description = title

        published = entry.get("published_parsed") or entry.get("updated_parsed")

        return ArticleCandidate(
            title=title,
            description=description,
            url=url,
            image=resolve_rss_image(entry),
            published_at=parse_timestamp(published),
            source=label,
            source_key=source.key,
            source_name=source.name,
            priority=source.priority,
        )

    # News APIs

    async def _fetch_gnews(self, source: FeedSource, cap: int) -> list[ArticleCandidate]:
        api_key = self.settings.gnews_api_key
        if not api_key:
            logger.info(f"GNEWS_API_KEY not configured, skipping {source.name}")
            return []

        params = dict(source.params)
        endpoint = GNEWS_TOP_URL if params.get("country") else GNEWS_SEARCH_URL
        params.update({"max": cap, "apikey": api_key})

        response = await self._get(endpoint, params=params)
        data = response.json()
        if not isinstance(data, dict) or data.get("errors"):
            msg = f"GNews error: {data.get('errors') if isinstance(data, dict) else data}"
            raise FeedFetchError(msg)
        articles = data.get("articles")
        if not isinstance(articles, list):
            msg = "GNews payload has no articles list"
            raise FeedFetchError(msg)

        return self._normalize_api_articles(articles, source, image_key="image")

    async def _fetch_newsapi(self, source: FeedSource, cap: int) -> list[ArticleCandidate]:
        api_key = self.settings.newsapi_key
        if not api_key:
            logger.info(f"NEWSAPI_KEY not configured, skipping {source.name}")
            return []

        params = dict(source.params)
        from_hours = params.pop("from_hours", 24)
        since = utcnow() - timedelta(hours=from_hours)
        params.update(
            {
                "from": since.date().isoformat(),
                "pageSize": cap,
                "apiKey": api_key,
            }
        )

        response = await self._get(NEWSAPI_URL, params=params)
        data = response.json()
        if not isinstance(data, dict) or data.get("status") != "ok":
            message = data.get("message") if isinstance(data, dict) else data
            msg = f"NewsAPI error: {message}"
            raise FeedFetchError(msg)

        return self._normalize_api_articles(
            data.get("articles") or [], source, image_key="urlToImage"
        )

    def _normalize_api_articles(
        self,
        articles: list[dict[str, Any]],
        source: FeedSource,
        image_key: str,
    ) -> list[ArticleCandidate]:
        candidates = []
        for item in articles:
            if not isinstance(item, dict):
                continue
            url = resolve_item_url(item.get("url") or "")
            if not url:
                continue

            title = normalize_whitespace(item.get("title") or "") or "No title"
            description = normalize_whitespace(
                item.get("description") or item.get("content") or ""
            ) or title
            publisher = item.get("source") or {}

            candidates.append(
                ArticleCandidate(
                    title=title,
                    description=description,
                    url=url,
                    image=item.get(image_key) or None,
                    published_at=parse_timestamp(item.get("publishedAt")),
                    source=publisher.get("name") or source.name,
                    source_key=source.key,
                    source_name=source.name,
                    priority=source.priority,
                )
            )
        return candidates
