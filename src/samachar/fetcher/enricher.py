"""Best-effort article body and image scraping."""

import asyncio
import logging
from typing import ClassVar
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from samachar.config import Settings
from samachar.models.candidate import ArticleCandidate, EnrichedContent
from samachar.utils.html_parser import make_soup, normalize_whitespace

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "hi-IN,hi;q=0.9,en-US;q=0.8,en;q=0.5",
}


class ContentEnricher:
    """Scrape the full body and a representative image from an article page."""

    BODY_SELECTORS: ClassVar[list[str]] = [
        "article",
        ".article-body",
        ".story-body",
        ".story-content",
        ".entry-content",
        ".post-content",
        ".td-post-content",
        ".news-detail",
        ".wp-block-post-content",
        "#content",
        ".ArticleBody",
        ".cn__content",
        ".story-section",
        ".article-container",
        "main",
    ]

    IMAGE_META: ClassVar[list[tuple[str, str]]] = [
        ("property", "og:image"),
        ("property", "og:image:url"),
        ("name", "twitter:image"),
        ("name", "twitter:image:src"),
    ]

    IMAGE_SELECTORS: ClassVar[list[str]] = [
        ".featured-image img",
        ".post-thumbnail img",
        ".entry-image img",
        ".article-image img",
        ".hero-image img",
        "article img",
    ]

    BOILERPLATE_MARKERS: ClassVar[list[str]] = [
        "©",
        "copyright",
        "all rights reserved",
        "advertisement",
        "sponsored",
        "विज्ञापन",
        "सर्वाधिकार",
    ]

    # Text thresholds (characters)
    MIN_SELECTOR_TEXT = 300
    MIN_PARAGRAPH_TEXT = 80
    MIN_PARAGRAPH_TOTAL = 400
    MIN_BODY_TEXT = 100

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.body_timeout = settings.body_timeout_seconds
        self.image_timeout = settings.image_timeout_seconds
        self._client = client or httpx.AsyncClient(
            headers=BROWSER_HEADERS,
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def enrich(self, candidate: ArticleCandidate) -> EnrichedContent:
        """Fetch body and image concurrently; fall back to feed text."""
        if candidate.image:
            scraped_body = await self.fetch_body(candidate.url)
            scraped_image = None
        else:
            scraped_body, scraped_image = await asyncio.gather(
                self.fetch_body(candidate.url),
                self.fetch_image(candidate.url),
            )

        if scraped_body and len(scraped_body) >= self.MIN_BODY_TEXT:
            body, body_source = scraped_body, "scraped"
        else:
            body, body_source = self._fallback_body(candidate), "description"

        if candidate.image:
            image, image_source = candidate.image, "feed"
        elif scraped_image:
            image, image_source = scraped_image, "scraped"
        else:
            image, image_source = None, None

        return EnrichedContent(
            candidate=candidate,
            body=body,
            body_source=body_source,
            image=image,
            image_source=image_source,
        )

    @staticmethod
    def _fallback_body(candidate: ArticleCandidate) -> str:
        parts: list[str] = []
        for part in (candidate.description, candidate.title):
            part = (part or "").strip()
            if part and part not in parts:
                parts.append(part)
        return "\n\n".join(parts)

    async def _load(self, url: str, timeout: float) -> BeautifulSoup | None:
        """Download and parse a page; None on any failure."""
        try:
            response = await self._client.get(url, timeout=timeout)
        except httpx.HTTPError as e:
            logger.warning(f"Page fetch failed for {url}: {type(e).__name__}: {e}")
            return None

        if not response.is_success:
            logger.warning(f"Page fetch failed for {url}: HTTP {response.status_code}")
            return None

        try:
            return make_soup(response.text)
        except Exception as e:
            logger.warning(f"Page parse failed for {url}: {e}")
            return None

    async def fetch_body(self, url: str) -> str | None:
        """Scrape the article text, or None."""
        soup = await self._load(url, self.body_timeout)
        if soup is None:
            return None
        return self.extract_body(soup)

    def extract_body(self, soup: BeautifulSoup) -> str | None:
        """Pick the article text from a parsed page."""
        for element in soup(["script", "style", "noscript", "nav", "aside", "footer"]):
            element.decompose()

        for selector in self.BODY_SELECTORS:
            node = soup.select_one(selector)
            if node is None:
                continue
            text = normalize_whitespace(node.get_text(separator=" "))
            if len(text) > self.MIN_SELECTOR_TEXT:
                return text

        paragraphs = []
        for p in soup.find_all("p"):
            text = normalize_whitespace(p.get_text(separator=" "))
            if len(text) <= self.MIN_PARAGRAPH_TEXT or self._is_boilerplate(text):
                continue
            paragraphs.append(text)

        content = "\n\n".join(paragraphs)
        return content if len(content) > self.MIN_PARAGRAPH_TOTAL else None

    def _is_boilerplate(self, text: str) -> bool:
        lowered = text.lower()
        return any(marker in lowered for marker in self.BOILERPLATE_MARKERS)

    async def fetch_image(self, url: str) -> str | None:
        """Scrape a representative image URL, or None."""
        soup = await self._load(url, self.image_timeout)
        if soup is None:
            return None
        return self.extract_image(soup, url)

    def extract_image(self, soup: BeautifulSoup, page_url: str) -> str | None:
        """Meta tags first, then featured-image selectors."""
        for attr, value in self.IMAGE_META:
            tag = soup.find("meta", attrs={attr: value})
            if tag and tag.get("content"):
                image = resolve_image_url(tag["content"], page_url)
                if image:
                    return image

        for selector in self.IMAGE_SELECTORS:
            img = soup.select_one(selector)
            if img is None:
                continue
            src = img.get("src") or img.get("data-src")
            image = resolve_image_url(src, page_url) if src else None
            if image:
                return image

        return None


def resolve_image_url(src: str, page_url: str) -> str | None:
    """Absolute http(s) image URL, or None when it cannot be resolved."""
    src = (src or "").strip()
    if not src or src.startswith("data:"):
        return None

    try:
        resolved = urljoin(page_url, src)
        parsed = urlparse(resolved)
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return resolved
