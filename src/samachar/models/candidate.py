"""Ephemeral pipeline models."""

from pydantic import AwareDatetime, BaseModel


class ArticleCandidate(BaseModel):
    """A news item discovered from a feed or API, before enrichment."""

    title: str
    description: str = ""
    url: str
    image: str | None = None
    published_at: AwareDatetime
    source: str  # publisher label reported by the feed
    source_key: str
    source_name: str  # registry display name
    priority: int


class EnrichedContent(BaseModel):
    """Candidate plus scraped body and image."""

    candidate: ArticleCandidate
    body: str
    body_source: str  # scraped | description
    image: str | None = None
    image_source: str | None = None  # feed | scraped
