"""ArticleRecord model."""

import json
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp."""
    return datetime.now(UTC)


class ArticleRecord(SQLModel, table=True):
    """A rewritten Hindi article."""

    __tablename__ = "ai_news"  # type: ignore[assignment]

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(description="Rewritten title")
    slug: str = Field(unique=True, index=True, description="URL-safe slug")
    source_url: str = Field(unique=True, index=True, description="Dedup key")
    ai_content: str = Field(description="Rewritten body")
    short_desc: str = Field(default="", description="Truncated excerpt")
    image_url: str = Field(description="Feed, scraped or default image")
    published_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=True)
    )
    region: str = Field(default="international", index=True)
    genre: str = Field(default="Other", index=True)
    created_at: datetime = Field(
        default_factory=utcnow, index=True, sa_type=DateTime(timezone=True)
    )
    meta: str = Field(default="{}", description="Provenance (JSON object)")

    def meta_dict(self) -> dict[str, Any]:
        """Decoded provenance."""
        try:
            data = json.loads(self.meta or "{}")
        except json.JSONDecodeError:
            return {}
        return data if isinstance(data, dict) else {}
