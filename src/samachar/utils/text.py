"""Slug and excerpt helpers."""

import random
import string

from slugify import slugify

SLUG_TITLE_CHARS = 120
SLUG_SUFFIX_CHARS = 5
SHORT_DESC_CHARS = 200

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def make_slug(title: str, rng: random.Random | None = None) -> str:
    """URL-safe slug from the title plus a random suffix."""
    base = slugify(str(title or "")[:SLUG_TITLE_CHARS]) or "news"
    suffix = "".join((rng or random).choices(_SUFFIX_ALPHABET, k=SLUG_SUFFIX_CHARS))
    return f"{base}-{suffix}"


def make_short_desc(content: str, limit: int = SHORT_DESC_CHARS) -> str:
    """First ``limit`` characters of the body, with an ellipsis when cut."""
    text = " ".join((content or "").split())
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."
