"""HTML parsing helpers."""

import re

from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"\s+")


def make_soup(html: str) -> BeautifulSoup:
    """Parse HTML with lxml."""
    return BeautifulSoup(html, "lxml")


def normalize_whitespace(text: str) -> str:
    """Collapse all runs of whitespace to a single space."""
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def html_to_text(html: str) -> str:
    """
    Convert an HTML fragment to plain text.

    Args:
        html: HTML content

    Returns:
        Extracted text, one block per line
    """
    if not html:
        return ""

    soup = make_soup(html)

    for element in soup(["script", "style"]):
        element.decompose()

    text = soup.get_text(separator="\n")

    lines = []
    for line in text.split("\n"):
        line = line.strip()
        if line:
            lines.append(line)

    return "\n".join(lines).strip()


def extract_first_image(html: str) -> str | None:
    """
    Return the src of the first <img> in an HTML fragment.

    Args:
        html: HTML content

    Returns:
        Image URL or None
    """
    if not html or "<img" not in html:
        return None

    soup = make_soup(html)
    img = soup.find("img")

    if img and img.get("src"):
        src = img["src"]
        if isinstance(src, list):
            src = src[0] if src else None
        return src.strip() if src and src.strip() else None

    return None


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens."""
    if not text:
        return 0
    return len(text.split())
