"""Hindi rewrite engine: race all providers, fall back to templates."""

import asyncio
import logging
import random
import re
from dataclasses import dataclass

from pydantic import BaseModel

from samachar.llm.base import LLMProvider, ProviderError
from samachar.utils.html_parser import count_words, normalize_whitespace

logger = logging.getLogger(__name__)

FALLBACK_PROVIDER = "fallback"
# Reported for template output regardless of the template's length
FALLBACK_WORD_COUNT = 300

# Parsed content must be longer than this to be accepted
MIN_ACCEPTED_CONTENT = 250
MAX_TITLE_CHARS = 150
SHORT_TITLE_CHARS = 100
FALLBACK_EXCERPT_CHARS = 300

_TAG_RE = re.compile(r"<[^>]*>")
_MARKDOWN_RE = re.compile(r"[*_~`#]")
_LABEL_RE = re.compile(
    r"^(?:headline|title|article body|article|news article|"
    r"शीर्षक|लेख|आर्टिकल|न्यूज़ आर्टिकल|समाचार)\s*[:：]\s*",
    re.IGNORECASE,
)
_PREAMBLE_RE = re.compile(
    r"^(?:here is|here's|sure|certainly|of course|below is)\b",
    re.IGNORECASE,
)
_SENTENCE_END_RE = re.compile(r"(?<=[।.!?])\s+")

FALLBACK_TEMPLATES = [
    (
        "ताज़ा जानकारी के अनुसार, {title} से जुड़ी खबर सामने आई है। {excerpt}\n\n"
        "उपलब्ध विवरण के मुताबिक इस विषय पर आगे और जानकारी आने की संभावना है। "
        "संबंधित पक्षों की ओर से विस्तृत बयान का इंतज़ार किया जा रहा है और "
        "लोग इस खबर से जुड़े हर नए अपडेट पर नज़र बनाए हुए हैं।\n\n"
        "हम इस खबर से जुड़ी हर नई जानकारी आप तक पहुँचाते रहेंगे। "
        "अधिक जानकारी के लिए हमारे साथ बने रहें।"
    ),
    (
        "{title} को लेकर एक अहम खबर आई है। {excerpt}\n\n"
        "प्राप्त जानकारी के अनुसार इस विषय से जुड़े कई पहलुओं पर अभी स्थिति "
        "पूरी तरह साफ़ नहीं हो पाई है। जानकारों का मानना है कि आने वाले समय में "
        "इससे जुड़ी और बातें सामने आ सकती हैं।\n\n"
        "इस खबर पर हमारी नज़र बनी हुई है और जैसे ही कोई नया अपडेट मिलेगा, "
        "हम उसे आप तक सबसे पहले पहुँचाएँगे।"
    ),
    (
        "खबर है कि {title}। {excerpt}\n\n"
        "सूत्रों से मिली जानकारी के मुताबिक इस विषय पर चर्चा लगातार जारी है और "
        "लोगों में इसे लेकर उत्सुकता बनी हुई है। आधिकारिक पुष्टि और विस्तृत "
        "विवरण का इंतज़ार किया जा रहा है।\n\n"
        "इस खबर से जुड़ी हर ताज़ा जानकारी के लिए जुड़े रहें, हम आपको "
        "हर नए घटनाक्रम से अवगत कराते रहेंगे।"
    ),
]


class RewriteResult(BaseModel):
    """Rewritten article."""

    title: str
    content: str
    provider: str
    word_count: int
    success: bool  # False for template output


@dataclass
class ProviderOutcome:
    """Result of one provider attempt."""

    provider: str
    text: str | None = None
    error: str | None = None


def parse_ai_response(raw: str) -> tuple[str, str]:
    """
    Split raw provider output into (title, content).

    HTML tags, markdown punctuation, label prefixes and assistant preambles
    are stripped; the first remaining line is the title.
    """
    if not raw:
        return "", ""

    cleaned = _MARKDOWN_RE.sub("", _TAG_RE.sub("", raw.strip()))

    lines = []
    for line in cleaned.split("\n"):
        line = _LABEL_RE.sub("", line.strip()).strip()
        if not line:
            continue
        if not lines and _PREAMBLE_RE.match(line):
            continue
        lines.append(line)

    if not lines:
        return "", ""

    first = lines[0]
    if len(first) <= MAX_TITLE_CHARS:
        title, body_lines = first, lines[1:]
    else:
        sentence = _SENTENCE_END_RE.split(first, maxsplit=1)[0]
        title = sentence if len(sentence) <= SHORT_TITLE_CHARS else first[:SHORT_TITLE_CHARS].rstrip()
        body_lines = lines

    content = "\n\n".join(body_lines).strip()
    if not content:
        content = title
    return title, content


class RewriteEngine:
    """Rewrite articles into Hindi with race-with-fallback semantics."""

    def __init__(
        self,
        providers: list[LLMProvider],
        rng: random.Random | None = None,
    ) -> None:
        self.providers = providers
        self._rng = rng or random.Random()

    @property
    def provider_names(self) -> list[str]:
        return [p.name for p in self.providers]

    async def close(self) -> None:
        """Close provider clients."""
        for provider in self.providers:
            await provider.close()

    async def rewrite(self, title: str, content: str) -> RewriteResult:
        """
        Rewrite title and body; always returns a usable result.

        All providers run concurrently and every outcome is awaited; the
        first acceptable one in preference order wins.
        """
        if not self.providers:
            logger.info("No AI providers configured, using template fallback")
            return self.fallback(title, content)

        outcomes = await asyncio.gather(
            *(self._attempt(provider, title, content) for provider in self.providers)
        )

        for outcome in outcomes:
            if outcome.error or not outcome.text:
                logger.warning(f"Provider {outcome.provider} failed: {outcome.error}")
                continue

            parsed_title, parsed_content = parse_ai_response(outcome.text)
            if len(parsed_content) <= MIN_ACCEPTED_CONTENT:
                logger.warning(
                    f"Provider {outcome.provider} returned insufficient content "
                    f"({len(parsed_content)} chars)"
                )
                continue

            word_count = count_words(parsed_content)
            logger.info(f"Rewrite succeeded with {outcome.provider}: {word_count} words")
            return RewriteResult(
                title=parsed_title or title,
                content=parsed_content,
                provider=outcome.provider,
                word_count=word_count,
                success=True,
            )

        logger.warning("All AI providers failed, using template fallback")
        return self.fallback(title, content)

    async def _attempt(
        self, provider: LLMProvider, title: str, content: str
    ) -> ProviderOutcome:
        """Run one provider under its own timeout; never raises."""
        try:
            text = await asyncio.wait_for(
                provider.generate(title, content),
                timeout=provider.config.timeout,
            )
        except TimeoutError:
            return ProviderOutcome(
                provider.name, error=f"timed out after {provider.config.timeout}s"
            )
        except ProviderError as e:
            return ProviderOutcome(provider.name, error=str(e))
        except Exception as e:
            return ProviderOutcome(provider.name, error=f"{type(e).__name__}: {e}")
        return ProviderOutcome(provider.name, text=text)

    def fallback(self, title: str, content: str) -> RewriteResult:
        """Fill a fixed Hindi template with the source title and an excerpt."""
        title = normalize_whitespace(title) or "ताज़ा खबर"
        excerpt = normalize_whitespace(content)
        if len(excerpt) > FALLBACK_EXCERPT_CHARS:
            excerpt = excerpt[:FALLBACK_EXCERPT_CHARS].rstrip() + "..."

        template = self._rng.choice(FALLBACK_TEMPLATES)
        body = template.format(title=title, excerpt=excerpt)

        return RewriteResult(
            title=title,
            content=body,
            provider=FALLBACK_PROVIDER,
            word_count=FALLBACK_WORD_COUNT,
            success=False,
        )
