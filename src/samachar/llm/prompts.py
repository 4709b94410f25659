"""Hindi rewrite prompts."""

SYSTEM_PROMPT = (
    "You are an expert Hindi journalist. Always respond in Hindi using "
    "Devanagari script. Write complete news articles."
)

USER_PROMPT_TEMPLATE = """You are an expert Hindi news writer. Write a complete Hindi news article based on the following information.

IMPORTANT: Write ONLY the article in Hindi. Do NOT include any English text, instructions, or formatting markers.
Write in proper Hindi (Devanagari script) with short paragraphs.

Include:
1. A catchy headline (in Hindi) on the first line
2. The article body (300-400 words in Hindi)
3. Write naturally like a news article

Source title: {title}

Content to rewrite: {content}

Now write the Hindi news article:"""

# Source text sent to a provider is capped to keep prompts inside token limits
MAX_SOURCE_CHARS = 6000


def build_user_prompt(title: str, content: str) -> str:
    """Fill the rewrite prompt."""
    content = content or ""
    if len(content) > MAX_SOURCE_CHARS:
        content = content[:MAX_SOURCE_CHARS]
    return USER_PROMPT_TEMPLATE.format(title=title or "No title", content=content)
