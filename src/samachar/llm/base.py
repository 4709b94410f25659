"""LLM provider base class."""

import logging
from abc import ABC, abstractmethod

import httpx
from pydantic import BaseModel

from samachar.llm.prompts import SYSTEM_PROMPT, build_user_prompt

logger = logging.getLogger(__name__)

# Raw provider output shorter than this is rejected
MIN_PROVIDER_OUTPUT = 200


class ProviderError(Exception):
    """A provider could not produce usable text."""


class Message(BaseModel):
    """Chat message."""

    role: str  # "system" | "user" | "assistant"
    content: str


class LLMConfig(BaseModel):
    """Provider configuration."""

    model: str
    temperature: float = 0.3
    max_tokens: int = 1500
    timeout: float = 30.0


class LLMProvider(ABC):
    """Text-generation provider that can rewrite an article into Hindi."""

    def __init__(self, name: str, config: LLMConfig) -> None:
        self.name = name
        self.config = config

    @abstractmethod
    async def chat(self, messages: list[Message]) -> str:
        """Return the full completion for a conversation."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        return None

    async def generate(self, title: str, content: str) -> str:
        """
        Rewrite title and body into a Hindi article.

        Raises:
            ProviderError: unauthenticated, rate-limited, non-2xx or short output
        """
        messages = [
            Message(role="system", content=SYSTEM_PROMPT),
            Message(role="user", content=build_user_prompt(title, content)),
        ]

        try:
            text = await self.chat(messages)
        except ProviderError:
            raise
        except Exception as e:
            msg = f"{self.name}: {type(e).__name__}: {e}"
            raise ProviderError(msg) from e

        text = (text or "").strip()
        if len(text) < MIN_PROVIDER_OUTPUT:
            msg = f"{self.name}: output too short ({len(text)} chars)"
            raise ProviderError(msg)
        return text

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} model={self.config.model}>"


def check_response(name: str, response: httpx.Response) -> None:
    """Map HTTP failures to ProviderError."""
    if response.is_success:
        return
    status = response.status_code
    if status in (401, 403):
        reason = "unauthenticated"
    elif status == 429:
        reason = "rate limited"
    else:
        reason = f"HTTP {status}"
    msg = f"{name}: {reason}: {response.text[:100]}"
    raise ProviderError(msg)
