"""AI rewrite providers and engine."""

from samachar.llm.base import LLMConfig, LLMProvider, Message, ProviderError
from samachar.llm.factory import create_providers
from samachar.llm.gemini import GeminiProvider
from samachar.llm.huggingface import HuggingFaceProvider
from samachar.llm.openai import OpenAIProvider
from samachar.llm.rewriter import (
    FALLBACK_PROVIDER,
    FALLBACK_WORD_COUNT,
    RewriteEngine,
    RewriteResult,
    parse_ai_response,
)

__all__ = [
    "FALLBACK_PROVIDER",
    "FALLBACK_WORD_COUNT",
    "GeminiProvider",
    "HuggingFaceProvider",
    "LLMConfig",
    "LLMProvider",
    "Message",
    "OpenAIProvider",
    "ProviderError",
    "RewriteEngine",
    "RewriteResult",
    "create_providers",
    "parse_ai_response",
]
