"""Provider factory."""

import logging

from samachar.config import Settings
from samachar.llm.base import LLMConfig, LLMProvider
from samachar.llm.gemini import GeminiProvider
from samachar.llm.huggingface import HuggingFaceProvider
from samachar.llm.openai import OpenAIProvider

logger = logging.getLogger(__name__)


def _build_provider(name: str, settings: Settings) -> LLMProvider | None:
    """Build one provider, or None when its credential is missing."""
    timeout = settings.provider_timeout_seconds

    if name in ("deepseek", "openrouter", "groq"):
        api_key = getattr(settings, f"{name}_api_key")
        if not api_key:
            return None
        config = LLMConfig(model=getattr(settings, f"{name}_model"), timeout=timeout)
        return OpenAIProvider(
            name=name,
            config=config,
            api_key=api_key,
            base_url=getattr(settings, f"{name}_base_url"),
        )

    if name == "gemini":
        if not settings.gemini_api_key:
            return None
        config = LLMConfig(model=settings.gemini_model, max_tokens=800, timeout=timeout)
        return GeminiProvider(config=config, api_key=settings.gemini_api_key)

    if name == "huggingface":
        if not settings.huggingface_api_key:
            return None
        config = LLMConfig(model=settings.hf_gen_model, max_tokens=500, timeout=timeout)
        return HuggingFaceProvider(config=config, api_key=settings.huggingface_api_key)

    logger.warning(f"Unknown provider in PROVIDER_ORDER: {name}")
    return None


def create_providers(settings: Settings) -> list[LLMProvider]:
    """Configured providers in preference order."""
    providers = []
    for name in settings.provider_names:
        provider = _build_provider(name, settings)
        if provider is not None:
            providers.append(provider)

    logger.info(
        "Active AI providers: "
        + (", ".join(p.name for p in providers) if providers else "none (template fallback only)")
    )
    return providers
