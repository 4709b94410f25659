"""OpenAI-compatible provider (DeepSeek, OpenRouter, Groq)."""

from typing import Any

from openai import APIStatusError, AsyncOpenAI

from samachar.llm.base import LLMConfig, LLMProvider, Message, ProviderError


class OpenAIProvider(LLMProvider):
    """Any OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        name: str,
        config: LLMConfig,
        api_key: str,
        base_url: str,
    ) -> None:
        super().__init__(name, config)
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=config.timeout,
            max_retries=0,
        )

    async def close(self) -> None:
        await self.client.close()

    async def chat(self, messages: list[Message]) -> str:
        """Return the full completion."""
        openai_messages: list[dict[str, Any]] = [
            {"role": m.role, "content": m.content} for m in messages
        ]

        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=openai_messages,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except APIStatusError as e:
            if e.status_code in (401, 403):
                reason = "unauthenticated"
            elif e.status_code == 429:
                reason = "rate limited"
            else:
                reason = f"HTTP {e.status_code}"
            msg = f"{self.name}: {reason}"
            raise ProviderError(msg) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
