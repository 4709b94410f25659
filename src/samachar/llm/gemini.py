"""Google Gemini provider."""

import httpx

from samachar.llm.base import LLMConfig, LLMProvider, Message, check_response

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiProvider(LLMProvider):
    """Gemini generateContent REST endpoint."""

    def __init__(self, config: LLMConfig, api_key: str) -> None:
        super().__init__("gemini", config)
        self.api_key = api_key
        self._client = httpx.AsyncClient(timeout=config.timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def chat(self, messages: list[Message]) -> str:
        """Return the full completion."""
        url = f"{GEMINI_BASE_URL}/{self.config.model}:generateContent"
        system = "\n".join(m.content for m in messages if m.role == "system")
        user = "\n\n".join(m.content for m in messages if m.role != "system")
        payload = {
            "contents": [{"role": "user", "parts": [{"text": user}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "maxOutputTokens": self.config.max_tokens,
            },
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        response = await self._client.post(
            url, params={"key": self.api_key}, json=payload
        )
        check_response(self.name, response)

        data = response.json()
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = candidates[0].get("content", {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)
