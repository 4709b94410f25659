"""HuggingFace Inference API provider."""

from typing import Any

import httpx

from samachar.llm.base import LLMConfig, LLMProvider, Message, check_response

HF_INFERENCE_URL = "https://api-inference.huggingface.co/models"


class HuggingFaceProvider(LLMProvider):
    """Text-generation model hosted on the HuggingFace Inference API."""

    def __init__(self, config: LLMConfig, api_key: str) -> None:
        super().__init__("huggingface", config)
        self._client = httpx.AsyncClient(
            timeout=config.timeout,
            headers={"Authorization": f"Bearer {api_key}"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def chat(self, messages: list[Message]) -> str:
        """Return the generated text."""
        url = f"{HF_INFERENCE_URL}/{self.config.model}"
        prompt = "\n\n".join(m.content for m in messages)
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": min(self.config.max_tokens, 1000),
                "temperature": self.config.temperature,
                "do_sample": True,
                "return_full_text": False,
            },
        }

        response = await self._client.post(url, json=payload)
        check_response(self.name, response)
        return self._extract_text(response.json())

    @staticmethod
    def _extract_text(data: Any) -> str:
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0].get("generated_text", "")
        if isinstance(data, dict):
            return data.get("generated_text", "")
        if isinstance(data, str):
            return data
        return ""
