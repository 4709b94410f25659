"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings (environment variables)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    database_url: str = "sqlite+aiosqlite:///./samachar.db"

    # Cycle
    poll_minutes: int = 15
    initial_delay_seconds: int = 5
    process_count: int = 15
    cleanup_days: int = 2
    max_concurrent_tasks: int = 5

    # Feed fetching
    feed_timeout_seconds: float = 15.0
    feed_retries: int = 2
    feed_retry_base_delay: float = 0.5
    source_max_items: dict[str, int] = {}

    # Page enrichment
    body_timeout_seconds: float = 15.0
    image_timeout_seconds: float = 10.0

    # News APIs
    gnews_api_key: str = ""
    newsapi_key: str = ""

    # AI providers
    provider_timeout_seconds: float = 30.0
    provider_order: str = "deepseek,openrouter,groq,gemini,huggingface"

    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com"
    deepseek_model: str = "deepseek-chat"

    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "meta-llama/llama-3.1-70b-instruct"

    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.1-70b-versatile"

    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"

    huggingface_api_key: str = ""
    hf_gen_model: str = "google/flan-t5-xxl"

    @property
    def provider_names(self) -> list[str]:
        """Provider preference order."""
        return [
            name.strip().lower()
            for name in self.provider_order.split(",")
            if name.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()
