from pathlib import Path
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase (auth + vector store)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    match_function: str = "match_document_sections"
    match_threshold: float = 0.8
    match_count: int = 5
    store_timeout_seconds: float = 30.0

    # LLM
    llm_provider: Literal["openai", "azure"] = "openai"
    openai_api_key: str = ""
    azure_openai_api_key: str = ""
    azure_openai_endpoint: str = ""
    azure_openai_api_version: str = "2024-10-21"
    azure_openai_chat_deployment: str = "gpt-35-turbo"
    chat_model: str = "gpt-3.5-turbo-0125"
    llm_timeout_seconds: float = 60.0
    llm_max_retries: int = 2

    answer_temperature: float = 0.2
    answer_max_tokens: int = 1024
    suggestion_temperature: float = 0.7
    suggestion_max_tokens: int = 256

    # Client side
    embedding_model: str = "thenlper/gte-small"
    assistant_api_url: str = "http://localhost:8000"

    # Application
    cors_allow_headers: list[str] = [
        "authorization",
        "x-client-info",
        "apikey",
        "content-type",
    ]
    log_level: str = "INFO"
    environment: str = "development"

    def missing_configuration(self) -> list[str]:
        """Names of required settings that are empty for the active provider."""
        required = ["supabase_url", "supabase_anon_key"]
        if self.llm_provider == "azure":
            required += ["azure_openai_api_key", "azure_openai_endpoint"]
        else:
            required.append("openai_api_key")
        return [name for name in required if not getattr(self, name)]


@lru_cache
def get_settings() -> Settings:
    return Settings()
