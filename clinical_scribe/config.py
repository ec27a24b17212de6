from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field


class Settings(BaseSettings):
    # External OpenAI-compatible server (optional, deterministic fallback otherwise)
    llm_enabled: bool = False
    llm_base_url: str = "http://127.0.0.1:11424/v1"
    llm_model: str = "google/medgemma-4b-it"
    llm_api_key: str = Field(
        default="EMPTY",
        validation_alias=AliasChoices(
            "SCRIBE_LLM_API_KEY",
            "OPENAI_API_KEY",
        ),
    )
    llm_max_tokens: int = 1024
    llm_temperature: float = 0.3
    llm_request_timeout_seconds: float = 20.0
    llm_max_retries: int = 2
    llm_retry_backoff_seconds: float = 0.5
    llm_parse_retry_enabled: bool = True
    llm_log_enabled: bool = False
    llm_log_path: str = "logs/llm_calls.jsonl"

    # Concurrency
    llm_max_concurrent_calls: int = 4

    # Blood pressure history
    bp_history_limit: int = 6
    visit_history_lookback: int = 10

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    model_config = {
        "env_prefix": "SCRIBE_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }


settings = Settings()
