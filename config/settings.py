from functools import lru_cache
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── OpenAI ───────────────────────────────────────────────────────────────
    # NUXT_OPENAI_API_KEY is accepted for deployments migrated from the web app
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OPENAI_API_KEY", "NUXT_OPENAI_API_KEY"),
    )
    default_agent: str = "gpt-5-mini"
    completion_max_tokens: int = 1000
    clarification_max_tokens: int = 200
    openai_timeout_seconds: float = 30.0
    openai_max_retries: int = 3

    # ── Clarification loop ───────────────────────────────────────────────────
    max_clarification_rounds: int = 3

    # ── Logging ──────────────────────────────────────────────────────────────
    app_env: str = "development"
    log_level: str = "INFO"
    activity_log_path: str = "logs/activity.jsonl"
    llm_log_path: str = "logs/llm_calls.jsonl"
    llm_preview_chars: int = 300

    # ── HTTP server ──────────────────────────────────────────────────────────
    server_host: str = "0.0.0.0"
    server_port: int = 8000

    # ── Derived helpers ──────────────────────────────────────────────────────
    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() in ("production", "prod")

    @property
    def api_key(self) -> str:
        return self.openai_api_key.strip()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

