from __future__ import annotations

import os
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DB_PATH = Path(__file__).resolve().parents[1] / "algoz.db"


class LLMProvider(str, Enum):
    gemini = "gemini"
    openai = "openai"


class Settings(BaseSettings):
    """Unified application settings for Algo-Z.

    Loads from env with support for repo ".env" files. Avoids manual load_dotenv().
    """

    _app_env = (os.getenv("APP_ENV") or "").strip().lower()
    _env_files = (
        []
        if _app_env in {"test", "ci"}
        else [
            str((Path(__file__).resolve().parents[1] / ".env")),  # apps/algoz/.env
            str((Path(__file__).resolve().parents[3] / ".env")),  # repo root .env
        ]
    )

    model_config = SettingsConfigDict(
        env_file=_env_files,
        case_sensitive=False,
        extra="ignore",
    )

    # --- App / Core ---
    app_env: str = Field(default="dev", alias="APP_ENV")
    app_name: str = Field(default="algoz", alias="APP_NAME")
    debug: bool = Field(default=False, alias="DEBUG")
    # Logging
    log_level: str | None = Field(default=None, alias="ALGOZ_LOG_LEVEL")
    log_level_fallback: str | None = Field(default=None, alias="LOG_LEVEL")

    secret_key: SecretStr = Field(default=SecretStr("dev-secret"), alias="SECRET_KEY")
    cors_allow_origins: list[str] = Field(default=["*"], alias="CORS_ALLOW_ORIGINS")

    # Auth (signed cookie session)
    session_cookie_name: str = Field(default="algoz_session", alias="SESSION_COOKIE_NAME")
    session_max_age_seconds: int = Field(
        default=60 * 60 * 24 * 7, alias="SESSION_MAX_AGE_SECONDS", ge=60
    )

    # Database
    database_url: str = Field(
        default=f"sqlite:///{DEFAULT_DB_PATH}",
        alias="DATABASE_URL",
    )

    # --- Generation service ---
    llm_provider: LLMProvider = Field(default=LLMProvider.gemini, alias="ALGOZ_LLM_PROVIDER")
    llm_temperature: float = Field(default=0.2, alias="ALGOZ_LLM_TEMPERATURE")

    # Gemini (default provider)
    gemini_api_key: SecretStr | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-1.5-pro", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    gemini_top_k: int = Field(default=40, alias="GEMINI_TOP_K", ge=1)
    gemini_top_p: float = Field(default=0.95, alias="GEMINI_TOP_P", gt=0, le=1)
    gemini_max_output_tokens: int = Field(default=8192, alias="GEMINI_MAX_OUTPUT_TOKENS", ge=1)
    gemini_timeout_seconds: float = Field(default=120.0, alias="GEMINI_TIMEOUT_SECONDS", gt=0)

    # OpenAI (also used by downstream libs)
    openai_api_key: SecretStr | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4.1-mini", alias="OPENAI_MODEL")
    openai_base_url: str | None = Field(default=None, alias="OPENAI_BASE_URL")
    openai_organization: str | None = Field(default=None, alias="OPENAI_ORG")

    # --- Profile source (Codeforces) ---
    codeforces_base_url: str = Field(
        default="https://codeforces.com/api", alias="CODEFORCES_BASE_URL"
    )
    codeforces_timeout_seconds: float = Field(
        default=20.0, alias="CODEFORCES_TIMEOUT_SECONDS", gt=0
    )

    # --- Realtime ---
    ws_path: str = Field(default="/ws", alias="ALGOZ_WS_PATH")
    profile_refresh_interval_seconds: float = Field(
        default=15.0,
        alias="PROFILE_REFRESH_INTERVAL_SECONDS",
        gt=0,
        description="Delay between profile refresh ticks for a tracked user.",
    )
    profile_refresh_fire_immediately: bool = Field(
        default=False,
        alias="PROFILE_REFRESH_FIRE_IMMEDIATELY",
        description="Run the first refresh as soon as tracking starts instead of after one interval.",
    )
    ws_reconnect_max_attempts: int = Field(default=5, alias="WS_RECONNECT_MAX_ATTEMPTS", ge=0)
    ws_reconnect_interval_seconds: float = Field(
        default=2.0, alias="WS_RECONNECT_INTERVAL_SECONDS", ge=0
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


# Convenience singleton for modules still expecting a module-level "settings"
settings = get_settings()
