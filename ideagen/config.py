# ideagen/config.py
from __future__ import annotations

import os
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

APP_VERSION = os.getenv("APP_VERSION", "1.0.0")


class Settings(BaseSettings):
    # --- Identity / Build ---
    APP_NAME: str = Field(default="Idea Generation API")
    ENV: str = Field(default="dev")
    VERSION: str = Field(default=APP_VERSION)

    # --- Model gateway ---
    # Not validated at startup; a missing key surfaces as an upstream auth error.
    GATEWAY_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GATEWAY_API_KEY", "LOVABLE_API_KEY"),
    )
    GATEWAY_BASE_URL: str = Field(default="https://ai.gateway.lovable.dev")
    GATEWAY_MODEL: str = Field(default="google/gemini-2.5-flash")
    GATEWAY_MAX_COMPLETION_TOKENS: int = Field(default=4000, ge=1)

    # --- Rate limit (fixed window, per caller key) ---
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX: int = Field(default=20, ge=1)
    RATE_LIMIT_WINDOW_S: int = Field(default=3600, ge=1)
    RATE_LIMIT_MAX_KEYS: int = Field(default=10000, ge=1)

    # --- Input limits ---
    MAX_REQUEST_BYTES: int = Field(default=10000, ge=1)
    MAX_STRING_LENGTH: int = Field(default=500, ge=1)
    MAX_IDEA_COUNT: int = Field(default=5, ge=1)
    MAX_DAYS: int = Field(default=365, ge=1)

    # --- Optional static bearer token for callers ---
    ACCESS_TOKEN: Optional[str] = None

    # --- HTTP / CORS ---
    CORS_ALLOW_ORIGINS: str = Field(default="*")  # comma-separated, or "*"

    # --- Logging ---
    LOG_JSON: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    model_config = {
        "extra": "ignore",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    def cors_origins(self) -> List[str]:
        raw = (self.CORS_ALLOW_ORIGINS or "").strip()
        origins = [x.strip() for x in raw.split(",") if x.strip()]
        return origins or ["*"]


def get_settings() -> Settings:
    return Settings()
