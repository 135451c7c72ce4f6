"""
polyrel.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the data-access layer.
- Offer a cached settings instance for callers that do not inject their own.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from polyrel.registry import CaseMatching


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="POLYREL_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "polyrel"
    log_level: str = "INFO"

    # Persistence
    database_url: str = "sqlite:///./polyrel.db"
    echo_sql: bool = False

    # How stored owner class names are compared against the type registry.
    class_case_matching: CaseMatching = CaseMatching.exact


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for every list that is built.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `class_case_matching` defaults to exact matching; switch to "insensitive" only
# when legacy rows were written with inconsistent class name casing.
