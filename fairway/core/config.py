from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Ignore unrelated env keys so local/dev .env can include the booking app's other settings.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Fairway Profitability"
    environment: str = "development"
    api_prefix: str = "/api/v1"
    cors_allow_origins: str = "http://localhost:5000,http://127.0.0.1:5000"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    supabase_url: str = Field(..., alias="SUPABASE_URL")
    supabase_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )
    supabase_anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")

    # Cost assumptions applied when no contract data explains a booking's cost.
    profitability_default_tee_time_cost_ratio: float = Field(
        default=0.80, ge=0.0, le=1.0, alias="PROFITABILITY_DEFAULT_TEE_TIME_COST_RATIO"
    )
    profitability_default_add_on_cost_ratio: float = Field(
        default=0.70, ge=0.0, le=1.0, alias="PROFITABILITY_DEFAULT_ADD_ON_COST_RATIO"
    )
    profitability_default_window_days: int = Field(
        default=30, ge=1, le=730, alias="PROFITABILITY_DEFAULT_WINDOW_DAYS"
    )
    profitability_default_package_type: str = Field(
        default="GREEN_FEE_BUGGY", alias="PROFITABILITY_DEFAULT_PACKAGE_TYPE"
    )
    profitability_page_size: int = Field(default=1000, ge=1, alias="PROFITABILITY_PAGE_SIZE")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_cors_origins() -> list[str]:
    settings = get_settings()
    return [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]
