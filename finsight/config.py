"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from finsight.core.projection import SHOCK_WINDOW_YEARS


class Settings(BaseSettings):
    """Configuration for the FinSight backend, read from FINSIGHT_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="FINSIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="FinSight")
    log_level: str = Field(default="INFO")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
    )

    shock_window_years: int = Field(
        default=SHOCK_WINDOW_YEARS,
        ge=0,
        description="Years during which macro-shock rate modifiers apply.",
    )
    profile_store_path: str = Field(
        default="var/finsight_app_state.json",
        description="JSON file holding the saved profiles.",
    )

    gemini_api_key: Optional[str] = Field(default=None)
    gemini_model: str = Field(default="gemini-2.5-flash")
    insight_timeout_seconds: float = Field(default=30.0, gt=0)
    insight_max_retries: int = Field(default=4, ge=1)
    insight_backoff_base_seconds: float = Field(default=1.0, ge=0)
    insight_backoff_jitter_seconds: float = Field(default=1.5, ge=0)

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"gemini_api_key"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
