"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATALOG_SOURCE = (
    "https://raw.githubusercontent.com/weave-services/node-assets/"
    "refs/heads/main/node-list/nodes.json"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Producer
    openai_api_key: Optional[str] = None
    openai_api_base: Optional[str] = None
    planner_model: str = "gpt-4o"
    planner_fallback_models: str = "gpt-4o-mini"
    planner_temperature: float = 0.0

    # Catalog (URL or local JSON file)
    catalog_source: str = DEFAULT_CATALOG_SOURCE
    catalog_timeout: float = 10.0
    entry_kinds: str = "trigger,webhook,scheduler"

    # Layout
    node_width: float = 180
    node_height: float = 60

    # Application Settings
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Retry Settings
    retry_max_attempts: int = 3
    retry_base_delay: float = 1.0
    retry_max_delay: float = 30.0

    def entry_kind_set(self) -> frozenset[str]:
        """Entry kinds as a normalized set."""
        return frozenset(
            k.strip().lower() for k in self.entry_kinds.split(",") if k.strip()
        )

    def planner_fallback_chain(self) -> list[str]:
        """Fallback planner models in order."""
        return [m.strip() for m in self.planner_fallback_models.split(",") if m.strip()]

    def validate_api_keys(self) -> dict[str, bool]:
        """Check which API keys are configured."""
        return {"openai": bool(self.openai_api_key)}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
