from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "AI Job Loss Tracker"
    app_env: str = "development"
    app_host: str = "127.0.0.1"
    app_port: int = 3000
    log_level: str = "INFO"

    secret_key: str = "change-me"
    admin_password: str = ""
    bcrypt_rounds: int = 10
    session_ttl_min: int = 7 * 24 * 60
    https_only_cookies: bool = False
    cors_origins: str = ""

    database_url: str = "sqlite:///./data/jobloss.db"
    data_dir: Path = Path("./data")
    seed_on_startup: bool = True

    public_cache_max_age_sec: int = 300
    gzip_minimum_size: int = 500

    event_registry_api_key: str = ""
    event_registry_base_url: str = "https://eventregistry.org/api/v1"
    event_registry_timeout_sec: int = 30
    discovery_lookback_days: int = 3
    discovery_page_size: int = 50
    discovery_summary_max_chars: int = 500

    scheduled_lookback_days: int = 2
    candidate_retention_days: int = 60

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, value: int) -> int:
        if value < 4 or value > 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def discovery_configured(self) -> bool:
        return bool(self.event_registry_api_key.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
