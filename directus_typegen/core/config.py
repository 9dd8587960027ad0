from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="DIRECTUS_TYPEGEN_", extra="ignore")

    # Schema sources, checked in this order when no CLI flag picks one
    snapshot_path: str | None = None
    directus_url: str | None = None
    directus_token: str | None = None
    database_url: str | None = None

    request_timeout_seconds: float = 10.0
    prefetch_choices: bool = True
    include_system_collections: bool = True

    json_type: Literal["any", "unknown"] = "any"
    lenient_types: bool = False

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
