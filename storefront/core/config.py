from functools import lru_cache
from typing import Literal
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "SonkoStorefront"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Mongo (catalog, users, orders, GridFS objects)
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "sonko"
    MONGO_TLS: bool = False

    # Redis (stats cache + page view counter), optional
    REDIS_URL: str = ""

    # Object storage
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    uploads_bucket: str = "uploads"
    max_upload_mb: int = 80                      # per file, server side

    # Cache config
    stats_cache_ttl: int = 60                    # seconds
    stats_cache_key: str = "stats:summary"
    page_views_key: str = "stats:page_views"

    # API
    api_prefix: str = "/api"

    # Client side (admin form + storefront shell)
    STOREFRONT_API_URL: str = "http://localhost:8000"
    CLIENT_STATE_PATH: str = ".sonko_state.json"
    SHOP_PHONE_NUMBER: str = "+255700000000"
    http_timeout_s: float = 120.0

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
