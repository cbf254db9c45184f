from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # App
    app_name: str = "Role Manager"
    debug: bool = False

    # Database (host role/user store)
    database_url: str = "sqlite:///./rolemanager.db"

    # Transient store: "redis" or "memory"
    cache_backend: str = "redis"
    redis_url: str = "redis://localhost:6379/0"
    cache_key_prefix: str = "rolemanager"

    # Derived-data cache lifetimes
    plugin_capabilities_ttl: int = 3600  # seconds
    user_counts_ttl: int = 300  # seconds

    # Security
    secret_key: str = "dev-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    action_token_expire_minutes: int = 1440

    # Role management
    manage_permission: str = "manage_options"
    fallback_role: str = "subscriber"

    # Logging
    log_level: str = "INFO"
    log_dir: str = "./logs"
    file_logging: bool = False
    log_format: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
