"""Application configuration using pydantic-settings."""
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ListStyle = Literal["grid", "list"]


def _default_add_user_fields() -> list[dict[str, Any]]:
    return [
        {"name": "username", "type": "text", "label": "Username", "validate": {"required": True}},
        {"name": "email", "type": "email", "label": "Email", "validate": {"required": True}},
        {"name": "password", "type": "password", "label": "Password", "validate": {"required": True}},
        {"name": "fullname", "type": "text", "label": "Full name"},
        {"name": "title", "type": "text", "label": "Title"},
    ]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Directory holding one <username>.yaml file per account
    accounts_dir: Path | None = Field(
        default=None, validation_alias="USER_MANAGER_ACCOUNTS_DIR",
    )

    # Listing
    per_page: int = Field(default=10, gt=0, validation_alias="USER_MANAGER_PER_PAGE")
    default_list_style: ListStyle = Field(
        default="grid", validation_alias="USER_MANAGER_DEFAULT_LIST_STYLE",
    )

    # Schema of the "add user" form, passed through to the rendering layer as-is
    add_user_fields: list[dict[str, Any]] = Field(
        default_factory=_default_add_user_fields,
        validation_alias="USER_MANAGER_ADD_USER_FIELDS",
    )

    # Redis - persisted tier of the users cache
    redis_url: str = Field(default="redis://localhost:6379", validation_alias="REDIS_URL")
    redis_enabled: bool = Field(default=True, validation_alias="REDIS_ENABLED")
    redis_pool_size: int = Field(default=20, validation_alias="REDIS_POOL_SIZE")
    users_cache_ttl: int = Field(
        default=604_800, gt=0, validation_alias="USER_MANAGER_CACHE_TTL",
    )

    # CORS - comma-separated list of allowed origins (stored as string, parsed via property)
    cors_origins_str: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ORIGINS",
    )

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins string into a list."""
        if not self.cors_origins_str:
            return []
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
