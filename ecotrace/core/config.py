"""
Application configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file = ".env",
        env_file_encoding = "utf-8",
        populate_by_name = True
    )
    
    # Database (in-memory by default, records live as long as the process)
    database_url: str = Field(default="sqlite+aiosqlite:///:memory:", alias="DATABASE_URL")
    
    # Lifecycle
    strict_transitions: bool = Field(default=True, alias="STRICT_TRANSITIONS")
    seed_demo_data: bool = Field(default=False, alias="SEED_DEMO_DATA")
    
    # Application
    app_name: str = Field(default="EcoTrace Engine", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    port: int = Field(default=8000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
