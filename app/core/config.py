"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "Adaptive Skincare Routine Engine"
    VERSION: str = "0.1.0"
    AUTHORS: List[str] = ["Routine Adaptation Team"]
    PROJECT_URL: str = ""

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database.  Without DATABASE_HOST a local SQLite file is used.
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: int = 5432
    DATABASE_DBNAME: str = "skincare"
    SQLITE_PATH: str = "skincare.db"

    # Adaptation engine
    WEATHER_STALE_AFTER_SECONDS: int = 3600
    RULES_DIR: Optional[Path] = None
    SNAPSHOT_CACHE_ENABLED: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def DATABASE_URL(self) -> str:
        if not self.DATABASE_HOST:
            return f"sqlite:///{self.SQLITE_PATH}"
        return (f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}"
                f":{self.DATABASE_PORT}"
                f"/{self.DATABASE_DBNAME}")


# Global settings instance
settings = Settings()
