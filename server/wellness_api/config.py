"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_prefix="WELLNESS_")

    # Directory holding the SQLite databases
    data_path: str = os.getenv("DATA_PATH", os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

    @property
    def mood_db_path(self) -> str:
        return os.path.join(self.data_path, "mood_entries.db")

    @property
    def risk_db_path(self) -> str:
        return os.path.join(self.data_path, "risk_evaluations.db")

    @property
    def profile_db_path(self) -> str:
        return os.path.join(self.data_path, "profiles.db")

    # Default windows when the range token cannot be parsed
    self_default_days: int = 7
    supporter_default_days: int = 30

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8082
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
