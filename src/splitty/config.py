"""Configuration management for Splitty."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Currency all balances and settlements are expressed in
    base_currency: str = Field(default="EUR", pattern=r"^[A-Z]{3}$")

    # Exchange rate API
    rates_api_url: str = "https://api.fxratesapi.com"
    rates_timeout: float = 30.0  # seconds per request

    # Database path (exchange rate cache)
    database_path: Path = Path.home() / ".splitty" / "splitty.db"

    def __init__(self, **kwargs):
        """Initialize settings and create database directory if needed."""
        super().__init__(**kwargs)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)


def load_settings(**overrides) -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings(**overrides)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check your environment and .env file.\n"
            f"Error: {e}"
        ) from e
