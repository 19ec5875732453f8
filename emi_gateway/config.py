"""Configuration management using Pydantic Settings"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Persistence: chosen once at startup
    persistence_backend: Literal["memory", "database"] = "memory"
    store_credentials: Optional[str] = None  # base64-encoded connection URL
    store_emulator_url: Optional[str] = None  # plain URL, wins over credentials

    # Calculation
    currency_code: str = "ZMW"
    currency_symbol: str = "K"
    calculation_version: str = "emi-v1"

    # Service
    service_name: str = "emi-gateway"
    log_level: str = "INFO"


settings = Settings()
