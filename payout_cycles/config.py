"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "payout-cycles"
    log_level: str = "INFO"

    # Payout defaults applied by the HTTP layer
    default_payment_method: str = "transfer"
    allow_future_start: bool = True


settings = Settings()
