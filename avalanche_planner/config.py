"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./avalanche.db"
    create_tables_on_startup: bool = True

    # Service
    service_name: str = "avalanche-planner"
    log_level: str = "INFO"

    # Projection window
    default_months_to_show: int = 6
    max_months_to_show: int = 360

    # Minimum payment rules
    default_min_payment_percent: float = 2.0
    minimum_payment_floor: float = 25.0  # currency units
    max_installment_term_months: int = 24

    default_currency: str = "USD"


settings = Settings()
