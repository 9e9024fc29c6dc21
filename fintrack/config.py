"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./fintrack.db"
    create_schema_on_startup: bool = True

    # Service
    service_name: str = "fintrack-api"
    log_level: str = "INFO"

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # Credit cards
    max_installments: int = 72


settings = Settings()
