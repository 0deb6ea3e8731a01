"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from installment_ledger.domain.models import MissingCategoryPolicy


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Service
    service_name: str = "installment-ledger"
    log_level: str = "INFO"

    # Engine
    timezone: str = "UTC"  # Used to derive "today" for plan status
    missing_category_policy: MissingCategoryPolicy = MissingCategoryPolicy.skip


settings = Settings()
