"""Configuration management using Pydantic Settings"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from finhub_engine.domain.context import ArchitectPolicy


class Settings(BaseSettings):
    """Application configuration loaded from environment variables (prefix FINHUB_)"""

    model_config = SettingsConfigDict(env_prefix="FINHUB_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "finhub-engine"
    log_level: str = "INFO"
    default_currency: str = "INR"

    # Forecasting
    forecast_horizon_days: int = 30
    burn_window_days: int = 60
    essential_categories: List[str] = [
        "Groceries",
        "Food & Dining",
        "Transport",
        "Healthcare",
        "Bills & Utilities",
        "Insurance",
    ]

    # Priority architect
    inflation_rate: float = 0.06
    growth_cagr: float = 0.12
    high_interest_threshold: float = 0.10
    fallback_monthly_expense: float = 20_000
    fallback_monthly_income: float = 50_000

    def architect_policy(self) -> ArchitectPolicy:
        """Architect thresholds overridden from settings"""
        return ArchitectPolicy(
            inflation_rate=self.inflation_rate,
            growth_cagr=self.growth_cagr,
            high_interest_threshold=self.high_interest_threshold,
            fallback_monthly_expense=self.fallback_monthly_expense,
            fallback_monthly_income=self.fallback_monthly_income,
        )


settings = Settings()
