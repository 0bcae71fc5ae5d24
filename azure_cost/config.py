"""Azure cost estimator configuration management"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Estimator settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AZURE_COST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Billing
    currency: str = Field(default="USD")
    cache_ttl_ms: int = Field(default=24 * 60 * 60 * 1000, ge=0)  # 24h

    # Azure Retail Prices API
    prices_api_url: str = Field(default="https://prices.azure.com/api/retail/prices")
    service_name: str = Field(default="Azure OpenAI Service")
    request_timeout: float = Field(default=30.0)  # seconds


settings = Settings()
