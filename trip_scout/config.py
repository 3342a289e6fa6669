from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

AMADEUS_TEST_URL = "https://test.api.amadeus.com"
AMADEUS_PRODUCTION_URL = "https://api.amadeus.com"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    amadeus_env: str = Field("test", alias="AMADEUS_ENV")
    amadeus_client_id: str = Field("", alias="AMADEUS_CLIENT_ID")
    amadeus_client_secret: str = Field("", alias="AMADEUS_CLIENT_SECRET")

    hf_model: str = Field(
        "mistralai/Mistral-7B-Instruct-v0.3", alias="HF_MODEL"
    )
    huggingface_api_key: str = Field("", alias="HUGGINGFACE_API_KEY")

    marketplace_timeout_s: float = Field(30.0, alias="MARKETPLACE_TIMEOUT_S")
    ai_timeout_s: float = Field(60.0, alias="AI_TIMEOUT_S")
    settlement_currency: str = Field("USD", alias="SETTLEMENT_CURRENCY")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(None, alias="LOG_FILE")

    @field_validator("amadeus_env", mode="before")
    @classmethod
    def _normalise_env(cls, v):
        v = (v or "").strip().lower()
        return v or "test"

    @field_validator("marketplace_timeout_s", "ai_timeout_s")
    @classmethod
    def _timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be greater than 0")
        return v

    @field_validator("settlement_currency")
    @classmethod
    def _currency_code(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("SETTLEMENT_CURRENCY must be a 3-letter code")
        return v

    @property
    def amadeus_base_url(self) -> str:
        return AMADEUS_TEST_URL if self.amadeus_env == "test" else AMADEUS_PRODUCTION_URL

    @property
    def amadeus_configured(self) -> bool:
        return bool(self.amadeus_client_id and self.amadeus_client_secret)

    @property
    def ai_configured(self) -> bool:
        return bool(self.huggingface_api_key)


@lru_cache()
def get_settings() -> Settings:
    """Return application settings loaded from the environment."""
    return Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "get_settings"]
