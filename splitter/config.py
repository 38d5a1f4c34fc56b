"""Configuration management"""

import logging
from decimal import Decimal
from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "Splitter"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Splits
    default_currency: str = "GBP"
    percentage_tolerance: Decimal = Decimal("0.01")

    # CORS
    allowed_origins: List[str] = []

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    @field_validator("default_currency")
    @classmethod
    def validate_default_currency(cls, v: str) -> str:
        """Validate default currency is a 3-letter code"""
        code = v.strip().upper()
        if len(code) != 3 or not (code.isascii() and code.isalpha()):
            raise ValueError("DEFAULT_CURRENCY must be a 3-letter ISO 4217 code")
        return code

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one the logging module knows"""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {v}")
        return level

    @field_validator("percentage_tolerance")
    @classmethod
    def validate_percentage_tolerance(cls, v: Decimal) -> Decimal:
        """Validate tolerance is non-negative"""
        if v < 0:
            raise ValueError("PERCENTAGE_TOLERANCE cannot be negative")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
