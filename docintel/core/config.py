"""
Application configuration management using Pydantic Settings.
"""
from functools import lru_cache
from typing import Any, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Document intelligence settings loaded from environment variables.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DOCINTEL_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "docintel"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    LOG_LEVEL: str = "INFO"

    # Analysis defaults
    DEFAULT_TARGET_TONE: str = "neutral"
    DEFAULT_TARGET_SECTION_LENGTH: int = Field(default=500, ge=1)
    DEFAULT_MIN_SECTIONS: int = Field(default=3, ge=0)
    DEFAULT_MAX_SECTIONS: int = Field(default=20, ge=1)
    DEFAULT_DOCUMENT_SUMMARY_LENGTH: int = Field(default=250, ge=1)
    DEFAULT_SECTION_SUMMARY_LENGTH: int = Field(default=100, ge=1)
    DEFAULT_MAX_REWRITE_ITERATIONS: int = Field(default=3, ge=0)
    DEFAULT_MAX_TONE_SHIFTS: int = Field(default=3, ge=0)

    # Statistics
    READING_WORDS_PER_MINUTE: int = Field(default=200, ge=1)

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return str(v).upper()

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    def get_analysis_defaults(self) -> Dict[str, Any]:
        """Get default analysis configuration."""
        return {
            "target_tone": self.DEFAULT_TARGET_TONE,
            "target_section_length": self.DEFAULT_TARGET_SECTION_LENGTH,
            "min_sections": self.DEFAULT_MIN_SECTIONS,
            "max_sections": self.DEFAULT_MAX_SECTIONS,
            "document_summary_length": self.DEFAULT_DOCUMENT_SUMMARY_LENGTH,
            "section_summary_length": self.DEFAULT_SECTION_SUMMARY_LENGTH,
            "max_rewrite_iterations": self.DEFAULT_MAX_REWRITE_ITERATIONS,
            "max_tone_shifts": self.DEFAULT_MAX_TONE_SHIFTS,
        }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    """
    return Settings()


settings = get_settings()
