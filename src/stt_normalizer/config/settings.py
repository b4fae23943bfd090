"""Configuration settings for the STT normalizer."""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConverterConfig(BaseSettings):
    """Audio converter settings."""

    ffmpeg_binary: str = Field(default="ffmpeg")
    temp_dir: Optional[Path] = Field(default=None)
    native_enabled: bool = Field(default=True)
    verify_output: bool = Field(default=True)

    model_config = SettingsConfigDict(env_prefix="STT_NORMALIZER_CONVERTER_")

    @field_validator("temp_dir", mode="before")
    @classmethod
    def validate_temp_dir(cls, v):
        if v and isinstance(v, str):
            return Path(v)
        return v or None


class Settings(BaseSettings):
    """Main application settings."""

    app_name: str = Field(default="STT Normalizer")
    environment: str = Field(default="production")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    converter: ConverterConfig = Field(default_factory=ConverterConfig)

    model_config = SettingsConfigDict(
        env_prefix="STT_NORMALIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()
