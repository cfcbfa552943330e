from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingSettings(BaseSettings):
    reject_overlapping_rules: bool = Field(
        default=True,
        description="Refuse to store an active rule whose effective range overlaps "
        "another active rule for the same vehicle and service type",
    )
    distance_precision: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places kept on computed trip distance before pricing",
    )
    max_surge_multiplier: float = Field(default=5.0, ge=1.0, le=10.0)
    rules_path: str = Field(
        default="",
        description="Optional JSON file with pricing rule records loaded at startup",
    )

    model_config = SettingsConfigDict(env_prefix="FARE_")


class LoggingSettings(BaseSettings):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["text", "json"] = "text"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class APISettings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    model_config = SettingsConfigDict(env_prefix="API_")

    @field_validator("cors_origins")
    @classmethod
    def validate_origins(cls, v: str) -> str:
        for origin in filter(None, (o.strip() for o in v.split(","))):
            if not origin.startswith(("http://", "https://")):
                raise ValueError(f"CORS origin must start with http:// or https://: {origin}")
        return v

    def origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class Settings(BaseSettings):
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: APISettings = Field(default_factory=APISettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
