"""
Configuration management for the social graph API.

Supports multiple environments (local, production) with
different logging, CORS and credential settings.

Responsibility: Centralized configuration and environment management
"""

from enum import Enum
from typing import List
import json
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment"""
    LOCAL = "local"
    PRODUCTION = "production"


class AuthConfig(BaseSettings):
    """Password hashing and session token configuration"""

    # Token signing
    secret: str = Field(
        default="change-me-in-production-social-graph-secret",
        validation_alias=AliasChoices("AUTH_SECRET", "SECRET"),
    )
    algorithm: str = Field(default="HS256")
    token_ttl_seconds: int = Field(default=86400, ge=1)  # 1 day
    token_header: str = Field(default="x-token")

    # bcrypt cost factor
    salt_rounds: int = Field(
        default=10,
        ge=4,
        le=31,
        validation_alias=AliasChoices("AUTH_SALT_ROUNDS", "SALT_ROUNDS"),
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True  # Allow AuthConfig(secret=..., salt_rounds=...)
    )


class AppConfig(BaseSettings):
    """Application configuration"""

    # Environment
    environment: Environment = Field(default=Environment.LOCAL)
    debug: bool = Field(default=True)

    # Application metadata
    app_name: str = Field(default="Social Graph API")
    app_version: str = Field(default="1.0.0")

    # Logging
    log_level: str = Field(default="INFO")

    # API settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=4000)

    # Populate the store with demo users and posts on start-up
    seed_demo_data: bool = Field(default=True)

    # CORS settings
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:4000"],
        description="Allowed CORS origins (JSON list or comma-separated in env)"
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from JSON string or comma-separated list"""
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            v = v.strip()
            if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
                v = v[1:-1]
            if v.startswith("["):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


class Settings(BaseSettings):
    """
    Global settings container.

    Loads configuration from:
    1. Environment variables
    2. .env file
    3. Default values

    Example:
        # Local development
        settings = Settings()

        # Tests: cheap hashing, empty store
        settings = Settings(
            app=AppConfig(seed_demo_data=False),
            auth=AuthConfig(secret="test-secret", salt_rounds=4)
        )
    """

    app: AppConfig = Field(default_factory=AppConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
