"""
Core configuration management for the Hacker News newest-stories backend
Centralized settings with Pydantic validation and environment-specific configurations
"""

import os
from typing import List
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Main application settings with validation"""

    # Application
    app_name: str = Field(default="Hacker News Newest Stories API", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(
        default="development",
        description="Environment (development/production/testing)",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    reload: bool = Field(default=False, description="Auto-reload on changes")

    # Upstream
    hackernews_base_url: str = Field(
        default="https://hacker-news.firebaseio.com/v0",
        description="Base URL of the Hacker News API",
    )
    request_timeout: float = Field(
        default=10.0, description="Timeout in seconds for a single upstream request"
    )

    # Story cache
    cache_ttl_seconds: int = Field(
        default=600, description="Time-to-live for the id feed and cached stories"
    )
    max_concurrent_fetches: int = Field(
        default=10, description="Maximum concurrent in-flight story fetches"
    )

    # Pagination
    default_page_size: int = Field(
        default=10, description="Page size used when the caller does not pass one"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:4200"], description="CORS allowed origins"
    )
    cors_credentials: bool = Field(default=True, description="CORS allow credentials")

    @validator("environment")
    def validate_environment(cls, v):
        """Validate environment setting"""
        allowed_envs = ["development", "production", "testing"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of {allowed_envs}")
        return v

    @validator("log_level")
    def validate_log_level(cls, v):
        """Validate log level"""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @validator("hackernews_base_url")
    def validate_base_url(cls, v):
        """Validate upstream base URL"""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Hacker News base URL must start with http:// or https://")
        return v.rstrip("/")

    @validator("request_timeout")
    def validate_request_timeout(cls, v):
        """Validate request timeout"""
        if isinstance(v, str):
            v = float(v)
        if v <= 0:
            raise ValueError("Request timeout must be positive")
        return v

    @validator("cache_ttl_seconds")
    def validate_cache_ttl(cls, v):
        """Validate cache TTL"""
        if isinstance(v, str):
            v = int(v)
        if v <= 0:
            raise ValueError("Cache TTL must be positive")
        return v

    @validator("max_concurrent_fetches")
    def validate_max_concurrent_fetches(cls, v):
        """Validate fetch parallelism"""
        if isinstance(v, str):
            v = int(v)
        if v < 1:
            raise ValueError("Max concurrent fetches must be at least 1")
        return v

    @validator("default_page_size")
    def validate_default_page_size(cls, v):
        """Validate default page size"""
        if isinstance(v, str):
            v = int(v)
        if v < 1:
            raise ValueError("Default page size must be at least 1")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


class DevelopmentSettings(Settings):
    """Development-specific settings"""

    debug: bool = True
    reload: bool = True
    log_level: str = "DEBUG"
    environment: str = "development"


class ProductionSettings(Settings):
    """Production-specific settings"""

    debug: bool = False
    reload: bool = False
    log_level: str = "INFO"
    environment: str = "production"


class TestingSettings(Settings):
    """Testing-specific settings"""

    debug: bool = True
    environment: str = "testing"
    log_level: str = "DEBUG"
    request_timeout: float = 2.0  # Fail fast in tests
    max_concurrent_fetches: int = 4


def get_settings() -> Settings:
    """Get settings based on environment"""
    environment = os.getenv("ENVIRONMENT", "development").lower()

    if environment == "production":
        return ProductionSettings()
    elif environment == "testing":
        return TestingSettings()
    else:
        return DevelopmentSettings()


# Global settings instance
settings = get_settings()
