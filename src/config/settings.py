"""
Centralized settings management using pydantic-settings.

All environment variables and configuration values are defined here.
Use get_settings() to access the singleton settings instance.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Required environment variables:
        - SUPABASE_URL: Supabase project URL
        - SUPABASE_SERVICE_KEY: Supabase service role key
        - SUPABASE_JWT_SECRET: Secret used to verify Supabase Auth tokens

    Optional environment variables:
        - HOST: Server host (default: 0.0.0.0)
        - PORT: Server port (default: 8080)
        - SEMANTIC_SEARCH_URL: Remote ranking service endpoint
        - SEMANTIC_SEARCH_API_KEY: Bearer token for the ranking service
        - ENVIRONMENT: Environment name (development, staging, production)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Debug mode")
    docs_enabled: bool = Field(default=True, description="Serve Swagger UI and ReDoc")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    # ==========================================================================
    # Server Configuration
    # ==========================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=4, description="Number of uvicorn workers")

    # CORS Configuration
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://localhost:7860",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        description="Allowed CORS origins"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # ==========================================================================
    # Supabase Configuration
    # ==========================================================================
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_service_key: str = Field(..., description="Supabase service role key")
    supabase_jwt_secret: str = Field(
        default="",
        description="JWT secret for token verification (from Supabase dashboard)",
    )

    # ==========================================================================
    # Semantic Search (remote ranking service)
    # ==========================================================================
    semantic_search_url: str = Field(
        default="",
        description="Ranking service endpoint accepting {query, n_results}",
    )
    semantic_search_api_key: str = Field(
        default="",
        description="Bearer token sent to the ranking service",
    )
    semantic_search_enabled: bool = Field(
        default=True,
        description="Use the ranking service for free-text queries (falls back to substring search if disabled or failing)",
    )
    semantic_search_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for a single ranking service call (seconds)",
    )
    semantic_candidate_count: int = Field(
        default=100,
        ge=1,
        description="Candidates requested from the ranking service per query",
    )

    @property
    def semantic_search_configured(self) -> bool:
        return bool(self.semantic_search_enabled and self.semantic_search_url)

    # ==========================================================================
    # Catalog Pagination
    # ==========================================================================
    default_page_size: int = Field(default=20, ge=1, description="Default products per page")
    max_page_size: int = Field(default=100, ge=1, description="Largest accepted page size")


@lru_cache
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Uses lru_cache to ensure only one instance is created.
    Settings are loaded from environment variables and .env file.

    Returns:
        Settings: The application settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    # Try to find .env file in project root
    env_file = Path(__file__).parent.parent.parent / ".env"
    if env_file.exists():
        os.environ.setdefault("ENV_FILE", str(env_file))

    return Settings(_env_file=env_file if env_file.exists() else None)


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a settings instance for testing with optional overrides.

    This bypasses the cache to allow different settings in tests.

    Args:
        **overrides: Setting values to override

    Returns:
        Settings: A new settings instance with overrides applied
    """
    test_defaults = {
        "supabase_url": "https://test.supabase.co",
        "supabase_service_key": "test-key",
        "supabase_jwt_secret": "test-jwt-secret-with-at-least-32-bytes!",
        "semantic_search_url": "https://ranker.test/search",
        "semantic_search_api_key": "test-ranker-key",
        "environment": "testing",
        "debug": True,
    }
    test_defaults.update(overrides)

    return Settings(**test_defaults)
