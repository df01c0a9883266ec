"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Name of the browser session cookie carrying the bearer token
SESSION_COOKIE_NAME = "session"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    DATABASE_URL, JWT_SECRET and PORT have no defaults: a process started
    without them fails while building the settings, before it serves anything.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(..., min_length=1)
    create_schema_on_startup: bool = Field(default=True)

    # JWT
    jwt_secret: str = Field(..., min_length=1)
    jwt_algorithm: str = Field(default="HS256")
    jwt_expiration_minutes: int = Field(default=1440, gt=0)  # 24 hours

    # Browser session
    cookie_secure: bool = Field(default=True)
    login_path: str = Field(default="/login")
    post_login_path: str = Field(default="/dashboard")

    # Unauthenticated ingestion endpoint
    public_ingest_enabled: bool = Field(default=False)

    # Server
    port: int = Field(..., gt=0, lt=65536)
    log_level: str = Field(default="INFO")
    environment: str = Field(default="development")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if len(self.jwt_secret) < 32:
                raise ValueError("JWT_SECRET must be at least 32 characters in production")
            if not self.cookie_secure:
                raise ValueError("COOKIE_SECURE cannot be disabled in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def session_max_age(self) -> int:
        """Cookie lifetime in seconds, matching the token expiry."""
        return self.jwt_expiration_minutes * 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
