"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Profiles API")
    app_env: str = Field(default="development")
    app_version: str = Field(
        default="0.1.0",
        description="Version reported by the liveness probe",
    )
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Store
    database_url: str = Field(
        default="sqlite+aiosqlite:///./profiles.db",
        description="Store connection URL with an async driver",
    )
    table_name: str = Field(
        default="profile_items",
        description="Table holding profile records and their email index keys",
    )

    # Token verification
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Shared secret for HS256 tokens (local development and tests)",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)
    jwt_issuer: str = Field(
        default="",
        description="Expected token issuer, e.g. https://cognito-idp.<region>.amazonaws.com/<pool>",
    )
    jwt_audience: str = Field(default="", description="Expected token audience")
    jwks_url: str = Field(default="", description="Explicit JWKS endpoint override")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def resolved_jwks_url(self) -> str:
        """JWKS endpoint for asymmetric token verification."""
        if self.jwks_url:
            return self.jwks_url
        if self.jwt_issuer:
            return f"{self.jwt_issuer.rstrip('/')}/.well-known/jwks.json"
        return ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure PostgreSQL URLs use the asyncpg driver scheme."""
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
