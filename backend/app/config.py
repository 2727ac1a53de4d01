"""Application configuration."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    APP_NAME: str = "LocaLink Insights"
    APP_VERSION: str = "1.0.0"
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database Settings
    DATABASE_URL: str = "sqlite+aiosqlite:///./localink.db"
    SQLALCHEMY_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    SQLITE_BUSY_TIMEOUT: float = 15.0  # seconds a writer waits on a locked SQLite file

    # External auth provider (HS256 access tokens carrying sub + email)
    AUTH_JWT_SECRET: str = ""
    AUTH_JWT_AUDIENCE: str = "authenticated"

    # Automation platform endpoints
    AUTOMATION_WEBHOOK_URL: str = "https://harshithjella3105.app.n8n.cloud/webhook-test/Localink-Dashboard"
    CHAT_WEBHOOK_URL: str = "https://harshithjella3105.app.n8n.cloud/webhook-test/chat-bot"
    OUTBOUND_TIMEOUT_SECONDS: float = 15.0

    # Webhook relay
    RELAY_REQUIRE_AUTH: bool = True
    RELAY_IMAGE_MIN_LENGTH: int = 100

    # Dashboard poller
    DASHBOARD_POLL_INTERVAL_SECONDS: float = 10.0
    RELAY_BASE_URL: str = "http://localhost:8000"

    # CORS Settings
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse ALLOWED_ORIGINS string into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    def validate_secrets(self) -> None:
        """Validate that the auth provider secret is configured in production.

        Raises:
            RuntimeError: If production environment has an empty AUTH_JWT_SECRET
        """
        if self.is_production and not self.AUTH_JWT_SECRET:
            raise RuntimeError(
                "CRITICAL: AUTH_JWT_SECRET environment variable must be set in production."
            )

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings.

    Uses caching to ensure settings are loaded only once.

    Returns:
        Settings object with all configuration values
    """
    return Settings()
