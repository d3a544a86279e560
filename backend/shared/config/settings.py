"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with defaults for development."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    # SQLite for development; production runs on PostgreSQL (postgresql+psycopg://...)
    database_url: str = "sqlite:///./restaurant.db"

    # Server
    rest_api_port: int = 3000

    # Comma-separated list of allowed origins (empty uses default localhost list)
    allowed_origins: str = ""

    # Environment
    environment: str = "development"
    debug: bool = True

    # Logging
    # Empty log_level follows debug; empty log_format is json in production, text elsewhere
    log_level: str = ""
    log_format: str = ""

    # Orders
    # Reject backward/skipped status jumps (pending -> paid, ready -> preparing, ...)
    strict_order_transitions: bool = True
    # Max difference accepted between the client's precomputed total and ours
    order_total_tolerance: float = 0.005

    # Rate limiting
    rate_limit_enabled: bool = True
    order_rate_limit: str = "60/minute"

    # WebSocket
    ws_max_connections: int = 500
    ws_max_message_size: int = 4 * 1024  # 4 KB
    # Seconds without client traffic before a connection is swept (0 disables)
    ws_heartbeat_timeout: int = 0
    ws_cleanup_interval: int = 30
    # Fixed reconnect backoff advertised to clients (no exponential growth, no cap)
    ws_reconnect_delay_ms: int = 2000

    # Startup
    seed_demo_data: bool = False

    def validate_production_config(self) -> list[str]:
        """
        Validate that configuration is sane for production.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.database_url.startswith("sqlite"):
                errors.append(
                    "DATABASE_URL must point to a server database in production (SQLite detected)"
                )

            if not self.allowed_origins:
                errors.append(
                    "ALLOWED_ORIGINS must be set in production (comma-separated list of allowed domains)"
                )

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()

# Direct access to commonly used settings
DATABASE_URL = settings.database_url
