"""Centralized application configuration using Pydantic settings."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the hotel web application."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_env: str = Field(default="development", description="Execution mode; 'test' selects the test database")
    database_url: str = Field(
        default="sqlite:///./hotel_louvain.db",
        description="SQLAlchemy database URL used outside of test mode.",
    )
    test_database_url: str = Field(
        default="sqlite:///./hotel_louvain_test.db",
        description="SQLAlchemy database URL used when app_env is 'test'.",
    )
    run_db_migrations: bool = Field(
        default=True,
        description="Whether the app should create missing database tables on startup.",
    )
    session_secret: str = Field(default="hotel-louvain-secret", description="Session cookie signing secret")
    session_algorithm: str = Field(default="HS256", description="Session cookie signing algorithm")
    session_cookie_name: str = Field(default="hotel_session", description="Name of the session cookie")
    session_max_age_minutes: int = Field(default=120, description="Absolute session lifetime in minutes")
    password_hash_rounds: int = Field(default=10, description="bcrypt cost factor")
    home_room_limit: int = Field(default=6, description="Number of rooms shown on the home page")
    default_rate_limit: str = Field(default="60/minute", description="Global rate limiting rule")
    rate_limiting_enabled: bool = Field(default=True, description="Toggle to disable SlowAPI limits (useful in tests)")
    metrics_enabled: bool = Field(default=True, description="Expose Prometheus metrics on /metrics")
    log_dir: str = Field(default="logs", description="Directory for audit log files")

    @property
    def active_database_url(self) -> str:
        if self.app_env == "test":
            return self.test_database_url
        return self.database_url


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""

    get_settings.cache_clear()
