"""Application configuration from environment variables."""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment (and .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Workout Log API"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_v1_prefix: str = "/api/v1"

    # Database (PostgreSQL)
    database_host: str = "localhost"
    database_port: int = 5432
    database_user: str = "postgres"
    database_password: str = ""  # Set in .env - never commit
    database_name: str = "workout_log"
    database_ssl_mode: str = "disable"
    # Full SQLAlchemy async URL; takes precedence over the parts above when set
    database_dsn: str | None = None

    # Pool (production tuning)
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # No migrations: optionally create tables on startup
    create_tables_on_startup: bool = False

    # CORS: comma-separated list of allowed origins in production
    cors_origins: str = ""

    # "Recent" history window in days
    recent_days: int = 45

    def _build_db_url(self, scheme: str = "postgresql", ssl_query: str = "sslmode=require") -> str:
        user = quote_plus(self.database_user)
        password = quote_plus(self.database_password)
        return (
            f"{scheme}://{user}:{password}@{self.database_host}:{self.database_port}"
            f"/{self.database_name}?{ssl_query}"
        )

    @property
    def async_database_url(self) -> str:
        """Async URL for FastAPI (asyncpg driver unless overridden by DATABASE_DSN)."""
        if self.database_dsn:
            return self.database_dsn
        return self._build_db_url(scheme="postgresql+asyncpg", ssl_query=f"ssl={self.database_ssl_mode}")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
