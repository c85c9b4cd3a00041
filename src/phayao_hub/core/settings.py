"""Application settings and configuration.

This module defines all configuration options for the Phayao Hub API.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Phayao Hub", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    bcrypt_rounds: int = Field(default=10, alias="BCRYPT_ROUNDS")

    # Database configuration
    database_url: str = Field(default="sqlite:///./phayao_hub.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # View-count deduplication markers
    view_marker_prefix: str = Field(default="viewed", alias="VIEW_MARKER_PREFIX")
    view_marker_max_age_seconds: int = Field(
        default=30 * 60,
        alias="VIEW_MARKER_MAX_AGE_SECONDS",
    )

    # Client-side session lifecycle
    api_base_url: str = Field(default="http://localhost:8000/api", alias="HUB_API_URL")
    session_timeout_minutes: int = Field(default=30, alias="SESSION_TIMEOUT_MINUTES")
    session_check_interval_seconds: float = Field(
        default=60.0,
        alias="SESSION_CHECK_INTERVAL_SECONDS",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=[
            "https://phayaohub.com",
            "https://www.phayaohub.com",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Return True when running in a production deployment."""
        return self.environment.lower() == "production"

    @property
    def session_timeout_ms(self) -> int:
        """Return the client session timeout in milliseconds."""
        return self.session_timeout_minutes * 60 * 1000

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts async driver URLs to their sync counterparts for
        operations like Alembic migrations.
        """
        url = self.database_url
        if url.startswith("mysql+aiomysql"):
            return url.replace("mysql+aiomysql", "mysql+pymysql", 1)
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url


settings = Settings()  # type: ignore[call-arg]
