"""
Settings for the Family Hub service.

Values come from environment variables or a .env file in the working
directory, validated by pydantic-settings. See .env.example.
"""

from functools import lru_cache
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Service settings.

    Every field maps to the upper-cased environment variable of the same
    name (DATABASE_URL, SESSION_TTL_HOURS, ...).
    """

    # Runtime
    python_env: Literal["development", "production"] = Field(
        default="development",
        description="Deployment environment"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for the src.* loggers"
    )

    # Storage
    database_url: str = Field(
        default="sqlite:///./family_hub.db",
        description="SQLAlchemy URL (SQLite for development, PostgreSQL in production)"
    )
    auto_create_tables: bool = Field(
        default=True,
        description="Run create_all on startup; production schemas are managed by Alembic"
    )

    # HTTP server
    api_host: str = Field(default="0.0.0.0", description="Bind address for uvicorn")
    api_port: int = Field(default=8000, description="Bind port for uvicorn")
    api_reload: bool = Field(default=True, description="uvicorn auto-reload")

    # Day boundaries for stats, today's tasks and calendar views
    timezone: str = Field(
        default="America/Los_Angeles",
        description="IANA name of the family timezone"
    )

    # Sign-in
    session_cookie_name: str = Field(
        default="family_hub_session",
        description="Name of the cookie holding the session id"
    )
    session_ttl_hours: int = Field(
        default=24 * 7,
        ge=1,
        description="Hours until a session expires"
    )
    dev_login_enabled: bool = Field(
        default=True,
        description="Serve POST /api/auth/login so sessions can be opened without an identity provider"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @property
    def is_development(self) -> bool:
        return self.python_env == "development"

    @property
    def is_production(self) -> bool:
        return self.python_env == "production"

    @property
    def uses_postgresql(self) -> bool:
        return self.database_url.lower().startswith("postgresql")

    @property
    def uses_sqlite(self) -> bool:
        return self.database_url.lower().startswith("sqlite")

    @property
    def sqlite_in_memory(self) -> bool:
        """True for sqlite:// and sqlite:///:memory: URLs."""
        return self.uses_sqlite and (
            ":memory:" in self.database_url or self.database_url.rstrip("/") == "sqlite:"
        )

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def validate_production_config(self) -> None:
        """
        Check the settings a production deployment depends on.

        Does nothing outside production.

        Raises:
            ValueError: Listing every problem found
        """
        if not self.is_production:
            return

        problems = []
        if not self.uses_postgresql:
            problems.append(
                "DATABASE_URL must point at PostgreSQL in production."
            )
        if self.dev_login_enabled:
            problems.append(
                "DEV_LOGIN_ENABLED must be false in production; "
                "sign-in goes through the identity provider."
            )

        if problems:
            raise ValueError("Invalid production settings:\n- " + "\n- ".join(problems))


@lru_cache()
def get_settings() -> Settings:
    """
    Settings loaded once per process.

    Example:
        >>> from src.config import get_settings
        >>> get_settings().timezone
        'America/Los_Angeles'
    """
    return Settings()
