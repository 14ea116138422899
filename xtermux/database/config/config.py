import json
from typing import Annotated, List, Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode
from sqlalchemy import URL


DEV_SECRET_KEY = "xtermux-development-only-signing-key-do-not-deploy"
"""Placeholder signing key; refused when `INIT_MODE` is `prod`."""

MIN_SECRET_KEY_LENGTH = 32


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    FRONTEND_URL: str = "http://localhost:5173"
    """Base URL of the frontend client application (allowed CORS origin)."""

    DB_DRIVER_NAME: str = "sqlite"
    """Database driver (e.g., `postgresql+psycopg`, `sqlite`)."""

    DB_USERNAME: Optional[str] = None
    """Database username credential."""

    DB_PASSWORD: Optional[str] = None
    """Database password credential."""

    DB_HOST: Optional[str] = None
    """Hostname or IP address of the database server."""

    DB_DATABASE_NAME: str = "xtermux.db"
    """Name of the application’s database (a file path for SQLite)."""

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    """Duration (in minutes) before access tokens expire."""

    SECRET_KEY: str = DEV_SECRET_KEY
    """Secret key used for signing tokens and securing sensitive operations."""

    ALGORITHM: str = "HS256"
    """Cryptographic algorithm used for JWT signing."""

    AI_INTEGRATIONS_OPENAI_API_KEY: str = ""
    """API key of the OpenAI-compatible completion provider."""

    AI_INTEGRATIONS_OPENAI_BASE_URL: Optional[str] = None
    """Base URL of the OpenAI-compatible completion provider."""

    AI_DEFAULT_MODEL: str = "gpt-4o"
    """Model used when a completion request does not name one."""

    AI_MAX_TOKENS: int = 2048
    """Default `max_tokens` sent with chat and architect requests."""

    ADMIN_EMAILS: Annotated[List[str], NoDecode] = []
    """Emails that always resolve to the admin role (comma separated in the environment)."""

    INIT_MODE: str = "dev"
    """Initialization mode (e.g., `dev`, `prod`, `test`)."""

    LOG_LEVEL: str = "INFO"
    """Root log level for the application loggers."""

    HOST: str = "0.0.0.0"
    """Interface the HTTP server binds to."""

    PORT: int = 5001
    """Port the HTTP server listens on."""

    @field_validator("ADMIN_EMAILS", mode="before")
    @classmethod
    def split_admin_emails(cls, value):
        if isinstance(value, str):
            if value.strip().startswith("["):
                return json.loads(value)
            return [e.strip() for e in value.split(",") if e.strip()]
        return value

    @model_validator(mode="after")
    def check_secret_key(self) -> "Settings":
        if self.INIT_MODE == "prod":
            if self.SECRET_KEY == DEV_SECRET_KEY:
                raise ValueError("SECRET_KEY must be set in prod mode")
            if len(self.SECRET_KEY) < MIN_SECRET_KEY_LENGTH:
                raise ValueError(f"SECRET_KEY must be at least {MIN_SECRET_KEY_LENGTH} characters in prod mode")
        return self

    @property
    def database_url(self) -> URL:
        """SQLAlchemy URL assembled from the `DB_*` keys."""
        return URL.create(
            drivername=self.DB_DRIVER_NAME,
            username=self.DB_USERNAME,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            database=self.DB_DATABASE_NAME,
        )

    @property
    def ai_configured(self) -> bool:
        return bool(self.AI_INTEGRATIONS_OPENAI_API_KEY)

    class Config:
        """
        Configuration for Pydantic settings. Loads values from `.env` file by default.
        """
        env_file = ".env"
        extra = "ignore"


# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the .env file"""
