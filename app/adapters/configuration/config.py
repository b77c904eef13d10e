# app/adapters/configuration/config.py (async version)

"""
Application Settings Configuration
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# configura corretamente para a raiz do projeto
env_path = Path(__file__).parent.parent.parent.parent / ".env"
load_dotenv(env_path)

from pydantic import (
    AliasChoices,
    AnyHttpUrl,
    ConfigDict,
    Field,
    PostgresDsn,
    SecretStr,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings
from typing import Optional, List, Union
from logging import getLevelName

from app.shared.utils.datetime_utils import DateTimeUtil

logger = logging.getLogger(__name__)

_DEV_ACCESS_SECRET = "dev-access-secret-not-for-production"
_DEV_REFRESH_SECRET = "dev-refresh-secret-not-for-production"


class Settings(BaseSettings):
    """
    Application Settings for environment configuration, database, auth, logging, and security.
    """
    model_config = ConfigDict(
        env_file=str(env_path),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # General Project Info
    PROJECT_NAME: str = Field(default="CPR Training Auth Service", description="Name of the project")
    VERSION: str = Field(default="1.0.0", description="Application version")
    ENVIRONMENT: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
        description="Environment: development, production, testing",
    )
    DEBUG: bool = Field(
        default=False,
        description="Return tracebacks in 500 responses; needed in development too, ignored in production",
    )
    API_PREFIX: str = Field(default="/api", description="Prefix under which the API routers are mounted")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")

    # Cookies
    REFRESH_COOKIE_NAME: str = Field(default="refreshToken", description="Name of the refresh token cookie")
    COOKIE_DOMAIN: Optional[str] = Field(default=None, description="Domain for cookies (e.g. example.com)")
    COOKIE_PATH: str = Field(default="/", description="Path for cookies")
    COOKIE_SAMESITE: str = Field(default="strict", description="SameSite policy for cookies: lax, strict, or none")

    # Database
    DB_DRIVER: str = Field(default="asyncpg", description="Database driver (asyncpg)")
    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: str = Field(default="postgres")
    POSTGRES_DB: str = Field(default="cpr_training")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: int = Field(default=5432)
    DATABASE_URL: Optional[str] = Field(default=None, description="Database connection URL")

    # Auth Settings
    JWT_ACCESS_SECRET: Optional[SecretStr] = Field(default=None, description="Secret for access tokens")
    JWT_REFRESH_SECRET: Optional[SecretStr] = Field(default=None, description="Secret for refresh tokens")
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    ACCESS_TOKEN_EXPIRY: str = Field(default="15m", description="Access token lifetime (e.g. 15m)")
    REFRESH_TOKEN_EXPIRY: str = Field(default="7d", description="Refresh token lifetime (e.g. 7d)")

    # Token blacklist
    BLACKLIST_FAIL_OPEN: bool = Field(
        default=True,
        description="Treat tokens as not revoked when the blacklist cannot be queried",
    )
    BLACKLIST_CLEANUP_INTERVAL_MINUTES: int = Field(
        default=60, description="Interval of the expired blacklist sweep (0 disables)"
    )

    # Field encryption
    DB_ENCRYPTION_KEY: Optional[SecretStr] = Field(
        default=None, description="64 hex chars (raw key) or passphrase for field encryption"
    )
    ENCRYPTION_AUDIT_EVERY: int = Field(default=100, description="Audit log every N encrypt/decrypt calls")

    # Security (CORS)
    CORS_ORIGINS: List[AnyHttpUrl] = Field(default=["http://localhost:3000", "http://127.0.0.1:3000"],
                                           description="Allowed CORS origins")

    # API Documentation
    SCHEMA_VISIBILITY: bool = Field(default=True, description="Show API docs (Swagger UI and Redoc)")

    def model_post_init(self, __context) -> None:
        """Fill derived values that depend on several fields."""
        if not self.DATABASE_URL:
            self.DATABASE_URL = str(PostgresDsn.build(
                scheme=f"postgresql+{self.DB_DRIVER}",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_HOST,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            ))

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def access_token_lifetime(self):
        return DateTimeUtil.parse_duration(self.ACCESS_TOKEN_EXPIRY)

    @property
    def refresh_token_lifetime(self):
        return DateTimeUtil.parse_duration(self.REFRESH_TOKEN_EXPIRY)

    @model_validator(mode="after")
    def validate_jwt_secrets(self):
        """
        Production requires explicit secrets; access and refresh secrets must always differ.
        """
        if self.ENVIRONMENT == "production":
            missing = [
                name for name in ("JWT_ACCESS_SECRET", "JWT_REFRESH_SECRET")
                if getattr(self, name) is None
            ]
            if missing:
                raise ValueError(f"{', '.join(missing)} must be set in production")

        if self.JWT_ACCESS_SECRET is None:
            logger.warning("JWT_ACCESS_SECRET not set, using development fallback (NOT SECURE FOR PRODUCTION)")
            self.JWT_ACCESS_SECRET = SecretStr(_DEV_ACCESS_SECRET)
        if self.JWT_REFRESH_SECRET is None:
            logger.warning("JWT_REFRESH_SECRET not set, using development fallback (NOT SECURE FOR PRODUCTION)")
            self.JWT_REFRESH_SECRET = SecretStr(_DEV_REFRESH_SECRET)

        if self.JWT_ACCESS_SECRET.get_secret_value() == self.JWT_REFRESH_SECRET.get_secret_value():
            raise ValueError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be different")
        return self

    @field_validator("DEBUG", "SCHEMA_VISIBILITY", "BLACKLIST_FAIL_OPEN", mode="before")
    def parse_boolean(cls, v: Union[str, bool]) -> bool:
        """Convert string boolean values to proper boolean."""
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes", "y", "on")
        return bool(v)

    @field_validator("ENVIRONMENT", mode="before")
    def validate_environment(cls, v: str) -> str:
        """Normalize the environment name."""
        env = str(v).strip().lower()
        if env not in ("development", "production", "testing", "test"):
            raise ValueError(f"Invalid ENVIRONMENT: {v}")
        return "testing" if env == "test" else env

    @field_validator("ACCESS_TOKEN_EXPIRY", "REFRESH_TOKEN_EXPIRY")
    def validate_expiry(cls, v: str) -> str:
        """Reject durations that cannot be parsed."""
        DateTimeUtil.parse_duration(v)
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Assemble CORS origins if provided as comma-separated string.
        """
        if isinstance(v, str) and not v.startswith("["):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return v
        raise ValueError(f"Invalid CORS_ORIGINS format: {v!r}")

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, v: str) -> str:
        """
        Validate that the log level is a valid level name.
        """
        lvl = v.upper()
        if getLevelName(lvl) == "Level %s" % lvl:
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return lvl

    @field_validator("COOKIE_SAMESITE", mode="before")
    def validate_cookie_samesite(cls, v: str) -> str:
        """Validate the cookie SameSite policy."""
        if v.lower() not in ["lax", "strict", "none"]:
            raise ValueError(f"COOKIE_SAMESITE must be 'lax', 'strict' or 'none', got: {v}")
        return v.lower()

    @field_validator("BLACKLIST_CLEANUP_INTERVAL_MINUTES", "ENCRYPTION_AUDIT_EVERY", mode="before")
    def validate_non_negative(cls, v: Union[str, int]) -> int:
        if isinstance(v, str):
            try:
                v = int(v)
            except ValueError:
                raise ValueError(f"Expected an integer, got: {v}")
        if v < 0:
            raise ValueError(f"Expected a non-negative value, got: {v}")
        return v


# Create settings instance
settings = Settings()

# Quick debug if run directly
if __name__ == "__main__":
    import json

    print(json.dumps(settings.model_dump(mode="json"), indent=4))
