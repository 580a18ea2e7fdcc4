"""Application configuration"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "AuthCore"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Credential and Google sign-in with OTP email verification"

    # Security
    SECRET_KEY: str = Field(...)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=15)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=7)
    PASSWORD_HASH_ROUNDS: int = Field(default=12, ge=4, le=31)

    # OTP
    OTP_EXPIRE_MINUTES: int = Field(default=15)
    # Unverified logins hand the fresh code back for the auto-login flow
    RETURN_OTP_ON_UNVERIFIED_LOGIN: bool = Field(default=True)

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./authcore.db")

    # Email SMTP Configuration
    SMTP_HOST: str = Field(default="localhost")
    SMTP_PORT: int = Field(default=587)
    SMTP_USERNAME: Optional[str] = Field(default=None)
    SMTP_PASSWORD: Optional[str] = Field(default=None)
    SMTP_USE_TLS: bool = Field(default=True)
    SMTP_TIMEOUT_SECONDS: float = Field(default=10.0)
    FROM_EMAIL: str = Field(default="noreply@authcore.local")
    FROM_NAME: str = Field(default="AuthCore")

    # Google OAuth
    GOOGLE_CLIENT_ID: Optional[str] = Field(default=None)

    # CORS
    ALLOWED_HOSTS: list[str] = Field(default=["http://localhost:3000"])

    # Development
    DEBUG: bool = Field(default=False)
    TESTING: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
