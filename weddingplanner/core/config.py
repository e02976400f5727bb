"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wedding_planner.db")

    # Security
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-in-production")
    RSVP_SECRET_KEY: str = os.getenv("RSVP_SECRET_KEY", "wedding_rsvp_default_secret_key")
    RSVP_TOKEN_EXPIRY_DAYS: int = 90
    AUTH_TOKEN_TTL_HOURS: int = 24 * 7

    # Bootstrap admin account, created on startup when both are set
    ADMIN_USERNAME: str | None = os.getenv("ADMIN_USERNAME")
    ADMIN_PASSWORD: str | None = os.getenv("ADMIN_PASSWORD")
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@example.com")

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    AUTO_ASSIGN_ROOMS: bool = os.getenv("AUTO_ASSIGN_ROOMS", "true").lower() in ("1", "true", "yes")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # File limits
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    # Outgoing email (SMTP). Leave SMTP_HOST empty to disable delivery.
    SMTP_HOST: str | None = os.getenv("SMTP_HOST")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    SMTP_USE_TLS: bool = os.getenv("SMTP_USE_TLS", "true").lower() in ("1", "true", "yes")
    EMAIL_FROM: str = os.getenv("EMAIL_FROM", "noreply@example.com")

    class Config:
        env_file = ".env"

settings = Settings()
