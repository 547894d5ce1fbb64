"""Configuration management for Trek."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Application configuration."""

    # Application
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    PORT: int = int(os.getenv("PORT", "7675"))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_SQL: bool = os.getenv("LOG_SQL", "false").lower() == "true"

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./trek.db")

    # Runtime data (migration lock, client storage)
    DATA_ROOT: Path = Path(os.getenv("DATA_ROOT", "./data"))

    # Cookies
    SESSION_COOKIE_SECURE: bool = (
        os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"
    )
    COOKIE_SAMESITE: str = os.getenv("COOKIE_SAMESITE", "lax")

    # Auth
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 30))
    )  # 30 days
    ALGORITHM: str = "HS256"

    # Map display
    DEFAULT_MAP_TYPE: str = os.getenv("DEFAULT_MAP_TYPE", "osm")

    @classmethod
    def ensure_data_dirs(cls) -> None:
        """Ensure runtime data directories exist."""
        cls.DATA_ROOT.mkdir(parents=True, exist_ok=True)


config = Config()
