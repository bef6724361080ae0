# studio/core/config.py
"""
Application configuration - single source of truth for all settings.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


@dataclass
class LLMSettings:
    """Gemini configuration."""
    gemini_api_key: Optional[str] = field(default_factory=lambda: os.getenv("GEMINI_API_KEY"))
    gemini_model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.0-flash"))
    gemini_api_url: str = field(default_factory=lambda: os.getenv(
        "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta/models"
    ))
    temperature: float = 0.7
    max_tokens: int = 8192
    request_timeout: int = 120


@dataclass
class DatabaseSettings:
    """MongoDB configuration."""
    mongodb_url: str = field(default_factory=lambda: os.getenv("MONGODB_URL", "mongodb://localhost:27017"))
    db_name: str = field(default_factory=lambda: os.getenv("DB_NAME", "component_studio"))
    server_selection_timeout_ms: int = 5000


@dataclass
class CacheSettings:
    """Redis mirror configuration. TTLs are in seconds."""
    redis_url: str = field(default_factory=lambda: os.getenv("REDIS_URL", "redis://localhost:6379"))
    session_ttl: int = 3600
    default_ttl: int = 300
    ai_generate_ttl: int = 3600


@dataclass
class AuthSettings:
    """JWT configuration."""
    jwt_secret: str = field(default_factory=lambda: os.getenv("JWT_SECRET", "change-me-in-production"))
    jwt_algorithm: str = "HS256"
    # 7 days, same lifetime the frontend keeps the token in localStorage
    jwt_expiration_hours: int = field(default_factory=lambda: int(os.getenv("JWT_EXPIRATION_HOURS", "168")))
    min_password_length: int = 6


@dataclass
class PathSettings:
    """Path configuration."""
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent.parent.parent.parent)
    frontend_dist: Path = field(default_factory=lambda: Path(os.getenv(
        "FRONTEND_DIST_PATH",
        str(Path(__file__).parent.parent.parent.parent / "frontend" / "out")
    )))


def _split_origins(raw: str) -> List[str]:
    if raw.strip() == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    """Main application settings."""
    llm: LLMSettings = field(default_factory=LLMSettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    auth: AuthSettings = field(default_factory=AuthSettings)
    paths: PathSettings = field(default_factory=PathSettings)
    port: int = field(default_factory=lambda: int(os.getenv("PORT", 5000)))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    cors_origins: List[str] = field(default_factory=lambda: _split_origins(os.getenv("CORS_ORIGINS", "*")))
    rate_limit: str = field(default_factory=lambda: os.getenv("RATE_LIMIT", "100/minute"))


# Singleton instance
settings = Settings()
