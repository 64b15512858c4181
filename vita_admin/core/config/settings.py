from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str = "sqlite+aiosqlite:///./vita_admin.db"

    # JWT / session settings
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    SESSION_TTL_HOURS: int = 24
    ADMIN_COOKIE_NAME: str = "adminToken"
    COOKIE_SECURE: bool = False
    COOKIE_SAMESITE: str = "lax"

    # OTP settings
    OTP_LENGTH: int = 6
    OTP_EXPIRE_MINUTES: int = 10
    OTP_MAX_ATTEMPTS: int = 5

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    # Email settings
    EMAIL_HOST: str = "smtp.gmail.com"
    EMAIL_PORT: int = 587
    EMAIL_HOST_USER: str = ""
    EMAIL_HOST_PASSWORD: str = ""
    EMAIL_USE_TLS: bool = True
    EMAIL_TIMEOUT_SECONDS: int = 30
    DEFAULT_FROM_EMAIL: str = "Vita Team <noreply@vita.example>"

    # API settings
    API_PREFIX: str = "/api/admin"
    PROJECT_NAME: str = "Vita Admin API"
    CORS_ORIGINS: list = ["*"]

    # Rate limiting (disabled unless Redis is configured)
    REDIS_URL: Optional[str] = None
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def session_ttl_seconds(self) -> int:
        return self.SESSION_TTL_HOURS * 60 * 60

@lru_cache()
def get_settings() -> Settings:
    """
    Get settings instance with caching
    Returns:
        Settings instance
    """
    return Settings()
