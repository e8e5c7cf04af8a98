from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "GitHub Stars Manager"
    APP_VERSION: str = "1.0.0"
    ENV: str = "dev"  # Environment: "dev", "staging", "prod"
    SERVER_PORT: int = 8181
    LOG_LEVEL: str = "info"
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # Database (MongoDB)
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "stars_manager"
    MONGODB_TIMEOUT_MS: int = 5000  # Server selection timeout

    # Sessions (Redis)
    REDIS_URL: str = "redis://localhost:6379/0"
    SESSION_TTL_SECONDS: int = 86400
    SESSION_COOKIE_NAME: str = "session_id"

    # GitHub
    GITHUB_API_URL: str = "https://api.github.com"

    # --- Sync engine ---
    GITHUB_PAGE_SIZE: int = 100  # Items per starred-list page
    GITHUB_REQUEST_TIMEOUT_SECONDS: float = 30.0  # Per attempt
    GITHUB_RETRY_ATTEMPTS: int = 3
    GITHUB_RETRY_BACKOFF_SECONDS: float = 1.0  # Sleeps 1x, 2x, 3x this unit

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
