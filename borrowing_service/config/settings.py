"""Application configuration with environment-based settings."""
import os
from typing import Optional
from dotenv import load_dotenv


class Config:
    """Base configuration class following Single Responsibility Principle."""

    # Load environment variables
    load_dotenv()

    # Remote collaborator services
    CATALOG_SERVICE_URL: Optional[str] = os.getenv("CATALOG_SERVICE_URL")
    DIRECTORY_SERVICE_URL: Optional[str] = os.getenv("DIRECTORY_SERVICE_URL")
    NOTIFICATION_SERVICE_URL: Optional[str] = os.getenv("NOTIFICATION_SERVICE_URL")
    GATEWAY_TIMEOUT_SECONDS: float = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "5"))
    GATEWAY_MAX_RETRIES: int = int(os.getenv("GATEWAY_MAX_RETRIES", "2"))

    # Borrowing policy
    LOAN_PERIOD_DAYS: int = int(os.getenv("LOAN_PERIOD_DAYS", "14"))

    # Storage / dispatch backends
    TRANSACTION_STORE: str = os.getenv("TRANSACTION_STORE", "redis")
    NOTIFICATION_DISPATCH: str = os.getenv("NOTIFICATION_DISPATCH", "sync")

    # Redis Configuration
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_KEY_PREFIX: str = os.getenv("REDIS_KEY_PREFIX", "borrowing:")

    # Celery Configuration
    CELERY_BROKER_URL: str = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/1")
    CELERY_RESULT_BACKEND: str = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

    # Rate Limiting
    RATELIMIT_STORAGE_URL: str = os.getenv("RATELIMIT_STORAGE_URL", "redis://localhost:6379/2")
    RATELIMIT_ENABLED: bool = os.getenv("RATELIMIT_ENABLED", "true").lower() == "true"

    # Monitoring
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
    ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

    # Application
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration values."""
        required_vars = [
            ("CATALOG_SERVICE_URL", cls.CATALOG_SERVICE_URL),
            ("DIRECTORY_SERVICE_URL", cls.DIRECTORY_SERVICE_URL),
            ("NOTIFICATION_SERVICE_URL", cls.NOTIFICATION_SERVICE_URL),
        ]

        missing = [name for name, value in required_vars if not value]
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    TRANSACTION_STORE = "memory"
    NOTIFICATION_DISPATCH = "sync"
    RATELIMIT_ENABLED = False
    ENABLE_METRICS = False
    SENTRY_DSN = None
    CATALOG_SERVICE_URL = "http://catalog.test"
    DIRECTORY_SERVICE_URL = "http://directory.test"
    NOTIFICATION_SERVICE_URL = "http://notification.test"
    REDIS_URL = "redis://localhost:6379/15"  # Use different DB for tests


def get_config() -> type[Config]:
    """Factory method to get configuration based on environment."""
    env = os.getenv("FLASK_ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }

    return config_map.get(env, DevelopmentConfig)
