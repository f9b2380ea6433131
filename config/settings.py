"""
Application configuration settings.

Centralized configuration using Pydantic Settings for type safety and validation.

Decision: Using pydantic-settings for:
1. Type-safe configuration
2. Environment variable loading
3. Validation
4. Default values
5. Easy testing with different configs
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "email-verification-api"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False

    # Redis (metrics storage)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0

    # Celery
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/0"
    celery_task_serializer: str = "json"
    celery_result_serializer: str = "json"
    celery_accept_content: list[str] = ["json"]
    celery_timezone: str = "UTC"
    celery_enable_utc: bool = True
    celery_task_acks_late: bool = True
    celery_task_reject_on_worker_lost: bool = True
    celery_worker_prefetch_multiplier: int = 4
    celery_worker_max_tasks_per_child: int = 1000
    celery_result_expires: int = 3600

    # Verification codes
    verification_code_ttl_seconds: int = 300
    delivery_timeout_seconds: float = 10.0
    code_store_sweep_interval_seconds: float = 60.0
    code_store_lock_stripes: int = 64

    # Delivery
    # smtp: send directly, celery: queue for a worker, console: log only (dev)
    delivery_backend: Literal["smtp", "celery", "console"] = "smtp"

    # Email Service (SMTP)
    smtp_host: str = "mailhog"
    smtp_port: int = 1025
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_from_email: str = "noreply@example.com"
    smtp_timeout_seconds: float = 10.0
    verification_page_url: str = "https://example.com/verify"
    privacy_policy_url: str = "https://example.com/privacy-policy"

    # Feature Flags
    enable_metrics: bool = True


# Global settings instance
settings = Settings()
