"""
Application Configuration
Loads settings from environment variables.
"""

from typing import List, Literal
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "Try-On API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_BASE_URL: str = "http://localhost:8000"  # Used to build absolute URLs for the compositor

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Local storage fallback
    LOCAL_STORAGE_PATH: str = "./uploads"
    USE_LOCAL_STORAGE: bool = True

    # Google Cloud Storage
    USE_GCS: bool = False
    GCS_BUCKET_UPLOADS: str = "tryon-uploads"
    GCP_PROJECT_ID: str = ""

    # Storage - S3 settings (used when neither GCS nor local storage is enabled)
    S3_BUCKET: str = ""
    S3_ENDPOINT: str = ""
    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    S3_REGION: str = "us-east-1"

    # Uploads
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10 MiB

    # Catalog
    CATALOG_PATH: str = "./data/products.json"
    MAX_ITEMS_PER_JOB: int = 3

    # Processing trigger: "simulated" completes jobs on a timer,
    # "delegated" hands them to an external compositor that calls back.
    PROCESSING_TRIGGER: Literal["simulated", "delegated"] = "simulated"

    # Simulated trigger
    SIMULATED_DELAY_MIN_MS: int = 3000
    SIMULATED_DELAY_MAX_MS: int = 5000
    SIMULATED_RESULT_URLS: List[str] = [
        "https://images.unsplash.com/photo-1594736797933-d0501ba2fe65"
        "?ixlib=rb-4.0.3&auto=format&fit=crop&w=600&h=750"
    ]

    # Delegated trigger
    COMPOSITOR_TRANSPORT: Literal["http", "rq"] = "http"
    COMPOSITOR_URL: str = ""
    COMPOSITOR_API_KEY: str = ""
    COMPOSITOR_TIMEOUT: float = 10.0

    # Redis (rq transport only)
    REDIS_URL: str = "redis://localhost:6379"
    COMPOSITOR_QUEUE: str = "tryon"
    COMPOSITOR_TASK: str = "compositor.tasks.run_tryon"
    COMPOSITOR_JOB_TIMEOUT: int = 300

    # Jobs still queued/processing after this long are reported as stale by /health
    STUCK_JOB_THRESHOLD_SECONDS: int = 300

    @field_validator('COMPOSITOR_API_KEY', 'S3_ACCESS_KEY', 'S3_SECRET_KEY', mode='before')
    @classmethod
    def strip_secrets(cls, v):
        """Strip whitespace and newlines from secrets loaded from files."""
        if isinstance(v, str):
            return v.strip()
        return v

    @model_validator(mode='after')
    def check_delay_window(self):
        if self.SIMULATED_DELAY_MIN_MS < 0 or self.SIMULATED_DELAY_MAX_MS < self.SIMULATED_DELAY_MIN_MS:
            raise ValueError(
                "SIMULATED_DELAY_MAX_MS must be >= SIMULATED_DELAY_MIN_MS >= 0"
            )
        if not self.SIMULATED_RESULT_URLS:
            raise ValueError("SIMULATED_RESULT_URLS must contain at least one url")
        if self.MAX_ITEMS_PER_JOB < 1:
            raise ValueError("MAX_ITEMS_PER_JOB must be at least 1")
        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
