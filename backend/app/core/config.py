"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Dutchpay"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:8080"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Settlement
    DEFAULT_CURRENCY: str = "KRW"  # Label used in the summary text only
    MISSING_SPLIT_POLICY: str = "zero"  # Options: "zero" (missing row owes nothing), "reject"

    @field_validator("MISSING_SPLIT_POLICY")
    @classmethod
    def check_missing_split_policy(cls, v):
        """Only the two documented policies are accepted."""
        v = v.strip().lower()
        if v not in ("zero", "reject"):
            raise ValueError("MISSING_SPLIT_POLICY must be 'zero' or 'reject'")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
