"""
Configuration Settings

Centralized configuration management using Pydantic and environment variables.
"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All sensitive values should be stored in .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Fingertips public health API settings
    fingertips_base_url: str = "https://fingertips.phe.org.uk/api"
    fingertips_api_version: str = "/0-32313c67/"
    fingertips_profile_id: int = 143
    fingertips_group_id: int = 1938133185
    fingertips_child_area_type_id: int = 3
    fingertips_area_type_ids: str = "167,402,401,8,15,3"

    # England is the national baseline for every comparison
    national_area_code: str = "E92000001"

    # HTTP settings
    http_timeout_seconds: float = 30.0

    # Area search settings
    search_debounce_seconds: float = 0.3
    search_min_query_length: int = 2

    # API settings
    api_cors_origins: List[str] = ["http://localhost:5173"]

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "json"

    # Application settings
    environment: str = "development"
    debug: bool = False


# Singleton instance
settings = Settings()
