# products_api/config.py
"""Centralised settings, read from the environment and an optional ``.env`` file."""
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # API
    api_title: str = "Product Service"
    api_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: str = "*"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Document store
    store_backend: str = "mongodb"  # "mongodb" or "memory"
    mongodb_url: str = "mongodb://127.0.0.1:27017/productDB"
    mongodb_database: Optional[str] = None
    mongodb_collection: str = "products"
    mongodb_timeout_ms: int = 5000
    store_fail_fast: bool = False

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS (comma-separated) into a list."""
        if not self.allowed_origins or self.allowed_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()
