"""
app/core/config.py

Centralised configuration loaded from environment variables.
Use a .env file locally; Docker Compose injects these at runtime.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Application ────────────────────────────────────────────────────────────
    app_name: str = "Dive Center File Upload API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"               # ignored when debug is on

    # ── Storage ────────────────────────────────────────────────────────────────
    upload_root: str = "./data/storage"   # local disk root for stored files
    storage_driver: str = "local"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Single shared instance, imported everywhere.
settings = Settings()
