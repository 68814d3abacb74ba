"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./staking_ledger.db"

    # Ledger namespace: every record address is derived under this program id
    program_id: str = "5f1c0d6a7e2b4c9d8a3f6e1b2c7d4a9e0f3b6c1d8e5a2f7b4c9d0e3a6f1b8c5d"
    asset_mover_id: str = "ledger-asset-mover-v1"
    storage_deposit_per_byte: int = 6960

    # Identity tokens
    secret_key: str = "change-this-in-production-minimum-32-characters-long"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    login_max_skew_seconds: int = 300

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # API Settings
    api_v1_prefix: str = "/api/v1"
    project_name: str = "Staking Ledger"
    version: str = "1.0.0"

    @field_validator("program_id")
    @classmethod
    def _program_id_is_32_bytes(cls, value: str) -> str:
        raw = bytes.fromhex(value)
        if len(raw) != 32:
            raise ValueError("program_id must be 32 bytes of hex")
        return value.lower()

    @property
    def program_id_bytes(self) -> bytes:
        return bytes.fromhex(self.program_id)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
