"""Application settings loaded from environment / .env file.

Config precedence (highest to lowest):
    1. Environment variables
    2. ``.env`` file in project root
    3. Defaults defined in this module

Secrets (the RapidAPI key) are never exposed in ``repr()``, ``str()``, or logs.
"""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root is three levels up from this file (backend/app/core/settings.py)
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_DEFAULT_SCORING_CONFIG_PATH = str(_PROJECT_ROOT / "config" / "scoring.json")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    api_host: str = "127.0.0.1"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Engagement data provider (RapidAPI), key via RAPIDAPI_KEY env var
    rapidapi_key: str | None = Field(default=None, repr=False)
    rapidapi_host: str = "linkedin-api8.p.rapidapi.com"
    provider_timeout_seconds: float = 30.0

    # Per-kind scoring weights file, override via SCORING_CONFIG_PATH
    scoring_config_path: str = _DEFAULT_SCORING_CONFIG_PATH

    @property
    def is_provider_configured(self) -> bool:
        """Return True if the provider API key is set."""
        return bool(self.rapidapi_key)

    @model_validator(mode="after")
    def _validate_timeout(self) -> "Settings":
        if self.provider_timeout_seconds <= 0:
            msg = (
                f"provider_timeout_seconds must be positive, "
                f"got {self.provider_timeout_seconds}."
            )
            raise ValueError(msg)
        return self

    def safe_dump(self) -> dict[str, object]:
        """Return settings dict with secrets masked, safe for logging."""
        return {
            "api_host": self.api_host,
            "api_port": self.api_port,
            "debug": self.debug,
            "log_level": self.log_level,
            "rapidapi_host": self.rapidapi_host,
            "provider_timeout_seconds": self.provider_timeout_seconds,
            "scoring_config_path": self.scoring_config_path,
            "is_provider_configured": self.is_provider_configured,
        }


settings = Settings()
