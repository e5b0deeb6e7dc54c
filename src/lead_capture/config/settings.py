"""
Configuration for the lead capture functions.
Credentials and tag ids come from the environment (or a .env file);
upstream endpoints are fixed constants.
"""

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# === Fixed upstream endpoints ===
KAJABI_API_BASE_URL = "https://api.kajabi.com"
KAJABI_TOKEN_PATH = "/v1/oauth/token"
MAKE_WEBHOOK_URL = "https://hook.us2.make.com/trcbbqjdbq9965c8kuttcfbb7ratd8ax"

# Cached tokens are dropped this many seconds before the upstream expiry
TOKEN_EXPIRY_MARGIN_SECONDS = 300

TAG_NAMES = ("contractor", "diy", "waitlist")


class KajabiSettings(BaseSettings):
    """Kajabi OAuth credentials, site and tag ids."""

    client_id: str | None = Field(default=None, description="OAuth client id")
    client_secret: str | None = Field(default=None, description="OAuth client secret")
    site_id: str | None = Field(default=None, description="Kajabi site identifier")

    # === Tag ids ===
    tag_id_contractor: str | None = Field(default=None, description="Tag id for 'contractor'")
    tag_id_diy: str | None = Field(default=None, description="Tag id for 'diy'")
    tag_id_waitlist: str | None = Field(default=None, description="Tag id for 'waitlist'")

    model_config = SettingsConfigDict(
        env_prefix="KAJABI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def tag_map(self) -> dict[str, str | None]:
        """Map tag names to their configured Kajabi tag ids."""
        return {
            "contractor": self.tag_id_contractor,
            "diy": self.tag_id_diy,
            "waitlist": self.tag_id_waitlist,
        }

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def masked(self) -> dict[str, Any]:
        """Configuration summary safe for display."""
        return {
            "client_id": self.client_id or "<unset>",
            "client_secret": "********" if self.client_secret else "<unset>",
            "site_id": self.site_id or "<unset>",
            **{
                f"tag_id_{name}": tag_id or "<unset>"
                for name, tag_id in self.tag_map().items()
            },
        }


class AppSettings(BaseSettings):
    """Runtime settings shared by both handlers."""

    # === Application ===
    app_name: str = Field(default="lead-capture", description="Service name used in logs")
    environment: str = Field(default="development", description="Deployment environment")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Emit single-line JSON logs")

    # === Server ===
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # === Upstream calls ===
    upstream_timeout: float | None = Field(
        default=None, description="Upstream request timeout in seconds (None = unbounded)"
    )
    upstream_max_attempts: int = Field(
        default=1, ge=1, description="Attempts per upstream call (1 = no retries)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LEAD_CAPTURE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()


@lru_cache
def get_kajabi_settings() -> KajabiSettings:
    return KajabiSettings()


def reset_settings() -> None:
    """Drop cached settings so the next access re-reads the environment."""
    get_settings.cache_clear()
    get_kajabi_settings.cache_clear()


__all__ = [
    "AppSettings",
    "KajabiSettings",
    "KAJABI_API_BASE_URL",
    "KAJABI_TOKEN_PATH",
    "MAKE_WEBHOOK_URL",
    "TAG_NAMES",
    "TOKEN_EXPIRY_MARGIN_SECONDS",
    "get_kajabi_settings",
    "get_settings",
    "reset_settings",
]
