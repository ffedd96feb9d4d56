"""Configuration management with pydantic-settings."""

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PORTAL_URL = "https://portal.commerce.ondemand.com/"
LOGIN_REQUIRED_HEADER = "com.sap.cloud.security.login"
LOGIN_STEPS = 4


class PortalSettings(BaseSettings):
    """ccportal application settings loaded from environment variables.

    All settings use the CCPORTAL_ prefix for environment variables.
    """

    # Portal configuration
    portal_url: str = Field(
        default=DEFAULT_PORTAL_URL,
        description="Root URL of the SSO protected portal",
    )
    subscription: str = Field(
        default="",
        description="Tenant (subscription) code used in API paths",
    )

    # Mutual TLS identity
    cert_file: Path | None = Field(
        default=None,
        description="PEM encoded client certificate",
    )
    key_file: Path | None = Field(
        default=None,
        description="PEM encoded private key for the client certificate",
    )

    # Cookie persistence
    config_dir: Path = Field(
        default=Path.home() / ".config" / "ccportal",
        description="Configuration directory for ccportal data",
    )
    cookie_file: Path | None = Field(
        default=None,
        description="Persisted cookie jar (defaults to <config_dir>/cookies.txt)",
    )

    # Login flow
    login_header: str = Field(
        default=LOGIN_REQUIRED_HEADER,
        description="Response header signalling that the SSO login chain must run",
    )
    login_steps: int = Field(
        default=LOGIN_STEPS,
        ge=1,
        description="Number of chained form submissions in the SSO login flow",
    )
    verify_login: bool = Field(
        default=False,
        description="Re-probe the portal after the login chain and fail if still unauthenticated",
    )

    # Logging configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(default="console", description="Log format: console or json")

    model_config = SettingsConfigDict(
        env_prefix="CCPORTAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize settings and create config directory."""
        super().__init__(**kwargs)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    @property
    def cookie_path(self) -> Path:
        """Get the persisted cookie jar location."""
        return self.cookie_file or self.config_dir / "cookies.txt"

    def require_identity(self) -> tuple[Path, Path]:
        """Return the configured certificate and key paths.

        Raises:
            ValueError: If either path is not configured.
        """
        if self.cert_file is None:
            raise ValueError("CCPORTAL_CERT_FILE environment variable is required")
        if self.key_file is None:
            raise ValueError("CCPORTAL_KEY_FILE environment variable is required")
        return self.cert_file, self.key_file


# Global settings instance
_settings: PortalSettings | None = None


def get_settings() -> PortalSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = PortalSettings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None
