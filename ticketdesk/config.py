"""
TicketDesk Client - Configuration Management
"""
from functools import lru_cache
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE = "/api"


class Settings(BaseSettings):
    """Application settings"""

    # Environment
    app_env: str = "development"

    # Remote API
    api_base: Optional[str] = None  # only honoured in production
    api_origin: str = "http://localhost:5173"
    request_timeout: float = 30.0

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


class ClientConfig(BaseModel):
    """
    Resolved connection settings for TicketDeskClient.

    Built once at startup and handed to the client constructor.

    Attributes:
        base_url: Absolute base URL of the ticket API (no trailing slash)
        timeout: Per-request timeout in seconds
        headers: Headers sent with every request
    """
    model_config = ConfigDict(frozen=True)

    base_url: str
    timeout: float = Field(30.0, gt=0)
    headers: Dict[str, str] = Field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        base_url: Optional[str] = None
    ) -> "ClientConfig":
        """
        Resolve the API base URL and build a config

        Precedence: explicit ``base_url`` > ``api_base`` from the environment
        (production only) > ``/api``. Relative bases are joined to
        ``settings.api_origin``.

        Args:
            settings: Settings to read from (defaults to cached settings)
            base_url: Explicit override

        Returns:
            ClientConfig instance
        """
        settings = settings or get_settings()
        return cls(
            base_url=resolve_api_base(settings, base_url),
            timeout=settings.request_timeout
        )


def resolve_api_base(settings: Settings, override: Optional[str] = None) -> str:
    """Pick the API base URL and make it absolute"""
    if override:
        base = override
    elif settings.is_production and settings.api_base:
        base = settings.api_base
    else:
        base = DEFAULT_API_BASE

    if not base.startswith(("http://", "https://")):
        base = f"{settings.api_origin.rstrip('/')}/{base.lstrip('/')}"
    return base.rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
