"""
Common Configuration
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class BaseAppConfig(BaseSettings):
    """
    Common application settings.
    """

    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    VERIFY_SSL: bool = Field(default=True, description="Whether to verify SSL certificates")

    # ===== HTTP Client Defaults =====
    HTTP_MAX_CONNECTIONS: int = Field(
        default=20, description="Max pooled connections for the shared HTTP client"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )
