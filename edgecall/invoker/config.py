"""
Edge client configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

from pydantic import Field
from edgecall.common.core.config import BaseAppConfig
from edgecall.invoker.models.request import InvocationOptions


class EdgeClientConfig(BaseAppConfig):
    """
    Configuration management for the edge function client.
    """

    # Backend project (required from env)
    EDGE_BASE_URL: str = Field(..., description="Project URL hosting /functions/v1")
    EDGE_ANON_KEY: str = Field(..., min_length=1, description="Public anon key (apikey header)")

    # Invocation policy
    EDGE_MAX_RETRIES: int = Field(default=3, ge=1, description="Attempt cycles per call")
    EDGE_TIMEOUT_MS: int = Field(default=30000, gt=0, description="HTTPS fallback timeout (ms)")
    EDGE_USE_FALLBACK: bool = Field(default=True, description="Enable direct HTTPS fallback")
    EDGE_BACKOFF_BASE_MS: int = Field(
        default=2000, ge=0, description="Backoff after attempt i is base * (i + 1) ms"
    )
    EDGE_PRIMARY_TIMEOUT_SECONDS: float = Field(
        default=150.0, gt=0, description="HTTP client timeout used by the primary transport"
    )

    # Local auth token store
    AUTH_STORE_PATH: str = Field(
        default="~/.edgecall/auth.json", description="Key-value auth token file"
    )

    def default_options(self) -> InvocationOptions:
        return InvocationOptions(
            max_retries=self.EDGE_MAX_RETRIES,
            timeout_ms=self.EDGE_TIMEOUT_MS,
            use_fallback=self.EDGE_USE_FALLBACK,
        )

