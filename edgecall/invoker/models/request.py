"""
Invocation request models.
"""

from typing import Any

from pydantic import BaseModel, Field, StrictStr


class InvocationOptions(BaseModel):
    """Per-call retry and timeout policy."""

    max_retries: int = Field(default=3, ge=1, description="Number of attempt cycles")
    timeout_ms: int = Field(default=30000, gt=0, description="HTTPS fallback timeout (ms)")
    use_fallback: bool = Field(default=True, description="Try direct HTTPS when primary fails")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


class InvocationRequest(BaseModel):
    """
    One edge function call. Owned by a single invocation.

    The name is only checked to be a string; an unknown name is left for the
    remote side to reject.
    """

    function_name: StrictStr = Field(..., description="Edge function name")
    payload: Any = Field(default=None, description="JSON-serializable body")
    options: InvocationOptions = Field(default_factory=InvocationOptions)
