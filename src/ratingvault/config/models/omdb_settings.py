"""OMDb API configuration model.

This module contains the configuration for the upstream rating source,
including authentication, request timeout and retry behaviour.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ratingvault.shared.constants import OMDbConfig, OMDbErrorHandling


class OMDbSettings(BaseModel):
    """OMDb API configuration.

    Security: api_key is masked in __repr__ so that settings objects can be
    logged without exposing the key.
    """

    api_key: str = Field(
        default="",
        repr=False,
        description="OMDb API key (required for API access)",
    )
    base_url: str = Field(
        default=OMDbConfig.BASE_URL,
        description="OMDb endpoint",
    )
    timeout: float = Field(
        default=OMDbConfig.DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )
    retry_attempts: int = Field(
        default=OMDbErrorHandling.RETRY_ATTEMPTS,
        ge=1,
        description="Total request attempts for transient failures",
    )
    retry_base_delay: float = Field(
        default=OMDbErrorHandling.RETRY_BASE_DELAY,
        ge=0,
        description="Base delay in seconds; doubled after each failed attempt",
    )
    plot: str = Field(
        default=OMDbConfig.DEFAULT_PLOT,
        description="Plot length requested from upstream (short, full)",
    )

    def __repr__(self) -> str:
        """Custom repr that masks the api_key."""
        masked_key = "****" if self.api_key else "[empty]"
        return (
            f"OMDbSettings("
            f"api_key={masked_key}, "
            f"timeout={self.timeout}, "
            f"retry_attempts={self.retry_attempts})"
        )
