"""Configuration models for core components.

Pydantic-based configuration consolidating the settings of the poller and
client, enabling dependency injection and testability.
"""

from pydantic import BaseModel, Field


class PollingConfig(BaseModel):
    """Configuration for content polling and request behavior.

    Attributes:
        max_attempts: Status-check rounds before giving up
        interval_ms: Milliseconds to wait between rounds
        request_timeout: Total seconds allowed for a single HTTP request
        read_retry_attempts: Tries for idempotent reads on retryable failures
    """

    max_attempts: int = Field(
        default=30,
        gt=0,
        description="Maximum number of status-check rounds before the poll times out"
    )

    interval_ms: int = Field(
        default=2000,
        gt=0,
        description="Interval in milliseconds between status-check rounds"
    )

    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Total timeout in seconds for a single HTTP request"
    )

    read_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for retryable failures of get_content/get_template_info"
    )

    read_retry_base_wait: float = Field(
        default=0.2,
        gt=0,
        description="Base wait time in seconds for exponential backoff between read retries"
    )

    read_retry_max_wait: float = Field(
        default=2.0,
        gt=0,
        description="Maximum wait time in seconds between read retries"
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @classmethod
    def from_app_settings(cls, settings) -> "PollingConfig":
        """Factory method to construct config from a PersonaliaSettings instance."""
        return cls(
            max_attempts=settings.PERSONALIA_POLL_MAX_ATTEMPTS,
            interval_ms=settings.PERSONALIA_POLL_INTERVAL_MS,
            request_timeout=settings.PERSONALIA_REQUEST_TIMEOUT,
            read_retry_attempts=settings.PERSONALIA_READ_RETRY_ATTEMPTS,
        )
