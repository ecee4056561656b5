from typing import Optional

from personalia.core.models.classified_error import ClassifiedError, Disposition


def format_seconds(milliseconds: int) -> str:
    """Render a millisecond total as seconds without rounding (7000 -> "7", 3703701 -> "3703.701")."""
    if milliseconds % 1000 == 0:
        return str(milliseconds // 1000)
    return repr(milliseconds / 1000)


class PersonaliaError(Exception):
    """Base exception for Personalia client failures.

    Attributes:
        message: Human-readable error description
        request_id: Content request the failure refers to, once known
    """
    def __init__(self, message: str, request_id: Optional[str] = None):
        self.message = message
        self.request_id = request_id
        super().__init__(message)

    def annotate(self, request_id: str) -> "PersonaliaError":
        """Attach the request id. Safe to call repeatedly; the first id wins."""
        if self.request_id is None:
            self.request_id = request_id
        return self

    def __str__(self) -> str:
        # the id is rendered at most once, even if the message already names it
        if self.request_id and self.request_id not in self.message:
            return f"{self.message}\nRequest ID: {self.request_id}"
        return self.message


class TransportError(PersonaliaError):
    """Raised by HTTP adapters when no response was received (timeout, refused connection, ...)."""
    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class PersonaliaApiError(PersonaliaError):
    """Failure classified into a disposition and remediation hint."""
    def __init__(self, error: ClassifiedError):
        self.error = error
        super().__init__(error.message, request_id=error.request_id)

    def annotate(self, request_id: str) -> "PersonaliaApiError":
        super().annotate(request_id)
        self.error = self.error.with_request_id(self.request_id)
        return self

    @property
    def status_code(self) -> Optional[int]:
        return self.error.status_code

    @property
    def error_id(self) -> Optional[str]:
        return self.error.error_id

    @property
    def error_code(self) -> Optional[int]:
        return self.error.error_code

    @property
    def remediation(self) -> Optional[str]:
        return self.error.remediation

    @property
    def disposition(self) -> Disposition:
        return self.error.disposition

    @property
    def is_retryable(self) -> bool:
        return self.error.is_retryable


class TransientPersonaliaError(PersonaliaApiError):
    """Wrapper for retryable errors of idempotent reads.

    Lets the retry adapter distinguish what to retry from what to surface.
    """
    pass


class ContentFailedError(PersonaliaApiError):
    """The provider marked the content request as Failed. Never retried."""
    pass


class PollingTimeoutError(PersonaliaError):
    """Raised when the polling attempt budget is used up without a terminal status.

    The job may still be processing; it can be fetched later by request id.
    """
    def __init__(self, request_id: str, attempts: int, interval_ms: int):
        self.attempts = attempts
        self.interval_ms = interval_ms
        self.elapsed_seconds = attempts * interval_ms / 1000
        message = (
            f"Content not ready after {attempts} attempts ({format_seconds(attempts * interval_ms)} seconds). "
            f"The request ID {request_id} may still be processing. "
            "You can try retrieving it later with get_content()."
        )
        super().__init__(message, request_id=request_id)


class PollingCancelledError(PersonaliaError):
    """Raised when a caller cancels an in-flight poll."""
    def __init__(self, request_id: str, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Polling cancelled after {attempts} attempts", request_id=request_id
        )
