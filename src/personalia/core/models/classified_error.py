from enum import StrEnum
from typing import Optional

from pydantic import BaseModel


class Disposition(StrEnum):
    retryable = "retryable"
    permanent = "permanent"


class ClassifiedError(BaseModel):
    """Structured verdict on a failed API interaction.

    ``status_code`` is None when no response was received at all.
    """

    model_config = {"frozen": True}

    message: str
    disposition: Disposition
    status_code: Optional[int] = None
    error_id: Optional[str] = None
    error_code: Optional[int] = None
    remediation: Optional[str] = None
    diagnostic: Optional[str] = None
    request_id: Optional[str] = None

    @property
    def is_retryable(self) -> bool:
        return self.disposition == Disposition.retryable

    def with_request_id(self, request_id: str) -> "ClassifiedError":
        """Return copy that carries the given request id."""
        if self.request_id == request_id:
            return self
        return self.model_copy(update={"request_id": request_id})
