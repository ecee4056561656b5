"""Per-round outcomes and state of a content polling call."""

from typing import Optional

from pydantic import BaseModel, Field

from personalia.core.exceptions import PersonaliaError
from personalia.core.models.content import GetContentResponse


class PollingState(BaseModel):
    attempts_made: int = Field(default=0, ge=0)
    max_attempts: int = Field(gt=0)
    interval_ms: int = Field(gt=0)

    @property
    def exhausted(self) -> bool:
        return self.attempts_made >= self.max_attempts

    def consume_attempt(self) -> None:
        if self.exhausted:
            raise RuntimeError("attempt budget already exhausted")
        self.attempts_made += 1


class PollOutcome:
    """Result of a single status-check round."""


class Completed(PollOutcome):
    def __init__(self, result: GetContentResponse):
        self.result = result


class Retry(PollOutcome):
    def __init__(self, reason: str, error: Optional[PersonaliaError] = None):
        self.reason = reason
        self.error = error


class Fatal(PollOutcome):
    def __init__(self, error: PersonaliaError):
        self.error = error
