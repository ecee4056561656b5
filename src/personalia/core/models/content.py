from enum import StrEnum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentStatus(StrEnum):
    pending = "Pending"
    in_progress = "InProgress"
    processing = "Processing"
    completed = "Completed"
    failed = "Failed"


class OutputOptions(BaseModel):
    Format: Optional[Literal["PDF", "JPG", "PNG"]] = None
    Quality: Optional[Literal["Display", "Print"]] = None
    Resolution: Optional[int] = Field(None, gt=0)
    Package: Optional[bool] = None
    StrictPolicy: Optional[bool] = None


class CreateContentRequest(BaseModel):
    """Body of a content creation (or on-demand URL) request."""

    TemplateId: str
    Fields: Dict[str, str | int | float | bool] = Field(default_factory=dict)
    Output: Optional[OutputOptions] = None

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


class CreateContentResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    RequestId: str


class CreateUrlResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    Url: str


class GetContentResponse(BaseModel):
    """Status snapshot of a content request; carries results once Completed.

    Unknown provider fields are kept so callers see the full payload.
    """

    model_config = ConfigDict(extra="allow")

    Status: Optional[str] = None
    URLs: Optional[List[str]] = None
    Content: Optional[str] = None
    ContentType: Optional[str] = None
    FailureDescription: Optional[str] = None
    ErrorId: Optional[str] = None

    @field_validator("ErrorId", mode="before")
    @classmethod
    def _error_id_as_text(cls, value):
        # provider sends numbers; catalog keys are strings
        return None if value in (None, "") else str(value)

    def is_completed(self) -> bool:
        return self.Status == ContentStatus.completed

    def is_failed(self) -> bool:
        return self.Status == ContentStatus.failed


class TemplateField(BaseModel):
    model_config = ConfigDict(extra="allow")

    Name: str
    Type: Optional[str] = None
    Description: Optional[str] = None


class TemplateInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    TemplateId: Optional[str] = None
    Fields: List[TemplateField] = Field(default_factory=list)

    @field_validator("Fields", mode="before")
    @classmethod
    def _fields_as_list(cls, value):
        """Accept both the list form and the ``{name: {Type, ...}}`` mapping form."""
        if isinstance(value, dict):
            return [{"Name": name, **(attrs or {})} for name, attrs in value.items()]
        return value

    def field_names(self) -> List[str]:
        return [field.Name for field in self.Fields]


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    Reason: str
    ErrorId: Optional[str] = None
    ErrorParameters: Optional[Dict[str, str]] = None

    @field_validator("ErrorId", mode="before")
    @classmethod
    def _error_id_as_text(cls, value):
        return None if value in (None, "") else str(value)
