"""Translation of API failures into classified errors.

Every failure signal the client can observe ends up here:

1. a transport failure (no response at all),
2. an HTTP response, usually non-2xx, with a parsed body,
3. a status payload whose ``Status`` is ``Failed``.

The classifier assigns a disposition (retryable or permanent) and, for known
provider error ids, the remediation hint from the error catalog. It is a pure
function of its input and never raises.
"""

import json
from typing import Any, Dict, Mapping, Optional, Tuple

from personalia.core.error_catalog import (
    ERROR_CATALOG,
    PERMANENT_ERROR_IDS,
    ErrorCatalogEntry,
)
from personalia.core.exceptions import TransportError
from personalia.core.models.classified_error import ClassifiedError, Disposition
from personalia.core.models.content import ErrorResponse, GetContentResponse

PROCESSING_MARKERS = ("processing", "in progress")

NO_RESPONSE_MESSAGE = "No response received from the server"
NO_RESPONSE_REMEDIATION = "Please check your network connection."

_REASON_KEYS = ("Reason", "message", "error")
_ERROR_ID_KEYS = ("ErrorId", "errorId")
_ERROR_CODE_KEYS = ("ErrorCode", "errorCode")


def _first(body: Dict[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        value = body.get(key)
        if value not in (None, ""):
            return value
    return None


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _serialize(body: Any) -> str:
    if body is None or body == "":
        return "<empty body>"
    if isinstance(body, str):
        return body
    return json.dumps(body, default=str)


def mentions_processing(text: Optional[str]) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(marker in lowered for marker in PROCESSING_MARKERS)


class ErrorClassifier:
    """Maps failure signals onto ``ClassifiedError`` values.

    Args:
        catalog: Known provider error ids with description and remediation
        permanent_ids: Provider error ids that must never be retried
    """

    def __init__(
        self,
        catalog: Mapping[str, ErrorCatalogEntry] = ERROR_CATALOG,
        permanent_ids: frozenset[str] = PERMANENT_ERROR_IDS,
    ):
        self._catalog = catalog
        self._permanent_ids = permanent_ids

    def classify_transport_failure(self, exc: TransportError) -> ClassifiedError:
        return ClassifiedError(
            message=NO_RESPONSE_MESSAGE,
            disposition=Disposition.retryable,
            status_code=None,
            remediation=NO_RESPONSE_REMEDIATION,
            diagnostic=exc.message,
        )

    def classify_response(
        self, response: Dict[str, Any], status_check: bool = False
    ) -> ClassifiedError:
        """Classify an HTTP response the caller considers a failure.

        ``status_check`` marks responses to ``GET /v1/content`` during polling,
        where a 404 means the request is not indexed yet.
        """
        status = response.get("status")
        status_text = response.get("reason") or ""
        body = response.get("body")
        diagnostic = f"HTTP {status} {status_text}: {_serialize(body)}".strip()

        if status_check and status == 404:
            return ClassifiedError(
                message="Content not ready yet (404)",
                disposition=Disposition.retryable,
                status_code=status,
                diagnostic=diagnostic,
            )

        reason, error_id, error_code = self._provider_fields(body)

        if error_id is not None:
            return self._classify_provider_error(
                reason or status_text or "unknown reason",
                error_id,
                status_code=status,
                error_code=error_code,
                diagnostic=diagnostic,
            )

        if mentions_processing(reason):
            return ClassifiedError(
                message=f"Personalia API Error unknown: {reason}",
                disposition=Disposition.retryable,
                status_code=status,
                error_code=error_code,
                diagnostic=diagnostic,
            )

        return ClassifiedError(
            message=f"API Error ({status} {status_text}): {_serialize(body)}",
            disposition=Disposition.permanent,
            status_code=status,
            error_code=error_code,
            diagnostic=diagnostic,
        )

    def classify_failed_status(
        self, content: GetContentResponse, status_code: Optional[int] = None
    ) -> ClassifiedError:
        """Classify a status payload the provider marked ``Failed``.

        The disposition is informational only: callers never retry a Failed job.
        """
        reason = f"Content generation failed: {content.FailureDescription or 'Unknown error'}"
        diagnostic = _serialize(content.model_dump(exclude_none=True))

        if content.ErrorId is not None:
            return self._classify_provider_error(
                reason, content.ErrorId, status_code=status_code, diagnostic=diagnostic
            )

        disposition = (
            Disposition.retryable
            if mentions_processing(content.FailureDescription)
            else Disposition.permanent
        )
        return ClassifiedError(
            message=reason,
            disposition=disposition,
            status_code=status_code,
            diagnostic=diagnostic,
        )

    def _classify_provider_error(
        self,
        reason: str,
        error_id: str,
        status_code: Optional[int] = None,
        error_code: Optional[int] = None,
        diagnostic: Optional[str] = None,
    ) -> ClassifiedError:
        entry = self._catalog.get(error_id)
        if entry is None:
            # new provider codes are assumed transient until catalogued
            return ClassifiedError(
                message=f"Personalia API Error {error_id}: {reason} (unrecognized error id {error_id})",
                disposition=Disposition.retryable,
                status_code=status_code,
                error_id=error_id,
                error_code=error_code,
                diagnostic=diagnostic,
            )

        disposition = (
            Disposition.permanent
            if error_id in self._permanent_ids
            else Disposition.retryable
        )
        return ClassifiedError(
            message=f"Personalia API Error {error_id}: {reason}: {entry.description} - {entry.remediation}",
            disposition=disposition,
            status_code=status_code,
            error_id=error_id,
            error_code=error_code,
            remediation=entry.remediation,
            diagnostic=diagnostic,
        )

    @staticmethod
    def _provider_fields(body: Any) -> Tuple[Optional[str], Optional[str], Optional[int]]:
        """Extract (reason, error id, error code) from whatever the provider sent."""
        if isinstance(body, str):
            return (body.strip() or None), None, None
        if not isinstance(body, dict):
            return None, None, None

        if "Reason" in body:
            try:
                parsed = ErrorResponse.model_validate(body)
                return (
                    parsed.Reason,
                    parsed.ErrorId or None,
                    _as_int(_first(body, _ERROR_CODE_KEYS)),
                )
            except ValueError:
                pass

        reason = _first(body, _REASON_KEYS)
        error_id = _first(body, _ERROR_ID_KEYS)
        return (
            None if reason is None else str(reason),
            None if error_id is None else str(error_id),
            _as_int(_first(body, _ERROR_CODE_KEYS)),
        )


default_classifier = ErrorClassifier()
