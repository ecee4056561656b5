"""Unit tests for ErrorClassifier.

The classifier turns every failure signal into a ClassifiedError with a
disposition. The partition of provider error ids into permanent and retryable
is a contract with the remote service, so it is asserted id by id.
"""

import pytest

from personalia.core.error_catalog import ERROR_CATALOG, PERMANENT_ERROR_IDS
from personalia.core.exceptions import TransportError
from personalia.core.managers.error_classifier import ErrorClassifier
from personalia.core.models.classified_error import Disposition
from personalia.core.models.content import GetContentResponse


PERMANENT_ROSTER = [
    "101", "102", "103", "104", "105", "106", "107", "108",
    "109", "111", "112", "113", "114", "117", "118",
]


@pytest.fixture
def classifier():
    return ErrorClassifier()


def _response(status, body=None, reason=""):
    return {"status": status, "reason": reason, "headers": {}, "body": body}


# --- Catalog ---

def test_permanent_roster_is_exact():
    assert PERMANENT_ERROR_IDS == frozenset(PERMANENT_ROSTER)


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        ERROR_CATALOG["999"] = ERROR_CATALOG["101"]


def test_catalog_entries_are_frozen():
    with pytest.raises(ValueError):
        ERROR_CATALOG["117"].description = "changed"


# --- Provider error ids ---

@pytest.mark.parametrize("error_id", PERMANENT_ROSTER)
def test_roster_ids_are_permanent(classifier, error_id):
    error = classifier.classify_response(
        _response(400, {"Reason": "Bad request", "ErrorId": int(error_id)}, "Bad Request")
    )

    assert error.disposition == Disposition.permanent
    assert error.error_id == error_id
    assert error.remediation == ERROR_CATALOG[error_id].remediation


@pytest.mark.parametrize(
    "error_id", sorted(set(ERROR_CATALOG) - set(PERMANENT_ROSTER))
)
def test_other_known_ids_are_retryable(classifier, error_id):
    error = classifier.classify_response(
        _response(500, {"Reason": "Render error", "ErrorId": error_id})
    )

    assert error.disposition == Disposition.retryable
    assert ERROR_CATALOG[error_id].description in error.message


def test_known_id_message_concatenates_reason_description_and_fix(classifier):
    error = classifier.classify_response(
        _response(400, {"Reason": "Template mismatch", "ErrorId": 101})
    )

    entry = ERROR_CATALOG["101"]
    assert "Template mismatch" in error.message
    assert entry.description in error.message
    assert entry.remediation in error.message
    assert error.status_code == 400


def test_unknown_id_is_retryable_and_kept_verbatim(classifier):
    error = classifier.classify_response(
        _response(422, {"Reason": "Brand new failure", "ErrorId": 4242})
    )

    assert error.disposition == Disposition.retryable
    assert "4242" in error.message
    assert "Brand new failure" in error.message
    assert error.remediation is None


def test_lowercase_error_fields_are_understood(classifier):
    error = classifier.classify_response(
        _response(400, {"message": "Out of credits", "errorId": "117", "errorCode": "7"})
    )

    assert error.error_id == "117"
    assert error.error_code == 7
    assert error.disposition == Disposition.permanent


# --- Status codes and text heuristics ---

def test_404_without_body_on_status_check_is_retryable(classifier):
    error = classifier.classify_response(_response(404, None, "Not Found"), status_check=True)

    assert error.disposition == Disposition.retryable
    assert error.status_code == 404


def test_404_on_status_check_wins_over_provider_id(classifier):
    error = classifier.classify_response(
        _response(404, {"Reason": "Unknown", "ErrorId": 103}), status_check=True
    )

    assert error.disposition == Disposition.retryable


def test_404_outside_status_check_is_permanent(classifier):
    error = classifier.classify_response(_response(404, None, "Not Found"))

    assert error.disposition == Disposition.permanent
    assert "404 Not Found" in error.message


@pytest.mark.parametrize("text", ["Request is still Processing", "job IN PROGRESS"])
def test_processing_text_without_id_is_retryable(classifier, text):
    error = classifier.classify_response(_response(409, {"Reason": text}))

    assert error.disposition == Disposition.retryable


def test_processing_text_in_raw_body_is_retryable(classifier):
    error = classifier.classify_response(_response(503, "Service is processing, retry later"))

    assert error.disposition == Disposition.retryable


def test_generic_failure_is_permanent_with_details(classifier):
    error = classifier.classify_response(
        _response(500, {"unexpected": "shape"}, "Internal Server Error")
    )

    assert error.disposition == Disposition.permanent
    assert error.message == 'API Error (500 Internal Server Error): {"unexpected": "shape"}'


# --- Transport failures ---

def test_transport_failure_is_retryable_without_status(classifier):
    error = classifier.classify_transport_failure(TransportError("Network Error: refused"))

    assert error.disposition == Disposition.retryable
    assert error.status_code is None
    assert "No response received" in error.message
    assert error.diagnostic == "Network Error: refused"


# --- Failed status payloads ---

def test_failed_status_with_known_id(classifier):
    content = GetContentResponse(
        Status="Failed", FailureDescription="Not enough credits", ErrorId=117
    )

    error = classifier.classify_failed_status(content, status_code=200)

    assert error.disposition == Disposition.permanent
    assert "Insufficient credits." in error.message
    assert "Content generation failed: Not enough credits" in error.message
    assert error.error_id == "117"


def test_failed_status_without_description(classifier):
    error = classifier.classify_failed_status(GetContentResponse(Status="Failed"))

    assert error.message == "Content generation failed: Unknown error"
    assert error.disposition == Disposition.permanent


def test_classified_error_annotation_returns_copy():
    error = ErrorClassifier().classify_transport_failure(TransportError("boom"))

    annotated = error.with_request_id("req-1")

    assert error.request_id is None
    assert annotated.request_id == "req-1"
    assert annotated.with_request_id("req-1") is annotated
