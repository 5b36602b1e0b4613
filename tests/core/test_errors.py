"""Error Hierarchy: status codes, codes, and the response envelope."""

import pytest

from bookcircle.core.errors import (
    AuthenticationRequiredError, BookCircleError, ConflictError, DatabaseError,
    ErrorCategory, ErrorSeverity, ExternalServiceError, IdentityResolutionError,
    OwnershipError, RateLimitExceededError, RecommendationParseError,
    RequestValidationFailed, ResourceNotFoundError,
)


@pytest.mark.parametrize("error, status, code", [
    (RequestValidationFailed("bad", "title"), 400, "VALIDATION_ERROR"),
    (AuthenticationRequiredError(), 401, "UNAUTHORIZED"),
    (OwnershipError("Book", "b1", "update"), 403, "FORBIDDEN"),
    (ResourceNotFoundError("Book", "b1"), 404, "NOT_FOUND"),
    (ConflictError("dup"), 409, "CONFLICT"),
    (RateLimitExceededError(1000), 429, "TOO_MANY_REQUESTS"),
    (IdentityResolutionError("Book", "b1", "u1"), 500, "IDENTITY_RESOLUTION_FAILED"),
    (RecommendationParseError(0), 500, "RECOMMENDATION_PARSE_FAILED"),
    (DatabaseError("down", "select"), 503, "DATABASE_ERROR"),
    (ExternalServiceError("Clerk", "boom", "timeout"), 503, "EXTERNAL_SERVICE_ERROR"),
])
def test_status_and_code(error, status, code):
    assert isinstance(error, BookCircleError)
    assert error.http_status == status
    assert error.code == code


def test_response_envelope_shape():
    body = ResourceNotFoundError("Profile", "p1").to_response()
    err = body["error"]
    assert err["code"] == "NOT_FOUND"
    assert err["category"] == ErrorCategory.RESOURCE_NOT_FOUND.value
    assert err["severity"] == ErrorSeverity.ERROR.value
    assert err["context"]["resource_type"] == "Profile"
    assert err["context"]["resource_id"] == "p1"
    assert "timestamp" in err


def test_rate_limit_carries_retry_after():
    body = RateLimitExceededError(2500).to_response()
    assert body["error"]["context"]["retry_after_ms"] == 2500


def test_identity_resolution_message_names_record_and_user():
    err = IdentityResolutionError("Book", "b1", "u1")
    assert "b1" in err.message and "u1" in err.message
    assert err.severity == ErrorSeverity.CRITICAL
