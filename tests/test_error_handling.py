"""
Tests for the error response envelope and exception mapping.
"""

import json

from sqlalchemy.exc import IntegrityError, OperationalError

from portal.services.error_handler import ErrorHandlerService
from portal.utils.exceptions import (
    BusinessRuleViolationError,
    DuplicateResourceError,
    NotFoundError,
    OverrideStorageError,
    PaymentFailedError,
    ServiceUnavailableForOrderError,
    ValidationError,
)


def body(response) -> dict:
    return json.loads(response.body)


class TestErrorEnvelope:

    def test_format(self):
        payload = ErrorHandlerService.format_error_response("NOT_FOUND", "Order not found", request_id="abc123")
        error = payload["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["message"] == "Order not found"
        assert error["request_id"] == "abc123"
        assert error["timestamp"].endswith("Z")
        assert "details" not in error

    def test_api_exception(self):
        response = ErrorHandlerService.handle_api_exception(NotFoundError("Order", "123"))
        assert response.status_code == 404
        assert body(response)["error"]["message"] == "Order not found with ID: 123"

    def test_validation_error_includes_field_errors(self):
        exc = ValidationError("Invalid property_id", field_errors=[{"field": "property_id", "message": "Must be a valid UUID"}])
        response = ErrorHandlerService.handle_api_exception(exc)
        assert response.status_code == 422
        assert body(response)["error"]["details"][0]["field"] == "property_id"

    def test_integrity_error_is_a_conflict(self):
        exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))
        response = ErrorHandlerService.handle_database_error(exc)
        assert response.status_code == 409
        assert body(response)["error"]["code"] == "INTEGRITY_ERROR"

    def test_other_database_errors(self):
        response = ErrorHandlerService.handle_database_error(OperationalError("SELECT 1", {}, Exception("gone")))
        assert response.status_code == 500
        assert body(response)["error"]["code"] == "DATABASE_ERROR"

    def test_unexpected_error_hides_details(self):
        response = ErrorHandlerService.handle_unexpected_error(RuntimeError("secret stack detail"))
        assert response.status_code == 500
        assert "secret" not in body(response)["error"]["message"]


class TestDomainExceptions:

    def test_status_codes(self):
        assert PaymentFailedError("declined").status_code == 402
        assert OverrideStorageError().status_code == 500
        assert DuplicateResourceError("Service", "Photos").status_code == 409
        assert BusinessRuleViolationError("default payment method", "Set another card first").status_code == 400
        assert ServiceUnavailableForOrderError("Helicopter Tour").status_code == 400

    def test_messages(self):
        assert "Helicopter Tour" in ServiceUnavailableForOrderError("Helicopter Tour").detail
        assert PaymentFailedError("Your card was declined.").error_code == "PAYMENT_FAILED"
