from rest_framework import exceptions as drf_exceptions

from core.exceptions import (
    CompensationError,
    ExternalServiceError,
    NotFoundError,
    TransitionError,
    ValidationError,
    api_exception_handler,
)


def test_validation_error():
    r = api_exception_handler(ValidationError({"pol": ["Required."]}), {})
    assert r.status_code == 400
    assert r.data == {"detail": "Validation failed", "errors": {"pol": ["Required."]}}


def test_transition_error_is_a_validation_error():
    r = api_exception_handler(TransitionError("Booking", "Delivered", "Booked"), {})
    assert r.status_code == 400
    assert r.data["errors"]["status"] == ["Booking cannot move from 'Delivered' to 'Booked'."]


def test_not_found():
    r = api_exception_handler(NotFoundError("Quotation", "QTN-1"), {})
    assert r.status_code == 404
    assert r.data["detail"] == "Quotation QTN-1 not found"


def test_external_service():
    assert api_exception_handler(ExternalServiceError("down"), {}).status_code == 502


def test_compensation():
    exc = CompensationError("not deleted", completed_steps=["delete_booking"], restored=True)
    r = api_exception_handler(exc, {})
    assert r.status_code == 409
    assert r.data == {"detail": "not deleted", "completed_steps": ["delete_booking"], "restored": True}


def test_serializer_errors_share_the_shape():
    r = api_exception_handler(drf_exceptions.ValidationError({"rate": ["A valid number is required."]}), {})
    assert r.status_code == 400
    assert r.data["errors"] == {"rate": ["A valid number is required."]}


def test_other_errors_fall_through_to_drf():
    r = api_exception_handler(drf_exceptions.NotAuthenticated(), {})
    assert r.status_code == 401
    assert api_exception_handler(RuntimeError("boom"), {}) is None
