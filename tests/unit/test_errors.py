import pytest

from akeditz.infra.errors import (
    ApiError,
    ClientError,
    NetworkError,
    ServerError,
    UnauthorizedError,
    error_from_response,
    error_message,
    is_not_found,
    is_server_error,
    is_unauthorized,
    validation_errors,
)

def test_backend_message_is_preferred():
    assert error_message(400, {"message": "Title is required"}) == "Title is required"

@pytest.mark.parametrize("status, expected", [
    (400, "Bad request"),
    (401, "Unauthorized access"),
    (403, "Access forbidden"),
    (404, "Resource not found"),
    (409, "Conflict occurred"),
    (422, "Validation failed"),
    (429, "Too many requests"),
    (500, "Internal server error"),
    (418, "Error 418"),
])
def test_default_message_per_status(status, expected):
    assert error_message(status, None) == expected

def test_gateway_errors_ignore_backend_message():
    assert error_message(502, {"message": "upstream exploded"}) == "Bad gateway"
    assert error_message(503, {"message": "maintenance"}) == "Service unavailable"

def test_errors_list_is_appended():
    data = {"message": "Validation failed", "errors": ["Title is required", "Price must be positive"]}
    assert error_message(400, data) == "Validation failed: Title is required, Price must be positive"

def test_error_from_response_classifies_by_status():
    assert isinstance(error_from_response(401, None), UnauthorizedError)
    assert isinstance(error_from_response(404, None), ClientError)
    assert isinstance(error_from_response(500, None), ServerError)
    err = error_from_response(503, {"message": "x"})
    assert err.kind == "server"
    assert err.status == 503
    assert err.message == "Service unavailable"

def test_unauthorized_is_a_client_error():
    err = error_from_response(401, {"message": "Token is not valid"})
    assert isinstance(err, ClientError)
    assert err.kind == "unauthorized"
    assert is_unauthorized(err)

def test_network_error_has_no_status():
    err = NetworkError()
    assert err.status is None
    assert err.kind == "network"
    assert err.message == "Network error: Unable to connect to server"
    assert isinstance(err, ApiError)

def test_predicates_and_validation_errors():
    err = error_from_response(404, {"message": "Project not found"})
    assert is_not_found(err)
    assert not is_server_error(err)
    assert is_server_error(error_from_response(500, None))
    assert validation_errors(error_from_response(400, {"errors": ["a", "b"]})) == ["a", "b"]
    assert validation_errors(ValueError("x")) == []
