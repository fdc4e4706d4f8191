import httpx
import pytest

from akeditz.auth.session import Session
from akeditz.auth.token_store import MemoryTokenStore
from akeditz.infra.api_client import ApiClient
from akeditz.infra.errors import ClientError, NetworkError, ServerError, UnauthorizedError

from fake_backend import BASE_URL

def _mock_client(handler, session=None) -> ApiClient:
    return ApiClient(BASE_URL, session=session, http=httpx.Client(transport=httpx.MockTransport(handler)))

def test_bearer_token_attached(user_api, backend):
    body = user_api.get("/auth/me")
    assert body["user"]["email"] == "jane@example.com"

def test_no_authorization_header_when_anonymous():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json={"ok": True})

    assert _mock_client(handler).get("/health") == {"ok": True}
    assert seen["auth"] is None

def test_none_params_are_dropped():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json=[])

    _mock_client(handler).get("/projects", params={"page": 2, "category": None})
    assert seen["url"] == f"{BASE_URL}/projects?page=2"

def test_not_found_uses_backend_message(api):
    with pytest.raises(ClientError) as exc:
        api.get("/projects/missing")
    assert exc.value.status == 404
    assert exc.value.message == "Project not found"

def test_validation_errors_are_listed(admin_api):
    with pytest.raises(ClientError) as exc:
        admin_api.post("/projects", json={})
    assert exc.value.message == "Validation failed: Title is required, Price must be positive"

def test_forbidden_for_non_admin(user_api):
    with pytest.raises(ClientError) as exc:
        user_api.get("/users")
    assert exc.value.status == 403
    assert exc.value.message == "Access denied. Admin only."
    # 403 ne touche pas à la session
    assert user_api.session.token == "tok-user"

def test_unauthorized_clears_session_once(user_api, backend):
    backend.tokens.pop("tok-user")
    notified = []
    user_api.session.on_unauthorized(lambda: notified.append(1))
    for _ in range(2):
        with pytest.raises(UnauthorizedError):
            user_api.get("/auth/me")
    assert user_api.session.token is None
    assert user_api.session.user is None
    assert notified == [1]

def test_unauthorized_without_token_notifies_nobody(api):
    notified = []
    api.session.on_unauthorized(lambda: notified.append(1))
    with pytest.raises(UnauthorizedError) as exc:
        api.post("/payments/create-payment-intent", json={})
    assert exc.value.message == "No token, authorization denied"
    assert notified == []

def test_stale_401_does_not_clear_newer_token():
    session = Session(MemoryTokenStore("old"))

    def handler(request):
        # le token change pendant que la requête est en vol
        session.set("new", None)
        return httpx.Response(401, json={"message": "Token is not valid"})

    with pytest.raises(UnauthorizedError):
        _mock_client(handler, session=session).get("/auth/me")
    assert session.token == "new"

@pytest.mark.parametrize("status, payload, expected_type, expected_message", [
    (502, {"message": "nginx"}, ServerError, "Bad gateway"),
    (503, None, ServerError, "Service unavailable"),
    (500, None, ServerError, "Internal server error"),
    (429, {}, ClientError, "Too many requests"),
])
def test_status_messages(status, payload, expected_type, expected_message):
    def handler(request):
        if payload is None:
            return httpx.Response(status, text="<html>oops</html>")
        return httpx.Response(status, json=payload)

    with pytest.raises(expected_type) as exc:
        _mock_client(handler).get("/anything")
    assert exc.value.message == expected_message
    assert exc.value.status == status

def test_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError) as exc:
        _mock_client(handler).get("/health")
    assert exc.value.message == "Network error: Unable to connect to server"
    assert exc.value.status is None

def test_empty_body_returns_none():
    client = _mock_client(lambda request: httpx.Response(204))
    assert client.delete("/projects/p1") is None

def test_client_closes_only_owned_http(http):
    ApiClient(BASE_URL, http=http).close()
    assert not http.is_closed
    with ApiClient(BASE_URL) as owned:
        inner = owned.http
    assert inner.is_closed
