import types
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from akeditz.auth.session import Session
from akeditz.auth.token_store import MemoryTokenStore
from akeditz.infra.api_client import ApiClient
from akeditz.models.users import User
from fake_backend import ADMIN, BASE_URL, USER, FakeBackend, create_app

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture()
def backend() -> FakeBackend:
    return FakeBackend()

@pytest.fixture()
def http(backend) -> Generator[TestClient, None, None]:
    with TestClient(create_app(backend)) as c:
        yield c

def _session(token: str, user: dict) -> Session:
    session = Session(MemoryTokenStore(token))
    session.set_user(User.model_validate(user))
    return session

@pytest.fixture()
def api(http) -> ApiClient:
    """Client anonyme branché sur le backend factice."""
    return ApiClient(BASE_URL, http=http)

@pytest.fixture()
def user_api(http) -> ApiClient:
    """Client connecté en tant qu'utilisateur standard (tok-user)."""
    return ApiClient(BASE_URL, session=_session("tok-user", USER), http=http)

@pytest.fixture()
def admin_api(http) -> ApiClient:
    return ApiClient(BASE_URL, session=_session("tok-admin", ADMIN), http=http)

# Client minimal pour les tests unitaires (repositories monkeypatchés, aucun HTTP)
@pytest.fixture()
def stub_client():
    return types.SimpleNamespace(session=_session("tok-user", USER), base_url=BASE_URL)

@pytest.fixture()
def anonymous_stub_client():
    return types.SimpleNamespace(session=Session(), base_url=BASE_URL)
