"""
Auth provider client and the session exchange endpoints
"""

from unittest.mock import Mock

import pytest
import requests

from pilatesflow.services import auth_service
from pilatesflow.services.auth_service import AuthProviderClient


def _response(status_code=200, payload=None):
    resp = Mock()
    resp.status_code = status_code
    resp.content = b"{}" if payload is not None else b""
    resp.json = Mock(return_value=payload)
    return resp


@pytest.mark.unit
class TestAuthProviderClient:
    def test_resolves_email(self, monkeypatch):
        get = Mock(return_value=_response(payload={"email": " Ana@Example.com "}))
        monkeypatch.setattr(auth_service.requests, "get", get)

        client = AuthProviderClient("https://auth.example.com/", "anon-key")
        assert client.resolve_email("tok") == "ana@example.com"

        args, kwargs = get.call_args
        assert args[0] == "https://auth.example.com/auth/v1/user"
        assert kwargs["headers"] == {"Authorization": "Bearer tok", "apikey": "anon-key"}
        assert kwargs["timeout"] > 0

    def test_rejected_token(self, monkeypatch):
        monkeypatch.setattr(auth_service.requests, "get", Mock(return_value=_response(401, {"msg": "bad"})))
        assert AuthProviderClient("https://auth.example.com", "").resolve_email("tok") is None

    def test_network_error(self, monkeypatch):
        monkeypatch.setattr(
            auth_service.requests, "get", Mock(side_effect=requests.ConnectionError("down"))
        )
        assert AuthProviderClient("https://auth.example.com", "").resolve_email("tok") is None

    def test_not_configured(self):
        client = AuthProviderClient("", "")
        assert client.configured is False
        assert client.resolve_email("tok") is None


class _FakeProvider:
    configured = True

    def __init__(self, emails):
        self.emails = emails

    def resolve_email(self, token):
        return self.emails.get(token)


@pytest.fixture
def session_client(db_session):
    """TestClient using the real session cookie for claims."""
    from fastapi.testclient import TestClient

    from pilatesflow.main import app
    from pilatesflow.dependencies import get_db_session, get_auth_client

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db_session] = _override_db
    app.dependency_overrides[get_auth_client] = lambda: _FakeProvider({
        "tok-ana": "ana@example.com",
        "tok-admin": "admin@example.com",
    })
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.mark.api
class TestSessionExchange:
    def test_new_user_becomes_alumna(self, session_client):
        resp = session_client.post("/api/auth/session", json={"access_token": "tok-ana"})
        assert resp.status_code == 200
        assert resp.json() == {
            "email": "ana@example.com",
            "role": "alumna",
            "plan": "free",
            "redirect": "/dashboard/alumna",
        }

        claims = session_client.get("/api/auth/session").json()
        assert claims["authenticated"] is True
        assert claims["is_alumna"] is True
        assert session_client.get("/api/bookings/me").status_code == 200

    def test_existing_admin(self, session_client, make_profile):
        make_profile("admin@example.com", role="admin", plan="activa")
        body = session_client.post("/api/auth/session", json={"access_token": "tok-admin"}).json()
        assert body["role"] == "admin"
        assert body["redirect"] == "/dashboard/classes"

    def test_invalid_token(self, session_client):
        assert session_client.post("/api/auth/session", json={"access_token": "nope"}).status_code == 401

    def test_logout_clears_session(self, session_client):
        session_client.post("/api/auth/session", json={"access_token": "tok-ana"})
        assert session_client.post("/api/auth/logout").json() == {"ok": True}

        claims = session_client.get("/api/auth/session").json()
        assert claims["authenticated"] is False
        assert claims["redirect"] == "/login"
        assert session_client.get("/api/bookings/me").status_code == 401

    def test_plan_switch_updates_session(self, session_client):
        session_client.post("/api/auth/session", json={"access_token": "tok-ana"})
        session_client.put("/api/profile/plan", json={"plan": "activa"})
        assert session_client.get("/api/auth/session").json()["plan"] == "activa"
