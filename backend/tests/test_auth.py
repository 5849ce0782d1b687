"""Tests for form owner accounts: registration, login, token refresh and profile."""

import time

import jwt
import pytest

from app.core.config import settings
from app.models.user import User
from app.services.auth import create_access_token, create_refresh_token

AUTH_URL = "/api/v1/auth"
FORMS_URL = "/api/v1/forms/"
PASSWORD = "strongpassword123"


def _register_payload(**overrides):
    payload = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "username": "ada",
        "email": "ada@example.com",
        "password": PASSWORD,
    }
    payload.update(overrides)
    return payload


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _token(user_id, **overrides) -> str:
    payload = {"sub": str(user_id), "exp": time.time() + 3600, "type": "access"}
    payload.update(overrides)
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


# ---------------------------------------------------------------------------
# Registration and login
# ---------------------------------------------------------------------------


class TestRegister:
    def test_register_with_company(self, client, db):
        resp = client.post(f"{AUTH_URL}/register", json=_register_payload(company_name="Acme GmbH"))
        assert resp.status_code == 201
        assert resp.json()["username"] == "ada"
        assert db.query(User).one().company_name == "Acme GmbH"

    @pytest.mark.parametrize(
        "overrides, detail",
        [
            ({"username": "other", "email": "OWNER@example.com"}, "Email already registered"),
            ({"username": "owner", "email": "new@example.com"}, "Username already taken"),
        ],
    )
    def test_conflicts(self, client, user, overrides, detail):
        resp = client.post(f"{AUTH_URL}/register", json=_register_payload(**overrides))
        assert resp.status_code == 409
        assert detail in resp.json()["detail"]

    def test_short_password(self, client):
        resp = client.post(f"{AUTH_URL}/register", json=_register_payload(password="short"))
        assert resp.status_code == 422


class TestLogin:
    def test_login_issues_tokens(self, client, user):
        resp = client.post(f"{AUTH_URL}/login", json={"email": user.email, "password": PASSWORD})
        assert resp.status_code == 200
        assert "refresh_token" in resp.cookies

        token = resp.json()["access_token"]
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert claims["sub"] == str(user.id)
        assert claims["type"] == "access"

    @pytest.mark.parametrize(
        "email, password",
        [("owner@example.com", "wrongpassword"), ("nobody@example.com", PASSWORD)],
    )
    def test_bad_credentials(self, client, user, email, password):
        resp = client.post(f"{AUTH_URL}/login", json={"email": email, "password": password})
        assert resp.status_code == 401

    def test_inactive_owner(self, client, db, user):
        user.is_active = False
        db.commit()
        resp = client.post(f"{AUTH_URL}/login", json={"email": user.email, "password": PASSWORD})
        assert resp.status_code == 403


class TestRefresh:
    def test_refresh_after_login(self, client, user):
        client.post(f"{AUTH_URL}/login", json={"email": user.email, "password": PASSWORD})
        resp = client.post(f"{AUTH_URL}/refresh")
        assert resp.status_code == 200
        assert "access_token" in resp.json()

    def test_missing_cookie(self, client):
        resp = client.post(f"{AUTH_URL}/refresh")
        assert resp.status_code == 401
        assert "Refresh token missing" in resp.json()["detail"]

    def test_access_token_is_not_a_refresh_token(self, client, user):
        client.cookies.set("refresh_token", create_access_token(user.id))
        resp = client.post(f"{AUTH_URL}/refresh")
        assert resp.status_code == 401
        assert "Invalid token type" in resp.json()["detail"]


# ---------------------------------------------------------------------------
# Bearer tokens on the form API
# ---------------------------------------------------------------------------


class TestBearerTokens:
    def test_access_token_lists_forms(self, client, auth_headers):
        assert client.get(FORMS_URL, headers=auth_headers).status_code == 200

    def test_missing_header(self, client):
        assert client.get(FORMS_URL).status_code in (401, 403)

    def test_refresh_token_rejected(self, client, user):
        resp = client.get(FORMS_URL, headers=_bearer(create_refresh_token(user.id)))
        assert resp.status_code == 401
        assert "Invalid token type" in resp.json()["detail"]

    @pytest.mark.parametrize(
        "overrides",
        [{"sub": "not-a-uuid"}, {"sub": None}, {"exp": time.time() - 10}],
    )
    def test_malformed_tokens(self, client, user, overrides):
        resp = client.get(FORMS_URL, headers=_bearer(_token(user.id, **overrides)))
        assert resp.status_code == 401

    def test_expired_token_detail(self, client, user):
        resp = client.get(FORMS_URL, headers=_bearer(_token(user.id, exp=time.time() - 10)))
        assert "expired" in resp.json()["detail"].lower()

    def test_wrong_secret(self, client, user):
        token = jwt.encode({"sub": str(user.id), "type": "access"}, "wrong-secret", algorithm="HS256")
        assert client.get(FORMS_URL, headers=_bearer(token)).status_code == 401

    def test_deleted_owner(self, client, db, user, auth_headers):
        db.delete(user)
        db.commit()
        assert client.get(FORMS_URL, headers=auth_headers).status_code == 401

    def test_inactive_owner(self, client, db, user, auth_headers):
        user.is_active = False
        db.commit()
        assert client.get(FORMS_URL, headers=auth_headers).status_code == 403


# ---------------------------------------------------------------------------
# Company and privacy profile
# ---------------------------------------------------------------------------


class TestProfile:
    def test_get_profile(self, client, auth_headers):
        resp = client.get(f"{AUTH_URL}/user-profile", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["company_name"] == "Acme GmbH"

    def test_update_privacy_details(self, client, auth_headers):
        resp = client.put(
            f"{AUTH_URL}/user-profile",
            json={
                "privacy_link": "https://acme.example/data",
                "privacy_contact_email": "dpo@acme.example",
            },
            headers=auth_headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["privacy_link"] == "https://acme.example/data"
        assert data["privacy_contact_email"] == "dpo@acme.example"
        assert data["legal_notice_link"] == "https://acme.example/imprint"

    def test_empty_update(self, client, auth_headers):
        assert client.put(f"{AUTH_URL}/user-profile", json={}, headers=auth_headers).status_code == 422

    def test_update_requires_auth(self, client):
        resp = client.put(f"{AUTH_URL}/user-profile", json={"company_name": "X"})
        assert resp.status_code in (401, 403)
