"""
Tests for the authentication / authorization chain and security helpers.

Tests:
- Every authentication failure yields the same 401
- Role gate yields 403 only after authentication succeeds
- Optional auth on job mutations
- Password hashing and token helpers
"""

from datetime import timedelta

import pytest
from jose import JWTError

from app.core.config import Settings, get_settings
from app.core.security import create_access_token, decode_token, get_password_hash, verify_password
from app.models.user import UserRole
from main import app

UNAUTHORIZED = {"message": "Not authorized"}


class TestAuthentication:
    """Failures of get_current_user, observed through GET /api/users"""

    @pytest.mark.parametrize("header", [
        "Basic dXNlcjpwYXNz",
        "Bearer",
        "Token abc.def.ghi",
        "Bearer not-a-jwt",
    ])
    def test_malformed_headers_are_unauthorized(self, client, header):
        response = client.get("/api/users", headers={"Authorization": header})

        assert response.status_code == 401
        assert response.json() == UNAUTHORIZED
        assert response.headers["www-authenticate"] == "Bearer"

    def test_expired_token(self, client, create_user, auth_headers):
        admin = create_user(role=UserRole.ADMIN)

        response = client.get("/api/users", headers=auth_headers(admin, expires_delta=timedelta(seconds=-30)))

        assert response.status_code == 401
        assert response.json() == UNAUTHORIZED

    def test_token_signed_with_other_secret(self, client, create_user):
        admin = create_user(role=UserRole.ADMIN)
        forged = create_access_token(
            data={"sub": str(admin.id)},
            settings=Settings(SECRET_KEY="someone-elses-secret"),
        )

        response = client.get("/api/users", headers={"Authorization": f"Bearer {forged}"})

        assert response.status_code == 401
        assert response.json() == UNAUTHORIZED

    def test_token_without_subject(self, client, test_settings):
        token = create_access_token(data={"email": "nobody@example.com"}, settings=test_settings)

        response = client.get("/api/users", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json() == UNAUTHORIZED

    def test_deleted_account(self, client, db_session, create_user, auth_headers):
        admin = create_user(role=UserRole.ADMIN)
        headers = auth_headers(admin)
        db_session.delete(admin)
        db_session.commit()

        response = client.get("/api/users", headers=headers)

        assert response.status_code == 401
        assert response.json() == UNAUTHORIZED

    def test_lowercase_bearer_scheme_accepted(self, client, create_user, auth_headers):
        admin = create_user(role=UserRole.ADMIN)
        token = auth_headers(admin)["Authorization"].split()[1]

        response = client.get("/api/users", headers={"Authorization": f"bearer {token}"})

        assert response.status_code == 200


class TestRoleGate:
    """Ordering of authentication and the admin role check"""

    def test_unauthenticated_caller_gets_401_not_403(self, client):
        response = client.get("/api/users")

        assert response.status_code == 401

    def test_standard_user_gets_403(self, client, create_user, auth_headers):
        member = create_user(role=UserRole.USER)

        response = client.get("/api/users", headers=auth_headers(member))

        assert response.status_code == 403

    def test_admin_gets_200(self, client, create_user, auth_headers):
        admin = create_user(role=UserRole.ADMIN)

        response = client.get("/api/users", headers=auth_headers(admin))

        assert response.status_code == 200


class TestJobWriteGuard:
    """JOBS_REQUIRE_AUTH toggles authentication on job mutations"""

    def test_job_mutations_open_by_default(self, client, sample_job_data):
        response = client.post("/api/jobs", json=sample_job_data)

        assert response.status_code == 201

    def test_job_mutations_require_token_when_enabled(self, client, test_settings, create_user, auth_headers, sample_job_data):
        locked = test_settings.model_copy(update={"JOBS_REQUIRE_AUTH": True})
        app.dependency_overrides[get_settings] = lambda: locked
        member = create_user()

        anonymous = client.post("/api/jobs", json=sample_job_data)
        authenticated = client.post("/api/jobs", json=sample_job_data, headers=auth_headers(member))

        assert anonymous.status_code == 401
        assert anonymous.json() == UNAUTHORIZED
        assert authenticated.status_code == 201

    def test_listing_stays_public_when_enabled(self, client, test_settings):
        locked = test_settings.model_copy(update={"JOBS_REQUIRE_AUTH": True})
        app.dependency_overrides[get_settings] = lambda: locked

        response = client.get("/api/jobs")

        assert response.status_code == 200


class TestSecurityHelpers:
    """Unit tests for app.core.security"""

    def test_password_hash_roundtrip(self, test_settings):
        hashed = get_password_hash("s3cret-Password", test_settings)

        assert hashed != "s3cret-Password"
        assert verify_password("s3cret-Password", hashed, test_settings)
        assert not verify_password("other-Password", hashed, test_settings)

    def test_token_carries_claims(self, test_settings):
        token = create_access_token(data={"sub": "abc", "email": "a@example.com"}, settings=test_settings)

        payload = decode_token(token, test_settings)

        assert payload["sub"] == "abc"
        assert payload["email"] == "a@example.com"
        assert "exp" in payload

    def test_expired_token_raises(self, test_settings):
        token = create_access_token(data={"sub": "abc"}, settings=test_settings, expires_delta=timedelta(seconds=-30))

        with pytest.raises(JWTError):
            decode_token(token, test_settings)
