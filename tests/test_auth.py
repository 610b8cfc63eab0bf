# =============================================================================
# tests/test_auth.py - Authentication Tests
# =============================================================================
# Covers:
# - Access token verification (HS256 tokens signed with the test secret)
# - AuthService calls against a mocked Supabase Auth client
# - Auth routes end to end
#
# Run with: pytest tests/test_auth.py -v
# =============================================================================

import time
from types import SimpleNamespace
from unittest.mock import MagicMock, patch
from uuid import UUID, uuid4

import pytest
from fastapi import HTTPException
from jose import jwt

from app.auth.dependencies import decode_access_token
from app.config import settings
from app.exceptions import AuthProviderError, InvalidCredentialsError
from core.services.auth_service import AuthService


def make_token(secret=None, **claims):
    payload = {
        "sub": str(uuid4()),
        "aud": "authenticated",
        "exp": int(time.time()) + 3600,
        "iat": int(time.time()),
        "email": "artist@example.com",
        "role": "authenticated",
        "user_metadata": {"name": "Artist"},
    }
    payload.update(claims)
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, secret or settings.SUPABASE_JWT_SECRET, algorithm="HS256")


class ProviderError(Exception):
    """Shaped like supabase_auth's AuthApiError: carries an HTTP status."""

    def __init__(self, message, status):
        super().__init__(message)
        self.status = status


def provider_response(session=True):
    user = SimpleNamespace(
        id=str(uuid4()),
        email="artist@example.com",
        user_metadata={"name": "Artist"},
        created_at=None,
    )
    tokens = SimpleNamespace(access_token="access", refresh_token="refresh", expires_at=1_900_000_000)
    return SimpleNamespace(user=user, session=tokens if session else None)


# =============================================================================
# Token Verification
# =============================================================================

class TestDecodeAccessToken:
    """Tests for decode_access_token."""

    def test_valid_token(self):
        user_id = uuid4()

        user = decode_access_token(make_token(sub=str(user_id)))

        assert user.id == user_id
        assert user.email == "artist@example.com"
        assert user.name == "Artist"

    def test_expired_token(self):
        token = make_token(exp=int(time.time()) - 60)

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    @pytest.mark.parametrize("token_kwargs", [
        {"secret": "some-other-secret-that-is-also-long-enough"},
        {"aud": "anon"},
    ])
    def test_invalid_token(self, token_kwargs):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(make_token(**token_kwargs))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid token"

    def test_garbage_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token("not-a-jwt")
        assert exc_info.value.status_code == 401

    def test_missing_subject(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(make_token(sub=None))
        assert exc_info.value.detail == "Invalid token: missing user ID"

    def test_malformed_subject(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(make_token(sub="user-42"))
        assert exc_info.value.detail == "Invalid token: malformed user ID"

    def test_empty_secret_rejects_hs256_tokens(self):
        payload = {"sub": str(uuid4()), "aud": "authenticated", "exp": int(time.time()) + 600}
        token = jwt.encode(payload, "", algorithm="HS256")

        with patch.object(settings, "SUPABASE_JWT_SECRET", ""):
            with pytest.raises(HTTPException) as exc_info:
                decode_access_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid token"

    def test_empty_secret_rejects_garbage_token(self):
        with patch.object(settings, "SUPABASE_JWT_SECRET", ""):
            with pytest.raises(HTTPException) as exc_info:
                decode_access_token("not-a-jwt")
        assert exc_info.value.status_code == 401


# =============================================================================
# AuthService
# =============================================================================

@pytest.fixture
def auth_client():
    client = MagicMock()
    with patch("core.services.auth_service.SupabaseClient.create_anon_client", return_value=client):
        yield client


class TestAuthService:
    """Tests for AuthService against a mocked provider."""

    def test_login_returns_tokens(self, auth_client):
        auth_client.auth.sign_in_with_password.return_value = provider_response()

        session = AuthService.login("artist@example.com", "secret")

        auth_client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "artist@example.com", "password": "secret"}
        )
        assert session.access_token == "access"
        assert session.refresh_token == "refresh"
        assert session.user.name == "Artist"

    def test_login_rejected(self, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = ProviderError("Invalid login credentials", 400)

        with pytest.raises(InvalidCredentialsError):
            AuthService.login("artist@example.com", "wrong")

    def test_login_provider_down(self, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = ConnectionError("unreachable")

        with pytest.raises(AuthProviderError):
            AuthService.login("artist@example.com", "secret")

    def test_login_without_user(self, auth_client):
        auth_client.auth.sign_in_with_password.return_value = SimpleNamespace(user=None, session=None)

        with pytest.raises(InvalidCredentialsError):
            AuthService.login("artist@example.com", "secret")

    def test_signup_stores_name_in_metadata(self, auth_client):
        auth_client.auth.sign_up.return_value = provider_response(session=False)

        session = AuthService.signup("Artist", "artist@example.com", "secret")

        auth_client.auth.sign_up.assert_called_once_with({
            "email": "artist@example.com",
            "password": "secret",
            "options": {"data": {"name": "Artist"}},
        })
        assert session.access_token is None
        assert session.user.email == "artist@example.com"

    def test_logout(self, auth_client):
        AuthService.logout("token-123")
        auth_client.auth.admin.sign_out.assert_called_once_with("token-123")

    def test_logout_inactive_session_is_quiet(self, auth_client):
        auth_client.auth.admin.sign_out.side_effect = ProviderError("session not found", 401)
        AuthService.logout("token-123")

    def test_each_call_uses_fresh_client(self):
        with patch("core.services.auth_service.SupabaseClient.create_anon_client") as factory:
            factory.return_value.auth.sign_in_with_password.return_value = provider_response()
            AuthService.login("a@example.com", "x")
            AuthService.login("b@example.com", "y")

        assert factory.call_count == 2


# =============================================================================
# Routes
# =============================================================================

class TestAuthRoutes:
    def test_me_with_valid_token(self, anonymous_client):
        user_id = uuid4()
        token = make_token(sub=str(user_id))

        response = anonymous_client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        body = response.json()
        assert UUID(body["id"]) == user_id
        assert body["name"] == "Artist"

    def test_me_without_token(self, anonymous_client):
        response = anonymous_client.get("/api/v1/auth/me")
        assert response.status_code in (401, 403)

    def test_verify_with_expired_token(self, anonymous_client):
        token = make_token(exp=int(time.time()) - 60)

        response = anonymous_client.get("/api/v1/auth/verify", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_login_route(self, anonymous_client, auth_client):
        auth_client.auth.sign_in_with_password.return_value = provider_response()

        response = anonymous_client.post(
            "/api/v1/auth/login",
            json={"email": "artist@example.com", "password": "secret"},
        )

        assert response.status_code == 200
        assert response.json()["access_token"] == "access"
        assert response.json()["token_type"] == "bearer"

    def test_login_route_rejected(self, anonymous_client, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = ProviderError("Invalid login credentials", 400)

        response = anonymous_client.post(
            "/api/v1/auth/login",
            json={"email": "artist@example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_CREDENTIALS"

    def test_logout_route(self, anonymous_client, auth_client):
        token = make_token()

        response = anonymous_client.post("/api/v1/auth/logout", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json() == {"logged_out": True}
        auth_client.auth.admin.sign_out.assert_called_once_with(token)


# =============================================================================
# Published Signing Keys (ES256)
# =============================================================================

def es256_key_pair(kid):
    from cryptography.hazmat.primitives import serialization
    from cryptography.hazmat.primitives.asymmetric import ec
    from jose import jwk

    private_key = ec.generate_private_key(ec.SECP256R1())
    private_pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    public_jwk = jwk.construct(public_pem, "ES256").to_dict()
    public_jwk["kid"] = kid
    return private_pem, public_jwk


def jwks_response(*keys):
    response = MagicMock()
    response.json.return_value = {"keys": list(keys)}
    return response


class TestSigningKeys:
    """Tests for the JWKS cache and ES256 verification."""

    @pytest.fixture(autouse=True)
    def fresh_cache(self):
        from app.auth.dependencies import signing_keys

        signing_keys.clear()
        yield
        signing_keys.clear()

    def test_keys_fetched_once_within_ttl(self):
        from app.auth.dependencies import SigningKeys

        keys = SigningKeys()
        with patch("app.auth.dependencies.httpx.get", return_value=jwks_response({"kid": "k1", "kty": "EC"})) as get:
            assert keys.get("k1")["kid"] == "k1"
            assert keys.get("k1")["kid"] == "k1"
            assert keys.get("unknown") is None

        assert get.call_count == 1
        assert get.call_args.args[0] == f"{settings.SUPABASE_URL}/auth/v1/.well-known/jwks.json"

    def test_failed_refresh_keeps_last_keys(self):
        import httpx

        from app.auth.dependencies import SigningKeys

        keys = SigningKeys(ttl_seconds=0)
        with patch("app.auth.dependencies.httpx.get", return_value=jwks_response({"kid": "k1"})):
            keys.get("k1")
        with patch("app.auth.dependencies.httpx.get", side_effect=httpx.ConnectError("down")):
            assert keys.get("k1") == {"kid": "k1"}

    def test_es256_token(self):
        private_pem, public_jwk = es256_key_pair("key-1")
        user_id = uuid4()
        token = jwt.encode(
            {"sub": str(user_id), "aud": "authenticated", "exp": int(time.time()) + 600},
            private_pem,
            algorithm="ES256",
            headers={"kid": "key-1"},
        )

        with patch("app.auth.dependencies.httpx.get", return_value=jwks_response(public_jwk)):
            user = decode_access_token(token)

        assert user.id == user_id

    def test_es256_token_with_unknown_key(self):
        private_pem, _ = es256_key_pair("key-1")
        token = jwt.encode(
            {"sub": str(uuid4()), "aud": "authenticated", "exp": int(time.time()) + 600},
            private_pem,
            algorithm="ES256",
            headers={"kid": "key-1"},
        )

        with patch("app.auth.dependencies.httpx.get", return_value=jwks_response()):
            with pytest.raises(HTTPException) as exc_info:
                decode_access_token(token)

        assert exc_info.value.status_code == 401

    def test_unknown_key_does_not_fall_back_to_secret(self):
        private_pem, _ = es256_key_pair("key-1")
        token = jwt.encode(
            {"sub": str(uuid4()), "aud": "authenticated", "exp": int(time.time()) + 600},
            private_pem,
            algorithm="ES256",
            headers={"kid": "key-2"},
        )

        with patch.object(settings, "SUPABASE_JWT_SECRET", ""), \
                patch("app.auth.dependencies.httpx.get", return_value=jwks_response()), \
                patch("app.auth.dependencies.jwt.decode") as decode:
            with pytest.raises(HTTPException) as exc_info:
                decode_access_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid token"
        decode.assert_not_called()
