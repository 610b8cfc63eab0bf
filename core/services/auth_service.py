# =============================================================================
# core/services/auth_service.py - Identity Provider Calls
# =============================================================================
# Login, signup and logout against Supabase Auth.
#
# Every call builds its own anon-key client: Supabase Auth stores the signed-in
# session on the client object, and a shared client would turn that into
# process-wide "current user" state. Tokens go back to the caller instead.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from app.auth.models import AuthSession, UserResponse
from app.exceptions import AuthProviderError, InvalidCredentialsError

logger = logging.getLogger(__name__)

# HTTP statuses Supabase Auth uses to reject credentials or input
REJECTED_STATUSES = {400, 401, 403, 422}


def _is_rejection(error: Exception) -> bool:
    return getattr(error, "status", None) in REJECTED_STATUSES


def _to_session(response: Any) -> AuthSession:
    """Convert a Supabase AuthResponse into an AuthSession."""
    if response.user is None:
        raise InvalidCredentialsError()
    session = response.session
    return AuthSession(
        access_token=session.access_token if session else None,
        refresh_token=session.refresh_token if session else None,
        expires_at=session.expires_at if session else None,
        user=UserResponse.from_provider_user(response.user),
    )


class AuthService:
    """Service for Supabase Auth operations."""

    @staticmethod
    def login(email: str, password: str) -> AuthSession:
        """
        Sign in with email and password.

        Raises:
            InvalidCredentialsError: If the provider rejects the credentials
            AuthProviderError: If the provider cannot be reached
        """
        try:
            client = SupabaseClient.create_anon_client()
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            if _is_rejection(e):
                logger.info(f"Login rejected for {email}")
                raise InvalidCredentialsError()
            logger.error(f"Login failed: {e}")
            raise AuthProviderError()

        logger.info(f"User logged in: {email}")
        return _to_session(response)

    @staticmethod
    def signup(name: str, email: str, password: str) -> AuthSession:
        """
        Register a new user; the display name is stored in user metadata.

        When email confirmation is enabled the returned session has no tokens.

        Raises:
            InvalidCredentialsError: If the provider rejects the signup data
            AuthProviderError: If the provider cannot be reached
        """
        try:
            client = SupabaseClient.create_anon_client()
            response = client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"name": name}},
            })
        except Exception as e:
            if _is_rejection(e):
                logger.info(f"Signup rejected for {email}: {e}")
                raise InvalidCredentialsError("Invalid signup data")
            logger.error(f"Signup failed: {e}")
            raise AuthProviderError()

        logger.info(f"User signed up: {email}")
        return _to_session(response)

    @staticmethod
    def logout(access_token: str) -> None:
        """
        Revoke the session behind an access token.

        Raises:
            AuthProviderError: If the provider cannot be reached
        """
        try:
            client = SupabaseClient.create_anon_client()
            client.auth.admin.sign_out(access_token)
        except Exception as e:
            if _is_rejection(e):
                # token already expired or revoked
                logger.info(f"Logout for an inactive session: {e}")
                return
            logger.error(f"Logout failed: {e}")
            raise AuthProviderError()

        logger.info("User logged out")
