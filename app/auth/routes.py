# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for the admin sign-in flow.
#
# Login and signup return tokens to the caller; the server keeps no record
# of who is signed in. Every later request proves identity with its own
# Bearer token.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_access_token, get_current_user
from app.auth.models import AuthSession, AuthUser, LoginRequest, SignupRequest, UserResponse
from core.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


@router.post("/login", response_model=AuthSession)
async def login(request: LoginRequest) -> AuthSession:
    """
    Sign in with email and password.

    Raises:
        401: If the credentials are rejected
    """
    return AuthService.login(request.email, request.password)


@router.post("/signup", response_model=AuthSession, status_code=201)
async def signup(request: SignupRequest) -> AuthSession:
    """
    Register a new user.

    Tokens are empty when the project requires email confirmation.
    """
    return AuthService.signup(request.name, request.email, request.password)


@router.post("/logout")
async def logout(token: str = Depends(get_access_token)) -> dict:
    """Revoke the session behind the current access token."""
    AuthService.logout(token)
    return {"logged_out": True}


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
    """
    return UserResponse.from_auth_user(user)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
