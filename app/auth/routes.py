# =============================================================================
# app/auth/routes.py - Admin Authentication Routes
# =============================================================================
# Sign-in / sign-out for the admin console. Credentials are checked by
# Supabase Auth; the returned access token is then sent as a Bearer token on
# every /admin/console request.
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials

from app.auth.dependencies import get_current_user, security
from app.auth.models import AuthUser, LoginRequest, LoginResponse
from app.dependencies import BackendDep
from app.exceptions import AuthenticationFailedError, BackendUnavailableError
from core.backend import BackendError, CredentialsRejectedError
from core.services.admin_console import console_registry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest, backend: BackendDep) -> LoginResponse:
    """
    Sign in with email and password.

    Raises:
        401: Credentials rejected (message is the backend's own text)
        502: Auth backend unreachable or failing
    """
    try:
        session = backend.auth.sign_in(request.email, request.password)
    except CredentialsRejectedError as e:
        raise AuthenticationFailedError(e.message)
    except BackendError as e:
        raise BackendUnavailableError(e.message, operation="sign_in")

    return LoginResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=session.expires_at,
        user_id=session.user_id,
        email=session.email,
    )


@router.post("/logout")
def logout(
    backend: BackendDep,
    user: AuthUser = Depends(get_current_user),
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    """
    End the admin session and drop the operator's console state.
    """
    console_registry.discard(str(user.id))

    try:
        backend.auth.sign_out(credentials.credentials)
    except BackendError as e:
        raise BackendUnavailableError(e.message, operation="sign_out")

    return {"message": "Signed out"}


@router.get("/verify")
async def verify_token(user: AuthUser = Depends(get_current_user)) -> dict:
    """
    Verify that the current token is valid.

    Useful for checking if a stored token is still valid.
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
