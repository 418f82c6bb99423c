"""
FastAPI router for Auth endpoints.

Registration, email verification, login, refresh token rotation and logout.
The access token travels in the JSON body; the refresh token only ever
travels in an HTTP-only cookie.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from app.config import settings
from app.dependencies import get_auth_service, get_user_agent, require_auth
from app.middleware.auth import AuthPrincipal
from app.schemas.auth import (
    EmailRequest,
    VerifyEmailRequest,
    LoginRequest,
    SaveProfileInfoRequest,
    SavePasswordRequest,
)
from app.services.auth.auth_service import AuthService
from app.services.auth.session_manager import SessionNotFoundError
from common.utils import success_response, UnauthorizedException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key=settings.REFRESH_TOKEN_COOKIE_NAME,
        value=refresh_token,
        max_age=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path=settings.REFRESH_TOKEN_COOKIE_PATH,
        httponly=True,
        secure=settings.REFRESH_TOKEN_COOKIE_SECURE,
        samesite=settings.REFRESH_TOKEN_COOKIE_SAMESITE,
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.REFRESH_TOKEN_COOKIE_NAME,
        path=settings.REFRESH_TOKEN_COOKIE_PATH,
        httponly=True,
        secure=settings.REFRESH_TOKEN_COOKIE_SECURE,
        samesite=settings.REFRESH_TOKEN_COOKIE_SAMESITE,
    )


# ─────────────────────────────────────────────────────────────────
# Registration
# ─────────────────────────────────────────────────────────────────

@router.post("/register/email")
async def register_email(
    body: EmailRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """
    Start registration.

    Creates an unverified account and emails a verification code.
    """
    await auth_service.register_email(body.email)
    return success_response(message="Verification code sent")


@router.post("/register/verify")
async def register_verify(
    body: VerifyEmailRequest,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    user_agent: Annotated[str, Depends(get_user_agent)],
):
    """
    Verify the email with the emailed code.

    Signs the user in: returns the access token and sets the refresh cookie.
    """
    result = await auth_service.register_verify(body.email, body.code, user_agent)
    _set_refresh_cookie(response, result["refreshToken"])

    return success_response({
        "user": result["user"],
        "accessToken": result["accessToken"],
    })


@router.post("/verify/resend")
async def verify_resend(
    body: EmailRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Send a new verification code."""
    await auth_service.verify_resend(body.email)
    return success_response(message="Verification code sent")


@router.patch("/register/profile")
async def save_profile_info(
    body: SaveProfileInfoRequest,
    principal: Annotated[AuthPrincipal, Depends(require_auth)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Claim a username and set first and last name."""
    user = await auth_service.save_profile_info(
        principal.user_id,
        body.username,
        body.firstName,
        body.lastName,
    )
    return success_response({"user": user})


@router.patch("/register/password")
async def save_password(
    body: SavePasswordRequest,
    principal: Annotated[AuthPrincipal, Depends(require_auth)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Set the account password."""
    await auth_service.save_password(principal.user_id, body.password)
    return success_response(message="Password saved")


# ─────────────────────────────────────────────────────────────────
# Login / session lifecycle
# ─────────────────────────────────────────────────────────────────

@router.post("/login/email")
async def login_email(
    body: EmailRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """
    First login step.

    Returns the account's public state so the client can route to password
    entry, verification or password creation.
    """
    user = await auth_service.get_user_by_email(body.email)
    return success_response({"user": user})


@router.post("/login/password")
async def login_password(
    body: LoginRequest,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    user_agent: Annotated[str, Depends(get_user_agent)],
):
    """Sign in with email and password."""
    result = await auth_service.login(body.email, body.password, user_agent)
    _set_refresh_cookie(response, result["refreshToken"])

    return success_response({
        "user": result["user"],
        "accessToken": result["accessToken"],
    })


@router.get("/refresh")
async def refresh(
    request: Request,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    user_agent: Annotated[str, Depends(get_user_agent)],
):
    """
    Rotate the refresh cookie and issue a new access token.

    The presented refresh token is single-use.
    """
    refresh_token = request.cookies.get(settings.REFRESH_TOKEN_COOKIE_NAME)
    if not refresh_token:
        raise UnauthorizedException(
            message="Refresh token required",
            code="REFRESH_TOKEN_REQUIRED"
        )

    try:
        tokens = await auth_service.refresh(refresh_token, user_agent)
    except SessionNotFoundError:
        raise UnauthorizedException(
            message="Invalid refresh token",
            code="INVALID_REFRESH_TOKEN"
        )

    _set_refresh_cookie(response, tokens["refreshToken"])
    return success_response({"accessToken": tokens["accessToken"]})


@router.get("/logout")
async def logout(
    request: Request,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Invalidate the refresh token and clear the cookie."""
    refresh_token = request.cookies.get(settings.REFRESH_TOKEN_COOKIE_NAME)
    if refresh_token:
        await auth_service.logout(refresh_token)

    _clear_refresh_cookie(response)
    return success_response(message="Logged out")
