"""
FastAPI router for User endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.dependencies import get_user_service, require_auth
from app.middleware.auth import AuthPrincipal
from app.schemas.user import UpdateProfileRequest
from app.services.user.user_service import UserService
from common.utils import success_response, NotFoundException

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me")
async def get_me(
    principal: Annotated[AuthPrincipal, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get the authenticated user."""
    user = await user_service.get_user_by_id(principal.user_id)
    if not user:
        raise NotFoundException("User not found", code="USER_NOT_FOUND")

    return success_response({"user": user_service.format_user_response(user)})


@router.patch("/profile")
async def update_profile(
    body: UpdateProfileRequest,
    principal: Annotated[AuthPrincipal, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Update first/last name, age or phone number."""
    user = await user_service.update_profile(
        principal.user_id,
        body.model_dump(exclude_unset=True),
    )
    if not user:
        raise NotFoundException("User not found", code="USER_NOT_FOUND")

    return success_response({"user": user_service.format_user_response(user)})
