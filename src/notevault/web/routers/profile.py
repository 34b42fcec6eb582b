from fastapi import APIRouter, Response
from pydantic import BaseModel, ConfigDict, Field

from notevault.core.modules.user.models import UserView
from notevault.web.cookies import clear_auth_cookie
from notevault.web.deps import AppDep, AuthTokenDep, CsrfDep
from notevault.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"])


class UpdateProfileRequest(BaseModel):
    """Request to update name and email."""

    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., min_length=1, description="Email address")


class ChangePasswordRequest(BaseModel):
    """Request to change user password."""

    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., min_length=1, alias="currentPassword", description="Current password")
    new_password: str = Field(..., min_length=1, alias="newPassword", description="New password")


class DeleteAccountRequest(BaseModel):
    """Request to delete the current account."""

    password: str = Field(..., min_length=1, description="Current password, re-checked before deletion")


class SuccessResponse(BaseModel):
    success: bool = True


@router.put(
    "/user/profile",
    summary="Update profile",
    description="Change the display name and email of the current user.",
    operation_id="updateProfile",
    dependencies=[CsrfDep],
    responses={
        200: {"description": "Updated profile"},
        400: {"model": ErrorResponse, "description": "Invalid data or email already in use"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "CSRF check failed"},
    },
)
async def update_profile(request: UpdateProfileRequest, app: AppDep, auth_token: AuthTokenDep) -> UserView:
    return await app.update_profile(auth_token, request.name, request.email)


@router.put(
    "/user/password",
    summary="Change password",
    description="Change the password for the currently authenticated user.",
    operation_id="changePassword",
    dependencies=[CsrfDep],
    responses={
        200: {"description": "Password changed successfully"},
        400: {"model": ErrorResponse, "description": "New password too weak"},
        401: {"model": ErrorResponse, "description": "Not authenticated or current password incorrect"},
        403: {"model": ErrorResponse, "description": "CSRF check failed"},
    },
)
async def change_password(request: ChangePasswordRequest, app: AppDep, auth_token: AuthTokenDep) -> SuccessResponse:
    await app.change_password(auth_token, request.current_password, request.new_password)
    return SuccessResponse()


@router.post(
    "/user/delete",
    summary="Delete account",
    description="Delete the current user with all notes and sessions, then clear the auth cookie.",
    operation_id="deleteAccount",
    dependencies=[CsrfDep],
    responses={
        200: {"description": "Account deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated or password incorrect"},
        403: {"model": ErrorResponse, "description": "CSRF check failed"},
    },
)
async def delete_account(
    request: DeleteAccountRequest, app: AppDep, auth_token: AuthTokenDep, response: Response
) -> SuccessResponse:
    await app.delete_account(auth_token, request.password)
    clear_auth_cookie(response, secure=app.config.is_production)
    return SuccessResponse()
