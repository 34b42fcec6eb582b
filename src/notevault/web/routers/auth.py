from fastapi import APIRouter, Response
from pydantic import BaseModel, ConfigDict, Field

from notevault.core.modules.user.models import UserView
from notevault.web.cookies import clear_auth_cookie, set_auth_cookie, set_csrf_cookie
from notevault.web.deps import AppDep, AuthTokenDep
from notevault.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Authentication request."""

    model_config = ConfigDict(populate_by_name=True)

    identifier: str = Field(..., min_length=1, description="Email or username")
    password: str = Field(..., min_length=1, description="Password for authentication")
    remember_me: bool = Field(False, alias="rememberMe", description="Keep the session for 30 days instead of 1")


class RegisterRequest(BaseModel):
    """Account creation request."""

    name: str = Field(..., min_length=1, description="Display name")
    username: str = Field(..., min_length=1, description="Lowercase letters, numbers and underscores")
    email: str = Field(..., min_length=1, description="Email address")
    password: str = Field(..., min_length=1, description="At least 8 characters with mixed case, a digit and a symbol")


class UserResponse(BaseModel):
    message: str | None = None
    user: UserView


class MessageResponse(BaseModel):
    message: str


class CsrfResponse(BaseModel):
    """The cookie is HTTP-only, so the token is also returned for the client to echo in X-CSRF-Token."""

    message: str
    csrf_token: str = Field(..., serialization_alias="csrfToken")


@router.get(
    "/auth/csrf",
    summary="Issue CSRF token",
    description="Set a fresh csrf_token cookie. Its value must be echoed in X-CSRF-Token on state-changing requests.",
    operation_id="issueCsrfToken",
)
async def issue_csrf(app: AppDep, response: Response) -> CsrfResponse:
    token = app.issue_csrf()
    set_csrf_cookie(response, token, secure=app.config.is_production)
    return CsrfResponse(message="CSRF token generated", csrf_token=token)


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with email or username and password. Sets the auth_token and csrf_token cookies.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> UserResponse:
    """Authenticate user and create session."""
    result = await app.login(login_data.identifier, login_data.password, login_data.remember_me)

    secure = app.config.is_production
    set_auth_cookie(response, result.token, result.max_age, secure=secure)
    set_csrf_cookie(response, app.issue_csrf(), secure=secure)

    return UserResponse(message="Login successful", user=UserView.from_domain(result.user))


@router.post(
    "/auth/logout",
    summary="End session",
    description="Revoke the current session and clear the auth cookie. Always succeeds.",
    operation_id="logout",
)
async def logout(app: AppDep, auth_token: AuthTokenDep, response: Response) -> MessageResponse:
    await app.logout(auth_token)
    clear_auth_cookie(response, secure=app.config.is_production)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/auth/register",
    summary="Create account",
    description="Register a new user. Does not log the user in.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Invalid data or username/email already taken"},
    },
)
async def register(register_data: RegisterRequest, app: AppDep) -> UserResponse:
    user = await app.register(register_data.name, register_data.username, register_data.email, register_data.password)
    return UserResponse(message="Registration successful", user=user)


@router.get(
    "/auth/me",
    summary="Get current user",
    description="Get the user behind the current session.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def me(app: AppDep, auth_token: AuthTokenDep) -> UserResponse:
    return UserResponse(user=await app.get_current_user(auth_token))
