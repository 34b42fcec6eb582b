from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie

from notevault.app import App
from notevault.core.modules.session.models import AuthToken
from notevault.errors import AccessDeniedError
from notevault.web.cookies import AUTH_COOKIE, CSRF_COOKIE, CSRF_HEADER

# Security schemes
cookie_scheme = APIKeyCookie(name=AUTH_COOKIE, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_auth_token(token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None) -> AuthToken | None:
    """Raw session token from the cookie; verification happens in the session service."""
    return AuthToken(token_cookie) if token_cookie else None


async def require_csrf(request: Request, app: Annotated[App, Depends(get_app)]) -> None:
    """Reject state-changing requests that fail the double-submit check with an opaque 403."""
    if not app.validate_csrf(request.method, request.cookies.get(CSRF_COOKIE), request.headers.get(CSRF_HEADER)):
        raise AccessDeniedError


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
AuthTokenDep = Annotated[AuthToken | None, Depends(get_auth_token)]
CsrfDep = Depends(require_csrf)
