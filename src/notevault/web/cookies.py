from fastapi import Response

from notevault.core.modules.csrf.service import CSRF_TTL

AUTH_COOKIE = "auth_token"
CSRF_COOKIE = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def set_auth_cookie(response: Response, token: str, max_age: int, secure: bool) -> None:
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=secure,
        path="/",
        max_age=max_age,  # Matches the token lifetime
    )


def set_csrf_cookie(response: Response, token: str, secure: bool) -> None:
    response.set_cookie(
        key=CSRF_COOKIE,
        value=token,
        httponly=True,
        samesite="strict",
        secure=secure,
        path="/",
        max_age=int(CSRF_TTL.total_seconds()),
    )


def clear_auth_cookie(response: Response, secure: bool) -> None:
    response.delete_cookie(AUTH_COOKIE, path="/", secure=secure, httponly=True, samesite="lax")
