from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from notevault.core.modules.csrf.service import SAFE_METHODS
from notevault.web.cookies import AUTH_COOKIE, CSRF_HEADER

SECURITY_SCHEMES = {
    "AuthTokenCookie": {
        "type": "apiKey",
        "in": "cookie",
        "name": AUTH_COOKIE,
        "description": "Session token set by POST /api/auth/login (HTTP-only)",
    },
    "CsrfHeader": {
        "type": "apiKey",
        "in": "header",
        "name": CSRF_HEADER,
        "description": "Value of the csrf_token cookie, required on state-changing requests",
    },
}

# (method, path) pairs reachable without a session
PUBLIC_OPERATIONS = frozenset(
    {
        ("GET", "/api/auth/csrf"),
        ("POST", "/api/auth/login"),
        ("POST", "/api/auth/logout"),
        ("POST", "/api/auth/register"),
        ("GET", "/health"),
    }
)


def _operation_security(method: str, path: str) -> list[dict[str, list[str]]]:
    if (method, path) in PUBLIC_OPERATIONS:
        return []
    if method in SAFE_METHODS:
        return [{"AuthTokenCookie": []}]
    return [{"AuthTokenCookie": [], "CsrfHeader": []}]


def set_custom_openapi(app: FastAPI) -> None:
    """Generate the schema once, annotating each operation with the credentials it needs."""

    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = get_openapi(
            title="NoteVault API",
            version="0.1.0",
            summary="Personal notes with cookie-based sessions",
            routes=app.routes,
        )
        schema.setdefault("components", {})["securitySchemes"] = SECURITY_SCHEMES
        for path, path_item in schema["paths"].items():
            for method, operation in path_item.items():
                operation["security"] = _operation_security(method.upper(), path)

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Body of every error response."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid credentials", "type": "invalid_credentials"},
                {"message": "Forbidden", "type": "access_denied"},
                {"message": "Too many requests", "type": "too_many_requests"},
            ]
        }
    }
