"""
Request gate

Per-request authorization evaluated before any route runs:
1. Static assets bypass every check
2. API requests must come from this host (Origin, else Referer)
3. API responses get CORS headers scoped to the validated origin
4. Protected paths need an auth cookie (presence only)
5. Protected API paths are rate limited per client address

Token signature and expiry are verified later, once, by the session service.
"""

import re
from urllib.parse import urlencode, urlsplit

import structlog
from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from notevault.web.cookies import AUTH_COOKIE
from notevault.web.error_handlers import create_json_error_response
from notevault.web.rate_limit import FixedWindowRateLimiter

logger = structlog.get_logger(__name__)

STATIC_PREFIXES = ("/_next", "/static", "/images", "/favicon")
API_PREFIX = "/api/"
AUTH_BOOTSTRAP_PREFIX = "/api/auth/"
PROTECTED_PREFIXES = ("/notes", "/api/notes", "/settings", "/api/user")
PUBLIC_PATHS = frozenset({"/", "/login", "/signup", "/register", "/api/auth/login", "/api/auth/register"})
LOOPBACK_RE = re.compile(r"^127\.\d+\.\d+\.\d+$")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self' 'unsafe-inline'; style-src 'self' 'unsafe-inline'; img-src 'self' data:;"
    ),
}


def is_static_path(path: str) -> bool:
    return path.startswith(STATIC_PREFIXES)


def is_api_path(path: str) -> bool:
    return path.startswith(API_PREFIX)


def is_protected_path(path: str) -> bool:
    """Protected prefixes minus the explicitly public paths."""
    return path.startswith(PROTECTED_PREFIXES) and path not in PUBLIC_PATHS


def is_trusted_hostname(hostname: str | None, host_header: str | None) -> bool:
    """Hostname equals the request's own host (port ignored) or is loopback."""
    if not hostname:
        return False
    current_host = host_header.split(":")[0].lower() if host_header else ""
    hostname = hostname.lower()
    return hostname == current_host or hostname == "localhost" or bool(LOOPBACK_RE.match(hostname))


def parse_hostname(url: str) -> str | None:
    """Hostname of an absolute URL, None when it has none or cannot be parsed."""
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return None
    if not parts.scheme:
        return None
    return hostname


def is_origin_allowed(path: str, origin: str | None, referer: str | None, host: str | None) -> bool:
    """Cross-origin check for API requests.

    Origin wins when present. Without it, Referer is checked except on auth
    bootstrap paths. Neither header means a same-origin navigation or a
    non-browser client, which is allowed.
    """
    if origin:
        return is_trusted_hostname(parse_hostname(origin), host)
    if referer and not path.startswith(AUTH_BOOTSTRAP_PREFIX):
        return is_trusted_hostname(parse_hostname(referer), host)
    return True


def cors_headers(origin: str | None) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin or "*",
        "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization, X-CSRF-Token",
        "Access-Control-Allow-Credentials": "true",
    }


def login_redirect_url(path: str) -> str:
    return f"/login?{urlencode({'redirect': path})}"


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RequestGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, rate_limiter: FixedWindowRateLimiter) -> None:
        super().__init__(app)
        self.rate_limiter = rate_limiter

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if is_static_path(path):
            return await call_next(request)

        response = await self._evaluate(request, call_next)
        response.headers.update(SECURITY_HEADERS)
        return response

    async def _evaluate(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        api = is_api_path(path)
        extra_headers: dict[str, str] = {}

        if api:
            origin = request.headers.get("origin")
            if not is_origin_allowed(path, origin, request.headers.get("referer"), request.headers.get("host")):
                logger.warning("request_rejected_origin", path=path, origin=origin)
                return create_json_error_response(403, "Forbidden", "access_denied")
            extra_headers.update(cors_headers(origin))

        if is_protected_path(path):
            if not request.cookies.get(AUTH_COOKIE):
                if api:
                    return create_json_error_response(
                        401, "Authentication required", "authentication_error", headers=extra_headers
                    )
                return RedirectResponse(login_redirect_url(path), status_code=307)

            if api:
                key = client_key(request)
                result = await self.rate_limiter.hit(key)
                extra_headers.update(result.headers())
                if not result.allowed:
                    logger.warning("rate_limit_exceeded", client=key, path=path)
                    return create_json_error_response(
                        429,
                        "Too many requests",
                        "too_many_requests",
                        headers={**extra_headers, "Retry-After": str(result.retry_after)},
                    )

        response = await call_next(request)
        response.headers.update(extra_headers)
        return response
