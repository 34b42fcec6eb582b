import hmac
import secrets
from datetime import timedelta

import structlog

from notevault.core.core import Service
from notevault.errors import TokenError

logger = structlog.get_logger(__name__)

CSRF_TTL = timedelta(hours=1)
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class CsrfService(Service):
    """Double-submit CSRF tokens, signed independently of the session token."""

    def issue(self) -> str:
        """Create a signed, one-hour anti-forgery token."""
        return self.core.csrf_codec.issue({"nonce": secrets.token_hex(32)}, CSRF_TTL).token

    def validate(self, method: str, cookie_token: str | None, header_token: str | None) -> bool:
        """Check a request against the double-submit rule.

        Safe methods always pass. Anything else needs a header equal to the
        cookie, and the cookie must carry a valid signature.
        """
        if method.upper() in SAFE_METHODS:
            return True
        if not cookie_token or not header_token:
            logger.info("csrf_rejected", reason="missing_token")
            return False
        if not hmac.compare_digest(cookie_token.encode("utf-8"), header_token.encode("utf-8")):
            logger.info("csrf_rejected", reason="mismatch")
            return False
        try:
            self.core.csrf_codec.verify(cookie_token)
        except TokenError as e:
            logger.info("csrf_rejected", reason=type(e).__name__)
            return False
        return True
