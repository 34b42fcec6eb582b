from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

# Only ever used outside production; see Config.check_secrets.
DEVELOPMENT_SECRET = "notevault-development-secret-not-for-production-use"


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    environment: Literal["development", "production"] = "development"
    jwt_secret: str | None = None  # Signs session tokens (required in production)
    csrf_secret: str | None = None  # Signs CSRF tokens, falls back to jwt_secret when unset
    forwarded_allow_ips: str = "127.0.0.1"  # Proxies trusted to set X-Forwarded-For (rate limit key)
    rate_limit_window_seconds: int = 60
    rate_limit_max_requests: int = 100
    bcrypt_rounds: int = 12
    session_retention_days: int = Field(default=90, ge=1)  # Expired and revoked sessions kept for audit this long

    model_config = {
        "env_file": [".env"],
        "env_prefix": "NOTEVAULT_",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def check_secrets(self) -> Self:
        """Refuse to start in production without an explicit signing secret."""
        if self.is_production and not self.jwt_secret:
            raise ValueError("jwt_secret must be set when environment is 'production'")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def session_signing_secret(self) -> str:
        return self.jwt_secret or DEVELOPMENT_SECRET

    @property
    def csrf_signing_secret(self) -> str:
        return self.csrf_secret or self.session_signing_secret

    @property
    def csrf_secret_is_shared(self) -> bool:
        """True when CSRF and session tokens are signed with the same key."""
        return self.csrf_signing_secret == self.session_signing_secret
