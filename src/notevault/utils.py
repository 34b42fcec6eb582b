import re
from datetime import UTC, datetime

USERNAME_RE = re.compile(r"^[a-z0-9_]+$")
EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def is_username(value: str) -> bool:
    return bool(USERNAME_RE.fullmatch(value))


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value))


def now() -> datetime:
    return datetime.now(UTC)
