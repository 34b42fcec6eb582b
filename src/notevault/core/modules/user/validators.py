from notevault.errors import ValidationError
from notevault.utils import is_email, is_username

PASSWORD_SPECIAL_CHARS = "!@#$%^&*"


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - Minimum length of 8 characters
    - At least one digit, one lowercase letter, one uppercase letter
    - At least one of !@#$%^&*

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < 8:
        raise ValidationError("Password must be at least 8 characters long")

    if not (
        any(char.isdigit() for char in password)
        and any(char.islower() for char in password)
        and any(char.isupper() for char in password)
        and any(char in PASSWORD_SPECIAL_CHARS for char in password)
    ):
        raise ValidationError("Password must contain uppercase, lowercase, number and special character")


def validate_username(username: str) -> None:
    if len(username) < 3:
        raise ValidationError("Username must be at least 3 characters long")
    if not is_username(username):
        raise ValidationError("Username can only contain lowercase letters, numbers and underscores")


def validate_email(email: str) -> None:
    if not is_email(email):
        raise ValidationError("Email is invalid")
