from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when a protected operation has no valid session."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when identifier or password is wrong.

    Unknown identifiers and wrong passwords share this error and its message.
    """

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised on origin/CSRF mismatch or access to another user's resource."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class RateLimitError(UserError):
    """Raised when a client exceeds the request ceiling of the current window."""

    def __init__(self, retry_after: int, message: str = "Too many requests") -> None:
        super().__init__(message)
        self.retry_after = retry_after


class StoreUnavailableError(Exception):
    """Raised when the credential or note store cannot be reached.

    Not a UserError: the message never reaches the client.
    """


class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidSignatureError(TokenError):
    """Token is malformed or was signed with a different secret."""


class TokenExpiredError(TokenError):
    """Token signature is valid but its expiry has passed."""
