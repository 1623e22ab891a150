"""Application exceptions raised by the security and service layers.

Each carries a ``message`` that is safe to show to API clients. The HTTP
layer maps exception types to status codes (see ``optionsdesk.api.errors``).
"""


class OptionsDeskError(Exception):
    """Base exception for all application errors."""

    default_message = "Request could not be processed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(OptionsDeskError):
    """Raised when input passes schema validation but is still unusable."""

    default_message = "Invalid input."


class DuplicateEmailError(OptionsDeskError):
    """Raised when an email is already registered to another user."""

    default_message = "Email is already in use."


class InvalidCredentialsError(OptionsDeskError):
    """Raised on login failure; unknown email and wrong password are indistinguishable."""

    default_message = "Invalid email or password."


class InvalidCurrentPasswordError(OptionsDeskError):
    """Raised when a password change supplies the wrong current password."""

    default_message = "Current password is incorrect."


class InvalidTokenError(OptionsDeskError):
    """Raised when a bearer token is malformed, expired, or signed with another secret."""

    default_message = "Invalid or expired token."


class MissingAuthHeaderError(OptionsDeskError):
    """Raised when a protected endpoint is called without bearer credentials."""

    default_message = "Authorization header with a Bearer token is required."


class UserNotFoundError(OptionsDeskError):
    """Raised when a requested user does not exist."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__("User not found.")


class ForbiddenError(OptionsDeskError):
    """Raised when an authenticated user acts on another user's resources."""

    default_message = "You may only access your own account."
