"""Authentication and authorization exceptions."""

from app.exceptions.base import AppException


class AuthenticationError(AppException):
    """Base class for errors about who the caller is."""

    pass


class InvalidTokenError(AuthenticationError):
    """Bearer token is invalid, malformed, or carries the wrong claims."""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class TokenExpiredError(InvalidTokenError):
    """Bearer token has expired."""

    def __init__(self, token_type: str = "access"):
        """
        Parameters:
            token_type (str): Kind of token that expired, stored on `token_type`.
        """
        super().__init__(f"{token_type.capitalize()} token has expired")
        self.token_type = token_type


class InsufficientPermissionsError(AppException):
    """
    The caller is known but is not allowed to perform the action.

    Raised by the permission validator when a partner's structure types (or
    inactive account) deny an action, and by ownership checks in services.
    """

    def __init__(self, message: str = "Insufficient permissions", action: str | None = None):
        """
        Parameters:
            message (str): Human-readable denial reason.
            action (str | None): The denied action, when the denial comes from the validator.
        """
        self.action = action
        super().__init__(message)
