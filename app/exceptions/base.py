"""Root of the application exception hierarchy."""


class AppException(Exception):
    """Base class for all domain-level errors raised by the services."""

    def __init__(self, message: str = "An application error occurred"):
        """
        Initialize the exception with a human-readable message.

        Parameters:
            message (str): Description of the failure, exposed as `str(exc)`.
        """
        self.message = message
        super().__init__(message)
